"""Provisioning workflow components."""

from sitesmith.workflow.dispatch import DispatchEmitter
from sitesmith.workflow.editor import EditorBridge
from sitesmith.workflow.generator import RepositoryGenerator
from sitesmith.workflow.ingestor import ContentIngestor
from sitesmith.workflow.provisioner import ProvisioningWorkflow, ProvisionResult
from sitesmith.workflow.publisher import PagesPublisher
from sitesmith.workflow.validator import TemplateValidator, ValidationResult

__all__ = [
    "ContentIngestor",
    "DispatchEmitter",
    "EditorBridge",
    "PagesPublisher",
    "ProvisioningWorkflow",
    "ProvisionResult",
    "RepositoryGenerator",
    "TemplateValidator",
    "ValidationResult",
]
