"""
Tests for sitesmith logging utilities.

Access tokens must never reach log output.
"""

import io
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from sitesmith.logging import (
    configure_logging,
    get_logger,
    log_http_request,
    log_http_response,
    mask_sensitive_data,
    mask_token,
    safe_log_dict,
)

_ALNUM = st.characters(whitelist_categories=("Lu", "Ll", "Nd"), max_codepoint=127)

classic_token_strategy = st.builds(
    lambda prefix, rest: f"{prefix}_{rest}",
    st.sampled_from(["ghp", "gho", "ghu", "ghs", "ghr"]),
    st.text(min_size=36, max_size=40, alphabet=_ALNUM),
)
fine_grained_token_strategy = st.text(
    min_size=30, max_size=60, alphabet=_ALNUM
).map(lambda rest: f"github_pat_{rest}")
token_strategy = st.one_of(classic_token_strategy, fine_grained_token_strategy)


def _capture_http_logs() -> io.StringIO:
    log_buffer = io.StringIO()
    handler = logging.StreamHandler(log_buffer)
    handler.setLevel(logging.DEBUG)
    http_logger = logging.getLogger("sitesmith.http")
    http_logger.setLevel(logging.DEBUG)
    http_logger.handlers = [handler]
    return log_buffer


@given(token=token_strategy)
@settings(max_examples=100)
def test_property_no_token_in_masked_output(token: str) -> None:
    """
    Any GitHub token embedded in free text is redacted.
    """
    text = f"request failed for {token} while provisioning"
    masked = mask_sensitive_data(text)

    assert token not in masked
    assert "provisioning" in masked


@given(token=token_strategy)
@settings(max_examples=100)
def test_property_request_log_never_contains_token(token: str) -> None:
    """
    Logging a request with an Authorization header and a token-bearing
    body emits neither value.
    """
    log_buffer = _capture_http_logs()

    log_http_request(
        "PUT",
        "https://api.github.com/repos/acme/site/contents/FAKE/values.js",
        headers={"Authorization": f"token {token}"},
        body={"message": "update", "pat": token, "nested": {"admin_pat": token}},
    )

    output = log_buffer.getvalue()
    assert output
    assert token not in output


@given(token=token_strategy)
@settings(max_examples=50)
def test_property_response_log_never_contains_token(token: str) -> None:
    log_buffer = _capture_http_logs()

    log_http_response(200, "https://api.github.com/user", body={"note": f"token: '{token}'"})

    assert token not in log_buffer.getvalue()


@given(token=st.text(min_size=13, max_size=80))
@settings(max_examples=100)
def test_mask_token_hides_middle(token: str) -> None:
    masked = mask_token(token)

    assert token not in masked
    assert masked.startswith(token[:4])
    assert masked.endswith(token[-4:])
    assert "..." in masked


def test_mask_token_short_values_fully_redacted() -> None:
    assert mask_token("abc") == "[REDACTED]"
    assert mask_token("x" * 12) == "[REDACTED]"


def test_safe_log_dict_abbreviates_file_content() -> None:
    """Long base64 bodies are replaced by their length."""
    data = {"message": "Update", "content": "QUJD" * 100, "sha": "abc"}

    safe = safe_log_dict(data)

    assert safe["content"] == "<400 chars>"
    assert safe["message"] == "Update"
    assert safe["sha"] == "abc"


def test_safe_log_dict_handles_nested_structures() -> None:
    data = {
        "outer": {
            "token": "hidden-1",
            "items": [{"password": "hidden-2", "name": "visible"}],
        },
    }

    safe = safe_log_dict(data)

    assert "hidden-1" not in str(safe)
    assert "hidden-2" not in str(safe)
    assert safe["outer"]["items"][0]["name"] == "visible"


def test_mask_sensitive_data_preserves_non_sensitive() -> None:
    text = "Waiting for acme/site1 to become ready (attempt 2/5)"
    assert mask_sensitive_data(text) == text


def test_configure_logging_sets_levels() -> None:
    configure_logging(
        level=logging.WARNING,
        http_level=logging.DEBUG,
        workflow_level=logging.ERROR,
        handler=logging.NullHandler(),
    )

    assert get_logger().level == logging.WARNING
    assert get_logger("http").level == logging.DEBUG
    assert get_logger("workflow").level == logging.ERROR


def test_configure_logging_twice_keeps_one_handler() -> None:
    first = logging.NullHandler()
    second = logging.NullHandler()

    configure_logging(handler=first)
    configure_logging(handler=second)

    handlers = get_logger().handlers
    assert second in handlers
    assert first not in handlers


def test_get_logger_returns_correct_loggers() -> None:
    assert get_logger().name == "sitesmith"
    assert get_logger("http").name == "sitesmith.http"
    assert get_logger("workflow").name == "sitesmith.workflow"
