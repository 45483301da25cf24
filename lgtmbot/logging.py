"""
lgtmbot logging utilities.

Provides configurable logging for inbound webhook events, outbound GitLab
requests and approval tallies. Ensures the GitLab private token and the
webhook secret never reach a log line.
"""

import logging
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lgtmbot.types.events import ApprovalEvent

# Create bot-specific loggers
_bot_logger = logging.getLogger("lgtmbot")
_http_logger = logging.getLogger("lgtmbot.http")
_quorum_logger = logging.getLogger("lgtmbot.quorum")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # GitLab token headers as they appear in rendered header dicts
    (re.compile(r"(private-token|x-gitlab-token)['\"]?\s*[:=]\s*['\"]?[^'\"\s,}]+['\"]?", re.IGNORECASE), r"\1: [REDACTED]"),
    # Personal access tokens
    (re.compile(r"glpat-[A-Za-z0-9_\-]{20,}"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"private-token", "x-gitlab-token", "private_token", "secret", "token", "password"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    quorum_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure lgtmbot logging.

    Args:
        level: Default log level for all bot loggers (default: INFO)
        http_level: Log level for GitLab request/response logging (default: same as level)
        quorum_level: Log level for approval tally logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: timestamp, level, logger name, source line)

    Example:
        ```python
        import logging
        from lgtmbot.logging import configure_logging

        # Show outbound merge requests
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _bot_logger.setLevel(level)
    _bot_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _quorum_logger.setLevel(quorum_level if quorum_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get an lgtmbot logger.

    Args:
        name: Logger name suffix (e.g., "http", "quorum"). If None, returns the main bot logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _bot_logger
    return logging.getLogger(f"lgtmbot.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Args:
        text: Text that may contain tokens or secrets

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of lowercase keys to mask (default: token headers, secret, token, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an outbound GitLab request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log a GitLab response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_webhook_event(event: "ApprovalEvent") -> None:
    """
    Log an inbound comment event at DEBUG level.

    Only the fields the bot acts on are rendered; the comment text is
    truncated so long review threads do not flood the log.
    """
    if not _bot_logger.isEnabledFor(logging.DEBUG):
        return

    note = event.comment_text
    if len(note) > 40:
        note = note[:40] + "..."

    _bot_logger.debug(
        "webhook event: kind=%s, noteable_type=%s, project_id=%d, "
        "merge_request_id=%d, merge_status=%s, author=%s, note=%r",
        event.kind,
        event.target_kind,
        event.project_id,
        event.target_id,
        event.mergeability,
        event.author or "-",
        note,
    )


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_webhook_event",
]
