"""
Logging helpers for message bodies and errors.

Message bodies come from arbitrary producers and can be hundreds of
kilobytes long. Nothing from a body reaches a log line without going
through these helpers first.

For Developers:
    - Use body_preview() when a log line needs to show what was received
    - Use get_safe_error_info() for exceptions raised by user handlers and
      parsers; their messages may echo payload content
    - Use redact_message_attributes() before logging SQS/SNS attributes
"""

import re
from typing import Any

# Maximum length of logged message content
MAX_LOG_INPUT_LENGTH = 200

# Attribute names whose values are never logged
SENSITIVE_FIELDS = {
    "password",
    "secret",
    "token",
    "authorization",
    "credential",
    "signature",
}


def sanitize_for_log(value: Any, max_length: int = MAX_LOG_INPUT_LENGTH) -> str:
    """
    Sanitize a value for logging by removing control characters and limiting length.

    Args:
        value: Value to sanitize (will be converted to string)
        max_length: Maximum length of output (default: 200)

    Returns:
        Single-line string of at most max_length characters plus "..."

    Example:
        >>> sanitize_for_log("error\\n[FAKE] entry")
        'error [FAKE] entry'
    """
    text = str(value)
    text = text.replace("\r", " ").replace("\n", " ").replace("\t", " ")
    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text


def body_preview(body: str | bytes | None, max_length: int = 80) -> str:
    """Short, sanitized preview of a message body for log lines."""
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return sanitize_for_log(body, max_length=max_length)


def get_safe_error_info(exception: BaseException) -> dict[str, str]:
    """
    Extract loggable information from an exception.

    Returns the exception type and a sanitized, truncated message. Chained
    causes are reported by type only.

    Example:
        >>> get_safe_error_info(ValueError("bad\\npayload"))
        {'error_type': 'ValueError', 'error': 'bad payload'}
    """
    info = {
        "error_type": type(exception).__name__,
        "error": sanitize_for_log(exception),
    }
    if exception.__cause__ is not None:
        info["cause_type"] = type(exception.__cause__).__name__
    return info


def redact_message_attributes(attributes: dict[str, Any] | None) -> dict[str, Any]:
    """
    Flatten SQS/SNS message attributes for logging, redacting sensitive names.

    Example:
        >>> redact_message_attributes(
        ...     {"SQSLargePayloadSize": {"DataType": "Number", "StringValue": "5198"}}
        ... )
        {'SQSLargePayloadSize': '5198'}
    """
    result: dict[str, Any] = {}
    for name, value in (attributes or {}).items():
        if any(sensitive in name.lower() for sensitive in SENSITIVE_FIELDS):
            result[name] = "***REDACTED***"
        elif isinstance(value, dict):
            result[name] = sanitize_for_log(
                value.get("StringValue", value.get("Value", value.get("DataType", "")))
            )
        else:
            result[name] = sanitize_for_log(value)
    return result
