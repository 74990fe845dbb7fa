"""
Unit tests for logging_utils module.

Tests cover the helpers that keep message content out of log lines:
- sanitize_for_log: CRLF injection prevention and truncation
- body_preview: Short previews of message bodies
- get_safe_error_info: Safe exception logging
- redact_message_attributes: Attribute flattening and redaction
"""

from src.big_payload.shared.logging_utils import (
    body_preview,
    get_safe_error_info,
    redact_message_attributes,
    sanitize_for_log,
)


class TestSanitizeForLog:
    """Tests for sanitize_for_log function."""

    def test_removes_newlines(self):
        """Test that newlines are replaced with spaces."""
        result = sanitize_for_log("line1\nline2\nline3")
        assert "\n" not in result
        assert result == "line1 line2 line3"

    def test_removes_carriage_returns(self):
        result = sanitize_for_log("line1\rline2")
        assert result == "line1 line2"

    def test_removes_control_characters(self):
        """Test that control characters are removed."""
        result = sanitize_for_log("text\x00\x1fnull")
        assert "\x00" not in result
        assert "\x1f" not in result

    def test_truncates_long_input(self):
        """Test that long input is truncated with ellipsis."""
        result = sanitize_for_log("a" * 300)
        assert len(result) == 203  # 200 + "..."
        assert result.endswith("...")

    def test_custom_max_length(self):
        result = sanitize_for_log("a" * 100, max_length=50)
        assert len(result) == 53

    def test_converts_non_string_to_string(self):
        assert sanitize_for_log(12345) == "12345"


class TestBodyPreview:
    """Tests for body_preview function."""

    def test_short_body_unchanged(self):
        assert body_preview('{"it":"works"}') == '{"it":"works"}'

    def test_large_body_truncated(self):
        result = body_preview("x" * 300_000)
        assert len(result) == 83  # 80 + "..."

    def test_bytes_decoded(self):
        assert body_preview(b'{"a":1}') == '{"a":1}'

    def test_invalid_utf8_does_not_raise(self):
        assert body_preview(b"\xff\xfe") != ""

    def test_none(self):
        assert body_preview(None) == ""


class TestGetSafeErrorInfo:
    """Tests for get_safe_error_info function."""

    def test_returns_type_and_sanitized_message(self):
        try:
            raise ValueError("bad\npayload")
        except Exception as e:
            result = get_safe_error_info(e)

        assert result == {"error_type": "ValueError", "error": "bad payload"}

    def test_truncates_message_echoing_payload(self):
        result = get_safe_error_info(ValueError("x" * 10_000))
        assert len(result["error"]) == 203

    def test_reports_cause_type(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError as inner:
                raise RuntimeError("outer") from inner
        except RuntimeError as e:
            result = get_safe_error_info(e)

        assert result["cause_type"] == "KeyError"


class TestRedactMessageAttributes:
    """Tests for redact_message_attributes function."""

    def test_flattens_string_values(self):
        result = redact_message_attributes(
            {"SQSLargePayloadSize": {"DataType": "Number", "StringValue": "5198"}}
        )
        assert result == {"SQSLargePayloadSize": "5198"}

    def test_redacts_sensitive_names(self):
        result = redact_message_attributes(
            {
                "AuthToken": {"DataType": "String", "StringValue": "abc"},
                "tenant": {"DataType": "String", "StringValue": "acme"},
            }
        )
        assert result["AuthToken"] == "***REDACTED***"
        assert result["tenant"] == "acme"

    def test_sns_style_value(self):
        result = redact_message_attributes({"kind": {"Type": "String", "Value": "x"}})
        assert result == {"kind": "x"}

    def test_none_is_empty(self):
        assert redact_message_attributes(None) == {}
