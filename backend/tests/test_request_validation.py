"""Tests for body sanitizing, prompt validation and the content-type gate."""
import pytest

from gateway.request_validation import (
    MAX_PROMPT_LENGTH,
    check_prompt,
    is_multipart,
    sanitize_body,
    validate_content_type,
    validate_prompt,
)


class TestSanitizeBody:
    def test_strips_dangerous_keys(self):
        body = {"__proto__": {"admin": True}, "constructor": "x", "prototype": 1, "prompt": "hi"}
        assert sanitize_body(body) == {"prompt": "hi"}

    def test_trims_strings_only(self):
        body = {"prompt": "  hello  ", "count": 3, "flags": [" a "]}
        sanitize_body(body)
        assert body == {"prompt": "hello", "count": 3, "flags": [" a "]}

    def test_mutates_in_place(self):
        body = {"prompt": " x "}
        assert sanitize_body(body) is body

    def test_none_body(self):
        assert sanitize_body(None) == {}


class TestCheckPrompt:
    """Rules are applied in order and the first failure wins."""

    @pytest.mark.parametrize("value", [None, "", 0, False])
    def test_missing(self, value):
        result = check_prompt(value)
        assert result.is_valid is False
        assert result.error == "Prompt is required in the request body"

    @pytest.mark.parametrize("value", [123, ["a"], {"text": "a"}, True])
    def test_not_a_string(self, value):
        assert check_prompt(value).error == "Prompt must be a string"

    def test_whitespace_only(self):
        assert check_prompt("   \n\t ").error == "Prompt cannot be empty"

    def test_exactly_max_length_is_valid(self):
        assert check_prompt("a" * MAX_PROMPT_LENGTH).is_valid is True

    def test_over_max_length(self):
        result = check_prompt("a" * (MAX_PROMPT_LENGTH + 1))
        assert result.error == "Prompt is too long (maximum 10,000 characters)"

    def test_length_measured_after_trim(self):
        assert check_prompt("  " + "a" * MAX_PROMPT_LENGTH + "  ").is_valid is True


class TestValidatePrompt:
    def test_replaces_with_trimmed_value(self):
        body = {"prompt": "  Explain AI  "}
        assert validate_prompt(body).is_valid is True
        assert body["prompt"] == "Explain AI"

    def test_missing_key(self):
        assert validate_prompt({}).error == "Prompt is required in the request body"

    def test_invalid_body_left_untouched(self):
        body = {"prompt": 5}
        validate_prompt(body)
        assert body["prompt"] == 5


class TestContentType:
    def test_plain_multipart(self):
        assert validate_content_type("multipart/form-data").is_valid is True

    def test_multipart_with_boundary(self):
        assert is_multipart("multipart/form-data; boundary=----abc123") is True

    @pytest.mark.parametrize("value", [None, "", "application/json", "text/plain"])
    def test_rejected(self, value):
        result = validate_content_type(value)
        assert result.is_valid is False
        assert result.error == "Content-Type must be multipart/form-data for file uploads"
