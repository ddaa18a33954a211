"""Request body sanitizing and prompt validation.

These run before any generation work:

1. ``sanitize_body`` drops keys that could be abused for prototype-style
   injection by downstream JSON consumers and trims every string value.
2. ``validate_prompt`` checks the ``prompt`` field and, on success, stores
   the trimmed value back into the body.
3. ``validate_content_type`` gates upload routes on a multipart body.

Validators return a :class:`ValidationResult` for bad input and never raise.
"""
import logging
from typing import Any, MutableMapping, Optional

from gateway.files.schemas import ValidationResult

logger = logging.getLogger(__name__)

DANGEROUS_KEYS = ("__proto__", "constructor", "prototype")
MAX_PROMPT_LENGTH = 10_000


def sanitize_body(body: Optional[MutableMapping[str, Any]]) -> MutableMapping[str, Any]:
    """Strip dangerous top-level keys and trim string values, in place."""
    if body is None:
        return {}

    for key in DANGEROUS_KEYS:
        if key in body:
            logger.debug("Dropping dangerous key from request body: %s", key)
            del body[key]

    for key, value in list(body.items()):
        if isinstance(value, str):
            body[key] = value.strip()
    return body


def _is_missing(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or value != value  # NaN
    return False


def check_prompt(prompt: Any) -> ValidationResult:
    """Validate a prompt value; the first failing rule wins."""
    if _is_missing(prompt):
        return ValidationResult.fail("Prompt is required in the request body")
    if not isinstance(prompt, str):
        return ValidationResult.fail("Prompt must be a string")

    trimmed = prompt.strip()
    if not trimmed:
        return ValidationResult.fail("Prompt cannot be empty")
    if len(trimmed) > MAX_PROMPT_LENGTH:
        return ValidationResult.fail("Prompt is too long (maximum 10,000 characters)")
    return ValidationResult.ok()


def validate_prompt(body: MutableMapping[str, Any]) -> ValidationResult:
    """Validate ``body["prompt"]`` and replace it with its trimmed value."""
    result = check_prompt(body.get("prompt"))
    if result.is_valid:
        body["prompt"] = body["prompt"].strip()
    return result


def is_multipart(content_type: Optional[str]) -> bool:
    return bool(content_type) and "multipart/form-data" in content_type


def validate_content_type(content_type: Optional[str]) -> ValidationResult:
    """Require a multipart body (boundary parameters are allowed)."""
    if not is_multipart(content_type):
        return ValidationResult.fail("Content-Type must be multipart/form-data for file uploads")
    return ValidationResult.ok()
