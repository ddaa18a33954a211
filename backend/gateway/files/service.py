"""File validation service for the upload intake pipeline.

Checks an uploaded file against its category policy, encodes it for the
upstream service and formats the metadata returned to clients.

The declared MIME type is trusted as-is: file bytes are never sniffed, so
a client can label any content as ``image/png``.  Only the size ceiling and
the allow-list protect the upstream call.
"""
import base64
import logging
from typing import Optional, Union

from gateway.ai_provider.base import UpstreamPayload
from gateway.utils import iso_timestamp

from .registry import lookup
from .schemas import FileCategory, IncomingFile, ValidationResult

logger = logging.getLogger(__name__)

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def is_type_allowed(file: Optional[IncomingFile], category: Union[str, FileCategory, None]) -> bool:
    """True when *file* declares a MIME type on *category*'s allow-list."""
    if file is None or not file.mime_type:
        return False
    spec = lookup(category)
    if spec is None:
        return False
    return file.mime_type in spec.allowed_mime_types


def is_size_allowed(file: Optional[IncomingFile], max_bytes: int) -> bool:
    """True when *file* has a known size no larger than *max_bytes*."""
    if file is None or not isinstance(file.size_bytes, int) or isinstance(file.size_bytes, bool):
        return False
    return file.size_bytes <= max_bytes


def validate_file(file: Optional[IncomingFile], category: Union[str, FileCategory, None]) -> ValidationResult:
    """Validate an uploaded file against its category policy.

    Checks run in a fixed order and the first failure wins: unknown
    category, missing file, disallowed MIME type, oversized file.

    Args:
        file: The uploaded file, or None when the request carried none.
        category: Category name (case-insensitive) or FileCategory.

    Returns:
        ValidationResult; this function never raises for bad input.
    """
    spec = lookup(category)
    if spec is None:
        label = category.value if isinstance(category, FileCategory) else category
        return ValidationResult.fail(f"Unknown file type: {label}")

    if file is None:
        return ValidationResult.fail(f"{spec.name} file is required")

    if not is_type_allowed(file, spec.category):
        return ValidationResult.fail(spec.rejection_message)

    if not is_size_allowed(file, spec.max_size_bytes):
        return ValidationResult.fail(f"File size exceeds {spec.max_size_mb}MB limit")

    return ValidationResult.ok()


def encode_for_upstream(file: Optional[IncomingFile]) -> UpstreamPayload:
    """Base64-encode *file* for the upstream call.

    Raises:
        ValueError: If the file has no content buffer or no MIME type.
    """
    if file is None or file.raw_bytes is None or not file.mime_type:
        raise ValueError("Invalid file object - missing buffer or mimetype")

    return UpstreamPayload(
        mime_type=file.mime_type,
        base64_data=base64.b64encode(file.raw_bytes).decode("ascii"),
    )


def format_file_size(size_bytes: int) -> str:
    """Human-readable size with at most two decimals.

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 Bytes"

    index = 0
    value = float(size_bytes)
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def describe_metadata(file: Optional[IncomingFile]) -> Optional[dict]:
    """Client-facing summary of *file*, or None when there is no file."""
    if file is None:
        return None

    size = file.size_bytes or 0
    return {
        "originalName": file.original_name or "unknown",
        "mimeType": file.mime_type or "unknown",
        "size": size,
        "sizeFormatted": format_file_size(size),
        "uploadedAt": iso_timestamp(),
    }

