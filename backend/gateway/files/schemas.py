"""Data types for the upload intake pipeline.

This module defines the values that flow through file validation:
- FileCategory: Closed set of accepted upload categories
- FileTypeSpec: Size ceiling and MIME allow-list for one category
- IncomingFile: A single uploaded file, held in memory for one request
- ValidationResult: Outcome of a validation step

Nothing here is persisted; an IncomingFile lives only as long as the
request that carried it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

MB = 1024 * 1024


class FileCategory(str, Enum):
    """Upload categories understood by the gateway.

    Each category has its own size ceiling and MIME allow-list, declared
    in :mod:`gateway.files.registry`.
    """
    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"


@dataclass(frozen=True)
class FileTypeSpec:
    """Policy for one upload category.

    Attributes:
        category: The category this policy applies to.
        max_size_bytes: Largest accepted file (inclusive).
        allowed_mime_types: Declared MIME types accepted for the category.
        field_name: Multipart field that carries the file.
        rejection_message: User-facing message for a disallowed MIME type.
    """
    category: FileCategory
    max_size_bytes: int
    allowed_mime_types: Tuple[str, ...]
    field_name: str
    rejection_message: str

    @property
    def name(self) -> str:
        return self.category.value

    @property
    def max_size_mb(self) -> int:
        # Half-up rounding, matching what clients display.
        return int(self.max_size_bytes / MB + 0.5)


@dataclass
class IncomingFile:
    """An uploaded file as received from the multipart parser.

    Any field may be missing when the upload was malformed; the validators
    treat a missing MIME type or size as invalid rather than raising.
    """
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    raw_bytes: Optional[bytes] = None

    @classmethod
    def from_bytes(cls, original_name: Optional[str], mime_type: Optional[str], content: bytes) -> "IncomingFile":
        return cls(
            original_name=original_name,
            mime_type=mime_type,
            size_bytes=len(content),
            raw_bytes=content,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Result of a validation step: ``error`` is set only when invalid."""
    is_valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True, None)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(False, error)
