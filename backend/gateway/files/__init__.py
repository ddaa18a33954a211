"""File-type registry and upload validation for the gateway.

Uploaded files are held in memory for the duration of one request and are
never written to disk.

Supported categories:
- Images: jpeg, png, gif, webp, bmp, svg (10MB)
- Documents: pdf, word, excel, powerpoint, text, csv (50MB)
- Audio: mp3, wav, ogg, aac, flac, webm (100MB)
- Video: mp4, avi, mov, wmv, flv, webm, mkv (200MB)
"""
from .registry import FILE_TYPES, describe_all, list_all, lookup
from .schemas import FileCategory, FileTypeSpec, IncomingFile, ValidationResult
from .service import (
    describe_metadata,
    encode_for_upstream,
    format_file_size,
    is_size_allowed,
    is_type_allowed,
    validate_file,
)

__all__ = [
    "FILE_TYPES",
    "FileCategory",
    "FileTypeSpec",
    "IncomingFile",
    "ValidationResult",
    "describe_all",
    "describe_metadata",
    "encode_for_upstream",
    "format_file_size",
    "is_size_allowed",
    "is_type_allowed",
    "list_all",
    "lookup",
    "validate_file",
]
