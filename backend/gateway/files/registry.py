"""Static catalog of accepted upload categories.

The four category policies are built once at import time and never
mutated.  Lookup is case-insensitive; an unknown name yields ``None`` so
callers can report it as a validation failure.
"""
from typing import Dict, List, Optional, Union

from .schemas import MB, FileCategory, FileTypeSpec

FILE_TYPES: Dict[FileCategory, FileTypeSpec] = {
    FileCategory.IMAGE: FileTypeSpec(
        category=FileCategory.IMAGE,
        max_size_bytes=10 * MB,
        allowed_mime_types=(
            "image/jpeg",
            "image/jpg",
            "image/png",
            "image/gif",
            "image/webp",
            "image/bmp",
            "image/svg+xml",
        ),
        field_name="file",
        rejection_message="Only JPEG, PNG, GIF, WebP, BMP, and SVG image files are allowed",
    ),
    FileCategory.DOCUMENT: FileTypeSpec(
        category=FileCategory.DOCUMENT,
        max_size_bytes=50 * MB,
        allowed_mime_types=(
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "text/plain",
            "text/csv",
            "application/vnd.ms-excel",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ),
        field_name="file",
        rejection_message="Only PDF, Word, Excel, PowerPoint, Text, and CSV files are allowed",
    ),
    FileCategory.AUDIO: FileTypeSpec(
        category=FileCategory.AUDIO,
        max_size_bytes=100 * MB,
        allowed_mime_types=(
            "audio/mpeg",
            "audio/mp3",
            "audio/wav",
            "audio/ogg",
            "audio/aac",
            "audio/flac",
            "audio/webm",
        ),
        field_name="file",
        rejection_message="Only MP3, WAV, OGG, AAC, FLAC, and WebM audio files are allowed",
    ),
    FileCategory.VIDEO: FileTypeSpec(
        category=FileCategory.VIDEO,
        max_size_bytes=200 * MB,
        allowed_mime_types=(
            "video/mp4",
            "video/avi",
            "video/mov",
            "video/wmv",
            "video/flv",
            "video/webm",
            "video/mkv",
        ),
        field_name="file",
        rejection_message="Only MP4, AVI, MOV, WMV, FLV, WebM, and MKV video files are allowed",
    ),
}


def lookup(category: Union[str, FileCategory, None]) -> Optional[FileTypeSpec]:
    """Return the policy for *category*, or ``None`` when it is unknown.

    Examples:
        >>> lookup("IMAGE").max_size_bytes
        10485760
        >>> lookup("spreadsheet") is None
        True
    """
    if isinstance(category, FileCategory):
        return FILE_TYPES[category]
    if not category or not isinstance(category, str):
        return None
    try:
        return FILE_TYPES[FileCategory(category.strip().lower())]
    except ValueError:
        return None


def list_all() -> List[FileTypeSpec]:
    """All policies in declaration order (image, document, audio, video)."""
    return list(FILE_TYPES.values())


def describe_all() -> List[dict]:
    """Plain-dict view of the registry for capability discovery."""
    return [
        {
            "type": spec.category.value,
            "name": spec.name,
            "maxSize": spec.max_size_bytes,
            "maxSizeMB": spec.max_size_mb,
            "allowedMimeTypes": list(spec.allowed_mime_types),
            "fieldName": spec.field_name,
        }
        for spec in list_all()
    ]
