"""Tests for the file-type registry and upload validation."""
import base64
import re

import pytest

from conftest import make_file
from gateway.ai_provider.base import UpstreamPayload
from gateway.files import (
    FileCategory,
    IncomingFile,
    describe_all,
    describe_metadata,
    encode_for_upstream,
    format_file_size,
    is_size_allowed,
    is_type_allowed,
    list_all,
    lookup,
    validate_file,
)
from gateway.files.schemas import MB


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    """Tests for category lookup and discovery."""

    @pytest.mark.parametrize("name", ["image", "IMAGE", "Image", " image "])
    def test_lookup_is_case_insensitive(self, name):
        assert lookup(name).category is FileCategory.IMAGE

    def test_lookup_accepts_enum(self):
        assert lookup(FileCategory.VIDEO).name == "video"

    @pytest.mark.parametrize("name", ["spreadsheet", "", None, 42])
    def test_lookup_unknown_returns_none(self, name):
        assert lookup(name) is None

    def test_list_all_order(self):
        assert [spec.name for spec in list_all()] == ["image", "document", "audio", "video"]

    def test_size_ceilings(self):
        sizes = {spec.name: spec.max_size_bytes for spec in list_all()}
        assert sizes == {
            "image": 10 * MB,
            "document": 50 * MB,
            "audio": 100 * MB,
            "video": 200 * MB,
        }

    def test_describe_all_shape(self):
        described = describe_all()
        image = described[0]
        assert image["type"] == "image"
        assert image["name"] == "image"
        assert image["maxSize"] == 10 * MB
        assert image["maxSizeMB"] == 10
        assert image["fieldName"] == "file"
        assert "image/png" in image["allowedMimeTypes"]
        assert [d["maxSizeMB"] for d in described] == [10, 50, 100, 200]


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


class TestIsTypeAllowed:
    def test_allowed_mime(self):
        assert is_type_allowed(make_file("image/png"), "image") is True

    def test_disallowed_mime(self):
        assert is_type_allowed(make_file("application/pdf"), "image") is False

    def test_missing_file(self):
        assert is_type_allowed(None, "image") is False

    def test_missing_mime(self):
        assert is_type_allowed(IncomingFile(original_name="x", size_bytes=1), "image") is False

    def test_unknown_category(self):
        assert is_type_allowed(make_file("image/png"), "hologram") is False

    def test_category_case_insensitive(self):
        assert is_type_allowed(make_file("text/csv"), "DOCUMENT") is True


class TestIsSizeAllowed:
    def test_under_limit(self):
        assert is_size_allowed(make_file(size=10), 100) is True

    def test_exact_limit_is_allowed(self):
        assert is_size_allowed(make_file(size=100), 100) is True

    def test_over_limit(self):
        assert is_size_allowed(make_file(size=101), 100) is False

    def test_missing_file(self):
        assert is_size_allowed(None, 100) is False

    def test_undefined_size(self):
        assert is_size_allowed(IncomingFile(mime_type="image/png"), 100) is False

    def test_zero_byte_file_is_size_valid(self):
        assert is_size_allowed(make_file(size=0, content=b""), 100) is True


# ---------------------------------------------------------------------------
# validate_file
# ---------------------------------------------------------------------------


class TestValidateFile:
    def test_valid_file(self):
        result = validate_file(make_file("image/jpeg", 2 * MB), "image")
        assert result.is_valid is True
        assert result.error is None

    def test_unknown_category_checked_first(self):
        result = validate_file(None, "hologram")
        assert result.is_valid is False
        assert result.error == "Unknown file type: hologram"

    def test_missing_file(self):
        result = validate_file(None, "audio")
        assert result.error == "audio file is required"

    def test_wrong_type_uses_category_message(self):
        result = validate_file(make_file("video/mp4", 10), "image")
        assert result.error == "Only JPEG, PNG, GIF, WebP, BMP, and SVG image files are allowed"

    def test_type_checked_before_size(self):
        result = validate_file(make_file("video/mp4", 500 * MB), "image")
        assert result.error.startswith("Only JPEG")

    def test_size_exactly_at_limit_is_valid(self):
        assert validate_file(make_file("image/png", 10 * MB), "image").is_valid is True

    def test_size_one_byte_over_limit(self):
        result = validate_file(make_file("image/png", 10 * MB + 1), "image")
        assert result.is_valid is False
        assert result.error == "File size exceeds 10MB limit"

    def test_fifteen_mb_image(self):
        result = validate_file(make_file("image/jpeg", 15 * MB), "image")
        assert "exceeds 10MB limit" in result.error

    @pytest.mark.parametrize(
        "category, mime, limit_mb",
        [
            ("document", "application/pdf", 50),
            ("audio", "audio/mpeg", 100),
            ("video", "video/webm", 200),
        ],
    )
    def test_limits_per_category(self, category, mime, limit_mb):
        assert validate_file(make_file(mime, limit_mb * MB), category).is_valid is True
        result = validate_file(make_file(mime, limit_mb * MB + 1), category)
        assert result.error == f"File size exceeds {limit_mb}MB limit"

    def test_enum_category(self):
        assert validate_file(make_file("audio/wav", 5), FileCategory.AUDIO).is_valid is True


# ---------------------------------------------------------------------------
# Encoding & metadata
# ---------------------------------------------------------------------------


class TestEncodeForUpstream:
    def test_encodes_base64(self):
        payload = encode_for_upstream(make_file("image/png", 5, content=b"hello"))
        assert payload == UpstreamPayload(mime_type="image/png", base64_data=base64.b64encode(b"hello").decode())

    def test_empty_buffer_is_encoded(self):
        payload = encode_for_upstream(make_file("text/plain", 0, content=b""))
        assert payload.base64_data == ""

    def test_missing_buffer_raises(self):
        with pytest.raises(ValueError, match="missing buffer or mimetype"):
            encode_for_upstream(IncomingFile(mime_type="image/png", size_bytes=3))

    def test_missing_mime_raises(self):
        with pytest.raises(ValueError, match="missing buffer or mimetype"):
            encode_for_upstream(IncomingFile(raw_bytes=b"abc", size_bytes=3))

    def test_missing_file_raises(self):
        with pytest.raises(ValueError):
            encode_for_upstream(None)


class TestDescribeMetadata:
    def test_no_file_returns_none(self):
        assert describe_metadata(None) is None

    def test_fields(self):
        meta = describe_metadata(make_file("image/png", 1536, name="cat.png"))
        assert meta["originalName"] == "cat.png"
        assert meta["mimeType"] == "image/png"
        assert meta["size"] == 1536
        assert meta["sizeFormatted"] == "1.5 KB"
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", meta["uploadedAt"])

    def test_defaults_for_missing_fields(self):
        meta = describe_metadata(IncomingFile())
        assert meta["originalName"] == "unknown"
        assert meta["mimeType"] == "unknown"
        assert meta["size"] == 0
        assert meta["sizeFormatted"] == "0 Bytes"


class TestFormatFileSize:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (MB, "1 MB"),
            (int(2.25 * MB), "2.25 MB"),
            (1024 * MB, "1 GB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_file_size(size) == expected
