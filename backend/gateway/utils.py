"""Small helpers shared across the gateway."""
from datetime import datetime, timezone


def iso_timestamp() -> str:
    """Current UTC instant as ISO-8601 with millisecond precision, e.g. ``2025-01-01T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
