"""Shared test fixtures and configuration for gateway tests."""
from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from gateway.ai_provider.base import AIProvider
from gateway.ai_provider.resolver import get_provider, set_provider
from gateway.config import DiagnosticsMode, get_config
from gateway.files.schemas import IncomingFile
from gateway.main import app
from gateway.rate_limit import RateLimiter, get_rate_limiter, set_rate_limiter
from gateway.responses import ResponseFormatter, get_formatter, set_formatter

API_PREFIX = get_config().server.api_prefix


class FakeClock:
    """Manually advanced clock for rate-limiter tests."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_singletons():
    """Give every test a fresh limiter, a production formatter and no provider."""
    original = (get_provider(), get_rate_limiter(), get_formatter())
    set_provider(None)
    set_rate_limiter(RateLimiter(max_requests=1_000, window_seconds=900))
    set_formatter(ResponseFormatter(DiagnosticsMode.PRODUCTION))
    yield
    set_provider(original[0])
    set_rate_limiter(original[1])
    set_formatter(original[2])


@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    """TestClient for the main app (lifespan not started, so no real provider)."""
    yield TestClient(app)


@pytest.fixture
def mock_provider() -> MagicMock:
    """Install a mock upstream provider as the global singleton."""
    provider = MagicMock(spec=AIProvider)
    provider.name = "mock"
    provider.generate_text.return_value = "AI is..."
    provider.generate_from_payload.return_value = "A cat on a sofa."
    provider.generate_chat.return_value = "Hello there!"
    set_provider(provider)
    return provider


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_file(
    mime_type: str = "image/jpeg",
    size: int = 1024,
    name: str = "photo.jpg",
    content: bytes = None,
) -> IncomingFile:
    """IncomingFile with a declared size that need not match the content."""
    return IncomingFile(
        original_name=name,
        mime_type=mime_type,
        size_bytes=size,
        raw_bytes=content if content is not None else b"\x00" * min(size, 16),
    )
