"""Async wrapper around the blocking upstream SDK calls.

Provider SDKs are synchronous; these helpers run them in a worker thread,
time them, and re-raise any failure as :class:`UpstreamError` so the
controller can treat every upstream failure the same way.  There are no
retries and no timeouts at this layer.
"""
import asyncio
import logging
from typing import List, Optional

from gateway.request_log import monitor_performance

from .base import AIProvider, ChatMessage, UpstreamPayload

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when the upstream provider call fails."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Upstream API error: {cause}")


class ProviderNotAvailableError(UpstreamError):
    """Raised when no upstream provider has been configured."""

    def __init__(self) -> None:
        super().__init__(RuntimeError("No upstream provider configured"))


def _require(provider: Optional[AIProvider]) -> AIProvider:
    if provider is None:
        raise ProviderNotAvailableError()
    return provider


@monitor_performance("Upstream API call")
async def call_generate(
    provider: Optional[AIProvider],
    prompt: str,
    payload: Optional[UpstreamPayload] = None,
) -> str:
    """Generate text from *prompt*, with *payload* attached when given."""
    provider = _require(provider)
    try:
        if payload is not None:
            return await asyncio.to_thread(provider.generate_from_payload, prompt, payload)
        return await asyncio.to_thread(provider.generate_text, prompt)
    except Exception as exc:
        raise UpstreamError(exc) from exc


@monitor_performance("Upstream chat call")
async def call_chat(provider: Optional[AIProvider], messages: List[ChatMessage]) -> str:
    provider = _require(provider)
    try:
        return await asyncio.to_thread(provider.generate_chat, messages)
    except Exception as exc:
        raise UpstreamError(exc) from exc
