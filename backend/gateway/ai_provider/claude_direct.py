"""Claude Direct API provider implementation.

This module provides an AIProvider implementation that connects directly
to Anthropic's Claude API using the official SDK.

Claude accepts images and PDFs as base64 content blocks; plain-text and
CSV documents are decoded and sent as text.  Other MIME types raise
:class:`UnsupportedPayloadError`.

Usage:
    provider = ClaudeDirectProvider(api_key="sk-ant-...")
    text = provider.generate_text("Explain AI")
"""
import base64
import logging
from typing import List, Optional

from .base import AIProvider, ChatMessage, UnsupportedPayloadError, UpstreamPayload

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
TEXT_MIME_TYPES = {"text/plain", "text/csv"}


class ClaudeDirectProvider(AIProvider):
    """AIProvider implementation using Anthropic's Claude API directly.

    Attributes:
        api_key: Anthropic API key for authentication.
        model: Claude model to use.
        max_tokens: Response token ceiling for every call.
    """

    name = "anthropic"
    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str, model: Optional[str] = None, max_tokens: int = 2048) -> None:
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens
        self._client: Optional[object] = None

    def _get_client(self) -> object:
        """Create the SDK client on first use.

        Raises:
            ImportError: If anthropic package is not installed.
        """
        if self._client is None:
            try:
                import anthropic
            except ImportError:
                raise ImportError(
                    "anthropic package is required for ClaudeDirectProvider. "
                    "Install it with: pip install anthropic"
                )
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def _create(self, messages: list, system: Optional[str] = None) -> str:
        client = self._get_client()
        kwargs = {"model": self.model, "max_tokens": self.max_tokens, "messages": messages}
        if system:
            kwargs["system"] = system
        response = client.messages.create(**kwargs)
        return "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        ).strip()

    def generate_text(self, prompt: str) -> str:
        return self._create([{"role": "user", "content": prompt}])

    def _payload_block(self, payload: UpstreamPayload) -> dict:
        mime_type = "image/jpeg" if payload.mime_type == "image/jpg" else payload.mime_type
        if mime_type in IMAGE_MIME_TYPES:
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": mime_type, "data": payload.base64_data},
            }
        if mime_type == "application/pdf":
            return {
                "type": "document",
                "source": {"type": "base64", "media_type": mime_type, "data": payload.base64_data},
            }
        if mime_type in TEXT_MIME_TYPES:
            text = base64.b64decode(payload.base64_data).decode("utf-8", errors="replace")
            return {"type": "text", "text": text}
        raise UnsupportedPayloadError(self.name, payload.mime_type)

    def generate_from_payload(self, prompt: str, payload: UpstreamPayload) -> str:
        content = [self._payload_block(payload), {"type": "text", "text": prompt}]
        return self._create([{"role": "user", "content": content}])

    def generate_chat(self, messages: List[ChatMessage]) -> str:
        system = "\n\n".join(m.content for m in messages if m.role == "system") or None
        turns = [
            {"role": "assistant" if m.role == "model" else "user", "content": m.content}
            for m in messages
            if m.role != "system"
        ]
        return self._create(turns, system=system)
