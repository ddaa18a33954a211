"""OpenAI API provider implementation.

This module provides an AIProvider implementation that connects to
OpenAI's API using the official SDK.

Images are sent as ``data:`` URLs, WAV/MP3 audio as ``input_audio`` parts
and plain-text documents as text.  Other MIME types raise
:class:`UnsupportedPayloadError`.

Usage:
    provider = OpenAIProvider(api_key="sk-...")
    text = provider.generate_text("Explain AI")
"""
import base64
import logging
from typing import List, Optional

from .base import AIProvider, ChatMessage, UnsupportedPayloadError, UpstreamPayload

logger = logging.getLogger(__name__)

AUDIO_FORMATS = {"audio/wav": "wav", "audio/mpeg": "mp3", "audio/mp3": "mp3"}
TEXT_MIME_TYPES = {"text/plain", "text/csv"}


class OpenAIProvider(AIProvider):
    """AIProvider implementation using OpenAI's API.

    Attributes:
        api_key: OpenAI API key for authentication.
        model: OpenAI model to use (default: gpt-4o).
        max_tokens: Response token ceiling for every call.
    """

    name = "openai"
    DEFAULT_MODEL = "gpt-4o"

    def __init__(self, api_key: str, model: Optional[str] = None, max_tokens: int = 2048) -> None:
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens
        self._client: Optional[object] = None

    def _get_client(self) -> object:
        """Create the SDK client on first use.

        Raises:
            ImportError: If openai package is not installed.
        """
        if self._client is None:
            try:
                import openai
            except ImportError:
                raise ImportError(
                    "openai package is required for OpenAIProvider. "
                    "Install it with: pip install openai"
                )
            self._client = openai.OpenAI(api_key=self.api_key)
        return self._client

    def _create(self, messages: list) -> str:
        client = self._get_client()
        response = client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=messages,
        )
        return (response.choices[0].message.content or "").strip()

    def generate_text(self, prompt: str) -> str:
        return self._create([{"role": "user", "content": prompt}])

    def _payload_part(self, payload: UpstreamPayload) -> dict:
        if payload.mime_type.startswith("image/"):
            return {
                "type": "image_url",
                "image_url": {"url": f"data:{payload.mime_type};base64,{payload.base64_data}"},
            }
        if payload.mime_type in AUDIO_FORMATS:
            return {
                "type": "input_audio",
                "input_audio": {"data": payload.base64_data, "format": AUDIO_FORMATS[payload.mime_type]},
            }
        if payload.mime_type in TEXT_MIME_TYPES:
            text = base64.b64decode(payload.base64_data).decode("utf-8", errors="replace")
            return {"type": "text", "text": text}
        raise UnsupportedPayloadError(self.name, payload.mime_type)

    def generate_from_payload(self, prompt: str, payload: UpstreamPayload) -> str:
        content = [{"type": "text", "text": prompt}, self._payload_part(payload)]
        return self._create([{"role": "user", "content": content}])

    def generate_chat(self, messages: List[ChatMessage]) -> str:
        role_map = {"user": "user", "model": "assistant", "system": "system"}
        return self._create([{"role": role_map[m.role], "content": m.content} for m in messages])
