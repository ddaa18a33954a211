"""Google Gemini provider implementation.

This module provides an AIProvider implementation backed by the
``google-genai`` SDK.  Files are sent inline as bytes alongside the
prompt, so every category the gateway accepts can be forwarded.

Usage:
    provider = GeminiProvider(api_key="...")
    text = provider.generate_text("Explain AI")
"""
import base64
import logging
from typing import List, Optional

from .base import AIProvider, ChatMessage, UpstreamPayload

logger = logging.getLogger(__name__)


class GeminiProvider(AIProvider):
    """AIProvider implementation using the Gemini API.

    Attributes:
        api_key: Gemini API key for authentication.
        model: Gemini model to use (default: gemini-2.5-flash).
    """

    name = "gemini"
    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(self, api_key: str, model: Optional[str] = None) -> None:
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self._client: Optional[object] = None

    def _get_client(self) -> object:
        """Get or create the genai client.

        Raises:
            ImportError: If google-genai package is not installed.
        """
        if self._client is None:
            try:
                from google import genai
                self._client = genai.Client(api_key=self.api_key)
            except ImportError:
                raise ImportError(
                    "google-genai package is required for GeminiProvider. "
                    "Install it with: pip install google-genai"
                )
        return self._client

    def generate_text(self, prompt: str) -> str:
        if not prompt:
            raise ValueError("Prompt cannot be empty.")

        client = self._get_client()
        response = client.models.generate_content(model=self.model, contents=prompt)
        return response.text or ""

    def generate_from_payload(self, prompt: str, payload: UpstreamPayload) -> str:
        from google.genai import types

        client = self._get_client()
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part(text=prompt),
                    types.Part.from_bytes(
                        data=base64.b64decode(payload.base64_data),
                        mime_type=payload.mime_type,
                    ),
                ],
            )
        ]
        response = client.models.generate_content(model=self.model, contents=contents)
        return response.text or ""

    def generate_chat(self, messages: List[ChatMessage]) -> str:
        """Send the conversation; ``system`` messages become the system instruction."""
        from google.genai import types

        client = self._get_client()
        system_parts = [m.content for m in messages if m.role == "system"]
        contents = [
            types.Content(role=m.role, parts=[types.Part(text=m.content)])
            for m in messages
            if m.role != "system"
        ]

        config = None
        if system_parts:
            config = types.GenerateContentConfig(system_instruction="\n\n".join(system_parts))

        response = client.models.generate_content(model=self.model, contents=contents, config=config)
        return response.text or ""
