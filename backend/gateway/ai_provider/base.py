"""AIProvider abstract interface for upstream generative-AI services.

This module defines the abstract base class for all upstream provider
implementations.  The gateway only ever needs three calls: plain text
generation, generation from a prompt plus one inline file, and a
multi-turn chat completion.

Usage:
    from gateway.ai_provider import GeminiProvider

    provider = GeminiProvider(api_key="...")
    text = provider.generate_text("Explain AI")
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Literal


class UnsupportedPayloadError(ValueError):
    """Raised when a provider cannot accept a payload of the given MIME type."""

    def __init__(self, provider_name: str, mime_type: str):
        self.provider_name = provider_name
        self.mime_type = mime_type
        super().__init__(f"{provider_name} does not accept {mime_type} payloads")


@dataclass(frozen=True)
class UpstreamPayload:
    """A file encoded for transmission to the upstream service.

    Attributes:
        mime_type: Declared MIME type of the file.
        base64_data: File bytes as a base64 string.
    """
    mime_type: str
    base64_data: str


@dataclass
class ChatMessage:
    """A single chat turn.

    Attributes:
        role: ``user`` or ``model`` for conversation turns, ``system`` for
            instructions.
        content: The message text.
    """
    role: Literal["user", "model", "system"]
    content: str


class AIProvider(ABC):
    """Abstract base class for upstream provider implementations.

    Methods:
        generate_text: Generate text from a prompt.
        generate_from_payload: Generate text from a prompt and one file.
        generate_chat: Generate the next turn of a conversation.
    """

    name: str = "provider"

    @abstractmethod
    def generate_text(self, prompt: str) -> str:
        """Generate text for a prompt.

        Raises:
            Exception: If the upstream call fails.
        """
        pass

    @abstractmethod
    def generate_from_payload(self, prompt: str, payload: UpstreamPayload) -> str:
        """Generate text for a prompt about an attached file.

        Raises:
            UnsupportedPayloadError: If the provider cannot accept the MIME type.
            Exception: If the upstream call fails.
        """
        pass

    @abstractmethod
    def generate_chat(self, messages: List[ChatMessage]) -> str:
        """Generate the reply to a conversation.

        Raises:
            Exception: If the upstream call fails.
        """
        pass
