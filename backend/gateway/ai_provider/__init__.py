"""AI Provider module for upstream generative-AI integrations.

This module provides a unified interface for upstream providers with three
implementations: GeminiProvider (default), ClaudeDirectProvider and
OpenAIProvider.

Usage:
    from gateway.ai_provider import GeminiProvider, UpstreamPayload

    provider = GeminiProvider(api_key="...")
    text = provider.generate_text("Explain AI")
    text = provider.generate_from_payload(
        "Describe this image",
        UpstreamPayload(mime_type="image/png", base64_data="iVBORw0..."),
    )
"""
from .base import AIProvider, ChatMessage, UnsupportedPayloadError, UpstreamPayload
from .claude_direct import ClaudeDirectProvider
from .gemini import GeminiProvider
from .openai_provider import OpenAIProvider
from .resolver import ProviderType, build_provider, get_provider, set_provider
from .wrapper import ProviderNotAvailableError, UpstreamError, call_chat, call_generate

__all__ = [
    "AIProvider",
    "ChatMessage",
    "UpstreamPayload",
    "UnsupportedPayloadError",
    "GeminiProvider",
    "ClaudeDirectProvider",
    "OpenAIProvider",
    "ProviderType",
    "build_provider",
    "get_provider",
    "set_provider",
    # Wrapper functions and exceptions
    "call_generate",
    "call_chat",
    "UpstreamError",
    "ProviderNotAvailableError",
]
