"""Generation controller.

Sequences one request through validate → call upstream → format.  The
controller holds no per-request state; the only shared mutable state in
the gateway is the rate limiter, which runs before the controller.

Every generation path is timed from the start of the handler to the
formatting of the response, and the duration is attached to the
success/error log entry.  Timing never changes control flow.

Failure handling:
    - File validation failures answer 400 without calling upstream, and are
      logged at WARNING with the file's name, size and MIME type.
    - Anything raised after validation (encoding, upstream, unexpected) is
      caught once here and answered as a 500 with a fixed public message.
"""
import logging
import time
from typing import Any, Callable, List, Mapping, Optional

import psutil
from fastapi import Request
from fastapi.responses import JSONResponse

from gateway import __version__
from gateway.ai_provider.base import AIProvider, ChatMessage
from gateway.ai_provider.wrapper import call_chat, call_generate
from gateway.files.registry import describe_all
from gateway.files.schemas import FileCategory, IncomingFile
from gateway.files.service import describe_metadata, encode_for_upstream, validate_file
from gateway.request_log import elapsed_ms, log_error, log_request, log_success, log_validation_error
from gateway.responses import ResponseFormatter
from gateway.utils import iso_timestamp

logger = logging.getLogger(__name__)


def process_uptime() -> float:
    """Seconds since this process was created."""
    return round(time.time() - psutil.Process().create_time(), 3)


def process_memory() -> dict:
    """Memory counters of this process, in bytes."""
    return dict(psutil.Process().memory_info()._asdict())


def _require_prompt(prompt: Any) -> str:
    if not prompt or not isinstance(prompt, str) or not prompt.strip():
        raise ValueError("Valid prompt is required")
    return prompt.strip()


class GenerationController:
    """Handles the gateway's generation, health and discovery endpoints.

    Args:
        provider: Upstream provider; None makes generation answer 500.
        formatter: Envelope writer (carries the diagnostics mode).
        uptime: Returns process uptime in seconds.
        memory: Returns a dict of memory counters.
    """

    def __init__(
        self,
        provider: Optional[AIProvider],
        formatter: ResponseFormatter,
        uptime: Callable[[], float] = process_uptime,
        memory: Callable[[], dict] = process_memory,
    ) -> None:
        self.provider = provider
        self.formatter = formatter
        self._uptime = uptime
        self._memory = memory

    # -----------------------------------------------------------------------
    # Generation
    # -----------------------------------------------------------------------

    async def handle_text_request(
        self,
        request: Request,
        body: Mapping[str, Any],
        endpoint: str = "generate-text",
    ) -> JSONResponse:
        started = time.perf_counter()
        prompt = body.get("prompt")

        try:
            log_request(request, endpoint, has_prompt=bool(prompt))
            text_prompt = _require_prompt(prompt)

            generated = await call_generate(self.provider, text_prompt)

            log_success(
                endpoint,
                elapsed_ms(started),
                promptLength=len(text_prompt),
                responseLength=len(generated),
            )
            return self.formatter.success(generated, "Content generated successfully")

        except Exception as exc:
            log_error(
                endpoint,
                exc,
                include_stack=self.formatter.is_development,
                promptLength=len(prompt) if isinstance(prompt, str) else 0,
                processingTime=f"{elapsed_ms(started)}ms",
            )
            return self.formatter.internal_error(exc, "Failed to generate content")

    async def handle_file_request(
        self,
        request: Request,
        prompt: Any,
        file: Optional[IncomingFile],
        category: FileCategory,
        endpoint: Optional[str] = None,
    ) -> JSONResponse:
        """Generate from a prompt plus one uploaded file of *category*."""
        started = time.perf_counter()
        label = category.value
        endpoint = endpoint or f"generate-from-{label}"

        try:
            log_request(request, endpoint, file_type=label, file=file, has_prompt=bool(prompt))
            text_prompt = _require_prompt(prompt)

            validation = validate_file(file, category)
            if not validation.is_valid:
                log_validation_error(
                    endpoint,
                    validation.error,
                    fileName=file.original_name if file else None,
                    fileSize=file.size_bytes if file else None,
                    fileMimeType=file.mime_type if file else None,
                )
                return self.formatter.validation_error(validation.error)

            payload = encode_for_upstream(file)
            generated = await call_generate(self.provider, text_prompt, payload)

            log_success(
                endpoint,
                elapsed_ms(started),
                promptLength=len(text_prompt),
                responseLength=len(generated),
                fileSize=file.size_bytes,
                fileName=file.original_name,
            )
            return self.formatter.success(
                generated,
                f"Content generated successfully from {label}",
                meta=describe_metadata(file),
            )

        except Exception as exc:
            log_error(
                endpoint,
                exc,
                include_stack=self.formatter.is_development,
                promptLength=len(prompt) if isinstance(prompt, str) else 0,
                fileName=file.original_name if file else None,
                fileSize=file.size_bytes if file else None,
                processingTime=f"{elapsed_ms(started)}ms",
            )
            return self.formatter.internal_error(exc, f"Failed to generate content from {label}")

    async def handle_chat_request(
        self,
        request: Request,
        messages: List[ChatMessage],
        endpoint: str = "chat",
    ) -> JSONResponse:
        started = time.perf_counter()

        try:
            log_request(request, endpoint, has_prompt=bool(messages))
            generated = await call_chat(self.provider, messages)

            log_success(
                endpoint,
                elapsed_ms(started),
                messageCount=len(messages),
                responseLength=len(generated),
            )
            return self.formatter.success(generated, "Chat response generated successfully")

        except Exception as exc:
            log_error(
                endpoint,
                exc,
                include_stack=self.formatter.is_development,
                messageCount=len(messages),
                processingTime=f"{elapsed_ms(started)}ms",
            )
            return self.formatter.internal_error(exc, "Failed to generate chat response")

    # -----------------------------------------------------------------------
    # Health & discovery
    # -----------------------------------------------------------------------

    def health_check(self) -> JSONResponse:
        """Report uptime and memory; never raises."""
        try:
            data = {
                "status": "healthy",
                "timestamp": iso_timestamp(),
                "uptime": self._uptime(),
                "memory": self._memory(),
                "version": __version__,
            }
            return self.formatter.success(data, "Service is healthy")
        except Exception as exc:
            return self.formatter.internal_error(exc, "Health check failed")

    def supported_file_types(self) -> JSONResponse:
        try:
            return self.formatter.success(describe_all(), "Supported file types retrieved successfully")
        except Exception as exc:
            return self.formatter.internal_error(exc, "Failed to retrieve file types information")
