"""Request-scoped logging helpers.

Each helper emits one log record whose message carries the endpoint name
and a dict of structured context, e.g.::

    SUCCESS: generate-text {'endpoint': 'generate-text', 'status': 'SUCCESS',
                            'processingTime': '412ms', 'promptLength': 10, ...}

Timing recorded here is observational only.
"""
import functools
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, TypeVar

from fastapi import Request

if TYPE_CHECKING:
    from gateway.files.schemas import IncomingFile

logger = logging.getLogger(__name__)

T = TypeVar("T")


def client_ip(request: Request) -> str:
    """Client address of *request*, or ``"unknown"`` when the transport has none."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def log_request(
    request: Request,
    endpoint: str,
    file_type: Optional[str] = None,
    file: Optional["IncomingFile"] = None,
    has_prompt: bool = False,
) -> None:
    info: dict = {
        "method": request.method,
        "endpoint": endpoint,
        "ip": client_ip(request),
        "userAgent": request.headers.get("user-agent"),
        "hasFile": file is not None,
        "hasPrompt": has_prompt,
    }
    if file_type:
        info["fileType"] = file_type
    if file is not None:
        info["fileInfo"] = {
            "originalName": file.original_name,
            "mimeType": file.mime_type,
            "size": file.size_bytes,
        }
    logger.info("REQUEST: %s %s", endpoint, info)


def log_success(endpoint: str, processing_ms: int, **info: Any) -> None:
    entry = {
        "endpoint": endpoint,
        "status": "SUCCESS",
        "processingTime": f"{processing_ms}ms",
        **info,
    }
    logger.info("SUCCESS: %s %s", endpoint, entry)


def log_error(endpoint: str, error: BaseException, include_stack: bool = False, **info: Any) -> None:
    """Log a failed request; the traceback is attached only when *include_stack*."""
    entry = {
        "endpoint": endpoint,
        "status": "ERROR",
        "errorMessage": str(error),
        "errorType": type(error).__name__,
        **info,
    }
    logger.error("ERROR: %s %s", endpoint, entry, exc_info=error if include_stack else None)


def log_validation_error(endpoint: str, validation_error: str, **request_data: Any) -> None:
    entry = {
        "endpoint": endpoint,
        "status": "VALIDATION_ERROR",
        "validationError": validation_error,
        "requestData": request_data,
    }
    logger.warning("VALIDATION_ERROR: %s %s", endpoint, entry)


def monitor_performance(operation_name: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorate an async callable to log how long each call took.

    Failures are logged and re-raised unchanged.
    """
    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            started = time.perf_counter()
            try:
                result = await fn(*args, **kwargs)
            except Exception as exc:
                logger.error("[PERFORMANCE] %s FAILED: %dms %s", operation_name, elapsed_ms(started), exc)
                raise
            logger.info("[PERFORMANCE] %s: %dms", operation_name, elapsed_ms(started))
            return result
        return wrapper
    return decorator
