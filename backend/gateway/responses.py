"""Uniform JSON envelope for every gateway response.

Every endpoint answers with::

    {
        "status": true | false,
        "code": <http status>,
        "message": "...",
        "data": ...,        # success only
        "meta": {...},      # success only, when provided
        "errors": ...,      # errors only, when provided
        "timestamp": "2025-01-01T12:00:00.000Z"
    }

Optional keys are omitted rather than set to null.  The timestamp is taken
when the envelope is built, so two otherwise identical envelopes differ in
``timestamp``.

Internal errors are the one place where the diagnostics mode matters: in
development the raw message and traceback are returned under ``errors``,
in production a fixed opaque string is returned instead.
"""
import logging
import traceback
from typing import Any, Optional, Union

from fastapi.responses import JSONResponse

from gateway.config import DiagnosticsMode, get_config
from gateway.utils import iso_timestamp

logger = logging.getLogger(__name__)

OPAQUE_INTERNAL_ERROR = "Internal server error occurred"

ErrorDetail = Union[str, dict, list, None]


def build_success(data: Any, message: str = "Success", meta: Optional[dict] = None, code: int = 200) -> dict:
    """Build a success envelope; ``data`` is always present."""
    envelope = {
        "status": True,
        "code": code,
        "message": message,
        "data": data,
        "timestamp": iso_timestamp(),
    }
    if meta is not None:
        envelope["meta"] = meta
    return envelope


def build_error(message: str, code: int = 500, errors: ErrorDetail = None) -> dict:
    """Build an error envelope; ``errors`` is included only when given."""
    envelope = {
        "status": False,
        "code": code,
        "message": message,
        "timestamp": iso_timestamp(),
    }
    if errors:
        envelope["errors"] = errors
    return envelope


class ResponseFormatter:
    """Writes envelopes as FastAPI ``JSONResponse`` objects.

    Args:
        mode: Controls whether internal error details reach the client.
    """

    def __init__(self, mode: DiagnosticsMode = DiagnosticsMode.PRODUCTION) -> None:
        self.mode = mode

    @property
    def is_development(self) -> bool:
        return self.mode is DiagnosticsMode.DEVELOPMENT

    def success(
        self,
        data: Any,
        message: str = "Success",
        meta: Optional[dict] = None,
        code: int = 200,
    ) -> JSONResponse:
        return JSONResponse(build_success(data, message, meta, code), status_code=code)

    def error(
        self,
        message: str,
        code: int = 500,
        errors: ErrorDetail = None,
        headers: Optional[dict] = None,
    ) -> JSONResponse:
        return JSONResponse(build_error(message, code, errors), status_code=code, headers=headers)

    def validation_error(self, message: str, errors: ErrorDetail = None) -> JSONResponse:
        return self.error(message, 400, errors)

    def internal_error(self, error: BaseException, message: str = "Internal server error") -> JSONResponse:
        """Log *error* and answer 500 with *message*.

        The raw error is only exposed in development mode.
        """
        logger.error("Internal Server Error: %s", error, exc_info=error)

        if self.is_development:
            details: ErrorDetail = {
                "message": str(error),
                "stack": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            }
        else:
            details = OPAQUE_INTERNAL_ERROR
        return self.error(message, 500, details)

    def not_found(self, resource: str = "Resource") -> JSONResponse:
        return self.error(f"{resource} not found", 404)

    def unauthorized(self, message: str = "Unauthorized access") -> JSONResponse:
        return self.error(message, 401)

    def forbidden(self, message: str = "Forbidden access") -> JSONResponse:
        return self.error(message, 403)


_formatter: Optional[ResponseFormatter] = None


def get_formatter() -> ResponseFormatter:
    """Return the process-wide formatter, built from config on first use."""
    global _formatter
    if _formatter is None:
        _formatter = ResponseFormatter(get_config().mode)
    return _formatter


def set_formatter(formatter: Optional[ResponseFormatter]) -> None:
    """Replace (or clear) the process-wide formatter."""
    global _formatter
    _formatter = formatter
