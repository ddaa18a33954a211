"""GenAI API router.

Every route is rate limited per client IP.  The router is mounted under
``server.api_prefix`` (``/api/nengAI`` by default).

Endpoints:
    GET  /health                    - Uptime, memory and version
    GET  /file-types                - Accepted upload categories
    POST /generate-text             - {prompt} -> generated text
    POST /generate-from-{category}  - multipart file + prompt -> generated text
                                      (category: image | document | audio | video)
    POST /chat                      - {messages: [{role, content}]} -> reply text

Upload routes check the request in this order: content type, multipart
parse, body sanitizing, prompt, file presence.  File type and size are
checked by the controller.
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.ai_provider.resolver import get_provider
from gateway.files.registry import lookup
from gateway.files.schemas import FileTypeSpec, IncomingFile
from gateway.rate_limit import enforce_rate_limit
from gateway.request_validation import sanitize_body, validate_content_type, validate_prompt
from gateway.responses import get_formatter

from .controller import GenerationController
from .schemas import ChatRequest, first_error_message

logger = logging.getLogger(__name__)

router = APIRouter(tags=["genai"], dependencies=[Depends(enforce_rate_limit)])

MAX_UPLOAD_FILES = 1
MAX_FORM_FIELDS = 100


def get_controller() -> GenerationController:
    return GenerationController(get_provider(), get_formatter())


async def _read_body(request: Request) -> Tuple[Dict[str, Any], Optional[str]]:
    """Parse a JSON or form body into a dict.

    Returns:
        ``(body, error)``; a non-object JSON value yields an empty body.
    """
    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        form = await request.form()
        try:
            return {k: v for k, v in form.multi_items() if isinstance(v, str)}, None
        finally:
            await form.close()

    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}, "Request body must be valid JSON"
    return (parsed if isinstance(parsed, dict) else {}), None


async def _read_upload(upload: UploadFile, spec: FileTypeSpec) -> IncomingFile:
    """Build an IncomingFile, skipping the read when the part is already too large."""
    if upload.size is not None and upload.size > spec.max_size_bytes:
        return IncomingFile(
            original_name=upload.filename,
            mime_type=upload.content_type,
            size_bytes=upload.size,
        )
    content = await upload.read()
    return IncomingFile.from_bytes(upload.filename, upload.content_type, content)


@router.get("/health")
async def health(controller: GenerationController = Depends(get_controller)) -> JSONResponse:
    return controller.health_check()


@router.get("/file-types")
async def file_types(controller: GenerationController = Depends(get_controller)) -> JSONResponse:
    return controller.supported_file_types()


@router.post("/generate-text")
async def generate_text(
    request: Request,
    controller: GenerationController = Depends(get_controller),
) -> JSONResponse:
    """Generate text from a prompt.

    Example::

        POST /api/nengAI/generate-text
        {"prompt": "Explain AI"}

        200 OK
        {"status": true, "code": 200, "message": "Content generated successfully",
         "data": "AI is...", "timestamp": "..."}
    """
    formatter = controller.formatter
    body, error = await _read_body(request)
    if error:
        return formatter.validation_error(error)

    sanitize_body(body)
    result = validate_prompt(body)
    if not result.is_valid:
        return formatter.validation_error(result.error)

    return await controller.handle_text_request(request, body)


@router.post("/generate-from-{category}")
async def generate_from_file(
    category: str,
    request: Request,
    controller: GenerationController = Depends(get_controller),
) -> JSONResponse:
    """Generate text from a prompt and one uploaded file.

    The multipart body carries the file under ``file`` and the prompt
    under ``prompt``.  Successful replies include the file's metadata as
    ``meta``.
    """
    formatter = controller.formatter
    spec = lookup(category)
    if spec is None or category != spec.name:
        return formatter.not_found("Route")

    content_type = validate_content_type(request.headers.get("content-type"))
    if not content_type.is_valid:
        return formatter.validation_error(content_type.error)

    try:
        form = await request.form(max_files=MAX_UPLOAD_FILES, max_fields=MAX_FORM_FIELDS)
    except StarletteHTTPException as exc:
        logger.warning("Rejected multipart upload on %s: %s", category, exc.detail)
        return formatter.validation_error(str(exc.detail))

    try:
        body = {k: v for k, v in form.multi_items() if isinstance(v, str)}
        sanitize_body(body)
        result = validate_prompt(body)
        if not result.is_valid:
            return formatter.validation_error(result.error)

        upload = form.get(spec.field_name)
        if not isinstance(upload, UploadFile):
            return formatter.validation_error(f"{spec.name} file is required for this endpoint")

        incoming = await _read_upload(upload, spec)
        return await controller.handle_file_request(request, body["prompt"], incoming, spec.category)
    finally:
        await form.close()


@router.post("/chat")
async def chat(
    request: Request,
    controller: GenerationController = Depends(get_controller),
) -> JSONResponse:
    """Generate the next reply of a conversation.

    Example::

        POST /api/nengAI/chat
        {"messages": [{"role": "user", "content": "Hello"}]}
    """
    formatter = controller.formatter
    body, error = await _read_body(request)
    if error:
        return formatter.validation_error(error)

    sanitize_body(body)
    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as exc:
        return formatter.validation_error("Invalid request body", first_error_message(exc))

    messages = [m.to_message() for m in chat_request.messages]
    return await controller.handle_chat_request(request, messages)
