"""GenAI Gateway Application.

This is the main entry point for the gateway service.  It wires the
generation router under the configured API prefix, installs the error
handlers that keep every failure inside the JSON envelope, and builds the
upstream provider at startup.

Startup fails immediately when the selected upstream provider has no API
key configured.

Usage:
    genai-gateway                       # installed entry point
    uvicorn gateway.main:app --port 6068
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway import __version__
from gateway.ai_provider.resolver import build_provider, set_provider
from gateway.config import get_config
from gateway.genai.router import router as genai_router
from gateway.rate_limit import RATE_LIMIT_MESSAGE, RateLimitExceeded
from gateway.responses import get_formatter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Silence verbose third-party loggers.
# httpx/httpcore log every TCP connection and TLS handshake made by the
# provider SDKs, which is not useful when debugging request handling.
for _noisy in (
    "urllib3",
    "httpx",
    "httpcore",
    "google_genai",
    "anthropic",
    "openai",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    # Raises ConfigError when the credential is missing, aborting startup.
    set_provider(build_provider(config))
    logger.info(
        "Gateway running on http://%s:%s%s (mode=%s)",
        config.server.host,
        config.server.port,
        config.server.api_prefix,
        config.mode.value,
    )

    yield  # Application runs here

    # Shutdown
    set_provider(None)
    logger.info("Application shutdown complete")


config = get_config()

app = FastAPI(
    title="GenAI Gateway",
    description="REST gateway for text, image, document, audio and video prompts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)

app.include_router(genai_router, prefix=config.server.api_prefix)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return get_formatter().error(
        RATE_LIMIT_MESSAGE,
        429,
        headers={"Retry-After": str(exc.retry_after)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    formatter = get_formatter()
    if exc.status_code == 404:
        return formatter.not_found("Route")
    return formatter.error(str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg") if errors else None
    return get_formatter().validation_error("Invalid request", detail)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error in API route: %s", exc, exc_info=exc)
    formatter = get_formatter()
    details = str(exc) if formatter.is_development else "Something went wrong"
    return formatter.error("Internal server error", 500, details)


# Static assets (the browser chat widget) are served from the site root when
# the configured directory exists.  Mounted last so API routes win.
if config.server.static_dir and Path(config.server.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=config.server.static_dir, html=True), name="static")


def main() -> None:
    """Run the gateway with uvicorn on the configured host and port."""
    cfg = get_config()
    uvicorn.run(
        "gateway.main:app",
        host=cfg.server.host,
        port=cfg.server.port,
        log_level=cfg.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
