"""GenAI Gateway configuration.

Loads settings from two YAML files:
  * gateway.settings.yaml  : non-secret configuration
  * gateway.secrets.yaml   : upstream credentials (never committed)

Environment variables override both files so the service can run from a
plain ``.env`` / container environment:

  GEMINI_API_KEY, ANTHROPIC_API_KEY, OPENAI_API_KEY
  UPSTREAM_PROVIDER, UPSTREAM_MODEL (alias GEMINI_MODEL)
  APP_ENV, HOST, PORT, LOG_LEVEL
"""
from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("gateway.settings.yaml")
SECRETS_FILE  = Path("gateway.secrets.yaml")


class ConfigError(RuntimeError):
    """Raised when the configuration cannot support a running service."""


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


class DiagnosticsMode(str, Enum):
    """Controls how much error detail reaches API clients."""
    DEVELOPMENT = "development"
    PRODUCTION  = "production"

    @classmethod
    def from_env(cls, value: Optional[str]) -> "DiagnosticsMode":
        if value and value.strip().lower() in ("development", "dev"):
            return cls.DEVELOPMENT
        return cls.PRODUCTION


# ---------------------------------------------------------------------------
# Secrets models
# ---------------------------------------------------------------------------


class ProviderSecrets(BaseModel):
    api_key: Optional[str] = None


class Secrets(BaseModel):
    gemini:    ProviderSecrets = Field(default_factory=ProviderSecrets)
    anthropic: ProviderSecrets = Field(default_factory=ProviderSecrets)
    openai:    ProviderSecrets = Field(default_factory=ProviderSecrets)


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host:            str  = "0.0.0.0"
    port:            int  = 6068
    api_prefix:      str  = "/api/nengAI"
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    static_dir:      Optional[str] = "static"

    @field_validator("api_prefix")
    @classmethod
    def _normalise_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value


class LoggingSettings(BaseModel):
    level: str = "info"


class RateLimitSettings(BaseModel):
    """Fixed-window limiter applied to every gateway route."""
    max_requests:    int   = Field(default=100, ge=1)
    window_seconds:  float = Field(default=15 * 60, gt=0)
    sweep_threshold: int   = Field(default=10_000, ge=1)


class UpstreamSettings(BaseModel):
    provider:   Literal["gemini", "anthropic", "openai"] = "gemini"
    model:      Optional[str] = None
    max_tokens: int = 2048


class AppConfig(BaseModel):
    server:     ServerSettings    = Field(default_factory=ServerSettings)
    logging:    LoggingSettings   = Field(default_factory=LoggingSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    upstream:   UpstreamSettings  = Field(default_factory=UpstreamSettings)
    mode:       DiagnosticsMode   = DiagnosticsMode.PRODUCTION
    secrets:    Secrets           = Field(default_factory=Secrets)

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> DiagnosticsMode:
        if isinstance(value, DiagnosticsMode):
            return value
        return DiagnosticsMode.from_env(value)

    @property
    def is_development(self) -> bool:
        return self.mode is DiagnosticsMode.DEVELOPMENT


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: Dict[str, Any], env: Mapping[str, str]) -> None:
    """Merge recognised environment variables into the raw settings dict."""
    server   = data.setdefault("server", {}) or {}
    upstream = data.setdefault("upstream", {}) or {}
    secrets  = data.setdefault("secrets", {}) or {}
    data["server"], data["upstream"], data["secrets"] = server, upstream, secrets

    for env_name, provider in (
        ("GEMINI_API_KEY", "gemini"),
        ("ANTHROPIC_API_KEY", "anthropic"),
        ("OPENAI_API_KEY", "openai"),
    ):
        if env.get(env_name):
            section = secrets.setdefault(provider, {}) or {}
            section["api_key"] = env[env_name]
            secrets[provider] = section

    if env.get("UPSTREAM_PROVIDER"):
        upstream["provider"] = env["UPSTREAM_PROVIDER"].strip().lower()
    model = env.get("UPSTREAM_MODEL") or env.get("GEMINI_MODEL")
    if model:
        upstream["model"] = model

    if env.get("HOST"):
        server["host"] = env["HOST"]
    if env.get("PORT"):
        server["port"] = env["PORT"]
    if env.get("LOG_LEVEL"):
        logging_section = data.get("logging") or {}
        logging_section["level"] = env["LOG_LEVEL"]
        data["logging"] = logging_section
    if env.get("APP_ENV"):
        data["mode"] = env["APP_ENV"]


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    secrets_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load and merge settings + secrets + environment into an *AppConfig*."""
    settings_data = _load_yaml(Path(settings_path) if settings_path else SETTINGS_FILE)
    secrets_data  = _load_yaml(Path(secrets_path) if secrets_path else SECRETS_FILE)

    # Merge: secrets live under the "secrets" key in AppConfig
    settings_data["secrets"] = secrets_data
    _apply_env_overrides(settings_data, os.environ if env is None else env)

    config = AppConfig(**settings_data)
    logger.info(
        "Settings loaded (server=%s:%s, prefix=%s, provider=%s, mode=%s)",
        config.server.host,
        config.server.port,
        config.server.api_prefix,
        config.upstream.provider,
        config.mode.value,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[AppConfig]) -> None:
    """Replace (or clear) the process-wide configuration."""
    global _config
    _config = config
