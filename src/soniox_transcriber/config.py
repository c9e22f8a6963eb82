from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

from soniox_transcriber.errors import SonioxValidationError

API_BASE_URL = "https://api.soniox.com/v1"
POLLING_INTERVAL_MS = 1000
POLLING_TIMEOUT_MS = 3 * 60 * 1000
REQUEST_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class Settings:
    api_key: str | None = None
    api_base_url: str = API_BASE_URL
    polling_interval_ms: int = POLLING_INTERVAL_MS
    polling_timeout_ms: int = POLLING_TIMEOUT_MS
    request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    mcp_path: str = "/mcp"
    health_path: str = "/healthz"


def _as_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SonioxValidationError(f"{name} must be an integer, got {raw!r}") from exc


def _as_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise SonioxValidationError(f"{name} must be a number, got {raw!r}") from exc


def _normalized_path(path: str) -> str:
    if not path.startswith("/"):
        path = f"/{path}"
    return path


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    if environ is None:
        load_dotenv()
        environ = os.environ

    return Settings(
        api_key=environ.get("SONIOX_API_KEY", "").strip() or None,
        api_base_url=environ.get("SONIOX_API_BASE_URL", "").strip() or API_BASE_URL,
        polling_interval_ms=_as_int(environ, "SONIOX_POLLING_INTERVAL_MS", POLLING_INTERVAL_MS),
        polling_timeout_ms=_as_int(environ, "SONIOX_POLLING_TIMEOUT_MS", POLLING_TIMEOUT_MS),
        request_timeout_seconds=_as_float(
            environ, "SONIOX_REQUEST_TIMEOUT_SECONDS", REQUEST_TIMEOUT_SECONDS
        ),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        host=environ.get("HOST", "0.0.0.0"),
        port=_as_int(environ, "PORT", 3000),
        mcp_path=_normalized_path(environ.get("MCP_PATH", "/mcp")),
        health_path=_normalized_path(environ.get("HEALTH_PATH", "/healthz")),
    )
