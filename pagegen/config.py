"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv(override=False)

MCP_TRANSPORTS = frozenset({"stdio", "streamable-http"})
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ConfigurationError(RuntimeError):
  """Raised when required startup configuration is missing or invalid."""


def check_server_url(value: str) -> str | None:
  """Return a problem description when ``value`` is not an absolute http(s) base address."""
  parsed = urlparse(value.strip())
  if parsed.scheme not in {"http", "https"} or not parsed.netloc:
    return "must be an absolute http:// or https:// URL."

  return None


@dataclass(frozen=True)
class Settings:
  """Typed settings for the page generation server."""

  server_url: str
  secret: str
  http_timeout_seconds: float
  log_level: str
  log_dir: str | None
  log_max_bytes: int
  log_backup_count: int
  mcp_transport: str

  def endpoint(self, path: str) -> str:
    """Join the service base address with a stage path."""
    return f"{self.server_url.rstrip('/')}/{path.lstrip('/')}"


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  return value or None


def _required_str(name: str) -> str:
  value = _optional_str(os.getenv(name))
  if value is None:
    raise ConfigurationError(f"{name} must be set.")
  return value


def _parse_positive_float(name: str, default: str) -> float:
  raw = os.getenv(name, default)
  try:
    value = float(raw)
  except ValueError as exc:
    raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from exc
  if value <= 0:
    raise ConfigurationError(f"{name} must be a positive number.")
  return value


def _parse_int(name: str, default: str, *, minimum: int) -> int:
  raw = os.getenv(name, default)
  try:
    value = int(raw)
  except ValueError as exc:
    raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc
  if value < minimum:
    raise ConfigurationError(f"{name} must be >= {minimum}.")
  return value


def load_settings() -> Settings:
  """Build settings from the current environment, failing fast on bad values."""
  server_url = _required_str("SERVER_URL")
  server_url_problem = check_server_url(server_url)
  if server_url_problem:
    raise ConfigurationError(f"SERVER_URL {server_url_problem}")

  # The secret is sent verbatim, so only blank values are rejected.
  secret = os.getenv("SECRET") or ""
  if secret.strip() == "":
    raise ConfigurationError("SECRET must be set.")

  log_level = (os.getenv("PAGEGEN_LOG_LEVEL") or "INFO").strip().upper()
  if log_level not in LOG_LEVELS:
    raise ConfigurationError(f"PAGEGEN_LOG_LEVEL must be one of: {', '.join(sorted(LOG_LEVELS))}.")

  mcp_transport = (os.getenv("PAGEGEN_MCP_TRANSPORT") or "stdio").strip().lower()
  if mcp_transport not in MCP_TRANSPORTS:
    raise ConfigurationError(f"PAGEGEN_MCP_TRANSPORT must be one of: {', '.join(sorted(MCP_TRANSPORTS))}.")

  return Settings(
    server_url=server_url,
    secret=secret,
    http_timeout_seconds=_parse_positive_float("PAGEGEN_HTTP_TIMEOUT_SECONDS", "120"),
    log_level=log_level,
    log_dir=_optional_str(os.getenv("PAGEGEN_LOG_DIR")),
    log_max_bytes=_parse_int("PAGEGEN_LOG_MAX_BYTES", "5242880", minimum=1),
    log_backup_count=_parse_int("PAGEGEN_LOG_BACKUP_COUNT", "10", minimum=0),
    mcp_transport=mcp_transport,
  )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""
  return load_settings()
