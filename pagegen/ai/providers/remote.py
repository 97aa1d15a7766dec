"""HTTP client for the remote generation service."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from pagegen.ai.errors import TransportFault
from pagegen.config import Settings
from pagegen.core.encoding import dumps_json

logger = logging.getLogger(__name__)


class GenerationTransport(Protocol):
  """Interface for sending one stage request and receiving its JSON envelope."""

  async def post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
    """POST ``body`` (plus credentials) to ``path`` and return the decoded envelope."""
    ...


class RemoteGenerationClient(GenerationTransport):
  """Posts stage requests to the remote generation service over HTTP."""

  def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
    self._settings = settings
    self._transport = transport

  def _build_client(self) -> httpx.AsyncClient:
    """Build a short-lived httpx client for a single stage call."""
    return httpx.AsyncClient(transport=self._transport, timeout=self._settings.http_timeout_seconds, headers={"Accept": "application/json"})

  async def post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
    """Send the stage body with the shared secret and decode the response envelope.

    Raises TransportFault for connection errors, timeouts and envelopes that are not JSON objects.
    HTTP error statuses are not faults on their own: the envelope still decides the outcome.
    """
    url = self._settings.endpoint(path)
    payload = {**body, "secret": self._settings.secret}
    # Component trees can nest deeper than the stdlib encoder recurses.
    content = dumps_json(payload, separators=(",", ":")).encode("utf-8")

    try:
      async with self._build_client() as client:
        logger.info("Calling generation service path=%s bytes=%d", path, len(content))
        response = await client.post(url, content=content, headers={"Content-Type": "application/json"})

    except httpx.TimeoutException as e:
      logger.error("Generation service timed out path=%s: %s", path, e)
      raise TransportFault(f"Request to {path} timed out after {self._settings.http_timeout_seconds:g}s.") from e
    except httpx.RequestError as e:
      logger.error("Generation service request failed path=%s: %s", path, e)
      raise TransportFault(f"Request to {path} failed: {str(e) or type(e).__name__}") from e

    if response.is_error:
      logger.warning("Generation service returned status=%s path=%s", response.status_code, path)

    try:
      envelope = response.json()
    except ValueError as e:
      logger.error("Generation service returned a non-JSON body status=%s path=%s", response.status_code, path)
      raise TransportFault(f"Response from {path} is not valid JSON (HTTP {response.status_code}).") from e
    except RecursionError as e:
      logger.error("Generation service returned a body nested too deeply to decode status=%s path=%s", response.status_code, path)
      raise TransportFault(f"Response from {path} is nested too deeply to decode (HTTP {response.status_code}).") from e

    if not isinstance(envelope, dict):
      raise TransportFault(f"Response from {path} must be a JSON object, got {type(envelope).__name__} (HTTP {response.status_code}).")

    return envelope
