"""Test configuration for importing the pagegen package."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402
import pytest  # noqa: E402

from pagegen.ai.orchestrator import PipelineOrchestrator  # noqa: E402
from pagegen.ai.providers.remote import RemoteGenerationClient  # noqa: E402
from pagegen.config import Settings  # noqa: E402


class FakeGenerationService:
  """In-memory stand-in for the remote generation service, served through httpx.MockTransport."""

  def __init__(self) -> None:
    self.requests: list[tuple[str, Any]] = []
    self.raw_requests: list[tuple[str, bytes]] = []
    self._responses: dict[str, httpx.Response | Exception] = {}

  def reply(self, path: str, body: Any, *, status_code: int = 200) -> None:
    self._responses[path] = httpx.Response(status_code, json=body)

  def reply_raw(self, path: str, text: str, *, status_code: int = 200) -> None:
    self._responses[path] = httpx.Response(status_code, text=text)

  def fail(self, path: str, exc: Exception) -> None:
    self._responses[path] = exc

  def handle(self, request: httpx.Request) -> httpx.Response:
    self.raw_requests.append((request.url.path, request.content))
    try:
      body = json.loads(request.content)
    except RecursionError:
      # Bodies nested past the decoder limit are only kept raw.
      body = None
    self.requests.append((request.url.path, body))
    response = self._responses.get(request.url.path)
    if response is None:
      return httpx.Response(404, json={"success": False, "error": f"no route {request.url.path}"})
    if isinstance(response, Exception):
      raise response
    return response


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def settings() -> Settings:
  return Settings(server_url="http://generator.test", secret="test-secret", http_timeout_seconds=5.0, log_level="INFO", log_dir=None, log_max_bytes=1024, log_backup_count=1, mcp_transport="stdio")


@pytest.fixture
def remote() -> FakeGenerationService:
  return FakeGenerationService()


@pytest.fixture
def client(settings, remote) -> RemoteGenerationClient:
  return RemoteGenerationClient(settings, transport=httpx.MockTransport(remote.handle))


@pytest.fixture
def orchestrator(settings, client) -> PipelineOrchestrator:
  return PipelineOrchestrator(settings=settings, transport=client)


@pytest.fixture
def login_form_tree() -> dict[str, Any]:
  return {
    "component": "Form",
    "description": "User login form with validation",
    "docQuery": "Form validation examples",
    "children": [
      {"component": "Input", "description": "Username field", "docQuery": None, "children": ""},
      {"component": "Input", "description": "Password field", "docQuery": None, "children": ""},
      {
        "component": "Toolbar",
        "description": "Form actions",
        "docQuery": None,
        "children": [{"component": "Button", "description": "Primary action button to submit credentials", "docQuery": "Button with custom styling", "children": "Sign in"}],
      },
    ],
  }


def build_deep_tree(depth: int) -> dict[str, Any]:
  """Return a single-chain tree with ``depth`` levels whose innermost node is a text leaf."""
  tree: dict[str, Any] = {"component": "Text", "description": "Innermost", "docQuery": None, "children": "deep"}
  for level in range(depth - 1):
    tree = {"component": "Box", "description": f"Level {level}", "docQuery": None, "children": [tree]}
  return tree


@pytest.fixture
def deep_tree():
  return build_deep_tree
