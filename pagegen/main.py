from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from pagegen import __version__
from pagegen.ai.orchestrator import PipelineOrchestrator
from pagegen.api.tools import PipelineTools, register_tools
from pagegen.config import ConfigurationError, Settings, get_settings
from pagegen.core.env_contract import validate_runtime_env_or_raise
from pagegen.core.logging import initialize_bootstrap_logging, initialize_logging

SERVER_NAME = "pagegen-mcp"
SERVER_INSTRUCTIONS = "Generate a UI page in three steps: call 'plan', then 'structure' with the plan, then 'merge' with the structure. Inspect each result before the next call."


def create_server(settings: Settings, *, orchestrator: PipelineOrchestrator | None = None) -> FastMCP:
  """Build the tool server with the three pipeline tools registered."""
  server = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, log_level=settings.log_level)
  register_tools(server, PipelineTools(orchestrator or PipelineOrchestrator(settings=settings)))
  return server


def load_startup_settings(logger: logging.Logger) -> Settings:
  """Validate the environment contract and load settings; raises ConfigurationError."""
  validate_runtime_env_or_raise(logger=logger)
  return get_settings()


def main() -> None:
  """Console entry point."""
  initialize_bootstrap_logging()
  logger = logging.getLogger("pagegen.main")

  try:
    settings = load_startup_settings(logger)
  except ConfigurationError as exc:
    # Fail before any tool is registered.
    logger.error("Configuration invalid; refusing to start: %s", exc)
    sys.exit(1)

  initialize_logging(settings)
  server = create_server(settings)
  logger.info("Starting %s %s transport=%s", SERVER_NAME, __version__, settings.mcp_transport)

  try:
    server.run(transport=settings.mcp_transport)
  except KeyboardInterrupt:
    logger.info("Shutting down.")


if __name__ == "__main__":
  main()
