"""Startup environment contract checks for the page generation server.

How/Why:
- Keep runtime configuration explicit so a missing service address or secret stops startup.
- Redact secret values in startup logs.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from pagegen.config import LOG_LEVELS, MCP_TRANSPORTS, ConfigurationError, check_server_url

EnvValidator = Callable[[str], str | None]


@dataclass(frozen=True)
class EnvVarDefinition:
  """Describe how an environment variable must be validated."""

  name: str
  required: bool
  secret: bool
  validator: EnvValidator | None = None


def _validate_non_empty(value: str) -> str | None:
  """Ensure a value is not blank after trimming whitespace."""
  if value.strip() == "":
    return "must not be empty."

  return None


def _validate_positive_number(value: str) -> str | None:
  try:
    number = float(value)
  except ValueError:
    return "must be a number."

  if number <= 0:
    return "must be positive."

  return None


def _integer_at_least(minimum: int) -> EnvValidator:
  def _validate(value: str) -> str | None:
    try:
      number = int(value)
    except ValueError:
      return "must be an integer."

    if number < minimum:
      return f"must be >= {minimum}."

    return None

  return _validate


def _validate_log_level(value: str) -> str | None:
  if value.strip().upper() in LOG_LEVELS:
    return None

  return f"must be one of: {', '.join(sorted(LOG_LEVELS))}."


def _validate_transport(value: str) -> str | None:
  if value.strip().lower() in MCP_TRANSPORTS:
    return None

  return f"must be one of: {', '.join(sorted(MCP_TRANSPORTS))}."


REQUIRED_ENV_REGISTRY: tuple[EnvVarDefinition, ...] = (
  EnvVarDefinition(name="SERVER_URL", required=True, secret=False, validator=check_server_url),
  EnvVarDefinition(name="SECRET", required=True, secret=True, validator=_validate_non_empty),
  EnvVarDefinition(name="PAGEGEN_HTTP_TIMEOUT_SECONDS", required=False, secret=False, validator=_validate_positive_number),
  EnvVarDefinition(name="PAGEGEN_LOG_LEVEL", required=False, secret=False, validator=_validate_log_level),
  EnvVarDefinition(name="PAGEGEN_LOG_DIR", required=False, secret=False),
  EnvVarDefinition(name="PAGEGEN_LOG_MAX_BYTES", required=False, secret=False, validator=_integer_at_least(1)),
  EnvVarDefinition(name="PAGEGEN_LOG_BACKUP_COUNT", required=False, secret=False, validator=_integer_at_least(0)),
  EnvVarDefinition(name="PAGEGEN_MCP_TRANSPORT", required=False, secret=False, validator=_validate_transport),
)


def list_required_env_names() -> tuple[str, ...]:
  """Expose required key names for deploy automation."""
  return tuple(definition.name for definition in REQUIRED_ENV_REGISTRY if definition.required)


def validate_env_values(env_map: dict[str, str]) -> list[str]:
  """Validate a provided env map against the contract rules."""
  errors: list[str] = []
  for definition in REQUIRED_ENV_REGISTRY:
    value = env_map.get(definition.name, "")
    if definition.required and value.strip() == "":
      errors.append(f"{definition.name}: required variable is missing.")
      continue

    if definition.validator and value.strip() != "":
      validation_error = definition.validator(value)
      if validation_error:
        errors.append(f"{definition.name}: {validation_error}")

  return errors


def validate_runtime_env_or_raise(*, logger: logging.Logger) -> None:
  """Validate and log runtime env values, raising ConfigurationError on violations."""
  resolved_values: dict[str, str] = {}
  for definition in REQUIRED_ENV_REGISTRY:
    value = os.getenv(definition.name) or ""
    resolved_values[definition.name] = value
    if definition.secret:
      logger.info("ENV_CHECK key=%s value=<redacted>", definition.name)
    elif value == "":
      logger.info("ENV_CHECK key=%s value=<missing>", definition.name)
    else:
      logger.info("ENV_CHECK key=%s value=%s", definition.name, value)

  errors = validate_env_values(resolved_values)

  if not errors:
    logger.info("ENV_CHECK status=ok checked=%d", len(REQUIRED_ENV_REGISTRY))
    return

  message = "ENV_CHECK status=failed violations:\n- {errors}".format(errors="\n- ".join(errors))
  logger.error(message)
  raise ConfigurationError(message)
