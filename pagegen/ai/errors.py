"""Stage error taxonomy raised inside the orchestrator and converted to failure outcomes."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
  """Runtime failure categories reported to the calling agent."""

  TRANSPORT_FAULT = "TransportFault"
  REMOTE_REJECTED = "RemoteRejected"
  MALFORMED_ARTIFACT = "MalformedArtifact"
  INVALID_INPUT = "InvalidInput"


class StageError(RuntimeError):
  """Base class for failures that end a stage invocation."""

  kind: ErrorKind


class TransportFault(StageError):
  """The remote service could not be reached or returned an unreadable envelope."""

  kind = ErrorKind.TRANSPORT_FAULT


class RemoteRejected(StageError):
  """The remote service reported failure or omitted the required data."""

  kind = ErrorKind.REMOTE_REJECTED


class MalformedArtifact(StageError):
  """The remote service reported success but its payload failed validation."""

  kind = ErrorKind.MALFORMED_ARTIFACT


class InvalidInput(StageError):
  """The stage was handed a malformed upstream artifact."""

  kind = ErrorKind.INVALID_INPUT
