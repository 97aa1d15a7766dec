"""Map stage outcomes to caller-facing reports.

Formatting is presentation-only: artifacts are serialized to their wire form and never edited,
reinterpreted or truncated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from pagegen.ai.errors import ErrorKind
from pagegen.ai.pipeline.contracts import ExecutionPlan, GeneratedArtifact, StageArtifact, StageName, StageOutcome
from pagegen.core.encoding import dumps_json
from pagegen.reporting.templates import NEXT_STEPS, render_merge_instructions
from pagegen.schema.act import ACTNode, act_stats, dump_act, to_camel

REMEDIATION_HINTS: dict[ErrorKind, str] = {
  ErrorKind.TRANSPORT_FAULT: "The generation service could not be reached or sent an unreadable response. Check SERVER_URL and network connectivity, then call the tool again.",
  ErrorKind.REMOTE_REJECTED: "The generation service refused the request. Read the error, adjust the input if it is at fault, then call the tool again.",
  ErrorKind.MALFORMED_ARTIFACT: "The generation service returned an artifact that failed validation. Call the tool again; do not pass this result to the next stage.",
  ErrorKind.INVALID_INPUT: "The input is not a valid artifact from the previous stage. Pass the artifact exactly as the previous tool returned it.",
}


class SuccessReport(BaseModel):
  """A stage succeeded and produced ``artifact``."""

  model_config = ConfigDict(populate_by_name=True, frozen=True, alias_generator=to_camel)

  success: Literal[True] = True
  stage: StageName
  artifact: dict[str, Any]
  summary: dict[str, int] | None = None
  next_step: str | None = None
  timestamp: datetime


class FailureReport(BaseModel):
  """A stage failed; no artifact is present."""

  model_config = ConfigDict(populate_by_name=True, frozen=True, alias_generator=to_camel)

  success: Literal[False] = False
  stage: StageName
  error_kind: ErrorKind
  error: str
  hint: str
  timestamp: datetime


Report = SuccessReport | FailureReport


def _artifact_payload(artifact: StageArtifact) -> dict[str, Any]:
  if isinstance(artifact, ACTNode):
    return dump_act(artifact)
  if isinstance(artifact, ExecutionPlan | GeneratedArtifact):
    return artifact.to_payload()
  raise TypeError(f"Unsupported artifact type: {type(artifact).__name__}")


def format_outcome(outcome: StageOutcome) -> Report:
  """Build the report for ``outcome``; the same outcome always yields the same report."""
  error_kind = outcome.error_kind
  if error_kind is None:
    if outcome.artifact is None:
      raise ValueError("Successful outcome is missing its artifact.")
    summary = None
    if isinstance(outcome.artifact, ACTNode):
      stats = act_stats(outcome.artifact)
      summary = {"nodes": stats.nodes, "leaves": stats.leaves, "depth": stats.depth}
    return SuccessReport(stage=outcome.stage, artifact=_artifact_payload(outcome.artifact), summary=summary, next_step=NEXT_STEPS[outcome.stage], timestamp=outcome.occurred_at)

  return FailureReport(stage=outcome.stage, error_kind=error_kind, error=outcome.message or error_kind.value, hint=REMEDIATION_HINTS[error_kind], timestamp=outcome.occurred_at)


def report_payload(report: Report) -> dict[str, Any]:
  """Return the JSON-ready wire form of a report."""
  if isinstance(report, FailureReport):
    return report.model_dump(mode="json", by_alias=True)

  # The artifact is already in wire form and may be nested deeper than pydantic serializes.
  fields = report.model_dump(mode="json", by_alias=True, exclude={"artifact"})
  payload: dict[str, Any] = {"success": fields.pop("success"), "stage": fields.pop("stage"), "artifact": report.artifact}
  payload.update(fields)
  return payload


def render_report(report: Report) -> str:
  """Render a report as the text returned to the calling agent."""
  if isinstance(report, SuccessReport) and report.stage == StageName.MERGE:
    return render_merge_instructions(report.artifact["code"])
  return dumps_json(report_payload(report), indent=2)
