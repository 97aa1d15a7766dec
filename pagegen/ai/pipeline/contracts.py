"""Shared data contracts for the page generation pipeline."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from pagegen.ai.errors import ErrorKind
from pagegen.schema.act import ACTNode, ComponentStructure, to_camel


class StageName(StrEnum):
  """The three ordered pipeline stages."""

  PLAN = "plan"
  STRUCTURE = "structure"
  MERGE = "merge"


def utc_now() -> datetime:
  return datetime.now(UTC)


class ExecutionPlan(BaseModel):
  """Plan produced by the plan stage and consumed by the structure stage."""

  model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore", alias_generator=to_camel)

  id: StrictStr = Field(min_length=1, description="Plan identifier.")
  original_query: StrictStr = Field(description="The free-text request the plan was produced for.")
  plan_text: StrictStr = Field(description="The execution plan text returned by the generator.")
  created_at: datetime = Field(description="UTC time the plan was produced.")

  @classmethod
  def create(cls, *, original_query: str, plan_text: str) -> ExecutionPlan:
    """Build a fresh plan with a new id and timestamp."""
    return cls(id=str(uuid.uuid4()), original_query=original_query, plan_text=plan_text, created_at=utc_now())

  def to_payload(self) -> dict[str, Any]:
    return self.model_dump(mode="json", by_alias=True)


class StructureRequest(BaseModel):
  """Input for the structure stage."""

  model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid", alias_generator=to_camel)

  query: StrictStr
  plan: ExecutionPlan


class GeneratedArtifact(BaseModel):
  """Terminal output of the merge stage."""

  model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore", alias_generator=to_camel)

  code: StrictStr = Field(min_length=1, description="Generated page source.")

  def to_payload(self) -> dict[str, Any]:
    return self.model_dump(mode="json", by_alias=True)


StageArtifact = ExecutionPlan | ComponentStructure | GeneratedArtifact


@dataclass(frozen=True)
class StageOutcome:
  """Result of one stage invocation: a validated artifact or a tagged failure."""

  stage: StageName
  artifact: StageArtifact | None = None
  error_kind: ErrorKind | None = None
  message: str | None = None
  occurred_at: datetime = field(default_factory=utc_now)

  @property
  def ok(self) -> bool:
    return self.error_kind is None

  @classmethod
  def success(cls, stage: StageName, artifact: StageArtifact) -> StageOutcome:
    return cls(stage=stage, artifact=artifact)

  @classmethod
  def failure(cls, stage: StageName, error_kind: ErrorKind, message: str) -> StageOutcome:
    return cls(stage=stage, error_kind=error_kind, message=message)


__all__ = ["ACTNode", "ComponentStructure", "ErrorKind", "ExecutionPlan", "GeneratedArtifact", "StageArtifact", "StageName", "StageOutcome", "StructureRequest", "utc_now"]
