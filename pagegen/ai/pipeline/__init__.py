"""Pipeline contracts and stage definitions."""

from pagegen.ai.pipeline.contracts import ErrorKind, ExecutionPlan, GeneratedArtifact, StageName, StageOutcome, StructureRequest
from pagegen.ai.pipeline.stages import MERGE_STAGE, PLAN_STAGE, STAGE_CONTRACTS, STRUCTURE_STAGE, StageContract

__all__ = ["ErrorKind", "ExecutionPlan", "GeneratedArtifact", "MERGE_STAGE", "PLAN_STAGE", "STAGE_CONTRACTS", "STRUCTURE_STAGE", "StageContract", "StageName", "StageOutcome", "StructureRequest"]
