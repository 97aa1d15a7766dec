"""Stage contracts: request bodies, hand-off checks and output validation for each stage."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from pagegen.ai.errors import InvalidInput, MalformedArtifact
from pagegen.ai.pipeline.contracts import ExecutionPlan, GeneratedArtifact, StageName, StructureRequest
from pagegen.schema.act import ACTNode, ACTValidationError, dump_act, validate_act

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


def _describe_pydantic_error(exc: ValidationError) -> str:
  parts = []
  for err in exc.errors():
    loc = ".".join(str(x) for x in err["loc"]) or "$"
    parts.append(f"{loc}: {err['msg']}")
  return "; ".join(parts)


@dataclass(frozen=True)
class StageContract(Generic[InputT, OutputT]):
  """Fixed input/output shape of one stage.

  ``check_input`` turns caller-supplied input into the stage's input type or raises ``InvalidInput``.
  ``build_body`` produces the stage-specific request fields (the secret is added by the remote client).
  ``parse_output`` validates the envelope ``data`` and raises ``MalformedArtifact`` on any mismatch.
  """

  name: StageName
  path: str
  check_input: Callable[[Any], InputT]
  build_body: Callable[[InputT], dict[str, Any]]
  parse_output: Callable[[Mapping[str, Any], InputT], OutputT]


# plan


def _check_plan_input(query: Any) -> str:
  if not isinstance(query, str):
    raise InvalidInput(f"query must be a string, got {type(query).__name__}")
  if query.strip() == "":
    raise InvalidInput("query must not be empty")
  return query


def _plan_body(query: str) -> dict[str, Any]:
  return {"query": query}


def _parse_plan(data: Mapping[str, Any], query: str) -> ExecutionPlan:
  plan_text = data.get("plan")
  if not isinstance(plan_text, str):
    raise MalformedArtifact(f"data.plan must be a string, got {type(plan_text).__name__}")
  if plan_text.strip() == "":
    raise MalformedArtifact("data.plan is empty")
  return ExecutionPlan.create(original_query=query, plan_text=plan_text)


# structure


def _check_structure_input(candidate: Any) -> StructureRequest:
  if isinstance(candidate, StructureRequest):
    return candidate
  try:
    return StructureRequest.model_validate(candidate)
  except ValidationError as exc:
    raise InvalidInput(f"structure input is not a valid {{query, plan}} pair: {_describe_pydantic_error(exc)}") from exc


def _structure_body(request: StructureRequest) -> dict[str, Any]:
  return {"query": request.query, "plan": request.plan.to_payload()}


def _parse_structure(data: Mapping[str, Any], _request: StructureRequest) -> ACTNode:
  if "structure" not in data:
    raise MalformedArtifact("data.structure is missing")
  try:
    return validate_act(data["structure"])
  except ACTValidationError as exc:
    raise MalformedArtifact(f"data.structure is not a well-formed component tree: {exc}") from exc


# merge


def _check_merge_input(candidate: Any) -> ACTNode:
  try:
    return validate_act(candidate)
  except ACTValidationError as exc:
    raise InvalidInput(f"structure is not a well-formed component tree: {exc}") from exc


def _merge_body(structure: ACTNode) -> dict[str, Any]:
  return {"structure": dump_act(structure)}


def _parse_merge(data: Mapping[str, Any], _structure: ACTNode) -> GeneratedArtifact:
  code = data.get("code")
  if code is None:
    # Older services nest the generated code under the component library key.
    legacy = data.get("kendoComponents")
    if isinstance(legacy, Mapping):
      code = legacy.get("code")
  if not isinstance(code, str):
    raise MalformedArtifact(f"data.code must be a string, got {type(code).__name__}")
  if code.strip() == "":
    raise MalformedArtifact("data.code is empty")
  return GeneratedArtifact(code=code)


PLAN_STAGE: StageContract[str, ExecutionPlan] = StageContract(name=StageName.PLAN, path="/api/agents/plan", check_input=_check_plan_input, build_body=_plan_body, parse_output=_parse_plan)
STRUCTURE_STAGE: StageContract[StructureRequest, ACTNode] = StageContract(
  name=StageName.STRUCTURE, path="/api/agents/structure", check_input=_check_structure_input, build_body=_structure_body, parse_output=_parse_structure
)
MERGE_STAGE: StageContract[ACTNode, GeneratedArtifact] = StageContract(name=StageName.MERGE, path="/api/agents/merge", check_input=_check_merge_input, build_body=_merge_body, parse_output=_parse_merge)

STAGE_CONTRACTS: dict[StageName, StageContract[Any, Any]] = {contract.name: contract for contract in (PLAN_STAGE, STRUCTURE_STAGE, MERGE_STAGE)}
