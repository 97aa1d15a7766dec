"""Single-stage orchestration for the page generation pipeline."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pagegen.ai.errors import RemoteRejected, StageError, TransportFault
from pagegen.ai.pipeline.contracts import ExecutionPlan, StageName, StageOutcome
from pagegen.ai.pipeline.stages import STAGE_CONTRACTS, StageContract
from pagegen.ai.providers.remote import GenerationTransport, RemoteGenerationClient
from pagegen.config import Settings
from pagegen.schema.act import ACTNode

logger = logging.getLogger(__name__)


def unwrap_envelope(envelope: Mapping[str, Any]) -> Mapping[str, Any]:
  """Return the envelope ``data`` or raise RemoteRejected.

  ``success`` and ``data`` are checked independently: the call fails when ``success`` is not ``True``
  or when ``data`` is missing or not an object, whatever the other flag says.
  """
  success = envelope.get("success")
  data = envelope.get("data")
  error = envelope.get("error")
  error_text = error if isinstance(error, str) and error.strip() else None

  if success is not True:
    raise RemoteRejected(error_text or "Generation service reported failure without an error message.")

  if data is None:
    raise RemoteRejected(error_text or "Generation service reported success but returned no data.")

  if not isinstance(data, Mapping):
    raise RemoteRejected(f"Generation service returned unusable data of type {type(data).__name__}.")

  return data


class PipelineOrchestrator:
  """Invokes exactly one pipeline stage per call.

  Stages are never chained here: the caller receives each artifact and decides whether to hand it to
  the next stage. The orchestrator holds no per-call state, so concurrent calls are independent.
  """

  def __init__(self, *, settings: Settings, transport: GenerationTransport | None = None) -> None:
    self._settings = settings
    self._transport = transport or RemoteGenerationClient(settings)

  async def plan(self, query: str) -> StageOutcome:
    """Run the plan stage for a free-text request."""
    return await self.run_stage(StageName.PLAN, query)

  async def structure(self, query: str, plan: ExecutionPlan | Mapping[str, Any]) -> StageOutcome:
    """Run the structure stage for a request and its execution plan."""
    return await self.run_stage(StageName.STRUCTURE, {"query": query, "plan": plan})

  async def merge(self, structure: ACTNode | Mapping[str, Any]) -> StageOutcome:
    """Run the merge stage for a component tree."""
    return await self.run_stage(StageName.MERGE, structure)

  async def run_stage(self, stage: StageName, stage_input: Any) -> StageOutcome:
    """Run one stage and convert every runtime failure into a failure outcome."""
    contract = STAGE_CONTRACTS[stage]
    try:
      artifact = await self._invoke(contract, stage_input)

    except StageError as exc:
      logger.warning("Stage failed stage=%s kind=%s message=%s", stage, exc.kind, exc)
      return StageOutcome.failure(stage, exc.kind, str(exc))

    except Exception as exc:  # noqa: BLE001
      # Never let an unexpected fault escape to the calling agent.
      logger.error("Stage crashed stage=%s error_type=%s", stage, type(exc).__name__, exc_info=True)
      fault = TransportFault(f"Unexpected error while calling the generation service: {type(exc).__name__}: {exc}")
      return StageOutcome.failure(stage, fault.kind, str(fault))

    logger.info("Stage succeeded stage=%s", stage)
    return StageOutcome.success(stage, artifact)

  async def _invoke(self, contract: StageContract[Any, Any], stage_input: Any) -> Any:
    checked_input = contract.check_input(stage_input)
    body = contract.build_body(checked_input)
    envelope = await self._transport.post(contract.path, body)
    data = unwrap_envelope(envelope)
    return contract.parse_output(data, checked_input)


__all__ = ["PipelineOrchestrator", "unwrap_envelope"]
