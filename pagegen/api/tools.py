"""Tool handlers exposed to the calling agent."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field, WithJsonSchema

from pagegen.ai.orchestrator import PipelineOrchestrator
from pagegen.ai.pipeline.contracts import ExecutionPlan, StageOutcome
from pagegen.reporting.formatter import format_outcome, render_report

logger = logging.getLogger(__name__)

PLAN_DESCRIPTION = (
  "Stage 1 of 3. Use this tool whenever the user wants to create a page with UI components. "
  "Produces an execution plan for the request. Pass the returned artifact, unchanged, to the 'structure' tool."
)
STRUCTURE_DESCRIPTION = (
  "Stage 2 of 3. Turns the request and its execution plan into an Abstract Component Tree "
  "(nodes of {component, description, docQuery, children}). Pass the returned artifact, unchanged, to the 'merge' tool."
)
MERGE_DESCRIPTION = "Stage 3 of 3. Generates the page code from an Abstract Component Tree and returns instructions for creating and checking the page."

QueryArg = Annotated[str, Field(description="The user request for page generation.")]
PlanArg = Annotated[
  dict[str, Any],
  WithJsonSchema(ExecutionPlan.model_json_schema(by_alias=True, mode="validation")),
  Field(description="The execution plan artifact returned by the 'plan' tool."),
]
StructureArg = Annotated[
  dict[str, Any],
  Field(description="The component tree artifact returned by the 'structure' tool: {component, description, docQuery, children}, where children is a list of nodes or a text string."),
]


class PipelineTools:
  """Runs one stage per tool call and renders the outcome for the agent."""

  def __init__(self, orchestrator: PipelineOrchestrator) -> None:
    self._orchestrator = orchestrator

  @staticmethod
  def _render(outcome: StageOutcome) -> str:
    return render_report(format_outcome(outcome))

  async def plan(self, query: str) -> str:
    logger.info("Tool call plan")
    return self._render(await self._orchestrator.plan(query))

  async def structure(self, query: str, plan: dict[str, Any]) -> str:
    logger.info("Tool call structure")
    return self._render(await self._orchestrator.structure(query, plan))

  async def merge(self, structure: dict[str, Any]) -> str:
    logger.info("Tool call merge")
    return self._render(await self._orchestrator.merge(structure))


def register_tools(server: FastMCP, tools: PipelineTools) -> None:
  """Register the plan, structure and merge tools on ``server``."""

  @server.tool(name="plan", title="Plan Page", description=PLAN_DESCRIPTION)
  async def plan(query: QueryArg) -> str:
    return await tools.plan(query)

  @server.tool(name="structure", title="Structure Page", description=STRUCTURE_DESCRIPTION)
  async def structure(query: QueryArg, plan: PlanArg) -> str:
    return await tools.structure(query, plan)

  @server.tool(name="merge", title="Generate Page Code", description=MERGE_DESCRIPTION)
  async def merge(structure: StructureArg) -> str:
    return await tools.merge(structure)
