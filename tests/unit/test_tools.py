"""Unit tests for the tool surface exposed to the calling agent."""

from __future__ import annotations

import json
import sys
from unittest.mock import AsyncMock

import pytest

from pagegen.ai.pipeline.contracts import ExecutionPlan, StageName, StageOutcome
from pagegen.api.tools import PipelineTools
from pagegen.main import create_server
from pagegen.schema.act import validate_act


@pytest.mark.anyio
async def test_server_registers_exactly_three_tools(settings, orchestrator) -> None:
  server = create_server(settings, orchestrator=orchestrator)

  tools = {tool.name: tool for tool in await server.list_tools()}

  assert set(tools) == {"plan", "structure", "merge"}
  assert tools["plan"].inputSchema["required"] == ["query"]
  assert set(tools["structure"].inputSchema["required"]) == {"query", "plan"}
  assert tools["merge"].inputSchema["required"] == ["structure"]


@pytest.mark.anyio
async def test_plan_tool_returns_success_report(orchestrator, remote) -> None:
  remote.reply("/api/agents/plan", {"success": True, "data": {"plan": "1. Login form"}})

  text = await PipelineTools(orchestrator).plan("build a login form")

  report = json.loads(text)
  assert report["success"] is True
  assert report["artifact"]["planText"] == "1. Login form"


@pytest.mark.anyio
async def test_tools_chain_through_all_three_stages(orchestrator, remote, login_form_tree) -> None:
  """Each tool's artifact, passed back unchanged, is valid input to the next tool."""
  remote.reply("/api/agents/plan", {"success": True, "data": {"plan": "1. Login form"}})
  remote.reply("/api/agents/structure", {"success": True, "data": {"structure": login_form_tree}})
  remote.reply("/api/agents/merge", {"success": True, "data": {"code": "export default function Login() {}"}})
  tools = PipelineTools(orchestrator)

  plan_report = json.loads(await tools.plan("build a login form"))
  structure_report = json.loads(await tools.structure("build a login form", plan_report["artifact"]))
  merge_text = await tools.merge(structure_report["artifact"])

  assert structure_report["success"] is True
  assert "export default function Login() {}" in merge_text
  assert [path for path, _body in remote.requests] == ["/api/agents/plan", "/api/agents/structure", "/api/agents/merge"]
  assert remote.requests[1][1]["plan"] == plan_report["artifact"]


@pytest.mark.anyio
async def test_failed_tool_call_returns_failure_report(orchestrator, remote) -> None:
  remote.reply("/api/agents/plan", {"success": False, "error": "rate limited"})

  report = json.loads(await PipelineTools(orchestrator).plan("build a login form"))

  assert report["success"] is False
  assert report["errorKind"] == "RemoteRejected"
  assert "rate limited" in report["error"]
  assert report["hint"]
  assert report["timestamp"]


@pytest.mark.anyio
async def test_structure_tool_reports_deep_tree(orchestrator, remote, deep_tree) -> None:
  tree = deep_tree(150)
  remote.reply("/api/agents/structure", {"success": True, "data": {"structure": tree}})
  plan = ExecutionPlan.create(original_query="nested page", plan_text="nest boxes")

  report = json.loads(await PipelineTools(orchestrator).structure("nested page", plan.to_payload()))

  assert report["success"] is True
  assert report["artifact"] == tree
  assert report["summary"]["depth"] == 150


@pytest.mark.anyio
async def test_structure_tool_renders_tree_beyond_recursion_limit(deep_tree) -> None:
  depth = sys.getrecursionlimit() + 500
  orchestrator = AsyncMock()
  orchestrator.structure.return_value = StageOutcome.success(StageName.STRUCTURE, validate_act(deep_tree(depth)))

  text = await PipelineTools(orchestrator).structure("nested page", {})

  assert '"success": true' in text
  assert text.count('"component": "Box"') == depth - 1
