"""Unit tests for component tree validation."""

from __future__ import annotations

import copy
import json
import sys

import pytest

from pagegen.schema.act import ACTNode, ACTValidationError, act_json_schema, act_stats, collect_act_issues, dump_act, to_camel, validate_act


def test_validate_accepts_nested_tree_and_round_trips(login_form_tree) -> None:
  """Validating the serialized form of a valid tree yields an equal tree."""
  node = validate_act(login_form_tree)
  assert node.component == "Form"
  assert node.children[2].children[0].children == "Sign in"

  wire = json.loads(json.dumps(dump_act(node)))
  assert wire == login_form_tree
  assert validate_act(wire) == node


def test_validate_does_not_mutate_or_normalize_input(login_form_tree) -> None:
  """Whitespace and casing are preserved and the candidate is left untouched."""
  login_form_tree["component"] = "  form "
  login_form_tree["children"][0]["children"] = "  Username  "
  original = copy.deepcopy(login_form_tree)

  node = validate_act(login_form_tree)
  assert node.component == "  form "
  assert node.children[0].children == "  Username  "
  assert login_form_tree == original


def test_leaf_and_empty_container_stay_distinct() -> None:
  """children='' and children=[] are both valid and never coerced into each other."""
  leaf = validate_act({"component": "Panel", "description": "Empty text panel", "children": ""})
  container = validate_act({"component": "Panel", "description": "Empty container", "children": []})

  assert leaf.children == ""
  assert leaf.is_leaf
  assert container.children == []
  assert not container.is_leaf
  assert dump_act(leaf)["children"] == ""
  assert dump_act(container)["children"] == []
  assert validate_act(dump_act(leaf)).children == ""
  assert validate_act(dump_act(container)).children == []


def test_absent_doc_query_is_explicit_null() -> None:
  node = validate_act({"component": "Grid", "description": "Records grid", "children": ""})
  assert node.doc_query is None
  assert dump_act(node) == {"component": "Grid", "description": "Records grid", "docQuery": None, "children": ""}


def test_legacy_mcp_query_key_is_accepted() -> None:
  node = validate_act({"component": "Grid", "description": "Records grid", "mcpQuery": "Grid with filtering", "children": ""})
  assert node.doc_query == "Grid with filtering"
  assert dump_act(node)["docQuery"] == "Grid with filtering"


@pytest.mark.parametrize(
  ("candidate", "path", "code"),
  [
    ({"description": "No component", "children": ""}, "$", "missing_component"),
    ({"component": "Grid", "children": ""}, "$", "missing_description"),
    ({"component": "Grid", "description": "", "children": "x"}, "$", "empty_description"),
    ({"component": "", "description": "Blank component", "children": "x"}, "$", "empty_component"),
    ({"component": 7, "description": "Numeric component", "children": "x"}, "$", "invalid_component"),
    ({"component": "Grid", "description": "Bad children", "children": 42}, "$", "invalid_children"),
    ({"component": "Grid", "description": "Bad children", "children": {"component": "Button"}}, "$", "invalid_children"),
    ({"component": "Grid", "description": "No children"}, "$", "missing_children"),
    ({"component": "Grid", "description": "Bad docQuery", "docQuery": 3, "children": ""}, "$", "invalid_doc_query"),
    ({"component": "Grid", "description": "Null children", "children": None}, "$", "invalid_children"),
    ("Grid", "$", "not_an_object"),
  ],
)
def test_validate_rejects_malformed_root(candidate, path, code) -> None:
  with pytest.raises(ACTValidationError) as exc_info:
    validate_act(candidate)
  assert exc_info.value.path == path
  assert exc_info.value.issues[0].code == code


def test_nested_failure_points_to_exact_subtree(login_form_tree) -> None:
  """A missing component at depth 2 reports children[2].children[0]."""
  del login_form_tree["children"][2]["children"][0]["component"]

  with pytest.raises(ACTValidationError) as exc_info:
    validate_act(login_form_tree)

  assert exc_info.value.path == "children[2].children[0]"
  assert "component is required" in str(exc_info.value)


def test_non_object_child_is_reported_by_index() -> None:
  candidate = {"component": "List", "description": "Items", "children": [{"component": "Item", "description": "First", "children": "a"}, "oops"]}
  with pytest.raises(ACTValidationError) as exc_info:
    validate_act(candidate)
  assert exc_info.value.path == "children[1]"
  assert exc_info.value.issues[0].code == "not_an_object"


def test_collect_issues_reports_every_problem_in_document_order() -> None:
  candidate = {
    "component": "Page",
    "description": "",
    "children": [
      {"component": "Header", "description": "Top bar", "children": 1},
      {"component": "Body", "description": "Main", "children": [{"description": "nameless", "children": ""}]},
    ],
  }
  issues = collect_act_issues(candidate)
  assert [issue.path for issue in issues] == ["$", "children[0]", "children[1].children[0]"]
  assert [issue.code for issue in issues] == ["empty_description", "invalid_children", "missing_component"]


def test_validate_accepts_existing_node(login_form_tree) -> None:
  node = validate_act(login_form_tree)
  assert validate_act(node) == node


def test_deep_tree_beyond_recursion_limit() -> None:
  """Validation, serialization and stats do not recurse per level."""
  depth = sys.getrecursionlimit() + 500
  candidate: dict = {"component": "Text", "description": "Innermost", "children": "deep"}
  for level in range(depth - 1):
    candidate = {"component": "Box", "description": f"Level {level}", "children": [candidate]}

  node = validate_act(candidate)
  stats = act_stats(node)
  assert stats.depth == depth
  assert stats.nodes == depth
  assert stats.leaves == 1

  wire = dump_act(node)
  for _ in range(depth - 1):
    wire = wire["children"][0]
  assert wire["children"] == "deep"


def test_act_stats_counts_nodes_and_leaves(login_form_tree) -> None:
  stats = act_stats(validate_act(login_form_tree))
  assert stats.nodes == 5
  assert stats.leaves == 3
  assert stats.depth == 3


def test_json_schema_describes_recursive_children() -> None:
  schema = act_json_schema()
  node_schema = schema["$defs"]["ACTNode"] if "$ref" in schema else schema
  props = node_schema["properties"]
  assert set(node_schema["required"]) == {"component", "description", "children"}
  assert "docQuery" in props
  assert "mcpQuery" not in props
  assert "#/$defs/ACTNode" in json.dumps(props["children"])


def test_model_validate_matches_structural_validator(login_form_tree) -> None:
  """The pydantic model and the work-stack validator agree on well-formed input."""
  assert ACTNode.model_validate(login_form_tree) == validate_act(login_form_tree)


def test_self_referencing_node_is_reported_as_cycle() -> None:
  node: dict = {"component": "Box", "description": "Contains itself", "children": []}
  node["children"].append({"component": "Row", "description": "Wrapper", "children": [node]})

  issues = collect_act_issues(node)
  assert [(issue.path, issue.code) for issue in issues] == [("children[0].children[0]", "cycle")]

  with pytest.raises(ACTValidationError) as exc_info:
    validate_act(node)
  assert exc_info.value.path == "children[0].children[0]"


def test_shared_subtree_in_separate_branches_is_valid() -> None:
  field = {"component": "Input", "description": "Reused field", "children": ""}
  candidate = {"component": "Form", "description": "Two copies", "children": [field, {"component": "Group", "description": "Nested", "children": [field]}]}

  node = validate_act(candidate)
  assert act_stats(node).nodes == 4
  assert node.children[0] == node.children[1].children[0]


def test_validate_returns_root_of_built_tree(login_form_tree) -> None:
  node = validate_act(login_form_tree)
  assert isinstance(node, ACTNode)
  assert [child.component for child in node.children] == ["Input", "Input", "Toolbar"]


def test_to_camel_matches_wire_field_names() -> None:
  assert to_camel("doc_query") == "docQuery"
  assert to_camel("plan_text") == "planText"
  assert to_camel("component") == "component"
