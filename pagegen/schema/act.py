"""Abstract Component Tree (ACT) schema and validation helpers.

An ACT node describes one UI element of a generated page. ``children`` is a tagged union: a list of
nodes for containers, or a plain string for leaf/text content. The tree can be arbitrarily deep, so
validation, construction and serialization below walk it with explicit stacks instead of recursion.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr

ROOT_PATH = "$"
DOC_QUERY_KEYS: tuple[str, ...] = ("docQuery", "doc_query", "mcpQuery")


def to_camel(string: str) -> str:
  """Convert snake_case to camelCase so the wire format matches the remote service."""
  parts = string.split("_")
  if not parts:
    return string
  return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


class ACTNode(BaseModel):
  """A single node in the Abstract Component Tree."""

  model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore", alias_generator=to_camel)

  component: StrictStr = Field(
    min_length=1,
    description=(
      'The UI component type or element name, e.g. "Grid", "Button", "Form", "DropDownList", "container", "header". '
      "Use specific component names when possible, or generic HTML elements for layout."
    ),
  )
  description: StrictStr = Field(
    min_length=1,
    description="Clear explanation of this component's purpose, the data it displays and the actions it enables.",
  )
  doc_query: StrictStr | None = Field(
    default=None,
    validation_alias=AliasChoices("docQuery", "doc_query", "mcpQuery"),
    serialization_alias="docQuery",
    description="Lookup query for supplementary documentation about this component. Null when no documentation is needed.",
  )
  children: list[ACTNode] | StrictStr = Field(
    description="Nested child nodes for containers, or the text content (possibly empty) for leaf nodes.",
  )

  @property
  def is_leaf(self) -> bool:
    return isinstance(self.children, str)


ComponentStructure = ACTNode


@dataclass(frozen=True)
class ValidationIssue:
  """A structural problem found at ``path`` (the failing subtree)."""

  path: str
  message: str
  code: str | None = None

  def __str__(self) -> str:
    return f"{self.path}: {self.message}"


class ACTValidationError(ValueError):
  """Raised when a candidate is not a well-formed ACT node."""

  def __init__(self, issues: list[ValidationIssue]) -> None:
    self.issues = issues
    first = issues[0]
    more = f" (+{len(issues) - 1} more)" if len(issues) > 1 else ""
    super().__init__(f"Invalid component tree at {first}{more}")

  @property
  def path(self) -> str:
    """Path of the first failing subtree."""
    return self.issues[0].path


def child_path(parent: str, index: int) -> str:
  """Return the path of ``children[index]`` under ``parent``."""
  segment = f"children[{index}]"
  if parent == ROOT_PATH:
    return segment
  return f"{parent}.{segment}"


def _read_doc_query(candidate: Mapping[str, Any]) -> tuple[bool, Any]:
  for key in DOC_QUERY_KEYS:
    if key in candidate:
      return True, candidate[key]
  return False, None


def _node_issues(candidate: Any, path: str) -> list[ValidationIssue]:
  """Check one node's own fields; children elements are checked by the caller's walk."""
  if not isinstance(candidate, Mapping):
    return [ValidationIssue(path=path, message=f"node must be an object, got {type(candidate).__name__}", code="not_an_object")]

  issues: list[ValidationIssue] = []
  for field_name in ("component", "description"):
    if field_name not in candidate:
      issues.append(ValidationIssue(path=path, message=f"{field_name} is required", code=f"missing_{field_name}"))
      continue
    value = candidate[field_name]
    if not isinstance(value, str):
      issues.append(ValidationIssue(path=path, message=f"{field_name} must be a string, got {type(value).__name__}", code=f"invalid_{field_name}"))
    elif value == "":
      issues.append(ValidationIssue(path=path, message=f"{field_name} must not be empty", code=f"empty_{field_name}"))

  _present, doc_query = _read_doc_query(candidate)
  if doc_query is not None and not isinstance(doc_query, str):
    issues.append(ValidationIssue(path=path, message=f"docQuery must be a string or null, got {type(doc_query).__name__}", code="invalid_doc_query"))

  if "children" not in candidate:
    issues.append(ValidationIssue(path=path, message="children is required", code="missing_children"))
  else:
    children = candidate["children"]
    if not isinstance(children, (str, list, tuple)):
      issues.append(ValidationIssue(path=path, message=f"children must be a string or a list of nodes, got {type(children).__name__}", code="invalid_children"))

  return issues


@dataclass
class _Visit:
  candidate: Mapping[str, Any]
  child_ids: list[int] | None


def _walk(candidate: Any) -> tuple[list[ValidationIssue], list[_Visit]]:
  """Pre-order walk over the candidate tree, returning issues and the visit order.

  A mapping that appears among its own ancestors is reported as a ``cycle`` and not descended into.
  The same mapping may still appear more than once in separate branches.
  """
  issues: list[ValidationIssue] = []
  visits: list[_Visit] = []
  # Ids of the mappings on the path from the root to the current node.
  ancestors: set[int] = set()
  # Each entry: (candidate, path, parent visit index, slot within parent's children), or the id of
  # a mapping whose subtree is finished.
  stack: list[tuple[Any, str, int | None, int] | int] = [(candidate, ROOT_PATH, None, 0)]

  while stack:
    entry = stack.pop()
    if isinstance(entry, int):
      ancestors.discard(entry)
      continue

    current, path, parent_id, slot = entry
    if isinstance(current, Mapping) and id(current) in ancestors:
      issues.append(ValidationIssue(path=path, message="node contains itself (cyclic reference)", code="cycle"))
      continue

    node_issues = _node_issues(current, path)
    issues.extend(node_issues)
    if not isinstance(current, Mapping):
      continue

    children = current.get("children")
    child_ids: list[int] | None = None
    if isinstance(children, (list, tuple)):
      child_ids = [-1] * len(children)

    visit_id = len(visits)
    visits.append(_Visit(candidate=current, child_ids=child_ids))
    if parent_id is not None:
      parent_ids = visits[parent_id].child_ids
      if parent_ids is not None:
        parent_ids[slot] = visit_id

    ancestors.add(id(current))
    stack.append(id(current))
    if child_ids is not None:
      # Push in reverse so children are visited (and reported) in document order.
      for index in range(len(children) - 1, -1, -1):
        stack.append((children[index], child_path(path, index), visit_id, index))

  return issues, visits


def collect_act_issues(candidate: Any) -> list[ValidationIssue]:
  """Return every structural issue in ``candidate`` in document order, without raising."""
  issues, _visits = _walk(candidate)
  return issues


def validate_act(candidate: Any) -> ACTNode:
  """Validate ``candidate`` as an ACT node and return the constructed tree.

  Accepts an ``ACTNode`` (re-validated from its wire form) or a nested mapping. No normalization is
  performed: strings are kept exactly as given. Raises ``ACTValidationError`` naming the failing path.
  """
  if isinstance(candidate, ACTNode):
    candidate = dump_act(candidate)

  issues, visits = _walk(candidate)
  if issues:
    raise ACTValidationError(issues)

  # Children always appear after their parent in pre-order, so build in reverse.
  built: dict[int, ACTNode] = {}
  for visit_id in range(len(visits) - 1, -1, -1):
    visit = visits[visit_id]
    raw = visit.candidate
    _present, doc_query = _read_doc_query(raw)
    if visit.child_ids is None:
      children: list[ACTNode] | str = raw["children"]
    else:
      children = [built[child_id] for child_id in visit.child_ids]
    built[visit_id] = ACTNode.model_construct(component=raw["component"], description=raw["description"], doc_query=doc_query, children=children)

  return built[0]


def dump_act(node: ACTNode) -> dict[str, Any]:
  """Serialize a tree to its wire form (camelCase keys, ``docQuery`` always present)."""
  root_out: dict[str, Any] = {}
  stack: list[tuple[ACTNode, dict[str, Any]]] = [(node, root_out)]
  while stack:
    current, out = stack.pop()
    out["component"] = current.component
    out["description"] = current.description
    out["docQuery"] = current.doc_query
    if isinstance(current.children, str):
      out["children"] = current.children
      continue
    child_outs: list[dict[str, Any]] = [{} for _ in current.children]
    out["children"] = child_outs
    stack.extend(zip(current.children, child_outs))
  return root_out


@dataclass(frozen=True)
class TreeStats:
  """Shape summary of a component tree."""

  nodes: int
  leaves: int
  depth: int


def act_stats(node: ACTNode) -> TreeStats:
  """Count nodes, leaves and depth (a lone root has depth 1)."""
  nodes = 0
  leaves = 0
  depth = 0
  stack: list[tuple[ACTNode, int]] = [(node, 1)]
  while stack:
    current, level = stack.pop()
    nodes += 1
    depth = max(depth, level)
    if isinstance(current.children, str) or not current.children:
      leaves += 1
      continue
    stack.extend((child, level + 1) for child in current.children)
  return TreeStats(nodes=nodes, leaves=leaves, depth=depth)


def act_json_schema() -> dict[str, Any]:
  """Return the JSON schema of an ACT node for generators that accept structured output schemas."""
  json_schema: dict[str, Any] = ACTNode.model_json_schema(by_alias=True, ref_template="#/$defs/{model}", mode="validation")
  return json_schema
