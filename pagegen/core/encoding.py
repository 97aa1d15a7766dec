"""Stack-based JSON encoding for arbitrarily nested payloads.

``json.dumps`` recurses once per nesting level, so a component tree deeper than the interpreter's
recursion limit cannot pass through it. Containers are walked here with an explicit stack; scalars are
still encoded by ``json`` itself, so the output matches ``json.dumps`` for the same arguments.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

# Stack entries: (is_literal, value, nesting level).
_Entry = tuple[bool, Any, int]


def _newline(indent: int | None, level: int) -> str:
  if indent is None:
    return ""
  return "\n" + " " * (indent * level)


def _encode_scalar(value: Any, ensure_ascii: bool) -> str:
  if value is None or isinstance(value, str | bool | int | float):
    return json.dumps(value, ensure_ascii=ensure_ascii)
  raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps_json(value: Any, *, indent: int | None = None, separators: tuple[str, str] | None = None, ensure_ascii: bool = False) -> str:
  """Encode ``value`` (dicts, lists, tuples and JSON scalars) without recursion."""
  if separators is None:
    separators = (", ", ": ") if indent is None else (",", ": ")
  item_separator, key_separator = separators

  parts: list[str] = []
  stack: list[_Entry] = [(False, value, 0)]
  while stack:
    is_literal, current, level = stack.pop()
    if is_literal:
      parts.append(current)
      continue

    if isinstance(current, Mapping):
      if not current:
        parts.append("{}")
        continue
      pending: list[_Entry] = [(True, "{", level)]
      for index, (key, item) in enumerate(current.items()):
        if not isinstance(key, str):
          raise TypeError(f"keys must be str, not {type(key).__name__}")
        prefix = item_separator if index else ""
        pending.append((True, prefix + _newline(indent, level + 1) + _encode_scalar(key, ensure_ascii) + key_separator, level))
        pending.append((False, item, level + 1))
      pending.append((True, _newline(indent, level) + "}", level))
      stack.extend(reversed(pending))
      continue

    if isinstance(current, list | tuple):
      if not current:
        parts.append("[]")
        continue
      pending = [(True, "[", level)]
      for index, item in enumerate(current):
        prefix = item_separator if index else ""
        pending.append((True, prefix + _newline(indent, level + 1), level))
        pending.append((False, item, level + 1))
      pending.append((True, _newline(indent, level) + "]", level))
      stack.extend(reversed(pending))
      continue

    parts.append(_encode_scalar(current, ensure_ascii))

  return "".join(parts)
