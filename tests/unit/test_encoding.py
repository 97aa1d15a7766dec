"""Unit tests for stack-based JSON encoding."""

from __future__ import annotations

import json
import sys

import pytest

from pagegen.core.encoding import dumps_json

PAYLOAD = {"success": True, "stage": "plan", "artifact": {"planText": "1. Café header\n2. Form", "tags": ["a", 1, 2.5, None], "empty": {}, "none": []}}


@pytest.mark.parametrize("kwargs", [{}, {"indent": 2}, {"separators": (",", ":")}])
def test_output_matches_stdlib_encoder(kwargs) -> None:
  assert dumps_json(PAYLOAD, **kwargs) == json.dumps(PAYLOAD, ensure_ascii=False, **kwargs)


def test_nesting_beyond_recursion_limit() -> None:
  depth = sys.getrecursionlimit() + 500
  value: list = []
  for _ in range(depth):
    value = [value]

  text = dumps_json(value, separators=(",", ":"))

  assert text == "[" * depth + "[]" + "]" * depth


def test_unsupported_values_raise_type_error() -> None:
  with pytest.raises(TypeError, match="set"):
    dumps_json({"items": {1, 2}})

  with pytest.raises(TypeError, match="keys must be str"):
    dumps_json({1: "one"})
