"""Component tree schema."""

from pagegen.schema.act import ACTNode, ACTValidationError, ComponentStructure, ValidationIssue, act_json_schema, act_stats, collect_act_issues, dump_act, to_camel, validate_act

__all__ = ["ACTNode", "ACTValidationError", "ComponentStructure", "ValidationIssue", "act_json_schema", "act_stats", "collect_act_issues", "dump_act", "to_camel", "validate_act"]
