from __future__ import annotations
import re
from typing import List

import yaml

from ..errors import ErrorCode, SuggestionEngineError
from ..models import (
    NumericRule,
    SemverDowngradeRule,
    SemverMajorUpgradeRule,
    StopRuleSuggestion,
    SuggestionResult,
    TransformSuggestion,
    VersionFormatRule,
)

DEFAULT_TOOL_NAME = "helm-env-delta"

# Characters a single-quoted scalar folds or a YAML stream rejects outright.
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f\u2028\u2029\ufeff]")

def escape_yaml_string(value: str) -> str:
    """Escape for a single-quoted YAML scalar."""
    return value.replace("'", "''")

def yaml_scalar(value: str) -> str:
    """Quoted scalar that loads back to exactly `value`; control characters force double quotes."""
    if not CONTROL_CHARS.search(value):
        return f"'{escape_yaml_string(value)}'"
    text = yaml.safe_dump(value, default_style='"', allow_unicode=True, width=1_000_000).rstrip("\n")
    if text.endswith("\n..."):
        text = text[:-4]
    return text

def _comment_safe(value: str) -> str:
    return CONTROL_CHARS.sub(lambda m: m.group().encode("unicode_escape").decode("ascii"), value)

def _file_word(count: int) -> str:
    return "file" if count == 1 else "files"

def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def _header(result: SuggestionResult, tool_name: str) -> List[str]:
    return [
        f"# {tool_name} Configuration Suggestions",
        f"# Generated from analysis of {result.metadata.changed_files} changed file(s)",
        f"# Timestamp: {result.metadata.timestamp}",
        "#",
        "# Instructions:",
        "#   1. Review suggestions below",
        "#   2. Copy relevant sections to your config.yaml",
        "#   3. Adjust patterns/values as needed",
        "#   4. Test with --dry-run before applying",
        "",
    ]

def _transform_lines(transform: TransformSuggestion) -> List[str]:
    confidence_pct = round(transform.confidence * 100)
    file_count = len(transform.affected_files)
    lines = [f"      # Confidence: {confidence_pct}% | Found in {file_count} {_file_word(file_count)}"
             f" | {transform.occurrences} occurrence(s)"]
    if transform.examples:
        example = transform.examples[0]
        lines.append(f"      # Example: \"{_comment_safe(example.old_value)}\" → "
                     f"\"{_comment_safe(example.target_value)}\" at {_comment_safe(example.path)}")
    lines.append(f"      - find: {yaml_scalar(transform.find)}")
    lines.append(f"        replace: {yaml_scalar(transform.replace)}")
    return lines

def _rule_field_lines(suggestion: StopRuleSuggestion) -> List[str]:
    rule = suggestion.rule
    lines = [f"    - type: '{rule.type}'",
             f"      path: {yaml_scalar(rule.path)}"]
    if isinstance(rule, VersionFormatRule):
        lines.append(f"      vPrefix: '{rule.v_prefix}'")
    elif isinstance(rule, NumericRule):
        if rule.min is not None:
            lines.append(f"      min: {_format_number(rule.min)}")
        if rule.max is not None:
            lines.append(f"      max: {_format_number(rule.max)}")
    elif not isinstance(rule, (SemverDowngradeRule, SemverMajorUpgradeRule)):
        raise TypeError(f"Unsupported stop rule kind: {type(rule).__name__}")
    return lines

def _stop_rule_lines(suggestion: StopRuleSuggestion) -> List[str]:
    confidence_pct = round(suggestion.confidence * 100)
    file_count = len(suggestion.affected_files)
    return [f"    # Confidence: {confidence_pct}% | {_comment_safe(suggestion.reason)}",
            f"    # Affects: {file_count} {_file_word(file_count)}",
            *_rule_field_lines(suggestion)]

def _render(result: SuggestionResult, tool_name: str) -> str:
    lines = _header(result, tool_name)

    if result.all_transforms():
        lines.append("transforms:")
        for pattern, transforms in result.transforms.items():
            if not transforms:
                continue
            lines.append(f"  {yaml_scalar(pattern)}:")
            lines.append("    content:")
            for transform in transforms:
                lines.extend(_transform_lines(transform))
        lines.append("")
    else:
        lines.extend(["# No transform suggestions found", ""])

    if result.all_stop_rules():
        lines.append("stopRules:")
        for pattern, suggestions in result.stop_rules.items():
            if not suggestions:
                continue
            lines.append(f"  {yaml_scalar(pattern)}:")
            for suggestion in suggestions:
                lines.extend(_stop_rule_lines(suggestion))
    else:
        lines.append("# No stop rule suggestions found")

    return "\n".join(lines)

def format_suggestions_as_yaml(result: SuggestionResult, tool_name: str = DEFAULT_TOOL_NAME) -> str:
    """
    Render suggestions as copy-paste ready configuration text.

    Each rule carries a comment with its confidence and evidence. Sections with
    nothing to suggest are replaced by an explicit comment so the output is
    always complete.
    """
    try:
        return _render(result, tool_name)
    except Exception as e:
        raise SuggestionEngineError("Failed to format suggestions as YAML",
                                    code=ErrorCode.FORMAT_ERROR, cause=e) from e
