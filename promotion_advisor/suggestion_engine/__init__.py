"""
Suggestion Engine Module
Finds value drift between source and destination YAML trees and proposes
content transforms and stop rules for the promotion config.
"""

from .engine import (
    DEFAULT_GLOB_PATTERN,
    analyze_differences_for_suggestions,
    create_empty_suggestion_result,
)
from .formatter import format_suggestions_as_yaml, escape_yaml_string, yaml_scalar
from .noise_filter import levenshtein_distance, should_ignore_value
from .stop_rules import (
    analyze_stop_rule_patterns,
    detect_numeric_stop_rules,
    detect_semver_stop_rules,
    detect_version_format_rules,
)
from .transforms import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    analyze_transform_patterns,
    calculate_transform_confidence,
    find_substring_patterns,
)
from .tree_diff import (
    detect_array_key_field,
    extract_all_differences,
    is_path_skipped,
    parse_json_path,
    walk_and_compare,
)
from .value_collector import collect_values_by_path, extract_all_path_values

__all__ = [
    # Entry point
    'analyze_differences_for_suggestions',
    'create_empty_suggestion_result',
    'DEFAULT_GLOB_PATTERN',
    'DEFAULT_CONFIDENCE_THRESHOLD',

    # Tree differ and value collector
    'walk_and_compare',
    'extract_all_differences',
    'detect_array_key_field',
    'is_path_skipped',
    'parse_json_path',
    'extract_all_path_values',
    'collect_values_by_path',

    # Transform suggestions
    'should_ignore_value',
    'levenshtein_distance',
    'find_substring_patterns',
    'calculate_transform_confidence',
    'analyze_transform_patterns',

    # Stop rule suggestions
    'analyze_stop_rule_patterns',
    'detect_semver_stop_rules',
    'detect_version_format_rules',
    'detect_numeric_stop_rules',

    # Output
    'format_suggestions_as_yaml',
    'escape_yaml_string',
    'yaml_scalar',
]
