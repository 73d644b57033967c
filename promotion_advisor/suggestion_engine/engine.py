"""
Suggestion engine entry point.

Turns the changed files of a source/destination comparison into reusable
content-transform rules and safety stop rules, skipping anything the active
configuration already contains.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from ..errors import ErrorCode, SuggestionEngineError
from ..logging_config import get_logger
from ..models import FileDiffResult, PromotionConfig, SuggestionMetadata, SuggestionResult
from .stop_rules import analyze_stop_rule_patterns
from .transforms import DEFAULT_CONFIDENCE_THRESHOLD, analyze_transform_patterns
from .tree_diff import extract_all_differences

logger = get_logger("suggestion_engine")

DEFAULT_GLOB_PATTERN = "**/*.yaml"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_empty_suggestion_result(diff_result: FileDiffResult) -> SuggestionResult:
    return SuggestionResult(
        transforms={},
        stop_rules={},
        metadata=SuggestionMetadata(
            files_analyzed=len(diff_result.changed_files),
            changed_files=0,
            timestamp=_timestamp(),
        ),
    )


def analyze_differences_for_suggestions(diff_result: FileDiffResult,
                                        config: PromotionConfig,
                                        confidence_threshold: Optional[float] = None,
                                        glob_pattern: Optional[str] = None) -> SuggestionResult:
    """
    Analyze file differences and suggest transforms and stop rules.

    Args:
        diff_result: Changed files with raw and processed source/destination trees
        config: Active configuration, consulted only to suppress adopted rules
        confidence_threshold: Transform suggestions below this score are dropped (default 0.3)
        glob_pattern: Key the suggestions are grouped under (default '**/*.yaml')

    Returns:
        SuggestionResult with confidence-sorted suggestions

    Raises:
        SuggestionEngineError: code ANALYSIS_FAILED, wrapping any internal failure
    """
    if not diff_result.changed_files:
        return create_empty_suggestion_result(diff_result)

    threshold = DEFAULT_CONFIDENCE_THRESHOLD if confidence_threshold is None else confidence_threshold
    pattern = glob_pattern or DEFAULT_GLOB_PATTERN

    try:
        differences = extract_all_differences(diff_result.changed_files)
        logger.debug(f"Found {len(differences)} value difference(s) across "
                     f"{len(diff_result.changed_files)} changed file(s)")

        transform_suggestions = analyze_transform_patterns(differences, config, threshold)
        stop_rule_suggestions = analyze_stop_rule_patterns(diff_result.changed_files, config)
    except Exception as e:
        logger.error(f"Suggestion analysis failed: {e}")
        raise SuggestionEngineError("Failed to analyze file differences",
                                    code=ErrorCode.ANALYSIS_FAILED, cause=e) from e

    logger.info(f"Suggested {len(transform_suggestions)} transform(s) and "
                f"{len(stop_rule_suggestions)} stop rule(s) from "
                f"{len(diff_result.changed_files)} changed file(s)")

    return SuggestionResult(
        transforms={pattern: transform_suggestions},
        stop_rules={pattern: stop_rule_suggestions},
        metadata=SuggestionMetadata(
            files_analyzed=len(diff_result.changed_files),
            changed_files=len(diff_result.changed_files),
            timestamp=_timestamp(),
        ),
    )
