from __future__ import annotations
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from ..logging_config import get_logger
from ..models import (
    ChangedFile,
    NumericRule,
    PathValueCollection,
    PromotionConfig,
    SemverDowngradeRule,
    SemverMajorUpgradeRule,
    StopRuleSuggestion,
    StopRuleType,
    VersionFormatRule,
)
from .value_collector import collect_values_by_path

logger = get_logger("suggestion_engine.stop_rules")

SEMVER_PATTERN = re.compile(r"v?\d+\.\d+\.\d+", re.ASCII)
CONSTRAINT_FIELDS = ("replicas", "replica", "count", "port", "timeout", "limit")
MIN_VERSION_FORMAT_CONFIDENCE = 0.6

def _semver_values(collection: PathValueCollection) -> List[str]:
    return [v for v in collection.values if isinstance(v, str) and SEMVER_PATTERN.match(v)]

def _suggestion(rule, confidence: float, reason: str, path: str, collection: PathValueCollection) -> StopRuleSuggestion:
    return StopRuleSuggestion(rule=rule, confidence=confidence, reason=reason,
                              affected_paths=[path], affected_files=list(collection.files))

# ----------------- Semver -----------------
def detect_semver_stop_rules(values_by_path: Dict[str, PathValueCollection],
                             config: PromotionConfig) -> List[StopRuleSuggestion]:
    suggestions: List[StopRuleSuggestion] = []
    for path, collection in values_by_path.items():
        if not _semver_values(collection):
            continue
        confidence = 0.95 if len(collection.files) >= 2 else 0.7

        if not config.has_stop_rule(StopRuleType.SEMVER_DOWNGRADE, path):
            suggestions.append(_suggestion(SemverDowngradeRule(path=path), confidence,
                                           f"Prevents version downgrades for {path}", path, collection))
        if not config.has_stop_rule(StopRuleType.SEMVER_MAJOR_UPGRADE, path):
            suggestions.append(_suggestion(SemverMajorUpgradeRule(path=path), confidence,
                                           f"Blocks major version bumps for {path}", path, collection))
    return suggestions

# ----------------- Version format -----------------
def infer_v_prefix(values: List[str]) -> Optional[Tuple[str, float]]:
    """(vPrefix, confidence) for a population of semver strings, or None when mixed."""
    if not values:
        return None
    with_v = sum(1 for v in values if v.startswith("v"))
    without_v = len(values) - with_v

    if with_v == len(values):
        return "required", 0.95
    if without_v == len(values):
        return "forbidden", 0.95
    if with_v > without_v * 2:
        return "required", 0.6
    if without_v > with_v * 2:
        return "forbidden", 0.6
    return None

def detect_version_format_rules(values_by_path: Dict[str, PathValueCollection],
                                config: PromotionConfig) -> List[StopRuleSuggestion]:
    suggestions: List[StopRuleSuggestion] = []
    for path, collection in values_by_path.items():
        verdict = infer_v_prefix(_semver_values(collection))
        if verdict is None:
            continue
        v_prefix, confidence = verdict
        if confidence < MIN_VERSION_FORMAT_CONFIDENCE:
            continue
        if config.has_stop_rule(StopRuleType.VERSION_FORMAT, path):
            continue
        suggestions.append(_suggestion(VersionFormatRule(path=path, v_prefix=v_prefix), confidence,
                                       f"Enforces {v_prefix} v-prefix for {path}", path, collection))
    return suggestions

# ----------------- Numeric -----------------
def coerce_number(value: Any) -> Optional[float]:
    """Numbers and numeric strings as floats; booleans, blanks, underscore or non-ASCII numerals and non-finite values are not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip() and value.isascii() and "_" not in value:
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None

def is_constraint_field(path: str) -> bool:
    lowered = path.lower()
    return any(field in lowered for field in CONSTRAINT_FIELDS)

def detect_numeric_stop_rules(values_by_path: Dict[str, PathValueCollection],
                              config: PromotionConfig) -> List[StopRuleSuggestion]:
    suggestions: List[StopRuleSuggestion] = []
    for path, collection in values_by_path.items():
        if not is_constraint_field(path):
            continue
        numbers = [n for n in (coerce_number(v) for v in collection.values) if n is not None]
        if not numbers:
            continue
        observed_min, observed_max = min(numbers), max(numbers)
        if observed_min == observed_max:
            continue
        if config.has_stop_rule(StopRuleType.NUMERIC, path):
            continue

        confidence = 0.7 if len(collection.files) >= 2 else 0.5
        suggested_min = max(1, math.floor(observed_min * 0.5))
        suggestions.append(_suggestion(NumericRule(path=path, min=suggested_min), confidence,
                                       f"Prevents {path} from dropping below safe minimum", path, collection))
    return suggestions

# ----------------- Combined -----------------
def analyze_stop_rule_patterns(changed_files: List[ChangedFile],
                               config: PromotionConfig) -> List[StopRuleSuggestion]:
    values_by_path = collect_values_by_path(changed_files)
    logger.debug(f"Collected values for {len(values_by_path)} path(s)")

    suggestions = (detect_semver_stop_rules(values_by_path, config)
                   + detect_version_format_rules(values_by_path, config)
                   + detect_numeric_stop_rules(values_by_path, config))
    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)
