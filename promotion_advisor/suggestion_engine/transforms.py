from __future__ import annotations
import re
from typing import Dict, List, Optional, Tuple

from ..logging_config import get_logger
from ..models import PatternOccurrence, PromotionConfig, TransformSuggestion, ValueDifference, ValuePair
from .noise_filter import should_ignore_value

logger = get_logger("suggestion_engine.transforms")

DEFAULT_CONFIDENCE_THRESHOLD = 0.3
MAX_EXAMPLES = 3

# Ordered: earlier entries are reported first when several fire on one pair.
SEMANTIC_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("uat", "prod"),
    ("UAT", "PROD"),
    ("staging", "production"),
    ("stg", "prd"),
    ("dev", "prod"),
    ("test", "prod"),
)
SEMANTIC_KEYWORDS = ("uat", "prod", "staging", "production", "dev", "test")

NUMERIC_ONLY = re.compile(r"\d+", re.ASCII)
VERSION_LIKE = re.compile(r"v?\d+\.\d+", re.ASCII)
BOOLEAN_STRINGS = ("true", "false")

# ----------------- Pattern extraction -----------------
def find_substring_patterns(old_value: str, target_value: str) -> List[Tuple[str, str]]:
    """
    Candidate (find, replace) rules for one value pair.

    Every vocabulary pair whose old fragment occurs in old_value and whose
    target fragment occurs in target_value is returned. Only when none fires
    is the whole value pair offered as a rule; fragments of a value are never
    proposed on their own.
    """
    patterns: List[Tuple[str, str]] = []
    for old_fragment, target_fragment in SEMANTIC_PATTERNS:
        candidate = (old_fragment, target_fragment)
        if old_fragment in old_value and target_fragment in target_value and candidate not in patterns:
            patterns.append(candidate)

    if not patterns and old_value != target_value:
        patterns.append((old_value, target_value))
    return patterns

# ----------------- Confidence -----------------
def is_semantic(find: str, replace: str) -> bool:
    find_lower, replace_lower = find.lower(), replace.lower()
    return any(keyword in find_lower or keyword in replace_lower for keyword in SEMANTIC_KEYWORDS)

def calculate_transform_confidence(occurrence: PatternOccurrence) -> float:
    file_count = len(occurrence.files)
    example_count = len(occurrence.examples)

    if file_count <= 1:
        confidence = 0.5 if example_count >= 3 else 0.3
    elif file_count <= 3:
        confidence = 0.6
    else:
        confidence = 0.85

    if is_semantic(occurrence.find, occurrence.replace):
        confidence = min(0.95, confidence + 0.05)
    return round(confidence, 2)

def _rejection_reason(occurrence: PatternOccurrence) -> Optional[str]:
    find, replace = occurrence.find, occurrence.replace
    if len(occurrence.examples) < 2:
        return "single occurrence"
    if NUMERIC_ONLY.fullmatch(find) and NUMERIC_ONLY.fullmatch(replace):
        return "numeric only"
    if find in BOOLEAN_STRINGS and replace in BOOLEAN_STRINGS:
        return "boolean flip"
    if VERSION_LIKE.match(find) and VERSION_LIKE.match(replace):
        return "version bump"
    return None

# ----------------- Aggregation -----------------
def aggregate_patterns(differences: List[ValueDifference]) -> Dict[str, PatternOccurrence]:
    """Merge candidates from every string difference into one map keyed by 'find→replace'."""
    pattern_map: Dict[str, PatternOccurrence] = {}
    for diff in differences:
        if not isinstance(diff.old_value, str) or not isinstance(diff.target_value, str):
            continue
        if should_ignore_value(diff.old_value, diff.target_value):
            continue

        example = ValuePair(old_value=diff.old_value, target_value=diff.target_value, path=diff.json_path)
        for find, replace in find_substring_patterns(diff.old_value, diff.target_value):
            key = f"{find}→{replace}"
            occurrence = pattern_map.get(key)
            if occurrence is None:
                occurrence = pattern_map[key] = PatternOccurrence(find=find, replace=replace)
            occurrence.add(diff.file_path, example)
    return pattern_map

def analyze_transform_patterns(differences: List[ValueDifference],
                               config: PromotionConfig,
                               confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> List[TransformSuggestion]:
    suggestions: List[TransformSuggestion] = []
    for key, occurrence in aggregate_patterns(differences).items():
        reason = _rejection_reason(occurrence)
        if reason:
            logger.debug(f"Dropping transform candidate '{key}': {reason}")
            continue

        confidence = calculate_transform_confidence(occurrence)
        if confidence < confidence_threshold:
            logger.debug(f"Dropping transform candidate '{key}': confidence {confidence} below threshold")
            continue
        if config.has_content_transform(occurrence.find, occurrence.replace):
            logger.debug(f"Dropping transform candidate '{key}': already configured")
            continue

        suggestions.append(TransformSuggestion(
            find=occurrence.find,
            replace=occurrence.replace,
            confidence=confidence,
            occurrences=len(occurrence.examples),
            affected_files=list(occurrence.files),
            examples=occurrence.examples[:MAX_EXAMPLES],
        ))

    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)
