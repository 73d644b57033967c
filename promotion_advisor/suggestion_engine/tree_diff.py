from __future__ import annotations
import re
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from ..models import ChangedFile, ValueDifference, YamlValue

KEY_FIELD_CANDIDATES = ("name", "id", "key", "identifier", "uid", "ref")
WILDCARD = "*"

_MISSING = object()

# ----------------- JSONPath helpers -----------------
@lru_cache(maxsize=1024)
def _parse_json_path_cached(path: str) -> Tuple[str, ...]:
    normalized = re.sub(r"\[(\*|\d+)\]", r".\1", path, flags=re.ASCII)
    return tuple(part for part in normalized.split(".") if part)

def parse_json_path(path: str) -> List[str]:
    """'env[*].value' and 'env.*.value' both parse to ['env', '*', 'value']."""
    return list(_parse_json_path_cached(path))

def matches_skip_path(candidate: str, pattern: str) -> bool:
    candidate_parts = _parse_json_path_cached(candidate)
    pattern_parts = _parse_json_path_cached(pattern)
    if len(candidate_parts) != len(pattern_parts):
        return False
    return all(p == WILDCARD or p == c for c, p in zip(candidate_parts, pattern_parts))

def is_path_skipped(path: str, skip_paths: List[str]) -> bool:
    return any(matches_skip_path(path, pattern) for pattern in skip_paths or [])

# ----------------- Value helpers -----------------
def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))

def values_identical(a: Any, b: Any) -> bool:
    """Strict leaf identity: bools only equal bools, ints and floats compare numerically."""
    if a is _MISSING or b is _MISSING:
        return a is b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b

def _present(value: Any) -> YamlValue:
    return None if value is _MISSING else value

def _children(node: Any) -> Dict[str, Any]:
    if isinstance(node, list):
        return {str(i): v for i, v in enumerate(node)}
    return {str(k): v for k, v in node.items()}

# ----------------- Array alignment -----------------
def detect_array_key_field(items: List[Any]) -> Optional[str]:
    """First candidate field present on every element with unique, hashable values."""
    if not items or not all(isinstance(item, dict) for item in items):
        return None
    for field in KEY_FIELD_CANDIDATES:
        if not all(field in item for item in items):
            continue
        values = [item[field] for item in items]
        try:
            if len(set(values)) == len(values):
                return field
        except TypeError:
            continue
    return None

def build_key_map(items: List[Any], key_field: str) -> Dict[Any, Any]:
    key_map: Dict[Any, Any] = {}
    for item in items:
        if not isinstance(item, dict) or key_field not in item:
            continue
        try:
            key_map[item[key_field]] = item
        except TypeError:  # unhashable key value on the other side
            continue
    return key_map

# ----------------- Tree differ -----------------
def walk_and_compare(source: Any,
                     destination: Any,
                     current_path: List[str],
                     file_path: str,
                     skip_paths: List[str]) -> List[ValueDifference]:
    """
    Compare a source (desired) tree against a destination (current) tree.

    Returns one ValueDifference per differing leaf, with array positions in the
    emitted path generalized to '*'. Keyed arrays are aligned on their key field
    and only elements present on both sides are compared; unkeyed arrays are
    compared pairwise up to the shorter length.
    """
    if not is_container(source) or not is_container(destination):
        if values_identical(source, destination):
            return []
        json_path = ".".join(current_path)
        if is_path_skipped(json_path, skip_paths):
            return []
        return [ValueDifference(file_path=file_path, json_path=json_path,
                                old_value=_present(destination), target_value=_present(source))]

    differences: List[ValueDifference] = []
    both_arrays = isinstance(source, list) and isinstance(destination, list)

    if both_arrays:
        key_field = detect_array_key_field(source) or detect_array_key_field(destination)
        if key_field:
            dest_map = build_key_map(destination, key_field)
            for key, source_item in build_key_map(source, key_field).items():
                if key in dest_map:
                    differences.extend(walk_and_compare(source_item, dest_map[key],
                                                        current_path + [WILDCARD], file_path, skip_paths))
            return differences

        for source_item, dest_item in zip(source, destination):
            differences.extend(walk_and_compare(source_item, dest_item,
                                                current_path + [WILDCARD], file_path, skip_paths))
        return differences

    source_children, dest_children = _children(source), _children(destination)
    for key in sorted(set(source_children) | set(dest_children)):
        differences.extend(walk_and_compare(source_children.get(key, _MISSING),
                                            dest_children.get(key, _MISSING),
                                            current_path + [key], file_path, skip_paths))
    return differences

def extract_all_differences(changed_files: List[ChangedFile]) -> List[ValueDifference]:
    differences: List[ValueDifference] = []
    for changed in changed_files:
        differences.extend(walk_and_compare(changed.raw_parsed_source, changed.raw_parsed_dest,
                                            [], changed.path, changed.skip_paths))
    return differences

