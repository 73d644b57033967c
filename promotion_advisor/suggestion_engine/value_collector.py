from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..models import ChangedFile, PathValueCollection, YamlValue
from .tree_diff import WILDCARD, is_container, is_path_skipped

# ----------------- Value collector -----------------
def extract_all_path_values(data: Any, current_path: Optional[List[str]] = None) -> Dict[str, List[YamlValue]]:
    """Leaf values of one tree keyed by generalized path. A scalar root has no path and is dropped."""
    current_path = current_path or []
    results: Dict[str, List[YamlValue]] = {}

    if not is_container(data):
        if current_path:
            results[".".join(current_path)] = [data]
        return results

    if isinstance(data, list):
        children = [(WILDCARD, item) for item in data]
    else:
        children = [(str(key), value) for key, value in data.items()]

    for segment, child in children:
        for path, values in extract_all_path_values(child, current_path + [segment]).items():
            results.setdefault(path, []).extend(values)
    return results

def collect_values_by_path(changed_files: List[ChangedFile]) -> Dict[str, PathValueCollection]:
    collections: Dict[str, PathValueCollection] = {}
    for changed in changed_files:
        for path, values in extract_all_path_values(changed.processed_source_content).items():
            if is_path_skipped(path, changed.skip_paths):
                continue
            collection = collections.setdefault(path, PathValueCollection())
            collection.values.extend(values)
            collection.add_file(changed.path)
    return collections
