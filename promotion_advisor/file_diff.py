from __future__ import annotations
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .errors import ErrorCode, FileLoadError
from .logging_config import get_logger
from .models import ChangedFile, FileDiffResult, PromotionConfig

logger = get_logger("file_diff")

YAML_EXTENSIONS = (".yaml", ".yml")

# ----------------- Repo scan -----------------
def extract_yaml_tree(root: Path) -> List[str]:
    files: List[str] = []
    for p in root.rglob("*"):
        if p.is_file() and p.suffix.lower() in YAML_EXTENSIONS:
            rel_path = str(p.relative_to(root)).replace("\\", "/")
            # Skip hidden files and directories
            if not any(part.startswith(".") for part in rel_path.split("/")):
                files.append(rel_path)
    return sorted(files)

def load_yaml_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileLoadError("Failed to read file", code=ErrorCode.FILE_READ_ERROR,
                            path=str(path), cause=e) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FileLoadError("Failed to parse YAML file", code=ErrorCode.YAML_PARSE_ERROR,
                            path=str(path), cause=e) from e

# ----------------- Skip paths -----------------
def glob_matches(file_path: str, pattern: str) -> bool:
    if fnmatchcase(file_path, pattern):
        return True
    # '**/x' also matches top-level 'x'
    return pattern.startswith("**/") and fnmatchcase(file_path, pattern[3:])

def get_skip_paths_for_file(file_path: str, skip_path: Optional[Dict[str, List[str]]]) -> List[str]:
    paths_to_skip: List[str] = []
    for pattern, paths in (skip_path or {}).items():
        if glob_matches(file_path, pattern):
            paths_to_skip.extend(paths)
    return paths_to_skip

# ----------------- Folder diff -----------------
def compute_file_diff(source_root: Path, dest_root: Path, config: Optional[PromotionConfig] = None) -> FileDiffResult:
    """
    Pair YAML files by relative path and classify them as added, deleted,
    changed or unchanged. Processed trees equal the raw trees: content
    transforms are applied by the host tool before it calls the engine.
    """
    config = config or PromotionConfig()
    source_files = set(extract_yaml_tree(source_root))
    dest_files = set(extract_yaml_tree(dest_root))

    changed: List[ChangedFile] = []
    unchanged: List[str] = []
    for rel in sorted(source_files & dest_files):
        source_tree = load_yaml_file(source_root / rel)
        dest_tree = load_yaml_file(dest_root / rel)
        if source_tree == dest_tree:
            unchanged.append(rel)
            continue
        changed.append(ChangedFile(
            path=rel,
            raw_parsed_source=source_tree,
            raw_parsed_dest=dest_tree,
            processed_source_content=source_tree,
            processed_dest_content=dest_tree,
            skip_paths=get_skip_paths_for_file(rel, config.skip_path),
        ))

    result = FileDiffResult(
        changed_files=changed,
        added_files=sorted(source_files - dest_files),
        deleted_files=sorted(dest_files - source_files),
        unchanged_files=unchanged,
    )
    logger.info(f"Compared {len(source_files | dest_files)} YAML file(s): {len(result.changed_files)} changed, "
                f"{len(result.added_files)} added, {len(result.deleted_files)} deleted")
    return result

# ----------------- Config -----------------
def load_promotion_config(path: Path) -> PromotionConfig:
    data = load_yaml_file(path) or {}
    if not isinstance(data, dict):
        raise FileLoadError("Configuration root must be a mapping", code=ErrorCode.CONFIG_INVALID, path=str(path))
    try:
        return PromotionConfig.model_validate(data)
    except ValidationError as e:
        raise FileLoadError("Configuration validation failed", code=ErrorCode.CONFIG_INVALID,
                            path=str(path), cause=e,
                            hints=["Check transforms and stopRules for typos or unsupported fields"]) from e
