"""Command line front end: diff two config folders and print suggestions."""

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .errors import AdvisorError
from .file_diff import compute_file_diff, load_promotion_config
from .logging_config import get_logger, setup_logging
from .models import PromotionConfig
from .suggestion_engine import analyze_differences_for_suggestions, format_suggestions_as_yaml

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="promotion-advisor",
        description="Compare a source environment folder against a destination folder "
                    "and suggest content transforms and stop rules.")
    ap.add_argument("--source", required=True, help="Source (desired state) folder, e.g. ./uat")
    ap.add_argument("--dest", required=True, help="Destination (current state) folder, e.g. ./prod")
    ap.add_argument("--config", default=None, help="Optional config.yaml with existing transforms/stopRules/skipPath")
    ap.add_argument("--suggest", action="store_true", help="Analyze differences and print suggested rules")
    ap.add_argument("--threshold", type=float, default=None,
                    help="Minimum confidence for transform suggestions (0-1)")
    ap.add_argument("--json", action="store_true", help="Print the suggestion result as JSON instead of YAML")
    ap.add_argument("--log-level", default=None, help="Logging level (default from LOG_LEVEL)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Config()
    setup_logging(args.log_level or settings.log_level, stream=sys.stderr)

    threshold = settings.confidence_threshold if args.threshold is None else args.threshold
    if not 0.0 <= threshold <= 1.0:
        print(f"--threshold must be between 0 and 1, got {threshold}", file=sys.stderr)
        return 2

    try:
        config = load_promotion_config(Path(args.config)) if args.config else PromotionConfig()
        diff_result = compute_file_diff(Path(args.source).resolve(), Path(args.dest).resolve(), config)

        if not args.suggest:
            print(json.dumps({
                "added": diff_result.added_files,
                "deleted": diff_result.deleted_files,
                "changed": [f.path for f in diff_result.changed_files],
                "unchanged": diff_result.unchanged_files,
            }, indent=2))
            return 0

        result = analyze_differences_for_suggestions(diff_result, config,
                                                     confidence_threshold=threshold,
                                                     glob_pattern=settings.glob_pattern)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(format_suggestions_as_yaml(result, tool_name=settings.tool_name))
        return 0
    except AdvisorError as e:
        logger.debug(f"Aborting: {e.code}")
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
