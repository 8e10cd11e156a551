"""
Feature Requirements Analyzer — Main Entry Point

Run one analysis from a params file (CLI):
    python -m feature_analyzer path/to/params.json
    python -m feature_analyzer path/to/params.json --json

Or import and run programmatically:
    from feature_analyzer.main import run
    result = run("path/to/params.json")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from feature_analyzer.config import get_settings
from feature_analyzer.exceptions import ValidationError
from feature_analyzer.models.schemas import AnalysisResult
from feature_analyzer.orchestration.runner import AnalysisRunner
from feature_analyzer.utils.logger import setup_logging


def run(file_path: str, as_json: bool = False) -> AnalysisResult:
    """Load params from a JSON file, analyze the feature and log a summary."""
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info(f"  {get_settings().app_name.upper()}")
    logger.info(f"  Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    try:
        raw = json.loads(Path(file_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"{file_path} is not valid JSON: {e}") from e

    result = AnalysisRunner().analyze(raw)
    _print_summary(result)

    if as_json:
        print(result.model_dump_json(indent=2))
    return result


def _print_summary(result: AnalysisResult) -> None:
    """Log a human-readable summary of the analysis."""
    logger = logging.getLogger(__name__)

    logger.info("")
    logger.info("-" * 60)
    logger.info("  ANALYSIS SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Feature:        {result.feature_id}")
    logger.info(f"  Requirements:   {len(result.requirements)} extracted")
    logger.info(f"  Dependencies:   {len(result.dependencies)} edges")
    logger.info(f"  Conflicts:      {len(result.conflicts)}")
    logger.info(f"  Overall Score:  {result.overall_complexity}")
    logger.info("-" * 60)

    scores = {e.requirement_id: e for e in result.complexity}
    for req in result.requirements:
        estimate = scores.get(req.id)
        score = f"{estimate.score:>4} ({estimate.time_estimate})" if estimate else "n/a"
        logger.info(
            f"    {req.id:<7} | {req.type.value:<14} | {req.priority.value:<8} | "
            f"{score} | {req.description[:60]}"
        )

    for conflict in result.conflicts:
        logger.info(f"  ! {conflict.rule.value}: {conflict.description[:100]}")
    logger.info("")


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    as_json = "--json" in args
    paths = [a for a in args if a != "--json"]
    if not paths:
        print("usage: python -m feature_analyzer <params.json> [--json]", file=sys.stderr)
        return 2
    run(paths[0], as_json=as_json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
