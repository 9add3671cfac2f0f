"""
Command-line entry point.

Usage:
    code-optimizer app.js
    code-optimizer src/*.py --min-confidence 0.8 --format json
    code-optimizer main.rs --config optimizer.conf --disable redundant-clone
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from code_optimizer.config import VERSION, settings
from code_optimizer.core.config_loader import load_config_file
from code_optimizer.core.errors import OptimizerError
from code_optimizer.core.rule_engine import AnalysisEngine, detect_language_from_path
from code_optimizer.models.analysis_models import FileReport
from code_optimizer.models.config_models import AnalysisConfig
from code_optimizer.models.rule_models import Language

logger = logging.getLogger("code_optimizer.cli")

SUPPORTED_EXTENSIONS = ".js, .jsx, .ts, .tsx, .py, .rs"
RULE_DIVIDER = "-" * 50


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-optimizer",
        description="Suggest line-level optimizations for JavaScript, TypeScript, Python and Rust files",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("files", nargs="+", type=Path, help="Source file(s) to analyze")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Configuration file (.json mapping or directive text)",
    )
    parser.add_argument(
        "--min-confidence",
        type=float,
        help="Drop suggestions below this confidence (0.0 - 1.0)",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="RULE",
        help="Disable a rule id; may be repeated",
    )
    parser.add_argument(
        "--language",
        "-l",
        help="Analyze every file as this language instead of detecting it",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on files whose language has no rules",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> AnalysisConfig:
    """Layer config file, then command-line flags, over the settings defaults."""
    if args.config is not None:
        config = load_config_file(args.config)
    elif settings.rules_config_path:
        config = load_config_file(settings.rules_config_path)
    else:
        config = AnalysisConfig(
            minimum_confidence=settings.default_minimum_confidence,
            strict_language=settings.strict_language,
        )

    overrides: dict = {}
    if args.min_confidence is not None:
        overrides["minimum_confidence"] = args.min_confidence
    if args.strict:
        overrides["strict_language"] = True
    if args.disable:
        overrides["enabled_rules"] = {
            **config.enabled_rules,
            **{rule_id: False for rule_id in args.disable},
        }
    if not overrides:
        return config
    return AnalysisConfig.model_validate({**config.model_dump(), **overrides})


def format_text(path: Path, report: FileReport) -> str:
    suggestions = report.report.suggestions if report.report else []
    if not suggestions:
        return f"No optimization suggestions found for '{path}'."

    out = [f"Found {len(suggestions)} potential optimizations in '{path}':", ""]
    for s in suggestions:
        out.append(RULE_DIVIDER)
        out.append(f"Rule: '{s.rule_id}' [{s.severity.value}] (Confidence: {s.confidence * 100:.0f}%)")
        out.append(f"Suggestion: {s.explanation}")
        out.append(f"Location:   Line {s.line_number}")
        out.append(f"   Original:   {s.original_code.strip()}")
        if s.suggested_code is not None:
            out.append(f"   Suggested:  {s.suggested_code.strip()}")
        out.append("")
    out.append(RULE_DIVIDER)
    return "\n".join(out)


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Returns:
        0 on success, 1 when a file cannot be read, decoded or typed.
        argparse itself exits with 2 on bad arguments.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    forced_language = None
    if args.language:
        forced_language = Language.parse(args.language)
        if forced_language is None:
            print(f"Error: unknown language '{args.language}'", file=sys.stderr)
            return 1

    engine = AnalysisEngine()
    reports: list[tuple[Path, FileReport]] = []

    for path in args.files:
        try:
            source = path.read_bytes()
        except OSError as e:
            print(f"Error: failed to read file '{path}': {e}", file=sys.stderr)
            return 1

        language = forced_language or detect_language_from_path(str(path))
        if language is None:
            print(
                f"Error: could not determine the programming language of '{path}' "
                "from its extension.",
                file=sys.stderr,
            )
            print(f"Supported extensions are: {SUPPORTED_EXTENSIONS}", file=sys.stderr)
            return 1

        try:
            report = engine.run(source, language, config)
        except OptimizerError as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            return 1

        if config.strict_language and not report.language_supported:
            print(f"Error: no rules available for {language.value} ('{path}')", file=sys.stderr)
            return 1

        logger.debug(f"{path}: {len(report.suggestions)} suggestions")
        reports.append((path, FileReport(path=str(path), report=report)))

    if args.format == "json":
        payload = [report.model_dump(mode="json") for _, report in reports]
        print(json.dumps(payload, indent=2))
    else:
        for path, report in reports:
            print(format_text(path, report))

    return 0


if __name__ == "__main__":
    sys.exit(main())
