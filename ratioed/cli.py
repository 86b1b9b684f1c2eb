"""
CLI interface for Ratioed
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from . import config
from .analysis_engine import analyze_group, analyze_one_on_one, compare_conversations
from .errors import InsufficientDataError

logger = logging.getLogger(__name__)


def _read_text(filepath: str) -> str:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    return path.read_text(encoding="utf-8", errors="replace")


def _emit(report: dict, output_file: str = None) -> None:
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        logger.info(f"Report saved to {output_file}")
    else:
        print(json.dumps(report, indent=2, ensure_ascii=False))


def analyze_file(filepath: str, output_file: str = None) -> dict:
    """
    Analyze a 1-on-1 chat export.

    Args:
        filepath: Path to the transcript .txt export
        output_file: Optional output JSON file

    Returns:
        Analysis result dict
    """
    logger.info(f"Analyzing file: {filepath}")

    valid, msg = config.validate_config()
    if not valid:
        logger.warning(f"Configuration warning: {msg}")

    report = analyze_one_on_one(_read_text(filepath))
    _emit(report, output_file)
    return report


def analyze_group_file(filepath: str, output_file: str = None) -> dict:
    """Analyze a group chat export."""
    logger.info(f"Analyzing group file: {filepath}")
    report = analyze_group(_read_text(filepath))
    _emit(report, output_file)
    return report


def compare_files(
    filepath_a: str,
    filepath_b: str,
    label_a: str = "Person A",
    label_b: str = "Person B",
    output_file: str = None,
) -> dict:
    """Compare two 1-on-1 chat exports."""
    logger.info(f"Comparing {filepath_a} with {filepath_b}")
    report = compare_conversations(
        _read_text(filepath_a),
        _read_text(filepath_b),
        label_a=label_a,
        label_b=label_b,
    )
    _emit(report, output_file)
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ratioed - Conversation Effort Balance Analyzer"
    )

    parser.add_argument(
        "command",
        choices=["analyze", "group", "compare", "validate"],
        help="Command to run"
    )

    parser.add_argument(
        "filepaths",
        nargs="+",
        help="Path to chat export .txt file (two paths for compare)"
    )

    parser.add_argument(
        "-o", "--output",
        dest="output_file",
        help="Output JSON file path"
    )

    parser.add_argument("--label-a", default="Person A", help="Label for the first chat (compare)")
    parser.add_argument("--label-b", default="Person B", help="Label for the second chat (compare)")

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "compare" and len(args.filepaths) != 2:
        parser.error("compare needs exactly two files")
    if args.command != "compare" and len(args.filepaths) != 1:
        parser.error(f"{args.command} takes exactly one file")

    if args.command == "validate":
        from .parser import validate_format
        valid, msg = validate_format(args.filepaths[0])
        print(f"Valid: {valid} - {msg}")
        return 0 if valid else 1

    try:
        if args.command == "analyze":
            report = analyze_file(args.filepaths[0], args.output_file)
            logger.info(f"Balance Score: {report['score']}/100 ({report['label']})")
        elif args.command == "group":
            report = analyze_group_file(args.filepaths[0], args.output_file)
            logger.info(f"Group summary: {report['summary']}")
        else:
            report = compare_files(
                args.filepaths[0], args.filepaths[1],
                args.label_a, args.label_b, args.output_file,
            )
            logger.info(report["comparison"]["summary"])
    except InsufficientDataError as e:
        logger.error(str(e))
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Analysis failed: {e}", exc_info=args.verbose)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
