"""
Command line entry point.

Usage:
    receipt-tally --dir ./receipts
    receipt-tally -d ./receipts --rule-set us_diner --lang eng
    receipt-tally -d ./receipts --csv out/totals.csv --json out/report.json
    python -m receipt_tally -d ./receipts -v
"""
from typing import List, Optional
import argparse
import logging
import sys

from .config import settings
from .core.bulk_processor import DirectoryUnreadable, process_receipt_directory
from .exporters.csv_exporter import export_csv, export_json
from .exporters.table_renderer import render_table
from .processors.aggregation.fuzzy_aggregator import FuzzyAggregator, SCORERS
from .processors.extraction.rule_loader import RuleSetNotFound, list_rule_sets

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receipt-tally",
        description="Analyze receipt images and extract product prices",
    )
    parser.add_argument("-d", "--dir", required=True, help="Directory containing receipt images")
    parser.add_argument(
        "--rule-set", default=None,
        help=f"Extraction rule set (default: {settings.rule_set}; available: {', '.join(list_rule_sets())})",
    )
    parser.add_argument("--lang", default=None, help=f"Tesseract language hint (default: {settings.ocr_language})")
    parser.add_argument(
        "--threshold", type=float, default=None,
        help=f"Similarity threshold, names merge above it (default: {settings.similarity_threshold})",
    )
    parser.add_argument(
        "--scorer", choices=sorted(SCORERS), default=None,
        help=f"rapidfuzz scorer (default: {settings.similarity_scorer})",
    )
    parser.add_argument("--workers", type=int, default=None, help="OCR worker threads (default: 1)")
    parser.add_argument("--csv", default=None, help="Also write product totals to this CSV file")
    parser.add_argument("--json", default=None, help="Also write the full report to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.workers is not None and args.workers < 1:
        print("Error: --workers must be at least 1", file=sys.stderr)
        return 1

    try:
        report = process_receipt_directory(
            args.dir,
            rule_set_id=args.rule_set,
            language=args.lang,
            max_workers=args.workers,
            aggregator=FuzzyAggregator(threshold=args.threshold, scorer=args.scorer),
        )
    except DirectoryUnreadable as e:
        print(f"Error: cannot read directory {args.dir}: {e}", file=sys.stderr)
        return 1
    except RuleSetNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render_table(report))

    if report.failures:
        logger.warning(f"{len(report.failures)} image(s) skipped because of OCR errors")
    if args.csv:
        export_csv(report, args.csv)
    if args.json:
        export_json(report, args.json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
