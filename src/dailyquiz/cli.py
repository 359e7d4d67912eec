"""CLI entrypoint for selecting a daily question set from files.

Usage:
    python -m dailyquiz.cli --candidates batch.json --corpus recent.txt
    dailyquiz-select --candidates batch.jsonl --corpus recent.json --count 10

Example:
    $ dailyquiz-select --candidates generated.json --corpus last_3_days.txt \\
        --mode filter_duplicates --threshold 0.45 --output ./selection
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from dailyquiz.config import SelectorSettings
from dailyquiz.datasets import QuestionBatchError, load_candidates, load_corpus
from dailyquiz.helpers import format_questions_for_display
from dailyquiz.reporters import JSONReporter, MarkdownReporter
from dailyquiz.selector import QuestionSelector


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="dailyquiz-select",
        description="Select the daily questions least similar to recently published ones.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dailyquiz-select --candidates batch.json --corpus recent.txt
  dailyquiz-select --candidates batch.csv --corpus recent.jsonl --count 8
  dailyquiz-select --candidates batch.json --corpus recent.txt --mode filter_duplicates

Defaults for --count and --threshold come from DAILYQUIZ_TARGET_COUNT and
DAILYQUIZ_DUPLICATE_THRESHOLD when set.
        """,
    )

    parser.add_argument(
        "--candidates",
        required=True,
        help="Generated candidate questions (.json, .jsonl or .csv)",
    )
    parser.add_argument(
        "--corpus",
        required=True,
        help="Recently published question texts (.txt, .json or .jsonl)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of questions to keep (default: 10)",
    )
    parser.add_argument(
        "--mode",
        choices=["least_similar", "filter_duplicates"],
        default="least_similar",
        help="Selection mode (default: least_similar)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Duplicate threshold for filter_duplicates (default: 0.45)",
    )
    parser.add_argument(
        "--output",
        default="./selection",
        help="Output directory for selected questions and reports (default: ./selection)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-candidate scores",
    )

    return parser.parse_args(args)


def load_settings(parsed: argparse.Namespace) -> SelectorSettings:
    """Merge command-line values over ``DAILYQUIZ_*`` settings.

    The candidates file fixes how many questions were generated, so a
    count from ``--count`` or ``DAILYQUIZ_TARGET_COUNT`` raises
    ``generate_count`` to match when needed.

    Raises:
        pydantic.ValidationError: If a value is out of range.
    """
    return SelectorSettings.from_env(
        fit_generate_count=True,
        target_count=parsed.count,
        duplicate_threshold=parsed.threshold,
    )


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        parsed = parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        settings = load_settings(parsed)

        output_dir = Path(parsed.output)
        output_dir.mkdir(parents=True, exist_ok=True)

        print(f"Loading candidates: {parsed.candidates}")
        candidates = load_candidates(parsed.candidates)
        print(f"  Loaded {len(candidates)} candidates")

        print(f"Loading corpus: {parsed.corpus}")
        corpus = load_corpus(parsed.corpus)
        print(f"  Loaded {len(corpus)} recent questions")

        selector = QuestionSelector(
            min_word_length=settings.min_word_length,
            threshold=settings.duplicate_threshold,
        )
        if parsed.mode == "least_similar":
            selected = selector.select(candidates, corpus, settings.target_count)
        else:
            selected = selector.filter(candidates, corpus)[: settings.target_count]
        report = selector.report(
            candidates,
            corpus,
            mode=parsed.mode,
            count=settings.target_count,
            threshold=settings.duplicate_threshold,
        )

        print(f"\nSaving results to: {output_dir}")

        selected_path = output_dir / "selected.json"
        selected_path.write_text(
            json.dumps([q.model_dump() for q in selected], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        print(f"  Selected questions: {selected_path}")

        md_path = output_dir / "report.md"
        MarkdownReporter().save(report, md_path)
        print(f"  Markdown report: {md_path}")

        json_path = output_dir / "report.json"
        JSONReporter().save(report, json_path)
        print(f"  JSON report: {json_path}")

        print("\n" + "=" * 60)
        print("SELECTION SUMMARY")
        print("=" * 60)
        print(f"Mode: {report.mode}")
        print(f"Selected: {report.selected_count} of {report.candidate_count}")
        print(format_questions_for_display(selected, numbered=True, prefix="  "))
        print("=" * 60)

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (QuestionBatchError, ValidationError) as e:
        print(f"Invalid data: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
