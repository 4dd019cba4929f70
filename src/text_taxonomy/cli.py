# cli.py

"""
Command-line entry point.

Examples:
  # Cluster the paragraphs of a file, tree as JSON on stdout
  text-taxonomy notes.txt

  # Sentence mode, flat CSV table written to a file
  text-taxonomy notes.txt --mode sentence --format csv --output tree.csv

  # Word mode from stdin, nouns only
  cat notes.txt | text-taxonomy - --mode word --noun-only --min-word-freq 2
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .analysis.export import to_csv, to_json
from .core.types import MODES
from .worker import ErrorMessage, ProgressMessage, TaxonomyRequest, run_request

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="text-taxonomy",
        description="Build a hierarchical taxonomy from unstructured text.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1].rstrip(),
    )
    parser.add_argument(
        "input",
        help="Path of a UTF-8 text file, or '-' to read stdin",
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="paragraph",
        help="Unit of clustering (default: paragraph)",
    )
    parser.add_argument(
        "--no-cutoff",
        action="store_true",
        help="Keep the full binary tree instead of cutting it into a forest",
    )
    parser.add_argument(
        "--linkage",
        choices=("average", "complete"),
        default="average",
        help="Cluster distance update rule (default: average)",
    )
    parser.add_argument(
        "--noun-only",
        action="store_true",
        help="Word mode: keep nouns only",
    )
    parser.add_argument(
        "--min-word-freq",
        type=int,
        default=1,
        help="Word mode: minimum occurrences of a stem (default: 1)",
    )
    parser.add_argument(
        "--stopword",
        action="append",
        default=[],
        metavar="WORD",
        help="Extra stopword; may be repeated",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write the tree here instead of stdout",
    )
    parser.add_argument(
        "--format",
        choices=("json", "csv"),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _print_progress(message) -> None:
    if isinstance(message, ProgressMessage):
        print(message.message, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        text = _read_input(args.input)
    except OSError as exc:
        print(f"Error: cannot read {args.input}: {exc}", file=sys.stderr)
        return 2

    options = {
        "nounOnly": args.noun_only,
        "minWordFreq": args.min_word_freq,
        "customStopwords": args.stopword,
        "linkage": args.linkage,
    }
    if args.no_cutoff:
        options["enableAutoCutoff"] = False

    request = TaxonomyRequest(text=text, mode=args.mode, options=options)
    terminal = run_request(request, on_message=_print_progress)[-1]

    if isinstance(terminal, ErrorMessage):
        print(f"Error: {terminal.error}", file=sys.stderr)
        return 1

    tree = terminal.data
    rendered = to_csv(tree) if args.format == "csv" else to_json(tree) + "\n"

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as fh:
            fh.write(rendered)
        logger.info("Wrote %s tree to %s", args.format, args.output)
    else:
        sys.stdout.write(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
