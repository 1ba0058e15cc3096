"""
Command-line interface for the DOM XSS detector.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import config
from .detector import DomXssDetector
from .exceptions import PatternError


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="domtaint",
        description="Detect DOM-based XSS flows in JavaScript and HTML files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s analyze path/to/file.js
  %(prog)s analyze path/to/directory/ -o results.json
  %(prog)s analyze page.html --sinks my_sinks.txt --no-emulate
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze local JavaScript/HTML files for DOM XSS flows"
    )
    analyze_parser.add_argument(
        "path",
        type=str,
        help="Path to JavaScript/HTML file or directory to analyze",
    )
    analyze_parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output file for results (default: stdout)",
        default=None,
    )
    analyze_parser.add_argument(
        "--no-emulate",
        action="store_true",
        help="Skip the dynamic emulation pass (no code is executed)",
    )
    analyze_parser.add_argument(
        "--sources",
        type=str,
        help="File with one source regex per line (default: built-in list)",
        default=None,
    )
    analyze_parser.add_argument(
        "--sinks",
        type=str,
        help="File with one sink regex per line (default: built-in list)",
        default=None,
    )
    analyze_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    if args.command == "analyze":
        return handle_analyze(args)
    else:
        parser.print_help()
        return 1


def load_patterns(path: Optional[str]) -> Optional[List[str]]:
    """
    Read regular expressions from a file, one per line.

    Blank lines and lines starting with ``#`` are ignored.

    Args:
        path: Pattern file, or None for the defaults

    Returns:
        List of patterns, or None when no file was given
    """
    if path is None:
        return None
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def handle_analyze(args) -> int:
    """Handle the analyze command."""
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    input_path = Path(args.path)
    if not input_path.exists():
        print(f"Error: Path '{args.path}' does not exist", file=sys.stderr)
        return 1

    if not args.no_emulate:
        for warning in config.validate()["warnings"]:
            print(f"Warning: {warning}", file=sys.stderr)

    try:
        detector = DomXssDetector(
            verbose=args.verbose,
            emulate=not args.no_emulate,
            source_patterns=load_patterns(args.sources),
            sink_patterns=load_patterns(args.sinks),
        )
    except (OSError, PatternError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        results = detector.analyze(input_path)

        if args.output:
            detector.save_results(results, Path(args.output))
            print(f"Results saved to {args.output}")
        else:
            detector.print_results(results)

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
