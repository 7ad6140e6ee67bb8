"""ai-error: explain developer error output and suggest fixes.

Usage:
    ai-error "Cannot find module 'express'"
    npm run build 2>&1 | ai-error --auto-fix
    tsc --noEmit 2>&1 | ai-error --json
    ai-error --list | --stats

Also runnable as `python -m ai_error.cli`.
"""

import argparse
import sys

from ai_error.catalog import CatalogError, get_catalog
from ai_error.matcher import analyze, extract_location
from ai_error.report import (
    render_help,
    render_json,
    render_list,
    render_report,
    render_stats,
    use_color,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-error",
        description="Match error output against known error patterns",
        add_help=False,
    )
    parser.add_argument("text", nargs="*", help="Error text (or pipe it on stdin)")
    parser.add_argument("-h", "--help", action="store_true", help="Show help")
    parser.add_argument(
        "--auto-fix", action="store_true", help="Show suggested fix commands prominently"
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    parser.add_argument("--list", action="store_true", help="List all known error patterns")
    parser.add_argument("--stats", action="store_true", help="Show catalog statistics")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def read_input(text_args: list[str], stdin=None) -> str:
    """Error text from the positional arguments, else from piped stdin.

    Arguments take precedence: piped stdin is ignored when any are given.
    """
    if text_args:
        return " ".join(text_args)
    stdin = stdin or sys.stdin
    if stdin.isatty():
        return ""
    return stdin.read()


def main(argv: list[str] | None = None, stdin=None):
    args = build_parser().parse_intermixed_args(argv)
    color = use_color(no_color=args.no_color)

    try:
        catalog = get_catalog()
    except CatalogError as e:
        for error in e.errors:
            sys.stderr.write(f"FAIL: {error}\n")
        sys.stderr.write("Pattern catalog could not be loaded\n")
        sys.exit(2)

    if args.help:
        print(render_help(len(catalog), color=color))
        sys.exit(0)

    if args.stats:
        print(render_stats(catalog, color=color))
        sys.exit(0)

    if args.list:
        print(render_list(catalog, color=color))
        sys.exit(0)

    text = read_input(args.text, stdin)
    if not text.strip():
        if not args.json:
            print(render_help(len(catalog), color=color))
        sys.exit(0)

    matches = analyze(text, catalog)
    location = extract_location(text)

    if args.json:
        print(render_json(matches, location))
    else:
        print(
            render_report(
                matches,
                location,
                pattern_count=len(catalog),
                auto_fix=args.auto_fix,
                color=color,
            )
        )
    sys.exit(0)


if __name__ == "__main__":
    main()
