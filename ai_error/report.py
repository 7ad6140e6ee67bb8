"""Render analysis results and catalog listings for the terminal or as JSON."""

import json
import os
import sys
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ai_error.catalog import PatternEntry, catalog_stats, group_by_category
from ai_error.matcher import MatchResult, StackLocation, summarize

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Longer matched lines are cut for display
MATCHED_LINE_WIDTH = 120
RULE_WIDTH = 60

ANSI = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
    "bg_red": "\x1b[41m",
    "bg_yellow": "\x1b[43m",
}
PLAIN = {name: "" for name in ANSI}

SEVERITY_STYLE = {
    "error": ("red", "✗"),
    "warning": ("yellow", "⚠"),
    "info": ("blue", "ℹ"),
}

_ENV: Environment | None = None


def _get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
    return _ENV


def use_color(stream=None, no_color: bool = False) -> bool:
    """Decide whether ANSI colors should be written to stream."""
    if no_color or "NO_COLOR" in os.environ:
        return False
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def _palette(color: bool) -> dict[str, str]:
    return ANSI if color else PLAIN


def _severity_view(severity: str, c: dict[str, str]) -> dict[str, str]:
    color_name, symbol = SEVERITY_STYLE[severity]
    return {
        "color": c[color_name],
        "icon": f"{c[color_name]}{symbol}{c['reset']}",
    }


def _render(template_name: str, color: bool, **context) -> str:
    c = _palette(color)
    return _get_env().get_template(template_name).render(
        c=c, rule="─" * RULE_WIDTH, **context
    )


def render_report(
    matches: list[MatchResult],
    location: StackLocation | None,
    pattern_count: int,
    auto_fix: bool = False,
    color: bool = False,
) -> str:
    """Human-readable report of every match, the source location and a summary."""
    c = _palette(color)
    views = [
        {
            "title": m.title,
            "category": m.entry.category,
            "line_number": m.line_number,
            "matched_line": m.matched_line[:MATCHED_LINE_WIDTH],
            "explanation": m.entry.explanation,
            "fix": m.fix,
            "auto_fix_cmd": m.auto_fix_cmd,
            **_severity_view(m.entry.severity.value, c),
        }
        for m in matches
    ]
    return _render(
        "report.txt",
        color,
        matches=views,
        location=location,
        summary=summarize(matches),
        auto_fix=auto_fix,
        pattern_count=pattern_count,
    )


def build_json_document(
    matches: list[MatchResult], location: StackLocation | None
) -> dict:
    return {
        "matchCount": len(matches),
        "matches": [m.to_dict() for m in matches],
        "sourceLocation": location.to_dict() if location else None,
    }


def render_json(matches: list[MatchResult], location: StackLocation | None) -> str:
    return json.dumps(
        build_json_document(matches, location), indent=2, ensure_ascii=False
    )


def render_list(catalog: tuple[PatternEntry, ...], color: bool = False) -> str:
    """Every known pattern title, grouped by category."""
    c = _palette(color)
    groups = [
        (
            category,
            [
                {"title": e.title, **_severity_view(e.severity.value, c)}
                for e in entries
            ],
        )
        for category, entries in group_by_category(catalog)
    ]
    return _render(
        "list.txt", color, groups=groups, pattern_count=len(catalog)
    )


def render_stats(catalog: tuple[PatternEntry, ...], color: bool = False) -> str:
    stats = catalog_stats(catalog)
    return _render(
        "stats.txt", color, stats=stats, pattern_count=stats["total"]
    )


def render_help(pattern_count: int, color: bool = False) -> str:
    return _render("help.txt", color, pattern_count=pattern_count)
