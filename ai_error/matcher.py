"""Match error text against the pattern catalog, line by line.

Usage:
    from ai_error.matcher import analyze, extract_location

    matches = analyze("Cannot find module 'express'")
    print(matches[0].title)          # Module Not Found
    print(matches[0].auto_fix_cmd)   # npm install express

    location = extract_location(stack_trace_text)
"""

import sys
from dataclasses import dataclass

import regex

from ai_error.catalog import PatternEntry, Severity, get_catalog
from ai_error.schema import PLACEHOLDER_PATTERN

# Per-search bound against catastrophic backtracking
MATCH_TIMEOUT_SECONDS = 0.25

# Frames whose path contains any of these are skipped
EXCLUDED_PATH_MARKERS = ("node_modules", "internal/")

# Frame shapes, tried in this order on every line
_FRAME_PATTERNS = (
    regex.compile(r"at .+ \((.+):(\d+):(\d+)\)", regex.ASCII),
    regex.compile(r"at (.+):(\d+):(\d+)", regex.ASCII),
    regex.compile(r"(.+):(\d+):(\d+)", regex.ASCII),
)

_PLACEHOLDER_RE = regex.compile(PLACEHOLDER_PATTERN)


def substitute_placeholders(template: str, groups: tuple) -> str:
    """Replace $N tokens with the Nth captured group.

    A token whose group was not captured is left as-is.
    """

    def _replace(m):
        index = int(m.group(1))
        if 1 <= index <= len(groups) and groups[index - 1] is not None:
            return groups[index - 1]
        return m.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


@dataclass(frozen=True)
class MatchResult:
    entry: PatternEntry
    matched_line: str
    line_number: int
    groups: tuple[str | None, ...]

    @property
    def title(self) -> str:
        return self.entry.title

    @property
    def fix(self) -> str:
        return substitute_placeholders(self.entry.fix, self.groups)

    @property
    def auto_fix_cmd(self) -> str | None:
        if self.entry.auto_fix_cmd is None:
            return None
        return substitute_placeholders(self.entry.auto_fix_cmd, self.groups)

    def to_dict(self) -> dict:
        return {
            "title": self.entry.title,
            "category": self.entry.category,
            "severity": self.entry.severity.value,
            "explanation": self.entry.explanation,
            "fix": self.fix,
            "autoFixCmd": self.auto_fix_cmd,
            "matchedLine": self.matched_line,
            "lineNumber": self.line_number,
        }


@dataclass(frozen=True)
class StackLocation:
    file: str
    line: int
    column: int

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "col": self.column}


def _search(pattern, line: str):
    try:
        return pattern.search(line, timeout=MATCH_TIMEOUT_SECONDS)
    except TimeoutError:
        sys.stderr.write(
            f"WARNING: Pattern gave up after {MATCH_TIMEOUT_SECONDS}s: "
            f"{pattern.pattern}\n"
        )
        return None


def analyze(
    text: str, catalog: tuple[PatternEntry, ...] | None = None
) -> list[MatchResult]:
    """Match every non-blank line of text against the catalog.

    Lines are scanned top to bottom and, within a line, entries in catalog
    order. Each title is reported at most once: the first line that
    triggers it wins. Returns matches in discovery order.
    """
    entries = get_catalog() if catalog is None else catalog
    matches = []
    seen_titles = set()

    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue

        for entry in entries:
            if entry.title in seen_titles:
                continue
            match = _search(entry.pattern, line)
            if match is None:
                continue
            seen_titles.add(entry.title)
            matches.append(
                MatchResult(
                    entry=entry,
                    matched_line=line,
                    line_number=line_number,
                    groups=match.groups(),
                )
            )

    return matches


def _is_excluded(path: str) -> bool:
    return any(marker in path for marker in EXCLUDED_PATH_MARKERS)


def extract_location(text: str) -> StackLocation | None:
    """Best-guess source location from the first usable stack frame.

    The first line/shape combination whose file is not inside a dependency
    or the runtime wins; later lines are not considered.
    """
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        for frame in _FRAME_PATTERNS:
            match = _search(frame, line)
            if match and not _is_excluded(match.group(1)):
                return StackLocation(
                    file=match.group(1),
                    line=int(match.group(2)),
                    column=int(match.group(3)),
                )
    return None


def summarize(matches: list[MatchResult]) -> dict[str, int]:
    """Count matches per severity."""
    counts = {s.value: 0 for s in Severity}
    for m in matches:
        counts[m.entry.severity.value] += 1
    return counts
