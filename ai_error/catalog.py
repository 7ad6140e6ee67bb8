"""Pattern catalog: the ordered, read-only list of known error signatures.

The catalog is stored as JSON data files under data/patterns/. Files are
read in sorted filename order and entries in file order; the resulting
sequence is the priority order used when matching.

Usage:
    from ai_error.catalog import get_catalog

    for entry in get_catalog():
        print(entry.title, entry.severity.value)
"""

import json
import os
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import regex

from ai_error.schema import PATTERN_FLAGS
from ai_error.validate import (
    validate_entry,
    validate_pattern_file,
    validate_unique_titles,
)

DATA_DIR = Path(__file__).parent / "data" / "patterns"
PATTERNS_DIR_ENV = "AI_ERROR_PATTERNS_DIR"

_CATALOG_CACHE: tuple["PatternEntry", ...] | None = None


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class CatalogError(Exception):
    """Raised when the pattern catalog cannot be built."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"{len(errors)} catalog error(s): {'; '.join(errors)}")


@dataclass(frozen=True)
class PatternEntry:
    """One error signature with its guidance text."""

    pattern: regex.Pattern
    title: str
    category: str
    severity: Severity
    explanation: str
    fix: str
    auto_fix_cmd: str | None = None

    @property
    def group_count(self) -> int:
        return self.pattern.groups

    @classmethod
    def from_dict(cls, data: dict) -> "PatternEntry":
        return cls(
            pattern=regex.compile(data["pattern"], PATTERN_FLAGS),
            title=data["title"],
            category=data["category"],
            severity=Severity(data["severity"]),
            explanation=data["explanation"],
            fix=data["fix"],
            auto_fix_cmd=data.get("auto_fix_cmd"),
        )


def default_data_dir() -> Path:
    """Catalog directory, honouring the AI_ERROR_PATTERNS_DIR override."""
    override = os.environ.get(PATTERNS_DIR_ENV)
    return Path(override) if override else DATA_DIR


def build_catalog(entries: list[dict]) -> tuple[PatternEntry, ...]:
    """Validate raw entries and compile them, preserving order.

    Raises CatalogError listing every problem found.
    """
    errors = []
    for i, entry in enumerate(entries):
        entry_errors, _ = validate_entry(entry)
        errors.extend(f"patterns[{i}]: {e}" for e in entry_errors)
    if errors:
        raise CatalogError(errors)
    return _compile(entries)


def _compile(entries: list[dict]) -> tuple[PatternEntry, ...]:
    errors = validate_unique_titles(entries)
    if errors:
        raise CatalogError(errors)
    return tuple(PatternEntry.from_dict(entry) for entry in entries)


def load_catalog(data_dir: Path | None = None) -> tuple[PatternEntry, ...]:
    """Load, validate and compile every pattern file in data_dir.

    Any invalid file, entry or duplicate title fails the whole load.
    """
    data_dir = data_dir or default_data_dir()
    pattern_files = sorted(data_dir.glob("*.json"))
    if not pattern_files:
        raise CatalogError([f"No pattern files found in {data_dir}"])

    errors = []
    entries = []
    for pattern_file in pattern_files:
        try:
            with open(pattern_file, encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as e:
            errors.append(f"{pattern_file.name}: Invalid JSON: {e}")
            continue

        file_errors, _ = validate_pattern_file(data)
        errors.extend(f"{pattern_file.name}: {e}" for e in file_errors)
        if not file_errors:
            entries.extend(data["patterns"])

    if errors:
        raise CatalogError(errors)
    return _compile(entries)


def get_catalog() -> tuple[PatternEntry, ...]:
    """Return the process-wide catalog (loaded once, then cached)."""
    global _CATALOG_CACHE
    if _CATALOG_CACHE is not None:
        return _CATALOG_CACHE

    _CATALOG_CACHE = load_catalog()
    return _CATALOG_CACHE


def catalog_stats(entries: tuple[PatternEntry, ...]) -> dict:
    """Count entries per severity and per category.

    Categories are ordered by count, largest first; ties keep catalog order.
    """
    by_severity = Counter(entry.severity for entry in entries)
    by_category = Counter(entry.category for entry in entries)
    return {
        "total": len(entries),
        "by_severity": {s.value: by_severity.get(s, 0) for s in Severity},
        "by_category": by_category.most_common(),
    }


def group_by_category(
    entries: tuple[PatternEntry, ...],
) -> list[tuple[str, list[PatternEntry]]]:
    """Group entries by category, categories sorted alphabetically."""
    groups: dict[str, list[PatternEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.category, []).append(entry)
    return sorted(groups.items(), key=lambda item: item[0].lower())
