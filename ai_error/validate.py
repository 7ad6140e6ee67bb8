"""Validation rules and script for the pattern catalog data files."""

import argparse
import json
import sys
from pathlib import Path

import regex
from jsonschema import ValidationError, validate

from ai_error.schema import (
    PATTERN_ENTRY_SCHEMA,
    PATTERN_FILE_SCHEMA,
    PATTERN_FLAGS,
    PLACEHOLDER_PATTERN,
)

_PLACEHOLDER_RE = regex.compile(PLACEHOLDER_PATTERN)


def placeholder_indices(template: str | None) -> set[int]:
    """Return the capture-group positions referenced by $N tokens."""
    if not template:
        return set()
    return {int(m.group(1)) for m in _PLACEHOLDER_RE.finditer(template)}


def validate_entry(data: dict) -> tuple[list[str], list[str]]:
    """Validate one catalog entry against the schema and data-quality rules.

    Returns (errors, warnings) — errors make the catalog unloadable,
    warnings do not.
    """
    errors = []
    warnings = []

    try:
        validate(instance=data, schema=PATTERN_ENTRY_SCHEMA)
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        return errors, warnings

    try:
        compiled = regex.compile(data["pattern"], PATTERN_FLAGS)
    except regex.error as e:
        errors.append(f"Invalid pattern regex: {e}")
        return errors, warnings

    for field in ("fix", "auto_fix_cmd"):
        missing = sorted(
            i for i in placeholder_indices(data.get(field)) if i > compiled.groups
        )
        if missing:
            tokens = ", ".join(f"${i}" for i in missing)
            warnings.append(
                f"'{data['title']}' {field} references {tokens} but the pattern "
                f"defines {compiled.groups} group(s); the token stays verbatim"
            )

    # Input is scanned one line at a time
    if "\n" in data["pattern"] or "\\n" in data["pattern"]:
        warnings.append(
            f"'{data['title']}' pattern spans a newline and can never match "
            "a single input line"
        )

    return errors, warnings


def validate_pattern_file(data: dict) -> tuple[list[str], list[str]]:
    """Validate a whole data file: the envelope, then each entry in turn."""
    errors = []
    warnings = []

    try:
        validate(instance=data, schema=PATTERN_FILE_SCHEMA)
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        return errors, warnings

    for i, entry in enumerate(data["patterns"]):
        entry_errors, entry_warnings = validate_entry(entry)
        errors.extend(f"patterns[{i}]: {e}" for e in entry_errors)
        warnings.extend(f"patterns[{i}]: {w}" for w in entry_warnings)

    return errors, warnings


def validate_unique_titles(entries: list[dict]) -> list[str]:
    """Validate that every title appears once across the whole catalog."""
    errors = []
    seen: dict[str, int] = {}
    for entry in entries:
        title = entry["title"]
        seen[title] = seen.get(title, 0) + 1

    for title, count in seen.items():
        if count > 1:
            errors.append(f"Duplicate title '{title}' found {count} times")
    return errors


def validate_all(data_dir: Path) -> bool:
    """Validate every pattern file in data_dir and print a report.

    Returns True if all validations pass (warnings don't cause failure).
    """
    all_errors = []
    all_warnings = []
    all_entries = []

    pattern_files = sorted(data_dir.glob("*.json"))
    if not pattern_files:
        all_errors.append(f"No pattern files found in {data_dir}")
        print(f"  FAIL: No pattern files found in {data_dir}")

    for pattern_file in pattern_files:
        try:
            with open(pattern_file, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            all_errors.append(f"{pattern_file.name}: Invalid JSON: {e}")
            print(f"  FAIL: {pattern_file.name}: Invalid JSON: {e}")
            continue

        errors, warnings = validate_pattern_file(data)
        for error in errors:
            all_errors.append(f"{pattern_file.name}: {error}")
            print(f"  FAIL: {pattern_file.name}: {error}")
        for warning in warnings:
            all_warnings.append(f"{pattern_file.name}: {warning}")
            print(f"  WARN: {pattern_file.name}: {warning}")
        if not errors:
            all_entries.extend(data["patterns"])
            print(f"  OK: {pattern_file.name} ({len(data['patterns'])} patterns)")

    for error in validate_unique_titles(all_entries):
        all_errors.append(error)
        print(f"  FAIL: {error}")

    print(f"\n  {len(all_entries)} patterns in {len(pattern_files)} file(s)")

    if all_warnings:
        print(f"\n{len(all_warnings)} warning(s)")

    if all_errors:
        print(f"\nValidation FAILED: {len(all_errors)} error(s)")
        return False
    else:
        print("\nValidation PASSED")
        return True


def main():
    from ai_error.catalog import default_data_dir

    parser = argparse.ArgumentParser(description="Validate the error pattern catalog")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory of pattern JSON files (default: bundled catalog)",
    )
    args = parser.parse_args()

    data_dir = args.data_dir or default_data_dir()
    print(f"Validating pattern catalog in {data_dir}...\n")

    success = validate_all(data_dir)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
