"""Pattern catalog JSON Schema definition."""

import regex

# Case-insensitive, with ASCII-only character classes
PATTERN_FLAGS = regex.IGNORECASE | regex.ASCII

# $1, $2, ... in fix and auto_fix_cmd refer to capture groups by position
PLACEHOLDER_PATTERN = r"\$(\d+)"

SEVERITIES = ["error", "warning", "info"]

PATTERN_ENTRY_SCHEMA = {
    "type": "object",
    "required": ["pattern", "title", "category", "severity", "explanation", "fix"],
    "additionalProperties": False,
    "properties": {
        "pattern": {"type": "string", "minLength": 1},
        "title": {"type": "string", "minLength": 1},
        "category": {"type": "string", "minLength": 1},
        "severity": {"type": "string", "enum": SEVERITIES},
        "explanation": {"type": "string", "minLength": 1},
        "fix": {"type": "string", "minLength": 1},
        "auto_fix_cmd": {"type": "string", "minLength": 1},
    },
}

PATTERN_FILE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["section", "patterns"],
    "additionalProperties": False,
    "properties": {
        "section": {"type": "string", "minLength": 1},
        "patterns": {
            "type": "array",
            "minItems": 1,
            # entries are checked one by one against PATTERN_ENTRY_SCHEMA
            "items": {"type": "object"},
        },
    },
}
