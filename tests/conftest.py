"""Shared test fixtures for ai-error tests."""

import copy
import json

import pytest

import ai_error.catalog as catalog_module

VALID_ENTRY = {
    "pattern": "Cannot find module '([^']+)'",
    "title": "Module Not Found",
    "category": "Node.js",
    "severity": "error",
    "explanation": "Node can't locate the module you're trying to import.",
    "fix": "Install $1 or check your import path.",
    "auto_fix_cmd": "npm install $1",
}


@pytest.fixture
def valid_entry():
    """Return a deep copy of a valid catalog entry."""
    return copy.deepcopy(VALID_ENTRY)


@pytest.fixture
def make_entry():
    """Factory fixture to create catalog entries with overrides.

    Pass auto_fix_cmd=None to drop the optional field.
    """

    def _make(**overrides):
        entry = copy.deepcopy(VALID_ENTRY)
        for key, value in overrides.items():
            if value is None:
                entry.pop(key, None)
            else:
                entry[key] = value
        return entry

    return _make


@pytest.fixture
def write_pattern_file(tmp_path):
    """Write a pattern data file into tmp_path and return its path."""

    def _write(name, patterns, section="Test"):
        path = tmp_path / name
        path.write_text(
            json.dumps({"section": section, "patterns": patterns}),
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def fresh_catalog_cache(monkeypatch):
    """Drop the cached catalog for the duration of a test."""
    monkeypatch.setattr(catalog_module, "_CATALOG_CACHE", None)
