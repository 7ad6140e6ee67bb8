"""Tests for the ai-error command line."""

import io
import json

import pytest

import ai_error.catalog as catalog_module
from ai_error.cli import main, read_input


def _run(argv, stdin_text=""):
    with pytest.raises(SystemExit) as exc_info:
        main(argv, stdin=io.StringIO(stdin_text))
    return exc_info.value.code


class _TtyInput(io.StringIO):
    def isatty(self):
        return True


class TestReadInput:
    def test_joins_arguments_with_spaces(self):
        assert read_input(["Cannot", "find", "module"]) == "Cannot find module"

    def test_reads_piped_stdin(self):
        assert read_input([], io.StringIO("line one\nline two\n")) == (
            "line one\nline two\n"
        )

    def test_terminal_without_arguments_is_empty(self):
        assert read_input([], _TtyInput("ignored")) == ""

    def test_arguments_win_over_piped_stdin(self):
        piped = io.StringIO("fetch failed\n")
        assert read_input(["Cannot", "find", "module"], piped) == "Cannot find module"
        assert piped.read() == "fetch failed\n"


class TestAnalysis:
    def test_text_argument(self, capsys):
        assert _run(["Cannot find module 'express'"]) == 0
        out = capsys.readouterr().out
        assert "Module Not Found" in out
        assert "Auto-fix: npm install express" in out

    def test_piped_input(self, capsys):
        trace = (
            "TypeError: Cannot read properties of undefined (reading 'map')\n"
            "    at UserList (/app/components/UserList.tsx:12:18)\n"
        )
        assert _run([], trace) == 0
        out = capsys.readouterr().out
        assert "Property Access on Null/Undefined" in out
        assert "/app/components/UserList.tsx:12:18" in out

    def test_json_output(self, capsys):
        assert _run(["--json", "Cannot find module 'express'"]) == 0
        doc = json.loads(capsys.readouterr().out)
        assert doc["matchCount"] == 1
        assert doc["matches"][0]["autoFixCmd"] == "npm install express"
        assert doc["sourceLocation"] is None

    def test_flag_between_words_of_text(self, capsys):
        assert _run(["Cannot", "--json", "find", "module", "'x'"]) == 0
        doc = json.loads(capsys.readouterr().out)
        assert doc["matchCount"] == 1
        assert doc["matches"][0]["matchedLine"] == "Cannot find module 'x'"
        assert doc["matches"][0]["autoFixCmd"] == "npm install x"

    def test_arguments_ignore_piped_stdin(self, capsys):
        assert _run(["--json", "fetch failed"], "Cannot find module 'express'\n") == 0
        doc = json.loads(capsys.readouterr().out)
        assert [m["title"] for m in doc["matches"]] == ["Fetch Failed"]

    def test_auto_fix_flag(self, capsys):
        assert _run(["--auto-fix", "npm ERR! code ERESOLVE"]) == 0
        assert "$ npm install --legacy-peer-deps" in capsys.readouterr().out

    def test_no_match_still_succeeds(self, capsys):
        assert _run(["all tests passed"]) == 0
        assert "No known error patterns found." in capsys.readouterr().out

    def test_never_colors_captured_output(self, capsys):
        _run(["Cannot find module 'express'"])
        assert "\x1b[" not in capsys.readouterr().out


class TestBlankInput:
    def test_prints_help(self, capsys):
        assert _run([], "   \n") == 0
        assert "Usage:" in capsys.readouterr().out

    def test_json_prints_nothing(self, capsys):
        assert _run(["--json"], "") == 0
        assert capsys.readouterr().out == ""


class TestReports:
    def test_help(self, capsys):
        assert _run(["--help"]) == 0
        assert "Options:" in capsys.readouterr().out

    def test_list(self, capsys):
        assert _run(["--list"]) == 0
        out = capsys.readouterr().out
        assert "All 162 Known Error Patterns:" in out
        assert "Module Not Found (Error Code)" in out

    def test_stats(self, capsys):
        assert _run(["--stats"]) == 0
        assert "Total patterns: 162" in capsys.readouterr().out


class TestBrokenCatalog:
    def test_exits_with_catalog_errors(self, fresh_catalog_cache, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv(catalog_module.PATTERNS_DIR_ENV, str(tmp_path))
        assert _run(["Cannot find module 'express'"]) == 2
        err = capsys.readouterr().err
        assert "FAIL: No pattern files found" in err
        assert "could not be loaded" in err
