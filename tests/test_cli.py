"""Tests for the CLI module: arg parsing, exit codes, output formats."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from csscascade.cascade import Origin
from csscascade.cli import CliOptions, analyse, build_parser, format_report, main, read_sources

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_selectors_only(self) -> None:
        ns = build_parser().parse_args(["a", ".b"])
        assert ns.selectors == ["a", ".b"]
        assert ns.file == []
        assert ns.origin is None
        assert ns.important is None

    def test_file_flags(self) -> None:
        ns = build_parser().parse_args(["-f", "a.txt", "--file", "b.txt"])
        assert ns.file == ["a.txt", "b.txt"]

    def test_origin_choices(self) -> None:
        ns = build_parser().parse_args(["a", "--origin", "userAgent"])
        assert ns.origin == "userAgent"
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a", "--origin", "inline"])

    def test_boolean_flags(self) -> None:
        ns = build_parser().parse_args(["a", "--important", "--no-sort", "--debug"])
        assert ns.important is True
        assert ns.sort is False
        assert ns.debug is True

    def test_format(self) -> None:
        ns = build_parser().parse_args(["a", "--format", "json"])
        assert ns.format == "json"


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def _options(**overrides) -> CliOptions:
    values = dict(
        selectors=[],
        input_files=[],
        origin=Origin.AUTHOR,
        important=False,
        sort=False,
        format="text",
        debug=False,
    )
    values.update(overrides)
    return CliOptions(**values)


class TestAnalyse:
    def test_read_sources_skips_blank_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.txt"
        path.write_text("a\n\n  .b  \n")
        opts = _options(selectors=["#c"], input_files=[path])
        assert read_sources(opts) == ["#c", "a", ".b"]

    def test_lists_are_split(self) -> None:
        tests = analyse(_options(selectors=["a, b", "c"]))
        assert [str(t.selector) for t in tests] == ["a", "b", "c"]

    def test_origin_and_importance_applied(self) -> None:
        (test,) = analyse(_options(selectors=["a"], origin=Origin.USER, important=True))
        assert test.origin is Origin.USER
        assert test.important is True

    def test_sort(self) -> None:
        tests = analyse(_options(selectors=["p", "#a", "p"], sort=True))
        assert [str(t.selector) for t in tests] == ["#a", "p", "p"]

    def test_debug_dump(self, capsys) -> None:
        analyse(_options(selectors=["a"], debug=True))
        assert "TypeSelector 'a'" in capsys.readouterr().err


class TestFormatReport:
    def test_text(self) -> None:
        tests = analyse(_options(selectors=["div.a", "#b"]))
        assert format_report(tests, "text") == "0,0,1,1\tdiv.a\n0,1,0,0\t#b\n"

    def test_json(self) -> None:
        tests = analyse(_options(selectors=["div.a"], important=True))
        rows = json.loads(format_report(tests, "json"))
        assert rows == [{"selector": "div.a", "specificity": [0, 0, 1, 1], "precedence": 1}]


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    @pytest.fixture(autouse=True)
    def _isolated(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)

    def test_success(self, capsys) -> None:
        assert main(["a > b"]) == 0
        assert capsys.readouterr().out == "0,0,0,2\ta > b\n"

    def test_selector_error_returns_1(self, capsys) -> None:
        assert main(["a >"]) == 1
        assert "error:" in capsys.readouterr().err

    def test_bad_config_returns_2(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "csscascade.toml").write_text('origin = "inline"\n')
        assert main(["a"]) == 2
        assert "error:" in capsys.readouterr().err

    def test_missing_file_returns_2(self, tmp_path: Path) -> None:
        assert main(["-f", str(tmp_path / "missing.txt")]) == 2

    def test_sorted_output(self, capsys) -> None:
        assert main(["p", ".x", "#y", "--sort"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert [line.split("\t")[1] for line in out] == ["#y", ".x", "p"]

    def test_file_input(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "rules.txt"
        path.write_text("a\nb > c\n")
        assert main(["-f", str(path)]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 2
