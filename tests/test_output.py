"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- JSON, YAML, plain and rich renderers
- format_document for nested model dumps
- print_table in every mode
- Output file redirection
- Global instance management
"""

from __future__ import annotations

import json

import pytest
import yaml

from oasmodel import output as output_module
from oasmodel.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("oasmodel.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("oasmodel.output._is_tty", lambda: True)


NESTED = {
    "openapi_version": "3.0.0",
    "operations": [{"method": "get", "path": "/pets", "tags": ["pets"]}],
}


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty):
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_yaml_stays_yaml(self, tty):
        mgr = OutputManager(format=OutputFormat.YAML)
        assert mgr.format == OutputFormat.YAML


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_disables_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout / stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Test that data goes to stdout and diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("diagnostic text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "diagnostic text" in captured.err

    def test_error_prefix_in_no_color(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.error("something broke")
        assert capfd.readouterr().err.startswith("Error: something broke")


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_and_success(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_warning_and_error(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.warning("careful")
        mgr.error("broken")
        err = capfd.readouterr().err
        assert "careful" in err
        assert "broken" in err

    def test_debug_hidden_by_default(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.debug("secret")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("details")
        assert "[debug] details" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# format_response
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response({"title": "Petstore", "operations": 5})
        assert json.loads(capfd.readouterr().out) == {"title": "Petstore", "operations": 5}

    def test_yaml(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.YAML, no_color=True)
        mgr.format_response({"title": "Petstore", "servers": ["/"]})
        assert yaml.safe_load(capfd.readouterr().out) == {"title": "Petstore", "servers": ["/"]}

    def test_plain_dict_as_key_value(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"title": "Petstore", "operations": 5})
        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["title\tPetstore", "operations\t5"]

    def test_plain_list_of_dicts_as_rows(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response([{"a": 1, "b": 2}, {"a": 3, "b": 4}])
        assert capfd.readouterr().out.strip().split("\n") == ["1\t2", "3\t4"]

    def test_rich_produces_output(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.format_response({"title": "Petstore"})
        out = capfd.readouterr().out
        assert "title" in out
        assert "Petstore" in out

    def test_unicode_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response({"title": "Café"})
        assert "Café" in capfd.readouterr().out


# ------------------------------------------------------------------ #
# format_document
# ------------------------------------------------------------------ #


class TestFormatDocument:
    def test_json_mode_prints_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_document(NESTED)
        assert json.loads(capfd.readouterr().out) == NESTED

    @pytest.mark.parametrize("fmt", [OutputFormat.YAML, OutputFormat.PLAIN])
    def test_other_modes_print_yaml(self, capfd, non_tty, fmt):
        mgr = OutputManager(format=fmt, no_color=True)
        mgr.format_document(NESTED)
        out = capfd.readouterr().out
        assert out.startswith("openapi_version: 3.0.0")
        assert yaml.safe_load(out) == NESTED

    def test_yaml_keeps_key_order(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.YAML, no_color=True)
        mgr.format_document({"z": 1, "a": 2})
        assert capfd.readouterr().out.strip().splitlines() == ["z: 1", "a: 2"]

    def test_rich_mode_produces_yaml_text(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.format_document(NESTED)
        out = capfd.readouterr().out
        assert "openapi_version" in out
        assert "/pets" in out


# ------------------------------------------------------------------ #
# print_table
# ------------------------------------------------------------------ #


class TestPrintTable:
    """Test print_table in every output mode."""

    def test_table_json_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["Method", "Path"], [["GET", "/pets"], ["POST", "/pets"]])
        parsed = json.loads(capfd.readouterr().out)
        assert parsed == [
            {"Method": "GET", "Path": "/pets"},
            {"Method": "POST", "Path": "/pets"},
        ]

    def test_table_yaml_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.YAML, no_color=True)
        mgr.print_table(["Method"], [["GET"]])
        assert yaml.safe_load(capfd.readouterr().out) == [{"Method": "GET"}]

    def test_table_plain_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["id", "name"], [["1", "Alice"]], title="ignored")
        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["id\tname", "1\tAlice"]

    def test_table_rich_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(["id", "name"], [["1", "Alice"]], title="Users")
        out = capfd.readouterr().out
        assert "Alice" in out
        assert "Users" in out

    def test_table_empty_rows(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["col1"], [])
        assert json.loads(capfd.readouterr().out) == []


# ------------------------------------------------------------------ #
# Output file redirection
# ------------------------------------------------------------------ #


class TestOutputFile:
    """Test -o / --output file redirection."""

    def test_json_document_written_to_file(self, tmp_path, capfd, non_tty):
        outfile = tmp_path / "model.json"
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True, output_file=str(outfile))
        mgr.format_document(NESTED)
        assert capfd.readouterr().out == ""
        assert json.loads(outfile.read_text(encoding="utf-8")) == NESTED

    def test_yaml_document_written_to_file(self, tmp_path, capfd, non_tty):
        outfile = tmp_path / "model.yaml"
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True, output_file=str(outfile))
        mgr.format_document(NESTED)
        assert capfd.readouterr().out == ""
        assert yaml.safe_load(outfile.read_text(encoding="utf-8")) == NESTED

    def test_print_data_appends_to_file(self, tmp_path, capfd, non_tty):
        outfile = tmp_path / "out.txt"
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, output_file=str(outfile))
        mgr.print_data("line one")
        mgr.print_data("line two")
        assert capfd.readouterr().out == ""
        assert outfile.read_text(encoding="utf-8") == "line one\nline two\n"


# ------------------------------------------------------------------ #
# Global instance management
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self, non_tty):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr

    def test_reset_output_clears_instance(self, non_tty):
        set_output(OutputManager(format=OutputFormat.JSON))
        reset_output()
        assert output_module._output is None

    def test_convenience_functions_use_global(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        output_module.format_response({"ok": True})
        output_module.warning("careful")
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"ok": True}
        assert "careful" in captured.err
