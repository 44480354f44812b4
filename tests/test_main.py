"""Tests for actiongate.__main__ — CLI parsing and entrypoint."""

from __future__ import annotations

import logging
import textwrap

import pytest

from actiongate.__main__ import list_actions, main, parse_args

# ---------------------------------------------------------------------------
# parse_args tests
# ---------------------------------------------------------------------------


class TestParseArgs:
    def test_defaults_to_serve(self):
        args = parse_args([])
        assert args.command == "serve"
        assert args.config == "config.yaml"
        assert args.host is None
        assert args.port is None

    def test_flags_without_subcommand(self):
        args = parse_args(["--config", "c.yaml", "--port", "9001"])
        assert args.command == "serve"
        assert args.config == "c.yaml"
        assert args.port == 9001

    def test_explicit_serve(self):
        args = parse_args(["serve", "--host", "0.0.0.0"])
        assert args.command == "serve"
        assert args.host == "0.0.0.0"

    def test_actions_subcommand(self):
        args = parse_args(["actions", "--config", "other.yaml"])
        assert args.command == "actions"
        assert args.config == "other.yaml"


# ---------------------------------------------------------------------------
# actions subcommand
# ---------------------------------------------------------------------------


@pytest.fixture()
def config_path(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text(textwrap.dedent("""\
        public_actions: [ping]
        actions:
          echo: "sample_actions:Echo"
    """))
    return str(p)


class TestListActions:
    def test_prints_public_and_partner_actions(self, config_path, capsys):
        assert list_actions(parse_args(["actions", "--config", config_path])) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["echo\tpartner", "ping\tpublic"]

    def test_main_exits_zero(self, config_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["actions", "--config", config_path])
        assert exc_info.value.code == 0


class TestMainConfigErrors:
    def test_missing_config_exits_1(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR, logger="actiongate"):
            with pytest.raises(SystemExit) as exc_info:
                main(["actions", "--config", str(tmp_path / "missing.yaml")])
        assert exc_info.value.code == 1
        assert "Configuration error" in caplog.text

    def test_bad_handler_exits_1(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text('actions:\n  x: "no_such_module_xyz:Thing"\n')
        with pytest.raises(SystemExit) as exc_info:
            main(["actions", "--config", str(p)])
        assert exc_info.value.code == 1

    def test_serve_with_missing_config_exits_1(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.yaml")])
        assert exc_info.value.code == 1
