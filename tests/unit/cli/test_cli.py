from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from devserve import __version__
from devserve.cli._dispatcher import build_parser, discover_root_commands, main
from devserve.cli.commands.serve import build_overrides, parse_header


def test_serve_and_config_show_are_discovered() -> None:
    assert "serve" in discover_root_commands()
    parser = build_parser()
    args = parser.parse_args(["config", "show", "--format", "json"])
    assert args.domain == "config"
    assert args.command == "show"


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "usage: devserve" in capsys.readouterr().out


def test_parse_header() -> None:
    assert parse_header("Access-Control-Allow-Origin: *") == ("Access-Control-Allow-Origin", "*")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_header("no-separator")


def test_build_overrides_from_serve_flags() -> None:
    args = build_parser().parse_args(
        [
            "serve",
            "dist",
            "static",
            "--port",
            "4000",
            "--fallback",
            "--header",
            "X-Dev: 1",
            "--quiet",
            "--strict-ranges",
        ]
    )
    overrides = build_overrides(args)
    assert overrides["content_base"] == ["dist", "static"]
    assert overrides["port"] == 4000
    assert overrides["history_api_fallback"] is True
    assert overrides["headers"] == {"X-Dev": "1"}
    assert overrides["verbose"] is False
    assert overrides["strict_ranges"] is True
    assert overrides["host"] is None
    assert "https" not in overrides


def test_build_overrides_defaults_are_unset() -> None:
    overrides = build_overrides(build_parser().parse_args(["serve"]))
    assert all(value is None for value in overrides.values())


def test_build_overrides_fallback_path_and_tls() -> None:
    args = build_parser().parse_args(
        ["serve", "--fallback", "/app.html", "--cert", "c.pem", "--key", "k.pem"]
    )
    overrides = build_overrides(args)
    assert overrides["history_api_fallback"] == "/app.html"
    assert overrides["https"] == {"cert": "c.pem", "key": "k.pem", "ca": None}


def test_config_show_json(tmp_path: Path, monkeypatch, capsys) -> None:
    (tmp_path / "devserve.yaml").write_text("port: 8123\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert main(["config", "show", "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["port"] == 8123
    assert data["host"] == "localhost"


def test_config_show_single_key(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["config", "show", "logging.level"]) == 0
    assert capsys.readouterr().out.strip() == "logging.level: WARNING"


def test_config_show_missing_key(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["config", "show", "no.such.key"]) == 1
    assert "Key not found" in capsys.readouterr().out


def test_config_show_reports_invalid_config(tmp_path: Path, monkeypatch, capsys) -> None:
    (tmp_path / "devserve.yaml").write_text("port: not-a-port\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert main(["config", "show", "--json"]) == 1
    payload = json.loads(capsys.readouterr().err)
    assert payload["error"] == "config_error"


def test_serve_reports_config_errors(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["serve", "--config", "missing.yaml"]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_serve_builds_config_from_layers(tmp_path: Path, monkeypatch) -> None:
    from devserve.cli.commands import serve as serve_command

    (tmp_path / "devserve.yaml").write_text("port: 8123\nlogging:\n  level: ERROR\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    started = []
    monkeypatch.setattr(serve_command, "run", started.append)

    assert main(["serve", "dist", "static", "--fallback", "--quiet"]) == 0

    (config,) = started
    assert config.content_base == ("dist", "static")
    assert config.port == 8123
    assert config.fallback_path == "/index.html"
    assert config.verbose is False
