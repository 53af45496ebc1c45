"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from intentc.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def write_intent(tmp_path: Path):
    """Write a named .intent file into tmp_path."""

    def _write(content: str, name: str = "app.intent") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


NO_PRIMARY = "entity Log:\n    message: string\n"


class TestVersion:
    def test_version_flag(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("intentc ")
        assert "Python" in result.output


class TestCheckCommand:
    """Tests for `intentc check`."""

    def test_valid_file(self, cli_runner, shop_file):
        result = cli_runner.invoke(app, ["check", str(shop_file)])

        assert result.exit_code == 0, result.output
        assert f"OK: {shop_file} is valid (3 entities, 8 actions, 1 rules)" in result.output

    def test_validation_errors(self, cli_runner, write_intent):
        path = write_intent("entity A:\n    id: uuid @primary\n    x: Ghost\n    y: Phantom\n")
        result = cli_runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert f"Validation failed: {path}" in result.output
        assert "Unknown entity reference: Ghost" in result.output
        assert "Unknown entity reference: Phantom" in result.output
        assert "OK:" not in result.output

    def test_parse_error(self, cli_runner, write_intent):
        path = write_intent("entity A:\n    id uuid\n")
        result = cli_runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert f"Parse error: {path}" in result.output
        assert "Expected ':'" in result.output

    def test_missing_file(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["check", str(tmp_path / "nope.intent")])
        assert result.exit_code == 1
        assert "file not found" in result.output

    def test_non_utf8_file(self, cli_runner, tmp_path):
        path = tmp_path / "latin1.intent"
        path.write_bytes("entity Caf\xe9:\n    id: uuid @primary\n".encode("latin-1"))
        result = cli_runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "is not valid UTF-8" in result.output

    def test_warnings_are_printed(self, cli_runner, write_intent):
        path = write_intent(NO_PRIMARY)
        result = cli_runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 0
        assert "warning: Entity 'Log' has no @primary field" in result.output
        assert "OK:" in result.output

    def test_strict_fails_on_warnings(self, cli_runner, write_intent):
        path = write_intent(NO_PRIMARY)
        result = cli_runner.invoke(app, ["check", str(path), "--strict"])

        assert result.exit_code == 1
        assert "1 warning(s) treated as errors" in result.output

    def test_vscode_format(self, cli_runner, write_intent):
        path = write_intent("entity A:\n    id: uuid @primary\n    x: Ghost\n")
        result = cli_runner.invoke(app, ["check", str(path), "--format", "vscode"])

        assert result.exit_code == 1
        assert f"{path}:3:5: error: Unknown entity reference: Ghost" in result.output

    def test_vscode_warning(self, cli_runner, write_intent):
        path = write_intent(NO_PRIMARY)
        result = cli_runner.invoke(app, ["check", str(path), "-f", "vscode"])

        assert result.exit_code == 0
        assert f"{path}:1:1: warning: Entity 'Log' has no @primary field" in result.output
        assert "OK:" not in result.output


class TestCheckWithManifest:
    """`intentc check` driven by intent.toml."""

    def test_uses_manifest_entry(self, cli_runner, tmp_path, monkeypatch, shop_source):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "shop.intent").write_text(shop_source, encoding="utf-8")
        (tmp_path / "intent.toml").write_text(
            '[project]\nname = "shop"\nentry = "src/shop.intent"\n', encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(app, ["check"])

        assert result.exit_code == 0, result.output
        assert "shop.intent is valid" in result.output

    def test_manifest_warnings_as_errors(self, cli_runner, tmp_path, monkeypatch):
        (tmp_path / "app.intent").write_text(NO_PRIMARY, encoding="utf-8")
        (tmp_path / "intent.toml").write_text(
            "[validation]\nwarnings_as_errors = true\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(app, ["check"])
        assert result.exit_code == 1

    def test_no_file_and_no_manifest(self, cli_runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(app, ["check"])

        assert result.exit_code == 2
        assert "no intent.toml found" in result.output


class TestParseCommand:
    """Tests for `intentc parse`."""

    def test_prints_ast_json(self, cli_runner, shop_file):
        result = cli_runner.invoke(app, ["parse", str(shop_file)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [e["name"] for e in data["entities"]] == ["User", "Order", "OrderItem"]
        assert data["auth_entity"] == "User"
        assert len(data["actions"]) == 1
        assert data["entities"][0]["fields"][0]["field_type"] == {"kind": "uuid"}

    def test_preprocess_adds_auth_actions(self, cli_runner, shop_file):
        result = cli_runner.invoke(app, ["parse", str(shop_file), "--preprocess"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["actions"]) == 8

    def test_parse_error(self, cli_runner, write_intent):
        path = write_intent("entity A\n")
        result = cli_runner.invoke(app, ["parse", str(path)])

        assert result.exit_code == 1
        assert "Parse error" in result.output

    def test_non_utf8_file(self, cli_runner, tmp_path):
        path = tmp_path / "binary.intent"
        path.write_bytes(b"\xff\xfe\x00entity")
        result = cli_runner.invoke(app, ["parse", str(path)])

        assert result.exit_code == 1
        assert "is not valid UTF-8" in result.output
