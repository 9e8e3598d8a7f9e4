"""Tests for the pinstore CLI."""

import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pinstore.core.config import ServiceSettings

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("PINSTORE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def served(monkeypatch: pytest.MonkeyPatch) -> list[ServiceSettings]:
    """Replace the blocking server loop with a recorder."""
    calls: list[ServiceSettings] = []
    monkeypatch.setattr("pinstore.rpc.server.serve", calls.append)
    return calls


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_version_flag(self) -> None:
        """--version shows version info."""
        from pinstore import __version__
        from pinstore.cli import app

        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"pinstore version {__version__}" in result.stdout

    def test_help_flag(self) -> None:
        """--help shows available commands."""
        from pinstore.cli import app

        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "serve" in result.stdout
        assert "cid" in result.stdout

    def test_missing_env_file_is_an_error(self, tmp_path: Path) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["--env-file", str(tmp_path / "missing.env"), "cid", "-"], input=b"x")
        assert result.exit_code == 1
        assert ".env file not found" in result.output


class TestCidCommand:
    def test_cid_of_file(self, tmp_path: Path) -> None:
        from pinstore.cli import app

        payload = tmp_path / "hello.txt"
        payload.write_bytes(b"hello world")

        result = runner.invoke(app, ["--no-dotenv", "cid", str(payload)])

        assert result.exit_code == 0
        assert result.stdout.strip() == "QmaozNR7DZHQK1ZcU9p7QdrshMvXqWK6gpu5rmrkPdT3L4"

    def test_cid_of_stdin(self) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["--no-dotenv", "cid", "-"], input=b"abc")

        assert result.exit_code == 0
        assert result.stdout.strip() == "QmatYkNGZnELf8cAGdyJpUca2PyY4szai3RHyyWofNY1pY"

    def test_cid_missing_file(self, tmp_path: Path) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["--no-dotenv", "cid", str(tmp_path / "nope.bin")])

        assert result.exit_code == 1
        assert "File not found" in result.output


class TestServeCommand:
    def test_serve_uses_loaded_settings(self, served: list[ServiceSettings]) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["--no-dotenv", "serve"])

        assert result.exit_code == 0, result.output
        assert served == [ServiceSettings()]

    def test_serve_cli_overrides(self, tmp_path: Path, served: list[ServiceSettings]) -> None:
        from pinstore.cli import app

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("grpc_port: 9200\nblockfrost_project_id: ipfsAbc\n")

        result = runner.invoke(
            app,
            ["--no-dotenv", "serve", "-c", str(config_file), "--port", "9500", "--json-logs", "--log-level", "debug"],
        )

        assert result.exit_code == 0, result.output
        (settings,) = served
        assert settings.grpc_port == 9500
        assert settings.blockfrost_project_id == "ipfsAbc"
        assert settings.log_json is True
        assert settings.log_level == "DEBUG"

    def test_serve_env_file(self, tmp_path: Path, served: list[ServiceSettings], monkeypatch: pytest.MonkeyPatch) -> None:
        from pinstore.cli import app

        env_file = tmp_path / ".env"
        env_file.write_text("PINSTORE_GRPC_PORT=9600\n")
        # load_dotenv writes into os.environ; let monkeypatch restore it
        monkeypatch.setenv("PINSTORE_GRPC_PORT", "")
        monkeypatch.delenv("PINSTORE_GRPC_PORT")

        result = runner.invoke(app, ["--env-file", str(env_file), "serve"])

        assert result.exit_code == 0, result.output
        assert served[0].grpc_port == 9600

    def test_serve_missing_config(self, tmp_path: Path, served: list[ServiceSettings]) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["--no-dotenv", "serve", "-c", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Settings file not found" in result.output
        assert served == []

    def test_serve_invalid_config(self, tmp_path: Path, served: list[ServiceSettings]) -> None:
        from pinstore.cli import app

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("max_workers: 0\n")

        result = runner.invoke(app, ["--no-dotenv", "serve", "-c", str(config_file)])

        assert result.exit_code == 1
        assert "max_workers" in result.output
        assert served == []

    def test_serve_invalid_override(self, served: list[ServiceSettings]) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["--no-dotenv", "serve", "--port", "70000"])

        assert result.exit_code == 1
        assert "grpc_port" in result.output
        assert served == []


class TestLegacyEnvironment:
    def test_serve_warns_about_legacy_project_id(self, served: list[ServiceSettings], monkeypatch: pytest.MonkeyPatch) -> None:
        from pinstore.cli import app

        monkeypatch.setenv("BLOCKFROST_IPFS_PROJECT_ID", "ipfsOld")

        result = runner.invoke(app, ["--no-dotenv", "serve", "--console-logs"])

        assert result.exit_code == 0, result.output
        assert "BLOCKFROST_IPFS_PROJECT_ID" in result.output
        assert "PINSTORE_BLOCKFROST_PROJECT_ID" in result.output
        assert "ipfsOld" not in result.output
        assert served[0].use_remote_backend is False

    def test_serve_help_documents_variable_names(self) -> None:
        from pinstore.cli import app

        result = runner.invoke(app, ["serve", "--help"])

        assert result.exit_code == 0
        assert "PINSTORE_BLOCKFROST_PROJECT_ID" in result.stdout
