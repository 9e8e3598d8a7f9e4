# src/pinstore/cli.py
"""pinstore Command Line Interface.

Entry point for the pinstore CLI tool.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import typer
from pydantic import ValidationError

from pinstore import __version__
from pinstore.core.config import ServiceSettings, ignored_legacy_env, load_settings

__all__ = ["app"]

logger = structlog.get_logger(__name__)

app = typer.Typer(
    name="pinstore",
    help="pinstore: content-addressed storage over IPFS pinning services.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pinstore version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(f"Error: .env file not found: {env_file}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
) -> None:
    """pinstore: content-addressed storage over IPFS pinning services."""
    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho("Warning: --env-file ignored because --no-dotenv is set.", fg=typer.colors.YELLOW, err=True)


def _load_settings_or_exit(config: Path | None) -> ServiceSettings:
    try:
        return load_settings(config)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {config}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


@app.command()
def serve(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to settings file (YAML or TOML). PINSTORE_* env vars override it.",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="gRPC listen port (overrides settings).",
    ),
    json_logs: bool | None = typer.Option(
        None,
        "--json-logs/--console-logs",
        help="Structured JSON logs or human-readable console logs (overrides settings).",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR (overrides settings).",
    ),
) -> None:
    """Run the gRPC storage service until SIGINT/SIGTERM.

    Settings come from PINSTORE_* environment variables over the optional
    settings file. Unprefixed names from older deployments are not read:
    BLOCKFROST_IPFS_PROJECT_ID -> PINSTORE_BLOCKFROST_PROJECT_ID,
    GRPC_PORT -> PINSTORE_GRPC_PORT, IPFS_GATEWAY_URL -> PINSTORE_GATEWAY_URL.
    Without a project id the service runs in mock mode (memory only).
    """
    from pinstore.core.logging import configure_logging
    from pinstore.rpc.server import serve as run_server

    settings = _load_settings_or_exit(config)

    overrides: dict[str, object] = {}
    if port is not None:
        overrides["grpc_port"] = port
    if json_logs is not None:
        overrides["log_json"] = json_logs
    if log_level is not None:
        overrides["log_level"] = log_level
    if overrides:
        # CLI overrides get the same validation as file/env values
        try:
            settings = ServiceSettings(**{**settings.model_dump(), **overrides})
        except ValidationError as e:
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                typer.echo(f"Error: {loc}: {error['msg']}", err=True)
            raise typer.Exit(1) from None

    configure_logging(json_output=settings.log_json, level=settings.log_level)
    for legacy, replacement in ignored_legacy_env().items():
        logger.warning(
            "Ignoring legacy environment variable",
            variable=legacy,
            use_instead=replacement,
        )
    run_server(settings)


@app.command()
def cid(
    path: str = typer.Argument(..., help="File to hash, or '-' to read stdin."),
) -> None:
    """Print the CIDv0 a payload would be stored under, without uploading it."""
    from pinstore.core.cid import compute_cid

    if path == "-":
        data = typer.get_binary_stream("stdin").read()
    else:
        file_path = Path(path)
        if not file_path.is_file():
            typer.echo(f"Error: File not found: {path}", err=True)
            raise typer.Exit(1)
        data = file_path.read_bytes()

    typer.echo(compute_cid(data))


if __name__ == "__main__":
    app()
