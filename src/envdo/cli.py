from __future__ import annotations

import logging
import sys

import typer

from envdo.config import LOG_LEVELS, build_run_config
from envdo.env import EnvFileError, load_merged_env
from envdo.runner import CommandNotFoundError, format_exports, run_command
from envdo.version import __version__

app = typer.Typer(
    add_completion=False,
    help=(
        "Execute commands with environment variables from .env files.\n\n"
        "Searches the current directory and $XDG_CONFIG_HOME/envdo; current "
        "directory values take priority. Without a command, prints the "
        "merged variables as export lines."
    ),
    pretty_exceptions_show_locals=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"envdo {__version__}")
        raise typer.Exit()


def _configure_logging(log_level: str) -> None:
    level = log_level.strip().lower()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"`--log-level` must be one of: {', '.join(LOG_LEVELS)}.")
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


@app.command(
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
)
def run(
    command: list[str] = typer.Argument(None, help="Command and arguments to execute"),
    profile: str = typer.Option(
        None, "--profile", "-p", envvar="ENVDO_PROFILE", help="Profile name (.env.<profile>)"
    ),
    log_level: str = typer.Option("warning", "--log-level"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    _configure_logging(log_level)
    cfg = build_run_config(profile=profile, command=command, log_level=log_level)

    try:
        envs = load_merged_env(cfg.profile, cfg.search_directories())
    except EnvFileError as exc:
        typer.echo(f"Error: failed to load environment variables: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not cfg.has_command:
        typer.echo(format_exports(envs).encode("utf-8", "surrogateescape"), nl=False)
        return

    try:
        code = run_command(cfg.command, envs)
    except (CommandNotFoundError, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if code != 0:
        raise typer.Exit(code=code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
