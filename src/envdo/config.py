from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from envdo.env import EnvResolver, resolve_search_directories

LOG_LEVELS = ("debug", "info", "warning", "error")


def resolve_working_directory() -> Path | None:
    try:
        return Path.cwd()
    except OSError:
        return None


def resolve_config_root(
    environ: Mapping[str, str] | None = None, home: Path | None = None
) -> Path | None:
    env = os.environ if environ is None else environ
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            return None
    return home / ".config"


@dataclass(slots=True)
class RunConfig:
    profile: str = ""
    working_directory: Path | None = None
    config_root: Path | None = None
    log_level: str = "warning"  # debug|info|warning|error
    command: list[str] = field(default_factory=list)

    @property
    def has_command(self) -> bool:
        return bool(self.command)

    def search_directories(self) -> list[Path]:
        return resolve_search_directories(self.working_directory, self.config_root)


def build_run_config(
    *,
    profile: str | None,
    command: list[str] | None,
    log_level: str = "warning",
    environ: Mapping[str, str] | None = None,
) -> RunConfig:
    return RunConfig(
        profile=profile or "",
        working_directory=resolve_working_directory(),
        config_root=resolve_config_root(environ),
        log_level=log_level,
        command=list(command or []),
    )


def load_env_files(profile: str | None = None) -> dict[str, str]:
    """Resolve env files against the current directory and the user config root."""
    resolver = EnvResolver(resolve_working_directory(), resolve_config_root())
    return resolver.load(profile)
