from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from envdo.models import EnvFileRef

logger = logging.getLogger(__name__)

CONFIG_SUBDIR = "envdo"
DEFAULT_ENV_FILENAME = ".env"

PathLike = str | os.PathLike[str]


class EnvFileError(OSError):
    """An env file exists but could not be read."""

    def __init__(self, path: Path, reason: object) -> None:
        super().__init__(f"failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


def resolve_search_directories(
    working_directory: PathLike | None, config_root: PathLike | None
) -> list[Path]:
    """Return the directories to search, highest priority first."""
    dirs: list[Path] = []
    if working_directory:
        dirs.append(Path(working_directory))
    if config_root:
        dirs.append(Path(config_root) / CONFIG_SUBDIR)
    return dirs


def resolve_env_filename(profile: str | None) -> str:
    if not profile:
        return DEFAULT_ENV_FILENAME
    return f"{DEFAULT_ENV_FILENAME}.{profile}"


def parse_env_file(contents: str) -> dict[str, str]:
    """
    Parse ``KEY=VALUE`` lines.

    Blank lines, ``#`` comment lines and lines without ``=`` are dropped.
    One pair of matching surrounding quotes is stripped from the value.
    A repeated key keeps its last value.
    """
    envs: dict[str, str] = {}
    for raw_line in contents.split("\n"):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        envs[key.strip()] = _unquote(value.strip())
    return envs


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def load_merged_env(profile: str | None, search_directories: Sequence[PathLike]) -> dict[str, str]:
    """
    Merge the profile's env file from every search directory.

    Directories are applied lowest priority first so that higher priority
    files overwrite. Missing files are skipped; any other read failure
    raises :class:`EnvFileError` and nothing is returned.
    """
    filename = resolve_env_filename(profile)
    envs: dict[str, str] = {}
    for directory in reversed(search_directories):
        ref = EnvFileRef(directory=Path(directory), filename=filename)
        values = _read_env_file(ref)
        if values is None:
            continue
        envs.update(values)
    return envs


def _read_env_file(ref: EnvFileRef) -> dict[str, str] | None:
    path = ref.path
    try:
        path.stat()
    except OSError as exc:
        logger.debug("env file not available, skipping: %s (%s)", path, exc)
        return None
    try:
        # Undecodable bytes survive as surrogates and round-trip to the child.
        with path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            contents = handle.read()
    except FileNotFoundError:
        logger.debug("env file vanished before read, skipping: %s", path)
        return None
    except OSError as exc:
        raise EnvFileError(path, exc) from exc
    values = parse_env_file(contents)
    logger.debug("loaded %d variable(s) from %s", len(values), path)
    return values


class EnvResolver:
    def __init__(self, working_directory: PathLike | None, config_root: PathLike | None) -> None:
        self.working_directory = working_directory
        self.config_root = config_root

    def search_directories(self) -> list[Path]:
        return resolve_search_directories(self.working_directory, self.config_root)

    def load(self, profile: str | None = None) -> dict[str, str]:
        return load_merged_env(profile, self.search_directories())
