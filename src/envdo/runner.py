from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


class CommandNotFoundError(RuntimeError):
    def __init__(self, command: str) -> None:
        super().__init__(f"command not found: {command}")
        self.command = command


def format_exports(envs: Mapping[str, str]) -> str:
    return "".join(f"export {key}={envs[key]}\n" for key in sorted(envs))


def build_child_env(
    envs: Mapping[str, str], base: Mapping[str, str] | None = None
) -> dict[str, str]:
    child_env = dict(os.environ if base is None else base)
    child_env.update(envs)
    return child_env


def run_command(command: Sequence[str], envs: Mapping[str, str]) -> int:
    """Run ``command`` with ``envs`` layered over the inherited environment.

    Stdio is inherited. Returns the exit status, mapping death by signal N
    to ``128 + N`` the way shells report it.
    """
    if not command:
        raise ValueError("command is empty")
    argv = list(command)
    logger.debug("running %s with %d resolved variable(s)", argv[0], len(envs))
    try:
        result = subprocess.run(argv, env=build_child_env(envs), check=False)
    except FileNotFoundError as exc:
        raise CommandNotFoundError(argv[0]) from exc
    if result.returncode < 0:
        return 128 + (-result.returncode)
    return result.returncode
