from __future__ import annotations

from pathlib import Path

import pytest

from envdo.env import (
    EnvFileError,
    EnvResolver,
    load_merged_env,
    resolve_search_directories,
)


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_search_directories_order_and_omissions(tmp_path: Path) -> None:
    cwd = tmp_path / "cwd"
    config = tmp_path / "config"
    assert resolve_search_directories(cwd, config) == [cwd, config / "envdo"]
    assert resolve_search_directories(str(cwd), "") == [cwd]
    assert resolve_search_directories(None, str(config)) == [config / "envdo"]
    assert resolve_search_directories("", None) == []


def test_merge_prefers_working_directory(tmp_path: Path) -> None:
    cwd = tmp_path / "cwd"
    config = tmp_path / "config"
    _write(cwd / ".env", "KEY1=pwd_value\nPWD_ONLY=pwd_key\n")
    _write(config / "envdo" / ".env", "KEY1=config_value\nCONFIG_ONLY=config_key\n")

    envs = load_merged_env("", resolve_search_directories(cwd, config))
    assert envs == {
        "KEY1": "pwd_value",
        "PWD_ONLY": "pwd_key",
        "CONFIG_ONLY": "config_key",
    }


def test_merge_tolerates_missing_files(tmp_path: Path) -> None:
    dirs = resolve_search_directories(tmp_path / "a", tmp_path / "b")
    assert load_merged_env(None, dirs) == {}


def test_merge_uses_profile_file_in_every_directory(tmp_path: Path) -> None:
    cwd = tmp_path / "cwd"
    config = tmp_path / "config"
    _write(cwd / ".env", "KEY=default\n")
    _write(cwd / ".env.staging", "KEY=staging\n")
    _write(config / "envdo" / ".env", "SHARED=default\n")
    _write(config / "envdo" / ".env.staging", "SHARED=staging\n")

    envs = EnvResolver(cwd, config).load("staging")
    assert envs == {"KEY": "staging", "SHARED": "staging"}


def test_merge_only_lower_priority_file_present(tmp_path: Path) -> None:
    config = tmp_path / "config"
    _write(config / "envdo" / ".env", "ONLY=config\n")
    assert EnvResolver(tmp_path / "cwd", config).load() == {"ONLY": "config"}


def test_unreadable_env_file_aborts_resolution(tmp_path: Path) -> None:
    cwd = tmp_path / "cwd"
    config = tmp_path / "config"
    (cwd / ".env").mkdir(parents=True)
    _write(config / "envdo" / ".env", "KEY=config\n")

    with pytest.raises(EnvFileError) as excinfo:
        load_merged_env("", resolve_search_directories(cwd, config))
    assert excinfo.value.path == cwd / ".env"
    assert str(cwd / ".env") in str(excinfo.value)
    assert isinstance(excinfo.value, OSError)


def test_invalid_utf8_passes_through_as_surrogates(tmp_path: Path) -> None:
    (tmp_path / ".env").write_bytes(b"KEY=caf\xe9\nOK=1\n")
    envs = load_merged_env("", [tmp_path])
    assert envs["OK"] == "1"
    assert envs["KEY"].encode("utf-8", "surrogateescape") == b"caf\xe9"


def test_overlong_profile_filename_is_skipped(tmp_path: Path) -> None:
    _write(tmp_path / ".env", "KEY=default\n")
    assert load_merged_env("x" * 300, [tmp_path]) == {}
