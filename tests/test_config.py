"""Tests for ServerConfig construction and environment settings."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from staticdir.domain.config import (
    DEFAULT_CHUNK_SIZE,
    ConfigurationError,
    RootNotFoundError,
    ServerConfig,
    get_chunk_size_from_env,
)


def test_from_root_canonicalizes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "site").mkdir()
    monkeypatch.chdir(tmp_path)

    cfg = ServerConfig.from_root("./site/../site")

    assert cfg.root == (tmp_path / "site").resolve()
    assert cfg.root.is_absolute()
    assert cfg.chunk_size == DEFAULT_CHUNK_SIZE


def test_missing_root_fails_fast(tmp_path: Path) -> None:
    missing = tmp_path / "nope"

    with pytest.raises(ConfigurationError) as exc:
        ServerConfig.from_root(missing)

    assert isinstance(exc.value, RootNotFoundError)
    assert exc.value.code == "root_not_found"
    assert "Could not locate root directory" in str(exc.value)
    assert str(missing) in str(exc.value)


def test_regular_file_root_is_accepted(tmp_path: Path) -> None:
    f = tmp_path / "file.txt"
    f.write_text("x")

    assert ServerConfig.from_root(f).root == f.resolve()


def test_config_is_immutable(tmp_path: Path) -> None:
    cfg = ServerConfig.from_root(tmp_path)

    with pytest.raises(ValidationError):
        cfg.root = Path("/")  # type: ignore[misc]


def test_non_positive_chunk_size_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        ServerConfig.from_root(tmp_path, chunk_size=0)


def test_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATIC_ROOT", str(tmp_path))
    monkeypatch.setenv("STREAM_CHUNK_SIZE", "4096")

    cfg = ServerConfig.from_env()

    assert cfg.root == tmp_path.resolve()
    assert cfg.chunk_size == 4096


def test_from_env_missing_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STATIC_ROOT", str(tmp_path / "gone"))

    with pytest.raises(RootNotFoundError):
        ServerConfig.from_env()


@pytest.mark.parametrize("raw", ["abc", "1.5", "0", "-3"])
def test_bad_chunk_size_env(raw: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STREAM_CHUNK_SIZE", raw)

    with pytest.raises(ConfigurationError):
        get_chunk_size_from_env()


def test_chunk_size_env_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STREAM_CHUNK_SIZE", raising=False)

    assert get_chunk_size_from_env() == DEFAULT_CHUNK_SIZE


def test_direct_construction_checks_root(tmp_path: Path) -> None:
    with pytest.raises(RootNotFoundError):
        ServerConfig(root=tmp_path / "nope")


def test_direct_construction_canonicalizes(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "site").mkdir()
    monkeypatch.chdir(tmp_path)

    cfg = ServerConfig(root=Path("site"))

    assert cfg.root == (tmp_path / "site").resolve()
    assert ServerConfig.model_validate({"root": "site"}) == cfg
