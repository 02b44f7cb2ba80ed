from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ConfigurationError",
    "RootNotFoundError",
    "ServerConfig",
    "get_chunk_size_from_env",
]

DEFAULT_CHUNK_SIZE = 64 * 1024


class ConfigurationError(Exception):
    """Raised when the server cannot be configured, e.g. a missing root.

    Not a ValueError, so pydantic lets it out of validators unwrapped.

    The `code` attribute gives callers a stable machine-readable reason.
    """

    code: str = "invalid_configuration"


class RootNotFoundError(ConfigurationError):
    code = "root_not_found"


class ServerConfig(BaseModel):
    """Immutable settings shared by every request.

    The root is canonicalized and must exist however the model is built.
    Nothing checks that it is a directory.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)

    @field_validator("root")
    @classmethod
    def _root_must_exist(cls, v: Path) -> Path:
        canonical = v.expanduser().resolve()
        if not canonical.exists():
            raise RootNotFoundError(f"Could not locate root directory {str(v)!r}")
        return canonical

    @classmethod
    def from_root(
        cls, root: str | os.PathLike[str], *, chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> ServerConfig:
        if chunk_size < 1:
            raise ConfigurationError("chunk_size must be positive")
        return cls(root=Path(root), chunk_size=chunk_size)

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build from STATIC_ROOT (default ".") and STREAM_CHUNK_SIZE."""
        return cls.from_root(
            os.getenv("STATIC_ROOT", "."), chunk_size=get_chunk_size_from_env()
        )


def get_chunk_size_from_env() -> int:
    """Return STREAM_CHUNK_SIZE from the environment, defaulting to 64 KiB."""
    raw = os.getenv("STREAM_CHUNK_SIZE")
    if raw is None:
        return DEFAULT_CHUNK_SIZE
    try:
        val = int(raw, 10)
    except ValueError as e:
        raise ConfigurationError("STREAM_CHUNK_SIZE must be an integer") from e
    if val < 1:
        raise ConfigurationError("STREAM_CHUNK_SIZE must be positive")
    return val
