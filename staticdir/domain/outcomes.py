from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, TypeAlias

__all__ = [
    "FileMetadata",
    "IndexLookup",
    "InternalError",
    "NotFound",
    "OutcomeKind",
    "Redirect",
    "ResponseOutcome",
    "StreamFile",
]


class OutcomeKind(str, Enum):
    not_found = "not_found"
    redirect = "redirect"
    stream_file = "stream_file"
    internal_error = "internal_error"


@dataclass(frozen=True)
class FileMetadata:
    """What one stat() told us about a path. Not cached."""

    is_file: bool
    size: int

    @classmethod
    def from_stat(cls, st: os.stat_result) -> FileMetadata:
        return cls(is_file=stat.S_ISREG(st.st_mode), size=st.st_size)


@dataclass(frozen=True)
class NotFound:
    kind: ClassVar[OutcomeKind] = OutcomeKind.not_found


@dataclass(frozen=True)
class Redirect:
    """Directory requested without a trailing slash."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.redirect
    location: str


@dataclass(frozen=True)
class StreamFile:
    """A regular file to stream; `metadata.size` becomes Content-Length."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.stream_file
    path: Path
    metadata: FileMetadata
    media_type: str


@dataclass(frozen=True)
class InternalError:
    """Filesystem failure other than "does not exist".

    `detail` is for logs only and never reaches the response body.
    """

    kind: ClassVar[OutcomeKind] = OutcomeKind.internal_error
    detail: str = ""


@dataclass(frozen=True)
class IndexLookup:
    """Non-terminal: resolve `request_path` (the index file) next."""

    request_path: str


ResponseOutcome: TypeAlias = NotFound | Redirect | StreamFile | InternalError
