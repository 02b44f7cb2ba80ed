from __future__ import annotations

import errno
import mimetypes
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from ..domain.config import ServerConfig
from ..domain.outcomes import (
    FileMetadata,
    IndexLookup,
    InternalError,
    NotFound,
    Redirect,
    ResponseOutcome,
    StreamFile,
)
from ..domain.paths import resolve_request_path
from ..logging_conf import get_logger

logger = get_logger("service.static")

INDEX_FILE = "index.html"
DEFAULT_MEDIA_TYPE = "application/octet-stream"

# The request itself, its index file, and one more hop for a directory named
# like the index file.
MAX_RESOLUTION_STEPS = 3

# stat() errors that mean "nothing there" rather than a broken filesystem.
_MISSING_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG})


def guess_media_type(path: Path) -> str:
    """Return the MIME type for `path` by extension, or octet-stream."""
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type or DEFAULT_MEDIA_TYPE


async def read_metadata(path: Path) -> FileMetadata | None:
    """Stat `path` without blocking the loop.

    Returns None when the entry does not exist. Other OSErrors propagate.
    """
    try:
        st = await aiofiles.os.stat(path)
    except ValueError:
        # Embedded NUL byte: no such file can exist.
        return None
    except OSError as e:
        if e.errno in _MISSING_ERRNOS:
            return None
        raise
    return FileMetadata.from_stat(st)


def decide(
    resolved: Path, metadata: FileMetadata | None, request_path: str
) -> ResponseOutcome | IndexLookup:
    """Map one stat result to the next step.

    - no entry            -> NotFound
    - non-file, no "/"    -> Redirect to request_path + "/"
    - non-file, with "/"  -> IndexLookup(request_path + "index.html")
    - regular file        -> StreamFile
    """
    if metadata is None:
        return NotFound()

    if not metadata.is_file:
        if not request_path.endswith("/"):
            return Redirect(location=request_path + "/")
        return IndexLookup(request_path=request_path + INDEX_FILE)

    return StreamFile(path=resolved, metadata=metadata, media_type=guess_media_type(resolved))


async def resolve_outcome(config: ServerConfig, request_path: str) -> ResponseOutcome:
    """Resolve a raw request path to a terminal outcome.

    Runs resolve -> stat -> decide, re-entering with the index file when a
    directory is requested with a trailing slash. Never raises for
    filesystem failures; those become InternalError.
    """
    current = request_path
    for _ in range(MAX_RESOLUTION_STEPS):
        resolved = resolve_request_path(config.root, current)
        try:
            metadata = await read_metadata(resolved)
        except OSError as e:
            logger.exception(
                "static.error",
                extra={"event": "static_error", "path": request_path, "stage": "stat"},
            )
            return InternalError(detail=f"stat {resolved}: {e}")

        step = decide(resolved, metadata, current)
        if isinstance(step, IndexLookup):
            current = step.request_path
            continue
        return step

    logger.warning(
        "static.hops_exhausted",
        extra={"event": "static_hops_exhausted", "path": request_path},
    )
    return NotFound()


class FileStream:
    """Lazy, single-pass byte stream over an opened file.

    Iterating yields chunks of at most `chunk_size` bytes and closes the file
    at EOF or when the consumer stops early. `aclose()` may be called again
    afterwards (the response also calls it once sending is done) and only the
    first call closes the handle.
    """

    def __init__(self, handle: Any, chunk_size: int) -> None:
        self._handle = handle
        self._chunk_size = chunk_size
        self._consumed = False
        self._closed = False

    @classmethod
    async def open(cls, path: Path, chunk_size: int) -> FileStream:
        """Open `path` for reading. OSErrors propagate to the caller."""
        handle = await aiofiles.open(path, mode="rb", buffering=chunk_size)
        return cls(handle, chunk_size)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise RuntimeError("FileStream can only be iterated once")
        self._consumed = True
        try:
            while chunk := await self._handle.read(self._chunk_size):
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._handle.close()


async def open_stream(config: ServerConfig, outcome: StreamFile) -> FileStream | InternalError:
    """Open the file behind a StreamFile outcome, or report why we couldn't."""
    try:
        stream = await FileStream.open(outcome.path, config.chunk_size)
    except OSError as e:
        logger.exception(
            "static.error",
            extra={"event": "static_error", "path": str(outcome.path), "stage": "open"},
        )
        return InternalError(detail=f"open {outcome.path}: {e}")
    return stream
