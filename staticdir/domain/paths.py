from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote

__all__ = [
    "normalize_segments",
    "resolve_request_path",
]

_SEP = "/"
_CURRENT_DIR = "."
_PARENT_DIR = ".."


def _fold(segments: list[str], raw: str, *, decode: bool) -> None:
    """Fold the `/`-separated components of `raw` into `segments` in place.

    Empty components and `.` are skipped, `..` pops (never below empty).
    With `decode`, a normal component is percent-decoded and the decoded text
    is folded again, so `%2e%2e` pops like `..` and `%2f` never yields an
    absolute component.
    """
    for part in raw.split(_SEP):
        if not part or part == _CURRENT_DIR:
            continue
        if part == _PARENT_DIR:
            if segments:
                segments.pop()
            continue
        if decode and "%" in part:
            _fold(segments, unquote(part, encoding="utf-8", errors="replace"), decode=False)
            continue
        segments.append(part)


def normalize_segments(request_path: str) -> list[str]:
    """Return the decoded, normalized segments of a raw request path.

    Rules:
    - Split on "/"; empty segments and "." are ignored.
    - ".." removes the previous segment; extra ".." at the top are dropped.
    - Other segments are percent-decoded as UTF-8, invalid bytes become
      U+FFFD. Decoding never fails.

    The result never contains "", "." or ".." and no segment contains "/".
    """
    segments: list[str] = []
    _fold(segments, request_path, decode=True)
    return segments


def resolve_request_path(root: Path, request_path: str) -> Path:
    """Join the normalized request path onto `root`.

    The result is `root` itself or a lexical descendant of it.
    """
    return root.joinpath(*normalize_segments(request_path))
