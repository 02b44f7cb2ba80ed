from __future__ import annotations

import string
from urllib.parse import quote_from_bytes

from fastapi import APIRouter, Request, Response

from ..domain.config import ServerConfig
from ..domain.outcomes import InternalError, StreamFile
from ..logging_conf import get_logger
from ..service import static_service
from .responses import internal_error_response, stream_response, to_response

router = APIRouter()
logger = get_logger("api")

_PRINTABLE = string.punctuation


def raw_request_path(request: Request) -> str:
    """Return the request path as sent, still percent-encoded.

    Starlette's `request.url.path` is already decoded, which would let an
    encoded "/" or ".." through as structure. `raw_path` may carry the query
    string under some servers, so it is cut off here. Bytes outside printable
    ASCII are percent-quoted so they decode as UTF-8 later and a redirect
    Location stays ASCII.
    """
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    path, _, _ = raw.partition(b"?")
    return quote_from_bytes(path, safe=_PRINTABLE) or "/"


async def serve_path(config: ServerConfig, request_path: str) -> Response:
    """Resolve `request_path` under the configured root and build the response.

    Every filesystem failure ends up as the fixed 404 or 500 response.
    """
    try:
        outcome = await static_service.resolve_outcome(config, request_path)
    except OSError:
        logger.exception(
            "static.error",
            extra={"event": "static_error", "path": request_path, "stage": "resolve"},
        )
        return internal_error_response()

    if not isinstance(outcome, StreamFile):
        logger.info(
            f"static.{outcome.kind.value}",
            extra={"event": f"static_{outcome.kind.value}", "path": request_path},
        )
        return to_response(outcome)

    opened = await static_service.open_stream(config, outcome)
    if isinstance(opened, InternalError):
        return to_response(opened)

    logger.info(
        "static.stream",
        extra={
            "event": "static_stream",
            "path": request_path,
            "file": str(outcome.path),
            "size": outcome.metadata.size,
            "media_type": outcome.media_type,
        },
    )
    return stream_response(outcome, opened)


@router.get(
    "/{file_path:path}",
    summary="Serve a file from the static root",
    include_in_schema=False,
)
async def serve_static_files(request: Request) -> Response:
    """Serve whatever the request path resolves to under the root.

    Request headers are accepted but not consulted.
    """
    config: ServerConfig = request.app.state.config
    return await serve_path(config, raw_request_path(request))
