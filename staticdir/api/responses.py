"""Translate resolution outcomes into Starlette responses."""
from __future__ import annotations

from fastapi import Response, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from ..domain.outcomes import InternalError, NotFound, Redirect, ResponseOutcome, StreamFile
from ..service.static_service import FileStream

DEFAULT_4XX_BODY = "Oops! I can't find what you're looking for..."
DEFAULT_5XX_BODY = "I'm broken, apparently."

_HTML = "text/html"


def not_found_response() -> Response:
    return Response(
        content=DEFAULT_4XX_BODY,
        status_code=status.HTTP_404_NOT_FOUND,
        headers={"content-type": _HTML},
    )


def internal_error_response() -> Response:
    return Response(
        content=DEFAULT_5XX_BODY,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers={"content-type": _HTML},
    )


def redirect_response(location: str) -> Response:
    return Response(
        content=b"",
        status_code=status.HTTP_301_MOVED_PERMANENTLY,
        headers={"location": location},
    )


def stream_response(outcome: StreamFile, stream: FileStream) -> StreamingResponse:
    """200 with the file body; Content-Length is the size seen at stat time."""
    return StreamingResponse(
        stream,
        status_code=status.HTTP_200_OK,
        headers={
            "content-type": outcome.media_type,
            "content-length": str(outcome.metadata.size),
        },
        # Closes the file if the body was never iterated.
        background=BackgroundTask(stream.aclose),
    )


def to_response(outcome: ResponseOutcome) -> Response:
    """Build the response for every outcome except StreamFile."""
    if isinstance(outcome, NotFound):
        return not_found_response()
    if isinstance(outcome, Redirect):
        return redirect_response(outcome.location)
    if isinstance(outcome, InternalError):
        return internal_error_response()
    raise TypeError(f"{type(outcome).__name__} needs an opened stream")
