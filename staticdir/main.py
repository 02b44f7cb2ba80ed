"""FastAPI app factory for the static directory server.

Nothing is built at import time. Run it with
`STATIC_ROOT=./site uvicorn --factory staticdir.main:create_app`
or through `python -m staticdir`.
"""
from __future__ import annotations

import os
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from staticdir.api import router as static_router
from staticdir.domain.config import ServerConfig
from staticdir.logging_conf import get_logger, setup_logging

logger = get_logger("app")


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Build the app. Without `config`, settings come from the environment.

    Raises ConfigurationError if the root directory does not exist.
    """
    setup_logging()
    config = config or ServerConfig.from_env()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "serving",
            extra={"event": "serving", "root": str(config.root), "chunk_size": config.chunk_size},
        )
        yield

    app = FastAPI(
        title="Static Directory Server",
        version=os.getenv("APP_VERSION", "0.1.0"),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.config = config

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        # Reuse the caller's X-Request-ID or mint one; echoed on the response.
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        start = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request",
            extra={
                "event": "request",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": round((time.perf_counter() - start) * 1000.0, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    # Catch-all; must come after every explicit route.
    app.include_router(static_router)

    return app
