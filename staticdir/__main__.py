"""Run the static server: `python -m staticdir --root ./site`."""
from __future__ import annotations

import argparse
import os
import sys

import uvicorn

from staticdir.domain.config import ConfigurationError, ServerConfig, get_chunk_size_from_env
from staticdir.logging_conf import get_logger, setup_logging
from staticdir.main import create_app

logger = get_logger("app.cli")


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the server."""
    parser = argparse.ArgumentParser(description="Serve a directory over HTTP")
    parser.add_argument("--root", default=os.getenv("STATIC_ROOT", "."))
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument("--chunk-size", type=int, default=None, dest="chunk_size")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging()
    try:
        chunk_size = args.chunk_size if args.chunk_size is not None else get_chunk_size_from_env()
        config = ServerConfig.from_root(args.root, chunk_size=chunk_size)
    except ConfigurationError as e:
        logger.error("config.invalid", extra={"event": "config_invalid", "error": str(e)})
        raise SystemExit(2) from e

    uvicorn.run(create_app(config), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
