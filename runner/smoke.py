#!/usr/bin/env python3
"""Smoke runner checking a live static server end to end.

Steps:
- wait for server health
- request every probe concurrently (redirects are not followed)
- compare status, Location and body length against expectations
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys
from collections.abc import Iterable

import httpx

from runner.cli import parse_args
from runner.client import fetch_all, wait_for_health
from runner.types import Probe
from runner.utils import DEFAULT_PROBES, parse_probe, summarize
from staticdir.logging_conf import get_logger, setup_logging

setup_logging()
logger = get_logger("runner")


async def run_smoke(
    *,
    base_url: str,
    probes: Iterable[Probe] = DEFAULT_PROBES,
    health_timeout_s: float = 20.0,
    retries: int = 2,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    probes = list(probes)
    await wait_for_health(base_url, timeout_s=health_timeout_s, transport=transport)
    results = await fetch_all(base_url, probes, retries=retries, transport=transport)
    summary, exit_code = summarize(results, requested=len(probes))
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    probes = [*DEFAULT_PROBES, *(parse_probe(p) for p in args.probes)]
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            probes=probes,
            health_timeout_s=args.timeout,
            retries=args.retries,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
