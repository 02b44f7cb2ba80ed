from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from runner.types import Probe, ProbeError, ProbeResult, SmokeError
from staticdir.logging_conf import get_logger

logger = get_logger("runner.client")


async def wait_for_health(
    base_url: str, timeout_s: float = 20.0, *, transport: httpx.AsyncBaseTransport | None = None
) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except httpx.HTTPError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


async def fetch_one(client: httpx.AsyncClient, probe: Probe, *, retries: int = 2) -> ProbeResult:
    """Request one probe path without following redirects, with retry.

    The body is read as a stream so its byte count can be checked against
    Content-Length.
    """
    last_err: Exception | None = None
    for attempt in range(retries):
        started = time.perf_counter()
        try:
            # The path goes out verbatim so encoded segments reach the server.
            url = httpx.URL(client.base_url).copy_with(raw_path=probe.path.encode("ascii"))
            async with client.stream("GET", url) as r:
                body_bytes = 0
                async for chunk in r.aiter_raw():
                    body_bytes += len(chunk)
            length = r.headers.get("content-length")
            return ProbeResult(
                probe=probe,
                status_code=r.status_code,
                location=r.headers.get("location"),
                body_bytes=body_bytes,
                content_length=int(length) if length is not None else None,
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
            )
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "probe.retry",
                extra={
                    "event": "probe_retry",
                    "path": probe.path,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
    raise ProbeError(f"probe failed for {probe.path}: {last_err}")


async def fetch_all(
    base_url: str,
    probes: Iterable[Probe],
    *,
    retries: int = 2,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[ProbeResult]:
    """Run probes concurrently; failed requests are logged and skipped.

    `transport` lets callers aim the client at an in-process ASGI app.
    """
    probes = list(probes)
    async with httpx.AsyncClient(
        base_url=base_url, timeout=10.0, follow_redirects=False, transport=transport
    ) as client:
        results = await asyncio.gather(
            *(fetch_one(client, p, retries=retries) for p in probes), return_exceptions=True
        )
    answered: list[ProbeResult] = []
    for res in results:
        if isinstance(res, ProbeError):
            logger.error("probe.failed", extra={"event": "probe_failed", "error": str(res)})
            continue
        if isinstance(res, BaseException):
            raise res
        answered.append(res)
    logger.info(
        "probe.summary",
        extra={
            "event": "probe_summary",
            "requested": len(probes),
            "answered": len(answered),
        },
    )
    return answered
