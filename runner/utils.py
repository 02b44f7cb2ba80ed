from __future__ import annotations

from runner.types import Probe, ProbeResult, now_ms

# Matches the site written by tools/fixtures.py.
DEFAULT_PROBES: tuple[Probe, ...] = (
    Probe("/", 200),
    Probe("/index.html", 200),
    Probe("/docs", 301, expected_location="/docs/"),
    Probe("/docs/", 200),
    Probe("/css/site.css", 200),
    Probe("/img/pixel.png", 200),
    Probe("/missing.txt", 404),
    Probe("/empty/", 404),
    Probe("/%2e%2e/%2E%2E/etc/passwd", 404),
)


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    return s[f] * (c - k) + s[c] * (k - f)


def parse_probe(spec: str) -> Probe:
    """Parse "PATH=STATUS" or "PATH=301>LOCATION" into a Probe."""
    path, sep, expected = spec.rpartition("=")
    if not sep or not path:
        raise ValueError(f"probe must look like PATH=STATUS, got {spec!r}")
    status, _, location = expected.partition(">")
    try:
        code = int(status, 10)
    except ValueError as e:
        raise ValueError(f"probe status must be an integer, got {status!r}") from e
    return Probe(path, code, expected_location=location or None)


def summarize(results: list[ProbeResult], requested: int) -> tuple[dict, int]:
    """Compute summary dict and an exit code from probe results."""
    durations_ms = [r.elapsed_ms for r in results]
    passed = [r for r in results if r.passed]
    failures = [
        {
            "path": r.probe.path,
            "expected_status": r.probe.expected_status,
            "status_code": r.status_code,
            "expected_location": r.probe.expected_location,
            "location": r.location,
        }
        for r in results
        if not r.passed
    ]
    per_status: dict[str, int] = {}
    for r in results:
        per_status[str(r.status_code)] = per_status.get(str(r.status_code), 0) + 1

    avg_ms = (sum(durations_ms) / len(durations_ms)) if durations_ms else 0.0
    summary = {
        "component": "runner",
        "event": "summary",
        "finished_at": now_ms(),
        "requested": requested,
        "answered": len(results),
        "passed": len(passed),
        "failed": requested - len(passed),
        "timings": {
            "avg_ms": round(avg_ms, 2),
            "p95_ms": round(percentile(durations_ms, 0.95), 2),
            "max_ms": round(max(durations_ms) if durations_ms else 0.0, 2),
        },
        "per_status": per_status,
        "failures": failures,
    }
    exit_code = 0 if (requested > 0 and len(passed) == requested) else 1
    return summary, exit_code
