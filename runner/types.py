from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class Probe:
    """One request the smoke run makes and what it expects back."""

    path: str
    expected_status: int
    expected_location: str | None = None


@dataclass
class ProbeResult:
    """What the server actually answered for a probe."""

    probe: Probe
    status_code: int
    location: str | None
    body_bytes: int
    content_length: int | None
    elapsed_ms: float

    @property
    def passed(self) -> bool:
        if self.status_code != self.probe.expected_status:
            return False
        if self.probe.expected_location is not None:
            return self.location == self.probe.expected_location
        if self.content_length is not None:
            return self.content_length == self.body_bytes
        return True


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""


class ProbeError(SmokeError):
    """Raised when a probe request fails after retries."""


def now_ms() -> int:
    """Return current time in epoch milliseconds."""
    return int(time.time() * 1000)
