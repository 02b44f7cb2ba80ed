#!/usr/bin/env python3
"""Write the sample site the smoke runner's default probes expect.

    python tools/fixtures.py
    python -m staticdir --root fixtures/site
    python -m runner.smoke
"""
from __future__ import annotations

import base64
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SITE = ROOT / "fixtures" / "site"

# Deterministic 1x1 PNG (transparent) via base64, to avoid external deps
_PNG_1x1 = base64.b64decode(
    b"iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAwMCAO6wZSYAAAAASUVORK5CYII="
)

FILES = [
    (SITE / "index.html", b"<!doctype html><title>home</title><a href=\"docs/\">docs</a>\n"),
    (SITE / "docs" / "index.html", b"<!doctype html><title>docs</title><a href=\"guide.txt\">guide</a>\n"),
    (SITE / "docs" / "guide.txt", b"relative links from docs/index.html land here\n"),
    (SITE / "css" / "site.css", b"body { font-family: sans-serif; }\n"),
    (SITE / "img" / "pixel.png", _PNG_1x1),
]

# Directories without an index file; requesting them with "/" is a 404.
EMPTY_DIRS = [SITE / "empty"]


def main() -> None:
    SITE.mkdir(parents=True, exist_ok=True)
    for path, data in FILES:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    for d in EMPTY_DIRS:
        d.mkdir(parents=True, exist_ok=True)
    created = [str(p.relative_to(ROOT)) for p, _ in FILES if p.exists()]
    print("Created site files:")
    for c in created:
        print(" -", c)
    if len(created) != len(FILES):
        raise SystemExit(f"Expected {len(FILES)} files, found {len(created)}")


if __name__ == "__main__":
    main()
