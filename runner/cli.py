from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Static server smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument("--timeout", type=float, default=20.0, help="health wait, seconds")
    parser.add_argument("--retries", type=int, default=2)
    parser.add_argument(
        "--probe",
        action="append",
        default=[],
        dest="probes",
        metavar="PATH=STATUS",
        help="extra probe, e.g. /about/=200; repeatable",
    )
    return parser.parse_args(argv)
