#!/usr/bin/env python3
"""
Container entry point: migrate, then hand the process over to gunicorn.

Environment:
    PORT             listen port (default 8080)
    WEB_CONCURRENCY  gunicorn workers (default 2)

Usage:
    python scripts/start.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _env_int(name: str, default: int, lo: int, hi: int) -> int:
    raw = (os.environ.get(name) or "").strip() or str(default)
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or not lo <= value <= hi:
        raise SystemExit(f"ERROR: {name}={raw!r} must be an integer {lo}-{hi}.")
    return value


def gunicorn_argv(port: int, workers: int) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{port}",
        "--workers", str(workers),
        "--timeout", "60",
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]


def main() -> None:
    port = _env_int("PORT", 8080, 1, 65535)
    workers = _env_int("WEB_CONCURRENCY", 2, 1, 64)

    from scripts.release import run_release

    try:
        run_release()
    except Exception as e:
        print(f"Release failed: {e}", flush=True)
        sys.exit(1)

    argv = gunicorn_argv(port, workers)
    print(f"=== exec {' '.join(argv)} ===", flush=True)
    # gunicorn replaces this process and receives signals directly.
    os.execvp(argv[0], argv)


if __name__ == "__main__":
    main()
