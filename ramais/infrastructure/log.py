# ramais/infrastructure/log.py
#
# Shared service logger with elapsed time.
#
# Design decisions:
#   - One log() function for the whole service, so every line has the same prefix.
#   - Elapsed time is measured from process start.
#   - Plain stdout with flush: the service runs under a process manager that
#     already captures and timestamps stdout.
from __future__ import annotations

import sys
import time

_start = time.monotonic()


def log(message: str) -> None:
    """Write a log line with elapsed time to stdout."""
    elapsed = time.monotonic() - _start
    minutes, seconds = divmod(int(elapsed), 60)
    hours, minutes = divmod(minutes, 60)
    sys.stdout.write(f"[ramais {hours:02d}:{minutes:02d}:{seconds:02d}] {message}\n")
    sys.stdout.flush()
