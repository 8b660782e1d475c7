# ingesta/log.py
#
# Shared pipeline logger with elapsed time.
#
# Design decisions:
#   - Single log() function used by every step (download, parse, integridad,
#     build) so the operator reads one consistent stream.
#   - Elapsed time is shown so the operator can see how long each phase takes.
#   - Plain stdout with flush: the pipeline is a batch job run from cron/CI,
#     whose runner already captures stdout.
from __future__ import annotations

import sys
import time

_start = time.monotonic()


def log(message: str) -> None:
    """Write a timestamped log line to stdout."""
    elapsed = time.monotonic() - _start
    minutes, seconds = divmod(int(elapsed), 60)
    sys.stdout.write(f"[ingesta {minutes:02d}:{seconds:02d}] {message}\n")
    sys.stdout.flush()
