from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


class Timer:
    """Log a header on entry and elapsed time with OK/ERROR status on exit."""

    def __init__(self, label: str = "task"):
        self.label = label
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        logger.info(">>> %s ...", self.label)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        status = "OK" if exc is None else "ERROR"
        logger.info("[%s] %s: %.2fs", status, self.label, self.elapsed)
