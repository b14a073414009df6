"""Measurement capability passed explicitly to the store and façade."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

logger = logging.getLogger(__name__)


class Timer(Protocol):
    """Anything that can time a named block."""

    def measure(self, name: str) -> AbstractContextManager[None]: ...


class LoggingTimer:
    """Times named blocks and reports durations through logging.

    Completed measurements are also kept in ``durations`` (name -> ms) so
    callers can inspect the last run of each block.
    """

    def __init__(self) -> None:
        self.durations: dict[str, float] = {}

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        logger.debug("Performance measurement started: %s", name)
        start = time.perf_counter()
        try:
            yield
        except Exception:
            logger.error("Error in measured block: %s", name, exc_info=True)
            raise
        finally:
            duration = (time.perf_counter() - start) * 1000
            self.durations[name] = duration
            logger.info("Performance measurement completed: %s (duration=%.2fms)", name, duration)


class NullTimer:
    """Timer that measures nothing."""

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        yield
