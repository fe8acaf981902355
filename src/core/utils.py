"""
Small shared utilities.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator


@dataclass
class Timing:
    """Wall-clock span; readable while running and frozen once stopped."""

    start: float = field(default_factory=time.perf_counter)
    end: float | None = None

    @property
    def seconds(self) -> float:
        return (self.end if self.end is not None else time.perf_counter()) - self.start

    @property
    def elapsed_ms(self) -> int:
        return int(self.seconds * 1000)

    @property
    def elapsed_us(self) -> int:
        return int(self.seconds * 1_000_000)


@contextmanager
def timer() -> Generator[Timing, None, None]:
    t = Timing()
    try:
        yield t
    finally:
        t.end = time.perf_counter()


def to_number(raw: str) -> int | float:
    """Parse a numeric literal, keeping integral values as ``int``."""
    value = float(raw)
    return int(value) if value.is_integer() else value
