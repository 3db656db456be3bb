"""A MapReduce application that sometimes crashes or stalls.

It exercises the framework's ability to recover from failed workers.
"""

from __future__ import annotations

import os
import secrets
import time
from typing import List

from distlab.mrrpc import KeyValue


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8", "surrogateescape"))


def maybe_crash() -> None:
    """Exit the process about a third of the time, stall another third."""
    roll = secrets.randbelow(1000)
    if roll < 330:
        os._exit(1)
    elif roll < 660:
        delay_ms = secrets.randbelow(10 * 1000)
        time.sleep(delay_ms / 1000)


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Emit fixed keys describing the input."""
    maybe_crash()
    return [
        KeyValue("a", filename),
        KeyValue("b", str(_byte_length(filename))),
        KeyValue("c", str(_byte_length(contents))),
        KeyValue("d", "xyzzy"),
    ]


def reduce_fn(key: str, values: List[str]) -> str:
    """Values sorted and joined by spaces, for deterministic output."""
    maybe_crash()
    return " ".join(sorted(values))