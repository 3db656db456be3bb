"""Counts how many times map tasks run.

Each map invocation leaves a marker file in the working directory; the
reduce function reports how many markers exist.
"""

from __future__ import annotations

import itertools
import os
import random
import time
from pathlib import Path
from typing import List

from distlab.mrrpc import KeyValue

_PREFIX = "mr-worker-jobcount"
_invocations = itertools.count()


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Leave a marker file, wait 2 to 5 seconds, and emit one pair."""
    marker = Path(f"{_PREFIX}-{os.getpid()}-{next(_invocations)}")
    marker.write_text("x")
    time.sleep((2000 + random.randrange(3000)) / 1000)
    return [KeyValue("a", "x")]


def reduce_fn(key: str, values: List[str]) -> str:
    """Number of map invocations recorded in the working directory."""
    return str(sum(1 for entry in Path(".").iterdir() if entry.name.startswith(_PREFIX)))