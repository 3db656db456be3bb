"""Counts map outputs per file, with some reduce tasks running slowly.

Slow reduces reveal workers that exit before the job has finished.
"""

from __future__ import annotations

import time
from typing import List

from distlab.mrrpc import KeyValue


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Emit ``(filename, "1")`` once per file."""
    return [KeyValue(filename, "1")]


def reduce_fn(key: str, values: List[str]) -> str:
    """Number of values, sleeping first for some keys."""
    if "sherlock" in key or "tom" in key:
        time.sleep(3)
    return str(len(values))