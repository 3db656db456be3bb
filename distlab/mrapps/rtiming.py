"""Reports how many reduce tasks run at the same time."""

from __future__ import annotations

from typing import List

from distlab.mrapps import mtiming as _mtiming
from distlab.mrrpc import KeyValue

__all__ = ["nparallel", "map_fn", "reduce_fn"]

_KEYS = "abcdefghij"


def nparallel(phase: str) -> int:
    """Count live workers of ``phase`` running now, this one included."""
    return _mtiming.nparallel(phase)


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Emit ten fixed keys so that there is work for many reduce tasks."""
    return [KeyValue(key, "1") for key in _KEYS]


def reduce_fn(key: str, values: List[str]) -> str:
    """Number of live reduce workers running alongside this one."""
    return str(nparallel("reduce"))