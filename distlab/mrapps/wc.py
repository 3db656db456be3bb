"""Word count: counts occurrences of each word across the input files."""

from __future__ import annotations

from itertools import groupby
from typing import List

from distlab.mrrpc import KeyValue


def _words(text: str) -> List[str]:
    return ["".join(run) for is_letter, run in groupby(text, str.isalpha) if is_letter]


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Emit ``(word, "1")`` for every word in ``contents``; the name is ignored."""
    return [KeyValue(word, "1") for word in _words(contents)]


def reduce_fn(key: str, values: List[str]) -> str:
    """Number of occurrences of ``key``."""
    return str(len(values))