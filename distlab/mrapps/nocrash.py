"""The crash application without the crashes."""

from __future__ import annotations

from typing import List

from distlab.mrrpc import KeyValue


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8", "surrogateescape"))


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Emit fixed keys describing the input."""
    return [
        KeyValue("a", filename),
        KeyValue("b", str(_byte_length(filename))),
        KeyValue("c", str(_byte_length(contents))),
        KeyValue("d", "xyzzy"),
    ]


def reduce_fn(key: str, values: List[str]) -> str:
    """Values sorted and joined by spaces, for deterministic output."""
    return " ".join(sorted(values))