"""Inverted index: lists the documents each word appears in."""

from __future__ import annotations

from itertools import groupby
from typing import List

from distlab.mrrpc import KeyValue


def _words(text: str) -> List[str]:
    return ["".join(run) for is_letter, run in groupby(text, str.isalpha) if is_letter]


def map_fn(document: str, value: str) -> List[KeyValue]:
    """Emit ``(word, document)`` once for each distinct word."""
    return [KeyValue(word, document) for word in dict.fromkeys(_words(value))]


def reduce_fn(key: str, values: List[str]) -> str:
    """Count and comma-separated sorted list of documents."""
    documents = sorted(values)
    return f"{len(documents)} {','.join(documents)}"