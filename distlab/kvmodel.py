"""A key/value store model for linearizability checking."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from distlab.model import Model, Operation


class KvOp(enum.IntEnum):
    """Kind of key/value operation."""

    GET = 0
    PUT = 1
    APPEND = 2


@dataclass(frozen=True)
class KvInput:
    """Input of a key/value operation."""

    op: int
    key: str
    value: str = ""


@dataclass(frozen=True)
class KvOutput:
    """Output of a key/value operation."""

    value: str = ""


def kv_partition(history: List[Operation]) -> List[List[Operation]]:
    """Split a history by key, ordered by key."""
    by_key: Dict[str, List[Operation]] = {}
    for op in history:
        by_key.setdefault(op.input.key, []).append(op)
    return [by_key[key] for key in sorted(by_key)]


def kv_init() -> str:
    """Initial value of a single key."""
    # partitions hold one key each, so the state is one value
    return ""


def kv_step(state: str, input: KvInput, output: KvOutput) -> Tuple[bool, str]:
    """Apply an operation to a single key's value."""
    if input.op == KvOp.GET:
        return output.value == state, state
    if input.op == KvOp.PUT:
        return True, input.value
    return True, state + input.value


def kv_describe_operation(input: KvInput, output: Any) -> str:
    """Describe an operation for display."""
    if input.op == KvOp.GET:
        return f"get('{input.key}') -> '{output.value}'"
    if input.op == KvOp.PUT:
        return f"put('{input.key}', '{input.value}')"
    if input.op == KvOp.APPEND:
        return f"append('{input.key}', '{input.value}')"
    return "<invalid>"


KV_MODEL = Model(
    init=kv_init,
    step=kv_step,
    partition=kv_partition,
    describe_operation=kv_describe_operation,
)