"""Operation histories and the state-machine models they are checked against."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, List, Tuple


class CheckResult(str, enum.Enum):
    """Outcome of a linearizability check."""

    UNKNOWN = "Unknown"  # timed out
    OK = "Ok"
    ILLEGAL = "Illegal"


class EventKind(enum.Enum):
    """Whether an event is an invocation or a response."""

    CALL = "call"
    RETURN = "return"


@dataclass(frozen=True)
class Operation:
    """A completed operation with its invocation and response times."""

    input: Any
    call: int
    output: Any
    ret: int
    client_id: int = 0


@dataclass(frozen=True)
class Event:
    """One half of an operation; calls and returns share an ``id``."""

    kind: EventKind
    value: Any
    id: int
    client_id: int = 0


def no_partition(history: List[Operation]) -> List[List[Operation]]:
    """Treat the whole history as a single partition."""
    return [history]


def no_partition_event(history: List[Event]) -> List[List[Event]]:
    """Treat the whole event history as a single partition."""
    return [history]


def shallow_equal(state1: Any, state2: Any) -> bool:
    """Compare two states with ``==``."""
    return state1 == state2


def default_describe_operation(input: Any, output: Any) -> str:
    """Describe an operation as ``input -> output``."""
    return f"{input} -> {output}"


def default_describe_state(state: Any) -> str:
    """Describe a state by its string form."""
    return f"{state}"


@dataclass
class Model:
    """A sequential specification of a system.

    ``step(state, input, output)`` returns whether the transition is legal
    and the resulting state; it must not mutate ``state``. Any of the
    optional callables left as ``None`` falls back to its default.
    """

    init: Callable[[], Any]
    step: Callable[[Any, Any, Any], Tuple[bool, Any]]
    partition: Callable[[List[Operation]], List[List[Operation]]] = no_partition
    partition_event: Callable[[List[Event]], List[List[Event]]] = no_partition_event
    equal: Callable[[Any, Any], bool] = shallow_equal
    describe_operation: Callable[[Any, Any], str] = default_describe_operation
    describe_state: Callable[[Any], str] = default_describe_state

    def __post_init__(self) -> None:
        if self.partition is None:
            self.partition = no_partition
        if self.partition_event is None:
            self.partition_event = no_partition_event
        if self.equal is None:
            self.equal = shallow_equal
        if self.describe_operation is None:
            self.describe_operation = default_describe_operation
        if self.describe_state is None:
            self.describe_state = default_describe_state