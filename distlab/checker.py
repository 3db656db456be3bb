"""Linearizability checking of operation and event histories."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, List, Optional, Tuple, Union

from distlab.bitset import Bitset
from distlab.model import CheckResult, Event, EventKind, Model, Operation

Timeout = Union[float, timedelta]


@dataclass(frozen=True)
class _Entry:
    kind: EventKind
    value: Any
    id: int
    time: int
    client_id: int


@dataclass
class LinearizationInfo:
    """Per-partition entries and the longest partial linearizations found."""

    history: List[List[_Entry]] = field(default_factory=list)
    partial_linearizations: List[List[List[int]]] = field(default_factory=list)


class _Node:
    __slots__ = ("value", "match", "id", "next", "prev")

    def __init__(self, value: Any, match: Optional[_Node], id: int) -> None:
        self.value = value
        self.match = match  # a call node if set, otherwise a return node
        self.id = id
        self.next: Optional[_Node] = None
        self.prev: Optional[_Node] = None


def _make_entries(history: List[Operation]) -> List[_Entry]:
    entries = []
    for op_id, op in enumerate(history):
        entries.append(_Entry(EventKind.CALL, op.input, op_id, op.call, op.client_id))
        entries.append(_Entry(EventKind.RETURN, op.output, op_id, op.ret, op.client_id))
    entries.sort(key=lambda e: e.time)
    return entries


def _renumber(events: List[Event]) -> List[Event]:
    mapping: dict = {}
    renumbered = []
    for ev in events:
        new_id = mapping.setdefault(ev.id, len(mapping))
        renumbered.append(Event(ev.kind, ev.value, new_id, ev.client_id))
    return renumbered


def _convert_entries(events: List[Event]) -> List[_Entry]:
    # the position in the list stands in for time
    return [
        _Entry(ev.kind, ev.value, ev.id, position, ev.client_id)
        for position, ev in enumerate(events)
    ]


def _insert_before(node: _Node, mark: Optional[_Node]) -> _Node:
    if mark is not None:
        before = mark.prev
        mark.prev = node
        node.next = mark
        if before is not None:
            node.prev = before
            before.next = node
    return node


def _length(node: Optional[_Node]) -> int:
    count = 0
    while node is not None:
        node = node.next
        count += 1
    return count


def _make_linked_entries(entries: List[_Entry]) -> Optional[_Node]:
    root: Optional[_Node] = None
    returns: dict = {}
    for entry in reversed(entries):
        if entry.kind is EventKind.RETURN:
            node = _Node(entry.value, None, entry.id)
            returns[entry.id] = node
        else:
            node = _Node(entry.value, returns.get(entry.id), entry.id)
        _insert_before(node, root)
        root = node
    return root


def _lift(node: _Node) -> None:
    node.prev.next = node.next
    node.next.prev = node.prev
    match = node.match
    match.prev.next = match.next
    if match.next is not None:
        match.next.prev = match.prev


def _unlift(node: _Node) -> None:
    match = node.match
    match.prev.next = match
    if match.next is not None:
        match.next.prev = match
    node.prev.next = node
    node.next.prev = node


def _check_single(
    model: Model, history: List[_Entry], compute_partial: bool, kill: threading.Event
) -> Tuple[bool, List[Optional[List[int]]]]:
    entry = _make_linked_entries(history)
    n = _length(entry) // 2
    linearized = Bitset(n)
    cache: dict = {}  # linearized set -> states reached with it
    calls: List[Tuple[_Node, Any]] = []
    # longest linearizable prefix that includes each entry
    longest: List[Optional[List[int]]] = [None] * n

    state = model.init()
    head = _insert_before(_Node(None, None, -1), entry)
    while head.next is not None:
        if kill.is_set():
            return False, longest
        if entry.match is not None:
            ok, new_state = model.step(state, entry.value, entry.match.value)
            if ok:
                new_linearized = linearized.clone().set(entry.id)
                seen = cache.setdefault(new_linearized, [])
                if not any(model.equal(new_state, old) for old in seen):
                    seen.append(new_state)
                    calls.append((entry, state))
                    state = new_state
                    linearized.set(entry.id)
                    _lift(entry)
                    entry = head.next
                else:
                    entry = entry.next
            else:
                entry = entry.next
        else:
            if not calls:
                return False, longest
            if compute_partial:
                seq: Optional[List[int]] = None
                for node, _ in calls:
                    current = longest[node.id]
                    if current is None or len(calls) > len(current):
                        if seq is None:
                            seq = [c.id for c, _ in calls]
                        longest[node.id] = seq
            entry, state = calls.pop()
            linearized.clear(entry.id)
            _unlift(entry)
            entry = entry.next

    # the complete linearization is the longest for every entry
    seq = [node.id for node, _ in calls]
    longest[:] = [seq] * n
    return True, longest


def _timeout_seconds(timeout: Timeout) -> float:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


def _check_parallel(
    model: Model, history: List[List[_Entry]], compute_info: bool, timeout: Timeout
) -> Tuple[CheckResult, LinearizationInfo]:
    kill = threading.Event()
    results: queue.Queue = queue.Queue()
    longest: List[List[Optional[List[int]]]] = [[] for _ in history]

    def run(index: int, subhistory: List[_Entry]) -> None:
        try:
            ok, partial = _check_single(model, subhistory, compute_info, kill)
        except BaseException as exc:  # surfaced to the caller below
            results.put(exc)
            return
        longest[index] = partial
        results.put(ok)

    def receive(block_timeout: Optional[float]) -> bool:
        outcome = results.get(timeout=block_timeout)
        if isinstance(outcome, BaseException):
            kill.set()
            raise outcome
        return outcome

    for index, subhistory in enumerate(history):
        threading.Thread(target=run, args=(index, subhistory), daemon=True).start()

    seconds = _timeout_seconds(timeout)
    deadline = time.monotonic() + seconds if seconds > 0 else None
    ok = True
    timed_out = False
    count = 0
    while count < len(history):
        try:
            if deadline is None:
                result = receive(None)
            else:
                result = receive(max(0.0, deadline - time.monotonic()))
        except queue.Empty:
            # a timeout may hide an illegal history
            timed_out = True
            kill.set()
            break
        count += 1
        ok = ok and result
        if not ok and not compute_info:
            kill.set()
            break

    info = LinearizationInfo()
    if compute_info:
        while count < len(history):
            receive(None)
            count += 1
        partial_linearizations = []
        for per_entry in longest:
            unique = {id(seq): seq for seq in per_entry if seq is not None}
            partial_linearizations.append([list(seq) for seq in unique.values()])
        info = LinearizationInfo(history=history, partial_linearizations=partial_linearizations)

    if not ok:
        result_kind = CheckResult.ILLEGAL
    elif timed_out:
        result_kind = CheckResult.UNKNOWN
    else:
        result_kind = CheckResult.OK
    return result_kind, info


def _check_events(
    model: Model, history: List[Event], verbose: bool, timeout: Timeout
) -> Tuple[CheckResult, LinearizationInfo]:
    partitions = model.partition_event(history)
    entries = [_convert_entries(_renumber(sub)) for sub in partitions]
    return _check_parallel(model, entries, verbose, timeout)


def _check_operations(
    model: Model, history: List[Operation], verbose: bool, timeout: Timeout
) -> Tuple[CheckResult, LinearizationInfo]:
    partitions = model.partition(history)
    entries = [_make_entries(sub) for sub in partitions]
    return _check_parallel(model, entries, verbose, timeout)


def check_operations(model: Model, history: List[Operation]) -> bool:
    """Whether the operation history is linearizable."""
    result, _ = _check_operations(model, history, False, 0)
    return result is CheckResult.OK


def check_operations_timeout(
    model: Model, history: List[Operation], timeout: Timeout
) -> CheckResult:
    """Check with a timeout in seconds (0 for none); UNKNOWN on timeout."""
    result, _ = _check_operations(model, history, False, timeout)
    return result


def check_operations_verbose(
    model: Model, history: List[Operation], timeout: Timeout
) -> Tuple[CheckResult, LinearizationInfo]:
    """Check and also collect partial linearizations."""
    return _check_operations(model, history, True, timeout)


def check_events(model: Model, history: List[Event]) -> bool:
    """Whether the event history is linearizable."""
    result, _ = _check_events(model, history, False, 0)
    return result is CheckResult.OK


def check_events_timeout(model: Model, history: List[Event], timeout: Timeout) -> CheckResult:
    """Check events with a timeout in seconds (0 for none); UNKNOWN on timeout."""
    result, _ = _check_events(model, history, False, timeout)
    return result


def check_events_verbose(
    model: Model, history: List[Event], timeout: Timeout
) -> Tuple[CheckResult, LinearizationInfo]:
    """Check events and also collect partial linearizations."""
    return _check_events(model, history, True, timeout)