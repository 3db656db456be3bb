"""Messages exchanged between the MapReduce coordinator and its workers."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyValue:
    """A key/value pair produced by a map function."""

    key: str
    value: str


@dataclass
class ExampleArgs:
    """Arguments of the example call."""

    x: int = 0


@dataclass
class ExampleReply:
    """Reply of the example call."""

    y: int = 0


@dataclass
class RpcArgs:
    """A worker's request; a non-empty ``task_name`` reports that task done."""

    task_name: str = ""


@dataclass
class RpcReply:
    """A task assignment; an empty ``task_name`` means no task is available."""

    task_name: str = ""
    n_reduce: int = 0
    phase: int = 0  # 1 for map, 2 for reduce
    index: int = 0  # worker index


def coordinator_sock() -> str:
    """A per-user UNIX-domain socket path for the coordinator."""
    uid = os.getuid() if hasattr(os, "getuid") else 0
    return "/var/tmp/824-mr-" + str(uid)