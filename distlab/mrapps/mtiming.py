"""Reports how many map tasks run at the same time.

Each map invocation leaves a marker file named after its process, looks
for markers of other live workers, and reports the count along with the
time it started.
"""

from __future__ import annotations

import os
import re
import time
from pathlib import Path
from typing import List

from distlab.mrrpc import KeyValue


def _alive(pid: int) -> bool:
    if pid == os.getpid():
        return True
    if os.name != "posix":
        # signal 0 is only a liveness probe on POSIX systems
        return False
    try:
        os.kill(pid, 0)
    except (OSError, OverflowError):
        return False
    return True


def nparallel(phase: str) -> int:
    """Number of live workers currently in ``phase``, this one included.

    Leaves a marker file in the working directory for a second so that
    other workers can see this one, then removes it.
    """
    marker = Path(f"mr-worker-{phase}-{os.getpid()}")
    marker.write_bytes(b"x")

    pattern = re.compile(rf"mr-worker-{re.escape(phase)}-([+-]?\d+)")
    running = 0
    for name in os.listdir("."):
        found = pattern.match(name)
        if found and _alive(int(found.group(1))):
            running += 1

    time.sleep(1)
    marker.unlink()
    return running


def map_fn(filename: str, contents: str) -> List[KeyValue]:
    """Emit this worker's start time and how many map workers ran alongside it."""
    started = time.time()
    pid = os.getpid()
    running = nparallel("map")
    return [
        KeyValue(f"times-{pid}", f"{started:.1f}"),
        KeyValue(f"parallel-{pid}", str(running)),
    ]


def reduce_fn(key: str, values: List[str]) -> str:
    """Values sorted and joined by spaces, for deterministic output."""
    return " ".join(sorted(values))