"""A sequential MapReduce that runs every map and reduce in one process."""

from __future__ import annotations

import sys
from itertools import groupby
from operator import attrgetter
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from distlab.mrrpc import KeyValue
from distlab.plugins import MapFunction, ReduceFunction, load_plugin

OUTPUT_NAME = "mr-out-0"

PathLike = Union[str, Path]


def _read(filename: PathLike) -> str:
    with open(filename, encoding="utf-8", errors="surrogateescape", newline="") as handle:
        return handle.read()


def run_sequential(
    mapf: MapFunction,
    reducef: ReduceFunction,
    filenames: Iterable[PathLike],
    output_path: PathLike = OUTPUT_NAME,
) -> Path:
    """Map every input file, reduce each distinct key, and write the results.

    Each output line is ``"<key> <reduce output>"``, in key order.
    Returns the output path.
    """
    intermediate: List[KeyValue] = []
    for filename in filenames:
        intermediate.extend(mapf(str(filename), _read(filename)))

    intermediate.sort(key=attrgetter("key"))

    output = Path(output_path)
    with open(output, "w", encoding="utf-8", errors="surrogateescape", newline="") as out:
        for key, group in groupby(intermediate, key=attrgetter("key")):
            values = [kv.value for kv in group]
            out.write(f"{key} {reducef(key, values)}\n")
    return output


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run ``mrsequential <plugin> <inputfiles...>``, writing ``mr-out-0``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("Usage: mrsequential xxx.so inputfiles...", file=sys.stderr)
        return 1

    try:
        mapf, reducef = load_plugin(args[0])
    except LookupError as exc:
        print(exc, file=sys.stderr)
        return 1

    filenames = args[1:]
    for filename in filenames:
        if not Path(filename).is_file():
            print(f"cannot open {filename}", file=sys.stderr)
            return 1

    try:
        run_sequential(mapf, reducef, filenames, OUTPUT_NAME)
    except OSError as exc:
        print(f"cannot read {exc.filename}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())