"""Lookup of MapReduce applications by name."""

from __future__ import annotations

from pathlib import PurePath
from types import ModuleType
from typing import Callable, Dict, List, Tuple

from distlab.mrapps import crash, early_exit, indexer, jobcount, mtiming, nocrash, rtiming, wc
from distlab.mrrpc import KeyValue

MapFunction = Callable[[str, str], List[KeyValue]]
ReduceFunction = Callable[[str, List[str]], str]

_APPLICATIONS: Dict[str, ModuleType] = {
    "wc": wc,
    "indexer": indexer,
    "crash": crash,
    "nocrash": nocrash,
    "early_exit": early_exit,
    "jobcount": jobcount,
    "mtiming": mtiming,
    "rtiming": rtiming,
}


class PluginNotFoundError(LookupError):
    """Raised when no application has the requested name."""


def available_plugins() -> List[str]:
    """Names of the known applications, sorted."""
    return sorted(_APPLICATIONS)


def load_plugin(name: str) -> Tuple[MapFunction, ReduceFunction]:
    """Map and reduce functions of the named application.

    ``name`` may be a bare name such as ``"wc"`` or a path such as
    ``"../mrapps/wc.so"``; only the file stem is used.
    """
    stem = PurePath(name).stem
    application = _APPLICATIONS.get(stem)
    if application is None:
        raise PluginNotFoundError(
            f"cannot load plugin {name}; expecting one of {available_plugins()}"
        )
    return application.map_fn, application.reduce_fn