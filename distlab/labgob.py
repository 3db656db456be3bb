"""Serialization for RPC messages and persisted state.

Values are written as length-prefixed, type-tagged JSON, so that a decoded
value never shares objects with the value that was encoded. Beyond encoding,
the module warns about two mistakes that silently lose data: private
(underscore-prefixed) dataclass fields, which are never transmitted, and
decoding into a target that already holds non-default values.
"""

from __future__ import annotations

import base64
import dataclasses
import enum
import json
import struct
import threading
import typing
from typing import Any, BinaryIO, Dict, Optional, Set

_HEADER = struct.Struct(">I")

_lock = threading.Lock()
_error_count = 0
_checked: Set[Any] = set()
_types_by_name: Dict[str, type] = {}
_names_by_type: Dict[type, str] = {}


class LabGobError(ValueError):
    """Raised when a stream holds data that cannot be decoded."""


def error_count() -> int:
    """Number of warnings and errors reported so far."""
    with _lock:
        return _error_count


def _count_error() -> None:
    global _error_count
    with _lock:
        _error_count += 1


def _note_default(what: str) -> None:
    global _error_count
    with _lock:
        if _error_count < 1:
            # typically a reply object reused across calls, or persisted
            # state restored into variables that already hold values
            print(f"labgob warning: Decoding into a non-default variable/field {what} may not work")
        _error_count += 1


def _is_exported(name: str) -> bool:
    return not name.startswith("_")


def _type_of(value: Any) -> Any:
    return value if isinstance(value, type) else type(value)


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


# --- registration -----------------------------------------------------------


def _default_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _registrable(cls: Any) -> bool:
    if not isinstance(cls, type):
        return False
    return dataclasses.is_dataclass(cls) or issubclass(cls, enum.Enum)


def _register_type(cls: type, name: str) -> None:
    if not _registrable(cls):
        raise TypeError(f"only dataclasses and enums can be registered, not {cls!r}")
    with _lock:
        existing_type = _types_by_name.get(name)
        existing_name = _names_by_type.get(cls)
        if existing_type is cls and existing_name == name:
            return
        if existing_type is not None:
            raise ValueError(f"name {name!r} is already registered for {existing_type!r}")
        if existing_name is not None:
            raise ValueError(f"type {cls!r} is already registered as {existing_name!r}")
        _types_by_name[name] = cls
        _names_by_type[cls] = name


def register(value: Any) -> None:
    """Register the type of ``value`` (or ``value`` itself if it is a type)."""
    cls = _type_of(value)
    _check_type(cls)
    _register_type(cls, _default_name(cls))


def register_name(name: str, value: Any) -> None:
    """Register the type of ``value`` under an explicit wire name."""
    cls = _type_of(value)
    _check_type(cls)
    _register_type(cls, name)


def _name_for(cls: type) -> str:
    with _lock:
        name = _names_by_type.get(cls)
    if name is None:
        name = _default_name(cls)
        _register_type(cls, name)
    return name


def _type_named(name: str) -> type:
    with _lock:
        cls = _types_by_name.get(name)
    if cls is None:
        raise LabGobError(f"type {name!r} has not been registered")
    return cls


# --- checks -----------------------------------------------------------------


def _check_type(tp: Any) -> None:
    if isinstance(tp, (list, tuple)):
        for item in tp:
            _check_type(item)
        return
    if isinstance(tp, str):
        # unresolved annotation; nested values are checked by _check_value
        return
    try:
        with _lock:
            # only complain once per type, and stop recursion
            if tp in _checked:
                return
            _checked.add(tp)
    except TypeError:
        return
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        for f in dataclasses.fields(tp):
            if not _is_exported(f.name):
                print(
                    f"labgob error: private field {f.name} of {tp.__name__} "
                    "in RPC or persist/snapshot will break your Raft"
                )
                _count_error()
            _check_type(f.type)
        return
    for arg in typing.get_args(tp):
        _check_type(arg)


def _check_value(value: Any) -> None:
    _check_type(_type_of(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _check_value(item)
    elif isinstance(value, dict):
        for key, item in value.items():
            _check_value(key)
            _check_value(item)
    elif _is_dataclass_instance(value):
        for f in dataclasses.fields(value):
            if _is_exported(f.name):
                _check_value(getattr(value, f.name))


def _zero_of(value: Any) -> Optional[Any]:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 0
    if isinstance(value, float):
        return 0.0
    if isinstance(value, str):
        return ""
    return None


def _check_default(value: Any, depth: int = 2, name: str = "") -> None:
    if depth > 3 or value is None:
        return
    if _is_dataclass_instance(value):
        for f in dataclasses.fields(value):
            field_name = f"{name}.{f.name}" if name else f.name
            _check_default(getattr(value, f.name), depth + 1, field_name)
        return
    zero = _zero_of(value)
    if zero is not None and value != zero:
        _note_default(name or type(value).__name__)


# --- wire format ------------------------------------------------------------


def _to_wire(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return {"e": _name_for(type(value)), "v": _to_wire(value.value)}
    if _is_dataclass_instance(value):
        fields = {
            f.name: _to_wire(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if _is_exported(f.name)
        }
        return {"o": _name_for(type(value)), "f": fields}
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return {"b": base64.b64encode(bytes(value)).decode("ascii")}
    if isinstance(value, list):
        return {"l": [_to_wire(item) for item in value]}
    if isinstance(value, tuple):
        return {"t": [_to_wire(item) for item in value]}
    if isinstance(value, frozenset):
        return {"fs": [_to_wire(item) for item in value]}
    if isinstance(value, set):
        return {"s": [_to_wire(item) for item in value]}
    if isinstance(value, dict):
        return {"d": [[_to_wire(k), _to_wire(v)] for k, v in value.items()]}
    raise TypeError(f"cannot encode value of type {type(value).__name__}")


def _build(cls: type, values: Dict[str, Any]) -> Any:
    obj = cls.__new__(cls)
    for f in dataclasses.fields(cls):
        if f.name in values:
            item = values[f.name]
        elif f.default is not dataclasses.MISSING:
            item = f.default
        elif f.default_factory is not dataclasses.MISSING:
            item = f.default_factory()
        else:
            item = None
        object.__setattr__(obj, f.name, item)
    return obj


def _from_wire(data: Any) -> Any:
    if data is None or isinstance(data, (bool, int, float, str)):
        return data
    if not isinstance(data, dict):
        raise LabGobError(f"malformed value {data!r}")
    try:
        if "o" in data:
            cls = _type_named(data["o"])
            if not dataclasses.is_dataclass(cls):
                raise LabGobError(f"{data['o']!r} is not a dataclass")
            values = {k: _from_wire(v) for k, v in data["f"].items()}
            return _build(cls, values)
        if "e" in data:
            cls = _type_named(data["e"])
            try:
                return cls(_from_wire(data["v"]))
            except ValueError as exc:
                raise LabGobError(str(exc)) from exc
        if "b" in data:
            return base64.b64decode(data["b"])
        if "l" in data:
            return [_from_wire(item) for item in data["l"]]
        if "t" in data:
            return tuple(_from_wire(item) for item in data["t"])
        if "fs" in data:
            return frozenset(_from_wire(item) for item in data["fs"])
        if "s" in data:
            return {_from_wire(item) for item in data["s"]}
        if "d" in data:
            return {_from_wire(k): _from_wire(v) for k, v in data["d"]}
    except (KeyError, TypeError, AttributeError) as exc:
        raise LabGobError(f"malformed value {data!r}") from exc
    raise LabGobError(f"unknown tag in {data!r}")


class LabEncoder:
    """Writes values to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def encode(self, value: Any) -> None:
        """Check ``value`` for fields that would be lost, then write it."""
        _check_value(value)
        payload = json.dumps(_to_wire(value), separators=(",", ":")).encode("utf-8")
        self._stream.write(_HEADER.pack(len(payload)) + payload)


class LabDecoder:
    """Reads values written by :class:`LabEncoder` from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _read(self) -> Any:
        header = self._stream.read(_HEADER.size)
        if not header:
            raise EOFError("no more values in stream")
        if len(header) < _HEADER.size:
            raise LabGobError("truncated header")
        (length,) = _HEADER.unpack(header)
        payload = self._stream.read(length)
        if len(payload) < length:
            raise LabGobError("truncated value")
        try:
            data = json.loads(payload.decode("utf-8"))
        except ValueError as exc:
            raise LabGobError(f"invalid payload: {exc}") from exc
        return _from_wire(data)

    def decode(self, into: Any = None) -> Any:
        """Read the next value.

        ``into`` may be a type the value must have, or an existing object:
        a non-frozen dataclass, list or dict is filled in place and returned,
        after a warning if it already held non-default values.
        """
        if into is not None:
            _check_value(into)
            if not isinstance(into, type):
                _check_default(into)
        value = self._read()
        if into is None:
            return value
        if isinstance(into, type):
            if not isinstance(value, into):
                raise TypeError(f"expected {into.__name__}, got {type(value).__name__}")
            return value
        if _is_dataclass_instance(into):
            if type(value) is not type(into):
                raise TypeError(f"expected {type(into).__name__}, got {type(value).__name__}")
            try:
                for f in dataclasses.fields(into):
                    setattr(into, f.name, getattr(value, f.name))
            except dataclasses.FrozenInstanceError:
                return value
            return into
        if not isinstance(value, type(into)):
            raise TypeError(f"expected {type(into).__name__}, got {type(value).__name__}")
        if isinstance(into, list):
            into[:] = value
            return into
        if isinstance(into, dict):
            into.clear()
            into.update(value)
            return into
        return value