"""
Reflective handles over arbitrary Python objects.

A `ReflectValue` wraps one runtime object together with the metadata the
traversal engine needs: its structural `Kind`, its type name, whether it was
reached through a public or a private field, whether it sits in a mutable
slot, and (for reference kinds) an identity usable for cycle detection.

The classifier is a closed mapping from Python types onto `Kind`. Anything the
mapping does not recognise lands in `Kind.UNKNOWN` so that new host types
degrade to a generic rendering instead of failing.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import array
import asyncio
import collections
import collections.abc as abc
import dataclasses
import functools
import inspect
import numbers
import queue
import types
import weakref
from enum import Enum, unique
from typing import Any, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import NO_VALUE
from .utils import class_name


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(str, Enum):
    """
    Structural category of a reflective value.

    Python mapping:
        - NIL: None
        - BOOL, INT, FLOAT, COMPLEX: numbers by their `numbers` ABC
        - STRING: str; BYTES: bytes, bytearray, memoryview
        - POINTER: instance of a class carrying `__dict__` or `__slots__`; its element is a STRUCT
        - INTERFACE: single-value box (closure cell, weakref), unwrapped transparently
        - STRUCT: field record (named tuple, Enum member, or the element of a POINTER)
        - SEQUENCE, SET, MAP: collections by their `collections.abc` ABC
        - CHANNEL: queues, generators and coroutines
        - FUNC: functions, methods, builtins, partials
        - UNKNOWN: everything else (classes, modules, Decimal, ...)
    """
    INVALID = "invalid"
    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    POINTER = "pointer"
    INTERFACE = "interface"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    SET = "set"
    MAP = "map"
    CHANNEL = "channel"
    FUNC = "func"
    UNKNOWN = "unknown"


SCALAR_KINDS = frozenset({Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.COMPLEX})

# Kinds whose identity can repeat along a descent path
_TRACKED_KINDS = frozenset({Kind.POINTER, Kind.STRUCT, Kind.SEQUENCE, Kind.SET, Kind.MAP})

_SIZED_KINDS = frozenset({Kind.STRING, Kind.BYTES, Kind.SEQUENCE, Kind.SET, Kind.MAP})

_CHANNEL_TYPES = (
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    types.GeneratorType,
    types.AsyncGeneratorType,
    types.CoroutineType,
)

_BOX_TYPES = (types.CellType, weakref.ReferenceType)


class ReflectValue:
    """
    Borrowed handle to one runtime value plus its metadata.

    Attributes:
        obj: The underlying object, or `NO_VALUE` for an invalid handle.
        kind: Structural kind, computed with `classify()` unless given.
        exported: False when the value was reached through a private (`_name`) field,
            at any level above it.
        addressable: True when the value was read from a mutable slot
            (an attribute of an object, an element of a mutable sequence, a dict value).
            Informational only: conversions are bound methods and need no addressable
            receiver, so neither the accessors nor the conversion step read it.
        error: The exception raised while reading the value, for invalid handles only.
        referenced: True for the STRUCT obtained by dereferencing a POINTER.
    """

    __slots__ = ("obj", "kind", "exported", "addressable", "error", "referenced")

    def __init__(self,
                 obj: Any = NO_VALUE,
                 *,
                 kind: Kind | None = None,
                 exported: bool = True,
                 addressable: bool = False,
                 error: BaseException | None = None,
                 referenced: bool = False) -> None:
        self.obj = obj
        self.kind = kind if kind is not None else classify(obj)
        self.exported = exported
        self.addressable = addressable
        self.error = error
        self.referenced = referenced

    def __repr__(self) -> str:
        return f"ReflectValue(kind={self.kind.value}, type={self.type_name()}, exported={self.exported})"

    @classmethod
    def invalid(cls, error: BaseException | None = None, *, exported: bool = True) -> "ReflectValue":
        """Return a handle with no underlying data."""
        return cls(NO_VALUE, kind=Kind.INVALID, exported=exported, error=error)

    @property
    def identity(self) -> int | None:
        """Reference identity for cycle detection, None for non-reference kinds."""
        if self.kind in _TRACKED_KINDS and not self.referenced:
            return id(self.obj)
        return None

    def type_name(self, fully_qualified: bool = False) -> str:
        if self.kind is Kind.INVALID:
            return "invalid"
        return class_name(self.obj, fully_qualified=fully_qualified)

    def is_valid(self) -> bool:
        return self.kind is not Kind.INVALID

    def is_nil(self) -> bool:
        """True for None and for boxes that hold nothing (empty cell, dead weakref)."""
        if self.kind is Kind.NIL:
            return True
        if self.kind is Kind.INTERFACE:
            return _unbox(self.obj) is NO_VALUE
        return False

    def interface(self) -> Any:
        """Return the underlying object."""
        return self.obj

    def pointer(self) -> int:
        """Return the identity of the underlying object."""
        return id(self.obj)

    def elem(self) -> "ReflectValue":
        """
        Dereference a POINTER or unwrap an INTERFACE box.

        Raises:
            TypeError: If the value is neither a pointer nor a box.
        """
        if self.kind is Kind.POINTER:
            return ReflectValue(self.obj,
                                kind=Kind.STRUCT,
                                exported=self.exported,
                                addressable=True,
                                referenced=True)
        if self.kind is Kind.INTERFACE:
            content = _unbox(self.obj)
            if content is NO_VALUE:
                content = None
            return ReflectValue(content, exported=self.exported, addressable=self.addressable)
        raise TypeError(f"elem() requires a pointer or interface value, but found {self.kind.value}")

    def fields(self) -> list[tuple[str, "ReflectValue"]]:
        """
        Return STRUCT fields as (name, value) pairs in declaration order.

        Dataclass fields come first, then the instance `__dict__` in insertion order,
        then `__slots__` along the MRO. Properties are never evaluated. A declared
        but unset slot yields an invalid handle.
        """
        addressable = self.referenced
        result = []
        for name, value, error in _struct_fields(self.obj):
            exported = self.exported and not name.startswith("_")
            if value is NO_VALUE:
                result.append((name, ReflectValue.invalid(error, exported=exported)))
            else:
                result.append((name, ReflectValue(value, exported=exported, addressable=addressable)))
        return result

    def elements(self) -> list["ReflectValue"]:
        """Return the members of a SEQUENCE, SET or BYTES value."""
        obj = self.obj
        addressable = isinstance(obj, abc.MutableSequence)
        try:
            items = list(bytes(obj)) if self.kind is Kind.BYTES else list(obj)
        except Exception as exc:
            return [ReflectValue.invalid(exc, exported=self.exported)]
        return [ReflectValue(item, exported=self.exported, addressable=addressable) for item in items]

    def bytes(self) -> bytes:
        """Return the raw content of a BYTES value."""
        return bytes(self.obj)

    def map_keys(self) -> list["ReflectValue"]:
        try:
            keys = list(self.obj.keys())
        except Exception as exc:
            return [ReflectValue.invalid(exc, exported=self.exported)]
        return [ReflectValue(key, exported=self.exported) for key in keys]

    def map_index(self, key: "ReflectValue") -> "ReflectValue":
        """Return the value stored under `key`, or an invalid handle if the lookup fails."""
        if not key.is_valid():
            return ReflectValue.invalid(key.error, exported=self.exported)
        try:
            value = self.obj[key.obj]
        except Exception as exc:
            return ReflectValue.invalid(exc, exported=self.exported)
        return ReflectValue(value, exported=self.exported, addressable=isinstance(self.obj, abc.MutableMapping))

    def len(self) -> int:
        """Return the length where the kind has one, 0 otherwise (or when len() fails)."""
        try:
            if self.kind is Kind.CHANNEL:
                qsize = getattr(self.obj, "qsize", None)
                return int(qsize()) if callable(qsize) else 0
            if self.kind in _SIZED_KINDS:
                return len(self.obj)
        except Exception:
            return 0
        return 0

    def cap(self) -> int:
        """
        Return the capacity where Python exposes one, 0 otherwise.

        Capacities: `deque.maxlen`, `queue.Queue.maxsize` and `asyncio.Queue.maxsize`.
        """
        obj = self.obj
        if isinstance(obj, collections.deque):
            return obj.maxlen or 0
        if isinstance(obj, (queue.Queue, asyncio.Queue)):
            return max(obj.maxsize, 0)
        return 0


# Methods --------------------------------------------------------------------------------------------------------------

def classify(obj: Any) -> Kind:
    """
    Determine the structural kind of a Python object.

    Total over all objects: unrecognised ones map to `Kind.UNKNOWN`.

    Examples:
        >>> classify(None)
        <Kind.NIL: 'nil'>
        >>> classify([1, 2])
        <Kind.SEQUENCE: 'sequence'>
        >>> classify(int)
        <Kind.UNKNOWN: 'unknown'>
    """
    if obj is NO_VALUE:
        return Kind.INVALID
    if obj is None:
        return Kind.NIL
    if isinstance(obj, bool):
        return Kind.BOOL
    if isinstance(obj, numbers.Integral):
        return Kind.INT
    if isinstance(obj, numbers.Real):
        return Kind.FLOAT
    if isinstance(obj, numbers.Complex):
        return Kind.COMPLEX
    if isinstance(obj, str):
        return Kind.STRING
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    if isinstance(obj, _BOX_TYPES):
        return Kind.INTERFACE
    # Classes and modules are callable or carry a __dict__, keep them away from FUNC/POINTER
    if isinstance(obj, (type, types.ModuleType)):
        return Kind.UNKNOWN
    if isinstance(obj, _CHANNEL_TYPES):
        return Kind.CHANNEL
    if inspect.isroutine(obj) or isinstance(obj, functools.partial):
        return Kind.FUNC
    if isinstance(obj, abc.Mapping):
        return Kind.MAP
    if isinstance(obj, abc.Set):
        return Kind.SET
    if _is_named_tuple(obj) or isinstance(obj, Enum):
        return Kind.STRUCT
    if isinstance(obj, (abc.Sequence, abc.ValuesView, collections.deque, array.array)):
        return Kind.SEQUENCE
    if _has_fields(obj):
        return Kind.POINTER
    return Kind.UNKNOWN


def value_of(obj: Any) -> ReflectValue:
    """Return a root handle for `obj`."""
    return ReflectValue(obj)


# Private Methods ------------------------------------------------------------------------------------------------------

def _unbox(box: Any) -> Any:
    """Return the content of a cell or weakref, NO_VALUE when empty or dead."""
    if isinstance(box, weakref.ReferenceType):
        target = box()
        return NO_VALUE if target is None else target
    try:
        return box.cell_contents
    except ValueError:
        return NO_VALUE


def _is_named_tuple(obj: Any) -> bool:
    return isinstance(obj, tuple) and isinstance(getattr(type(obj), "_fields", None), tuple)


def _instance_dict(obj: Any) -> dict:
    try:
        attrs = object.__getattribute__(obj, "__dict__")
    except (AttributeError, TypeError):
        return {}
    return attrs if isinstance(attrs, dict) else {}


def _has_fields(obj: Any) -> bool:
    try:
        object.__getattribute__(obj, "__dict__")
        return True
    except (AttributeError, TypeError):
        return bool(_slot_names(type(obj)))


def _slot_names(cls: type) -> list[str]:
    """Collect `__slots__` along the MRO, base classes first, with private names mangled."""
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if not isinstance(slot, str) or slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            if slot not in names:
                names.append(slot)
    return names


def _field_names(obj: Any) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()

    candidates: list[str] = []
    if dataclasses.is_dataclass(obj):
        candidates.extend(f.name for f in dataclasses.fields(obj))
    candidates.extend(_instance_dict(obj))
    candidates.extend(_slot_names(type(obj)))

    for name in candidates:
        if not isinstance(name, str) or name in seen:
            continue
        if name.startswith("__") and name.endswith("__"):
            continue  # Skip dunder
        seen.add(name)
        names.append(name)
    return names


def _struct_fields(obj: Any) -> Iterator[tuple[str, Any, BaseException | None]]:
    """Yield (name, value, error) triples; value is NO_VALUE when it cannot be read."""
    if isinstance(obj, Enum):
        yield "name", obj._name_, None
        yield "value", obj._value_, None
        return

    if _is_named_tuple(obj):
        for name, value in zip(type(obj)._fields, tuple.__iter__(obj)):
            yield name, value, None
        return

    attrs = _instance_dict(obj)
    for name in _field_names(obj):
        if name in attrs:
            yield name, attrs[name], None
            continue
        value, error = NO_VALUE, None
        try:
            value = getattr(obj, name)
        except AttributeError:
            pass  # Declared but unset slot
        except Exception as exc:
            error = exc
        yield name, value, error
