#
# Pyspew - Reflect Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import array
import collections
import functools
import queue
import weakref
from collections import namedtuple
from dataclasses import dataclass, field
from enum import Enum

# Third party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from pyspew.reflect import Kind, ReflectValue, classify, value_of
from pyspew.sentinels import NO_VALUE

Pair = namedtuple("Pair", "left right")


class Color(Enum):
    RED = 1


class Plain:
    def __init__(self):
        self.b = 2
        self.a = 1


class Slotted:
    __slots__ = ("x", "y")


class Secret:
    __slots__ = ("__key",)

    def __init__(self):
        self.__key = "k"


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Lazy:
    items: list = field(default_factory=list)

    def __getattr__(self, name):
        raise RuntimeError(f"no {name}")


class WithProperty:
    def __init__(self):
        self.x = 1

    @property
    def boom(self):
        raise RuntimeError("evaluated")


def _gen():
    yield 1


# Tests ----------------------------------------------------------------------------------------------------------------

class TestClassify:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(NO_VALUE, Kind.INVALID, id="no-value"),
            pytest.param(None, Kind.NIL, id="none"),
            pytest.param(True, Kind.BOOL, id="bool"),
            pytest.param(7, Kind.INT, id="int"),
            pytest.param(1.5, Kind.FLOAT, id="float"),
            pytest.param(1 + 2j, Kind.COMPLEX, id="complex"),
            pytest.param("s", Kind.STRING, id="str"),
            pytest.param(b"b", Kind.BYTES, id="bytes"),
            pytest.param(bytearray(b"b"), Kind.BYTES, id="bytearray"),
            pytest.param(memoryview(b"b"), Kind.BYTES, id="memoryview"),
            pytest.param(queue.Queue(), Kind.CHANNEL, id="queue"),
            pytest.param(_gen(), Kind.CHANNEL, id="generator"),
            pytest.param(len, Kind.FUNC, id="builtin"),
            pytest.param(_gen, Kind.FUNC, id="function"),
            pytest.param(functools.partial(int, "1"), Kind.FUNC, id="partial"),
            pytest.param({}, Kind.MAP, id="dict"),
            pytest.param(frozendict(a=1), Kind.MAP, id="frozendict"),
            pytest.param({1}, Kind.SET, id="set"),
            pytest.param(frozenset(), Kind.SET, id="frozenset"),
            pytest.param([1], Kind.SEQUENCE, id="list"),
            pytest.param((1,), Kind.SEQUENCE, id="tuple"),
            pytest.param(range(3), Kind.SEQUENCE, id="range"),
            pytest.param(collections.deque(), Kind.SEQUENCE, id="deque"),
            pytest.param(array.array("i"), Kind.SEQUENCE, id="array"),
            pytest.param(Pair(1, 2), Kind.STRUCT, id="namedtuple"),
            pytest.param(Color.RED, Kind.STRUCT, id="enum"),
            pytest.param(Plain(), Kind.POINTER, id="object"),
            pytest.param(Slotted(), Kind.POINTER, id="slotted"),
            pytest.param(ValueError("x"), Kind.POINTER, id="exception"),
            pytest.param(int, Kind.UNKNOWN, id="class"),
            pytest.param(collections, Kind.UNKNOWN, id="module"),
            pytest.param(object(), Kind.UNKNOWN, id="bare-object"),
        ],
    )
    def test_kinds(self, obj, expected):
        """Map Python values onto the closed Kind set."""
        assert classify(obj) is expected

    def test_weakref_is_interface(self):
        """Classify weak references as boxes."""
        target = Plain()
        assert classify(weakref.ref(target)) is Kind.INTERFACE

    def test_cell_is_interface(self):
        """Classify closure cells as boxes."""
        captured = [1]
        cell = (lambda: captured).__closure__[0]
        assert classify(cell) is Kind.INTERFACE


class TestReflectValue:
    def test_invalid_handle(self):
        """Report an invalid handle with its type name."""
        value = ReflectValue.invalid()
        assert not value.is_valid()
        assert value.type_name() == "invalid"
        assert value.identity is None

    def test_identity_for_reference_kinds(self):
        """Expose id() for containers and objects, None for scalars."""
        items = [1]
        assert value_of(items).identity == id(items)
        assert value_of(5).identity is None
        assert value_of("s").identity is None

    def test_pointer_elem(self):
        """Dereference an object to an addressable struct without identity."""
        obj = Plain()
        elem = value_of(obj).elem()
        assert elem.kind is Kind.STRUCT
        assert elem.obj is obj
        assert elem.addressable
        assert elem.identity is None

    def test_elem_of_scalar_raises(self):
        """Refuse to dereference a non-reference value."""
        with pytest.raises(TypeError, match="pointer or interface"):
            value_of(5).elem()

    def test_dead_weakref_is_nil(self):
        """Treat a dead weak reference as nil."""
        target = Plain()
        ref = weakref.ref(target)
        del target
        assert value_of(ref).is_nil()
        assert value_of(ref).elem().kind is Kind.NIL

    def test_cell_elem(self):
        """Unwrap a closure cell to its content."""
        captured = [1, 2]
        cell = (lambda: captured).__closure__[0]
        assert value_of(cell).elem().obj is captured

    def test_type_name(self):
        """Return short or qualified type names."""
        assert value_of(Plain()).type_name() == "Plain"
        assert value_of(Plain()).type_name(fully_qualified=True) == f"{__name__}.Plain"
        assert value_of([]).type_name(fully_qualified=True) == "list"


class TestFields:
    @staticmethod
    def _fields(obj):
        return [(name, value.obj) for name, value in value_of(obj).elem().fields()]

    def test_dict_insertion_order(self):
        """List instance attributes in assignment order."""
        assert self._fields(Plain()) == [("b", 2), ("a", 1)]

    def test_dataclass_declaration_order(self):
        """List dataclass fields in declaration order."""
        assert self._fields(Point(x=1, y=2)) == [("x", 1), ("y", 2)]

    def test_namedtuple_fields(self):
        """Read named tuple fields from _fields."""
        fields = value_of(Pair(1, "r")).fields()
        assert [(name, value.obj) for name, value in fields] == [("left", 1), ("right", "r")]

    def test_enum_fields(self):
        """Expose name and value of an Enum member."""
        fields = value_of(Color.RED).fields()
        assert [(name, value.obj) for name, value in fields] == [("name", "RED"), ("value", 1)]

    def test_unset_slot_is_invalid(self):
        """Yield an invalid handle for a declared but unset slot."""
        obj = Slotted()
        obj.x = 1
        fields = dict(value_of(obj).elem().fields())
        assert fields["x"].obj == 1
        assert not fields["y"].is_valid()
        assert fields["y"].error is None

    def test_mangled_slot(self):
        """Report private slots under their mangled name."""
        assert self._fields(Secret()) == [("_Secret__key", "k")]

    def test_properties_not_evaluated(self):
        """Never call properties while listing fields."""
        assert self._fields(WithProperty()) == [("x", 1)]

    def test_raising_getattr_is_captured(self):
        """Keep the exception of a failing attribute read on the invalid handle."""
        obj = Lazy()
        del obj.items
        (name, value), = value_of(obj).elem().fields()
        assert name == "items"
        assert not value.is_valid()
        assert isinstance(value.error, RuntimeError)

    def test_exported_flag(self):
        """Mark fields with a leading underscore, and everything below them, as not exported."""
        outer = Plain()
        outer._hidden = Plain()
        fields = dict(value_of(outer).elem().fields())
        assert fields["a"].exported
        assert not fields["_hidden"].exported
        inner = dict(fields["_hidden"].elem().fields())
        assert not inner["a"].exported


class TestSizes:
    @pytest.mark.parametrize(
        "obj, length, capacity",
        [
            pytest.param([1, 2, 3], 3, 0, id="list"),
            pytest.param("abcd", 4, 0, id="str"),
            pytest.param({"a": 1}, 1, 0, id="dict"),
            pytest.param(collections.deque([1], maxlen=4), 1, 4, id="bounded-deque"),
            pytest.param(collections.deque([1]), 1, 0, id="unbounded-deque"),
            pytest.param(queue.Queue(maxsize=8), 0, 8, id="queue"),
            pytest.param(7, 0, 0, id="int"),
        ],
    )
    def test_len_cap(self, obj, length, capacity):
        """Report lengths and the capacities Python exposes."""
        value = value_of(obj)
        assert value.len() == length
        assert value.cap() == capacity

    def test_map_index_failure(self):
        """Return an invalid handle carrying the error when a lookup fails."""

        class Flaky(dict):
            def __getitem__(self, key):
                raise KeyError(key)

        mapping = value_of(Flaky(a=1))
        key, = mapping.map_keys()
        value = mapping.map_index(key)
        assert not value.is_valid()
        assert isinstance(value.error, KeyError)
