"""
Deterministic ordering of mapping keys and set members.

Keys are ordered first by a kind rank, then by their natural value within the
rank:

    invalid < None < numbers (bool, int, float; NaN last) < complex < str < bytes < tuple < other

Keys of the "other" rank order by type name, then by text: their own
conversion when every such key has one and methods are enabled, their Inline
rendering when `spew_keys` is set, and a `<Type Value>` placeholder otherwise.
Ordering never calls `__str__` unless methods are enabled and the accessor
allows it; keys tied on the placeholder keep their input order. The order is
cosmetic and carries no meaning beyond repeatable output.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .access import ACCESSOR, FieldAccessor
from .config import SpewOptions
from .methods import find_conversion, panic
from .reflect import Kind, ReflectValue

__all__ = ["sort_key", "sort_values"]

_RANK_INVALID = 0
_RANK_NIL = 1
_RANK_NUMBER = 2
_RANK_COMPLEX = 3
_RANK_STRING = 4
_RANK_BYTES = 5
_RANK_TUPLE = 6
_RANK_OTHER = 7

_KIND_RANKS = {
    Kind.INVALID: _RANK_INVALID,
    Kind.NIL: _RANK_NIL,
    Kind.BOOL: _RANK_NUMBER,
    Kind.INT: _RANK_NUMBER,
    Kind.FLOAT: _RANK_NUMBER,
    Kind.COMPLEX: _RANK_COMPLEX,
    Kind.STRING: _RANK_STRING,
    Kind.BYTES: _RANK_BYTES,
}


# Methods --------------------------------------------------------------------------------------------------------------

def sort_values(values: list[ReflectValue],
                options: SpewOptions,
                accessor: FieldAccessor | None = None) -> None:
    """
    Sort `values` in place into a deterministic total order.

    Example:
        >>> from pyspew.reflect import value_of
        >>> keys = [value_of(k) for k in ("b", 2, None, "a", 1.5)]
        >>> sort_values(keys, SpewOptions())
        >>> [k.obj for k in keys]
        [None, 1.5, 2, 'a', 'b']
    """
    accessor = accessor if accessor is not None else ACCESSOR
    others = [value for value in values if _rank(value) == _RANK_OTHER]
    texts = _other_texts(others, options, accessor)
    values.sort(key=lambda value: sort_key(value, texts))


def sort_key(value: ReflectValue, texts: dict[int, str] | None = None) -> tuple:
    """
    Return the sort key tuple of one value.

    Args:
        value: The key to order.
        texts: Precomputed texts of "other" rank keys, by handle identity. Keys
            without one order by the `<Type Value>` placeholder, which runs no user code.
    """
    kind = value.kind
    obj = value.obj

    if kind is Kind.INVALID:
        return (_RANK_INVALID,)
    if kind is Kind.NIL:
        return (_RANK_NIL,)

    try:
        if kind in (Kind.BOOL, Kind.INT):
            return (_RANK_NUMBER, 0, int(obj))
        if kind is Kind.FLOAT:
            number = float(obj)
            return (_RANK_NUMBER, 1, 0) if number != number else (_RANK_NUMBER, 0, number)
        if kind is Kind.COMPLEX:
            number = complex(obj)
            return (_RANK_COMPLEX, number.real, number.imag)
        if kind is Kind.BYTES:
            return (_RANK_BYTES, bytes(obj))
    except Exception:
        return _other_key(value, texts)

    if kind is Kind.STRING:
        return (_RANK_STRING, str.__str__(obj))
    if _is_tuple(value):
        return (_RANK_TUPLE, tuple(sort_key(ReflectValue(item), texts) for item in tuple.__iter__(obj)))
    return _other_key(value, texts)


# Private Methods ------------------------------------------------------------------------------------------------------

def _rank(value: ReflectValue) -> int:
    kind = value.kind
    if kind in _KIND_RANKS:
        return _KIND_RANKS[kind]
    if _is_tuple(value):
        return _RANK_TUPLE
    return _RANK_OTHER


def _is_tuple(value: ReflectValue) -> bool:
    return isinstance(value.obj, tuple) and value.kind in (Kind.SEQUENCE, Kind.STRUCT)


def _other_key(value: ReflectValue, texts: dict[int, str] | None) -> tuple:
    type_name = value.type_name(fully_qualified=True)
    text = (texts or {}).get(id(value))
    if text is None:
        text = f"<{type_name} Value>"
    return (_RANK_OTHER, type_name, text)


def _other_texts(others: list[ReflectValue], options: SpewOptions, accessor: FieldAccessor) -> dict[int, str]:
    if not others:
        return {}

    if not options.disable_methods:
        conversions = [find_conversion(value) if accessor.can_read(value) else None for value in others]
        if all(conversion is not None for conversion in conversions):
            return {id(value): _convert(conversion) for value, conversion in zip(others, conversions)}

    if options.spew_keys:
        from .format import sprint_value
        return {id(value): sprint_value(options, value.obj, plus=True, sharp=True, accessor=accessor)
                for value in others}

    return {}


def _convert(conversion: Callable[[], Any]) -> str:
    try:
        return conversion()
    except Exception as exc:
        return panic(exc)
