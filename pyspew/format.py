"""
Inline renderer and `str.format` integration.

`SpewFormatter` wraps a value so that format specs drive the Inline renderer:

    - "" or "v": values only, e.g. `{1 two}`
    - "+" or "+v": field names and object identities, e.g. `{a:1 b:two}`, `<*>(0xc000)`
    - "#" or "#v": type annotations, e.g. `(Point){x:(int)1 y:(int)2}`
    - "+#", "#+" (with or without "v"): both

Any other spec goes to the wrapped value's own `__format__`, and is applied to the
base Inline string when the value rejects it (`"{:>10}"` on a list, for example).
"""

# Standard library -----------------------------------------------------------------------------------------------------
import io
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .access import FieldAccessor
from .common import (
    MAX_SHORT,
    NIL,
    SHOWN,
    TraversalContext,
    Writer,
    invalid_text,
    scalar_text,
    string_text,
    unpack_value,
)
from .config import SpewOptions, get_options
from .reflect import SCALAR_KINDS, Kind, ReflectValue, value_of
from .sorting import sort_values
from .utils import fmt_type, hex_ptr

__all__ = [
    "FormatState",
    "SpewError",
    "SpewFormatter",
    "fprint",
    "fprintf",
    "sprint",
    "sprint_value",
    "sprintf",
]

_FLAGS = frozenset("+#")


# Classes --------------------------------------------------------------------------------------------------------------

class SpewError(ValueError):
    """Error carrying a message built with the Inline renderer, see `errorf()`."""


class FormatState(TraversalContext):
    """
    Traversal state of one value rendered in Inline mode.

    Attributes:
        plus: Show struct field names and object identities.
        sharp: Show type annotations and struct field names.
    """

    def __init__(self,
                 sink: Writer,
                 options: SpewOptions,
                 plus: bool = False,
                 sharp: bool = False,
                 accessor: FieldAccessor | None = None) -> None:
        super().__init__(sink, options, accessor)
        self.plus = plus
        self.sharp = sharp

    def format(self, value: ReflectValue) -> None:
        """Render `value` at the current depth."""
        kind = value.kind

        if kind is Kind.INVALID:
            self.ignore_next_type = False
            self.write(invalid_text(value))
            return

        if kind is Kind.POINTER:
            self.format_pointer(value)
            return

        if self.sharp and not self.ignore_next_type:
            self.write(f"({self.type_name(value)})")
        self.ignore_next_type = False

        if kind is not Kind.INTERFACE and self.handle_methods(value):
            return

        if kind is Kind.NIL or kind is Kind.INTERFACE:
            self.write(NIL)
        elif kind in SCALAR_KINDS:
            self.write(scalar_text(value))
        elif kind is Kind.STRING:
            self.write(string_text(value))
        elif kind in (Kind.BYTES, Kind.SEQUENCE, Kind.SET):
            self.format_body(value, "[", "]", self.format_sequence)
        elif kind is Kind.MAP:
            self.format_body(value, "map[", "]", self.format_map)
        elif kind is Kind.STRUCT:
            self.format_body(value, "{", "}", self.format_struct)
        elif kind in (Kind.CHANNEL, Kind.FUNC):
            self.write(hex_ptr(value.pointer()))
        else:
            self.write(self.fallback_text(value))

    def format_pointer(self, value: ReflectValue) -> None:
        """Write `<*>`, `(*Type)` with "#", plus `(0xaddr)` with "+", then the referenced value."""
        cycle = self.tracker.visit(value.identity, self.depth)

        if self.sharp and not self.ignore_next_type:
            self.write(f"(*{self.type_name(value)})")
        else:
            self.write("<*>")

        if self.plus and not self.options.disable_pointer_addresses:
            self.write(f"({hex_ptr(value.pointer())})")

        if cycle:
            self.ignore_next_type = False
            self.write(SHOWN)
        else:
            self.ignore_next_type = True
            self.format(value.elem())

    def format_body(self, value: ReflectValue, opening: str, closing: str, members) -> None:
        """
        Write a delimited body, `<max>` beyond `max_depth`.

        A container already on the descent path renders `<shown>` in place of the body.
        """
        self.depth += 1
        truncated = self.max_exceeded()
        self.depth -= 1

        if not truncated and value.identity is not None and self.tracker.visit(value.identity, self.depth):
            self.write(SHOWN)
            return

        self.write(opening)
        self.depth += 1
        if truncated:
            self.write(MAX_SHORT)
        else:
            members(value)
        self.depth -= 1
        self.write(closing)

    def format_sequence(self, value: ReflectValue) -> None:
        items = value.elements()
        if value.kind is Kind.SET and self.options.sort_keys:
            sort_values(items, self.options, self.accessor)

        for i, item in enumerate(items):
            if i > 0:
                self.write(" ")
            self.ignore_next_type = True
            self.format(unpack_value(item))

    def format_map(self, value: ReflectValue) -> None:
        keys = value.map_keys()
        if self.options.sort_keys:
            sort_values(keys, self.options, self.accessor)

        for i, key in enumerate(keys):
            if i > 0:
                self.write(" ")
            self.ignore_next_type = True
            self.format(unpack_value(key))
            self.write(":")
            self.ignore_next_type = True
            self.format(unpack_value(value.map_index(key)))

    def format_struct(self, value: ReflectValue) -> None:
        for i, (name, field) in enumerate(value.fields()):
            if i > 0:
                self.write(" ")
            if self.plus or self.sharp:
                self.write(f"{name}:")
            self.format(unpack_value(field))


class SpewFormatter:
    """
    Wrap a value so that `str.format` renders it with the Inline renderer.

    The options are captured when the formatter is created.

    Examples:
        >>> "{}".format(SpewFormatter([1, "a"]))
        '[1 a]'
        >>> "{:#}".format(SpewFormatter({"k": 1}))
        '(dict)map[k:1]'
        >>> "{:>4}".format(SpewFormatter(7))
        '   7'
    """

    __slots__ = ("value", "options")

    def __init__(self, value: Any, options: SpewOptions | None = None) -> None:
        self.value = value
        self.options = options if options is not None else get_options()

    def __format__(self, format_spec: str) -> str:
        flags = format_spec[:-1] if format_spec.endswith("v") else format_spec
        if set(flags) <= _FLAGS and len(set(flags)) == len(flags):
            return sprint_value(self.options, self.value, plus="+" in flags, sharp="#" in flags)
        try:
            return format(self.value, format_spec)
        except (TypeError, ValueError):
            return format(str(self), format_spec)

    def __str__(self) -> str:
        return sprint_value(self.options, self.value)

    def __repr__(self) -> str:
        return repr(self.value)


# Methods --------------------------------------------------------------------------------------------------------------

def sprint_value(options: SpewOptions,
                 obj: Any,
                 plus: bool = False,
                 sharp: bool = False,
                 accessor: FieldAccessor | None = None) -> str:
    """Return the Inline rendering of a single object."""
    buffer = io.StringIO()
    state = FormatState(buffer, options, plus=plus, sharp=sharp, accessor=accessor)
    state.format(unpack_value(value_of(obj)))
    return buffer.getvalue()


def sprintf(options: SpewOptions, fmt: str, *args: Any, **kwargs: Any) -> str:
    """
    Format `fmt` with every argument wrapped in a `SpewFormatter`.

    Raises:
        TypeError: If `fmt` is not a str.
    """
    if not isinstance(fmt, str):
        raise TypeError(f"fmt must be str, but got {fmt_type(fmt)}")
    wrapped_args = [SpewFormatter(arg, options) for arg in args]
    wrapped_kwargs = {name: SpewFormatter(arg, options) for name, arg in kwargs.items()}
    return fmt.format(*wrapped_args, **wrapped_kwargs)


def fprintf(options: SpewOptions, file: Writer, fmt: str, *args: Any, **kwargs: Any) -> int:
    """Write `sprintf()` output to `file` and return the number of characters written."""
    _check_writer(file)
    text = sprintf(options, fmt, *args, **kwargs)
    file.write(text)
    return len(text)


def sprint(options: SpewOptions, *args: Any) -> str:
    """Return the base Inline rendering of each argument, joined by a space."""
    return " ".join(sprint_value(options, arg) for arg in args)


def fprint(options: SpewOptions, file: Writer, *args: Any, end: str = "") -> int:
    """Write `sprint()` output and `end` to `file`, return the number of characters written."""
    _check_writer(file)
    text = sprint(options, *args) + end
    file.write(text)
    return len(text)


# Private Methods ------------------------------------------------------------------------------------------------------

def _check_writer(file: Any) -> None:
    if not callable(getattr(file, "write", None)):
        raise TypeError(f"file must have a write() method, but got {fmt_type(file)}")
