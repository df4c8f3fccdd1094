"""
Indented renderer: one entry per line with type annotations.

Example output for `[1, "a", {"k": None}]`:

    (list) (len=3) {
     (int) 1,
     (str) (len=1) "a",
     (dict) (len=1) {
      (str) (len=1) "k": (NoneType) <nil>
     }
    }
"""

# Standard library -----------------------------------------------------------------------------------------------------
import io
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .common import (
    MAX_LONG,
    NIL,
    SHOWN,
    TraversalContext,
    Writer,
    hexdump,
    invalid_text,
    scalar_text,
    string_text,
    unpack_value,
)
from .config import SpewOptions
from .methods import panic
from .reflect import SCALAR_KINDS, Kind, ReflectValue, value_of
from .sorting import sort_values
from .utils import fmt_type, hex_ptr, quote

__all__ = ["DumpState", "fdump", "sdump"]

_LEN_KINDS = frozenset({Kind.STRING, Kind.BYTES, Kind.SEQUENCE, Kind.SET, Kind.MAP, Kind.CHANNEL})
_CAP_KINDS = frozenset({Kind.SEQUENCE, Kind.CHANNEL})


# Classes --------------------------------------------------------------------------------------------------------------

class DumpState(TraversalContext):
    """Traversal state of one value rendered in Indented mode."""

    def __init__(self, sink: Writer, options: SpewOptions, accessor=None) -> None:
        super().__init__(sink, options, accessor)
        self.ignore_next_indent = False

    def indent(self) -> None:
        if self.ignore_next_indent:
            self.ignore_next_indent = False
            return
        self.write(self.options.indent * self.depth)

    def dump(self, value: ReflectValue) -> None:
        """Render `value` at the current depth."""
        kind = value.kind

        if kind is Kind.INVALID:
            self.ignore_next_type = False
            self.indent()
            self.write(invalid_text(value))
            return

        if kind is Kind.POINTER:
            self.indent()
            self.dump_pointer(value)
            return

        if not self.ignore_next_type:
            self.indent()
            self.write(f"({self.type_name(value)}) ")
        self.ignore_next_type = False

        self.write_len_cap(value)

        if kind is not Kind.INTERFACE and self.handle_methods(value):
            return

        if kind is Kind.NIL or kind is Kind.INTERFACE:
            self.write(NIL)
        elif kind in SCALAR_KINDS:
            self.write(scalar_text(value))
        elif kind is Kind.STRING:
            self.write(quote(string_text(value)))
        elif kind is Kind.BYTES:
            self.dump_body(value, self.dump_bytes)
        elif kind in (Kind.SEQUENCE, Kind.SET):
            self.dump_body(value, self.dump_sequence)
        elif kind is Kind.MAP:
            self.dump_body(value, self.dump_map)
        elif kind is Kind.STRUCT:
            self.dump_body(value, self.dump_struct)
        elif kind in (Kind.CHANNEL, Kind.FUNC):
            self.write(hex_ptr(value.pointer()))
        else:
            self.write(self.fallback_text(value))

    def dump_pointer(self, value: ReflectValue) -> None:
        """Write `(*Type)(0xaddr)(value)`, or `<shown>` as the value on a cycle."""
        cycle = self.tracker.visit(value.identity, self.depth)

        self.write(f"(*{self.type_name(value)})")
        if not self.options.disable_pointer_addresses:
            self.write(f"({hex_ptr(value.pointer())})")

        self.write("(")
        if cycle:
            self.write(SHOWN)
        else:
            self.ignore_next_type = True
            self.dump(value.elem())
        self.write(")")

    def write_len_cap(self, value: ReflectValue) -> None:
        """Write `(len=N cap=M) ` for non-zero lengths and capacities."""
        length = value.len() if value.kind in _LEN_KINDS else 0
        capacity = value.cap() if value.kind in _CAP_KINDS and not self.options.disable_capacities else 0

        parts = []
        if length:
            parts.append(f"len={length}")
        if capacity:
            parts.append(f"cap={capacity}")
        if parts:
            self.write(f"({' '.join(parts)}) ")

    def dump_body(self, value: ReflectValue, members) -> None:
        """
        Write a braced body, truncated beyond `max_depth`.

        A container already on the descent path renders `<shown>` in place of the body.
        """
        self.depth += 1
        truncated = self.max_exceeded()
        self.depth -= 1

        if not truncated and value.identity is not None and self.tracker.visit(value.identity, self.depth):
            self.write(SHOWN)
            return

        self.write("{\n")
        self.depth += 1
        if truncated:
            self.indent()
            self.write(MAX_LONG + "\n")
        else:
            members(value)
        self.depth -= 1
        self.indent()
        self.write("}")

    def dump_bytes(self, value: ReflectValue) -> None:
        indent = self.options.indent * self.depth
        try:
            data = value.bytes()
        except Exception as exc:
            self.write(indent + panic(exc) + "\n")
            return
        text = indent + hexdump(data)
        text = text.replace("\n", "\n" + indent)
        self.write(text.rstrip(self.options.indent))

    def dump_sequence(self, value: ReflectValue) -> None:
        items = value.elements()
        if value.kind is Kind.SET and self.options.sort_keys:
            sort_values(items, self.options, self.accessor)

        for i, item in enumerate(items):
            self.dump(unpack_value(item))
            self.write(",\n" if i < len(items) - 1 else "\n")

    def dump_map(self, value: ReflectValue) -> None:
        keys = value.map_keys()
        if self.options.sort_keys:
            sort_values(keys, self.options, self.accessor)

        for i, key in enumerate(keys):
            self.dump(unpack_value(key))
            self.write(": ")
            self.ignore_next_indent = True
            self.dump(unpack_value(value.map_index(key)))
            self.write(",\n" if i < len(keys) - 1 else "\n")

    def dump_struct(self, value: ReflectValue) -> None:
        fields = value.fields()
        for i, (name, field) in enumerate(fields):
            self.indent()
            self.write(f"{name}: ")
            self.ignore_next_indent = True
            self.dump(unpack_value(field))
            self.write(",\n" if i < len(fields) - 1 else "\n")


# Methods --------------------------------------------------------------------------------------------------------------

def fdump(options: SpewOptions, file: Writer, *values: Any) -> None:
    """
    Write the Indented rendering of each value to `file`, each followed by a newline.

    Raises:
        TypeError: If `file` has no callable `write`.
    """
    if not callable(getattr(file, "write", None)):
        raise TypeError(f"file must have a write() method, but got {fmt_type(file)}")

    for obj in values:
        state = DumpState(file, options)
        state.dump(unpack_value(value_of(obj)))
        state.write("\n")


def sdump(options: SpewOptions, *values: Any) -> str:
    """Return the Indented rendering of each value, each followed by a newline."""
    buffer = io.StringIO()
    fdump(options, buffer, *values)
    return buffer.getvalue()
