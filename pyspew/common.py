"""
Traversal state and helpers shared by the Indented and Inline renderers.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
from typing import Protocol

# Local ----------------------------------------------------------------------------------------------------------------
from .access import ACCESSOR, FieldAccessor
from .config import SpewOptions
from .methods import handle_methods, panic, safe_str
from .reflect import Kind, ReflectValue
from .tracker import CycleTracker

# Output tokens
NIL = "<nil>"
INVALID = "<invalid>"
SHOWN = "<shown>"
MAX_SHORT = "<max>"
MAX_LONG = "<max depth reached>"


# Classes --------------------------------------------------------------------------------------------------------------

class Writer(Protocol):
    def write(self, s: str, /) -> object: ...


class TraversalContext:
    """
    State of one top-level rendering call.

    Holds the depth counter, a fresh `CycleTracker`, the read-only options, the
    field accessor and the output sink. Never shared across calls or threads.
    """

    def __init__(self, sink: Writer, options: SpewOptions, accessor: FieldAccessor | None = None) -> None:
        self.sink = sink
        self.options = options
        self.accessor = accessor if accessor is not None else ACCESSOR
        self.tracker = CycleTracker()
        self.depth = 0
        self.ignore_next_type = False

    def write(self, text: str) -> None:
        self.sink.write(text)

    def type_name(self, value: ReflectValue) -> str:
        return value.type_name(fully_qualified=self.options.fully_qualified_names)

    def max_exceeded(self) -> bool:
        """True when the body at the current depth lies beyond `max_depth`."""
        return self.options.max_depth != 0 and self.depth > self.options.max_depth

    def handle_methods(self, value: ReflectValue) -> bool:
        return handle_methods(self, value)

    def fallback_text(self, value: ReflectValue) -> str:
        """
        Render a value of a kind the engine does not know.

        Readable values use the host `str()`, denied ones a `<Type Value>` placeholder.
        """
        if self.accessor.can_read(value):
            return safe_str(value.obj)
        return f"<{self.type_name(value)} Value>"


# Methods --------------------------------------------------------------------------------------------------------------

def unpack_value(value: ReflectValue) -> ReflectValue:
    """Unwrap boxes (cells, weakrefs) until a non-box or an empty box is reached."""
    while value.kind is Kind.INTERFACE and not value.is_nil():
        value = value.elem()
    return value


def invalid_text(value: ReflectValue) -> str:
    """`<invalid>`, or the panic placeholder when reading the value raised."""
    if value.error is not None:
        return panic(value.error)
    return INVALID


def scalar_text(value: ReflectValue) -> str:
    """
    Render BOOL, INT, FLOAT and COMPLEX values by their numeric value.

    Subclasses render like their base number, so `__str__` overrides are left to
    the custom conversion step.
    """
    obj = value.obj
    try:
        if value.kind is Kind.BOOL:
            return "True" if obj else "False"
        if value.kind is Kind.INT:
            return str(int(obj))
        if value.kind is Kind.FLOAT:
            number = float(obj)
            return repr(number) if math.isfinite(number) else str(number)
        return str(complex(obj))
    except Exception as exc:
        return panic(exc)


def string_text(value: ReflectValue) -> str:
    """Return the characters of a STRING value, ignoring any `__str__` override."""
    return str.__str__(value.obj)


def hexdump(data: bytes) -> str:
    """
    Return a `hexdump -C` style listing of `data`, one line per 16 bytes.

    Example:
        >>> hexdump(b"\\x01\\x02abc")
        '00000000  01 02 61 62 63                                    |..abc|\\n'
    """
    lines = []
    for offset in range(0, len(data), 16):
        chunk = data[offset:offset + 16]
        hex_part = ""
        for i in range(16):
            hex_part += f"{chunk[i]:02x} " if i < len(chunk) else "   "
            if i == 7:
                hex_part += " "
        text = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        lines.append(f"{offset:08x}  {hex_part} |{text}|\n")
    return "".join(lines)
