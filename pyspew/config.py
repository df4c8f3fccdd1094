"""
Pyspew configuration.

`SpewOptions` is an immutable set of switches consulted at each traversal step.
Build one explicitly for per-call behaviour, or rebind the process-wide default
with `configure()`; instances themselves are never mutated.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import sys
import warnings
from dataclasses import dataclass, fields, replace
from typing import Any, Literal, Self, TextIO

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_type

__all__ = [
    "SpewOptions",
    "configure",
    "get_options",
]


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class SpewOptions:
    """
    Rendering options shared by the Indented (dump) and Inline (format) renderers.

    Attributes:
        indent: Indentation unit of the Indented renderer.
        max_depth: Maximum nesting depth, 0 for unlimited. Bodies nested deeper
            render as `<max depth reached>` (Indented) or `<max>` (Inline).
        disable_methods: Never render values through their own `__str__` or exception message.
        disable_pointer_addresses: Omit `0x...` identities of referenced objects.
        disable_capacities: Omit `cap=` annotations.
        continue_on_method: After a custom conversion, render the structure as well.
        sort_keys: Sort mapping keys and set members for deterministic output.
        spew_keys: When sorting keys without a natural order, compare their Inline renderings.
        fully_qualified_names: Annotate types as `module.QualName`.

    Examples:
        >>> SpewOptions(indent="\\t").sdump([1])
        '(list) (len=1) {\\n\\t(int) 1\\n}\\n'
        >>> SpewOptions.stable().sort_keys
        True
    """
    indent: str = " "
    max_depth: int = 0
    disable_methods: bool = False
    disable_pointer_addresses: bool = False
    disable_capacities: bool = False
    continue_on_method: bool = False
    sort_keys: bool = False
    spew_keys: bool = False
    fully_qualified_names: bool = False

    def __post_init__(self):
        """Validate and normalize fields"""
        if not isinstance(self.indent, str):
            raise TypeError(f"indent must be str, but got {fmt_type(self.indent)}")

        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise TypeError(f"max_depth must be int, but got {fmt_type(self.max_depth)}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, but got {self.max_depth}")

        for f in fields(self):
            if f.name not in ("indent", "max_depth"):
                object.__setattr__(self, f.name, bool(getattr(self, f.name)))

        if self.continue_on_method and self.disable_methods:
            warnings.warn("continue_on_method has no effect while disable_methods is set",
                          UserWarning, stacklevel=3)

    @classmethod
    def stable(cls) -> Self:
        """
        Reproducible output: sorted keys, no identities, no capacities.

        Suited for golden files and test assertions.
        """
        return cls(sort_keys=True, disable_pointer_addresses=True, disable_capacities=True)

    @classmethod
    def compact(cls) -> Self:
        """Shallow output for large graphs, three levels deep."""
        return cls(max_depth=3, disable_capacities=True)

    @classmethod
    def debug(cls) -> Self:
        """Show custom conversions next to the full structure, sorted."""
        return cls(sort_keys=True, continue_on_method=True)

    def merge(self, **kwargs) -> Self:
        """
        Return a new instance with the given fields overridden.

        Raises:
            TypeError: If an unknown option name is given.
        """
        return replace(self, **kwargs)

    # Indented ---------------------------------------------------------------------------------------------------------

    def dump(self, *values: Any) -> None:
        """Write the Indented rendering of each value to stdout."""
        from .dump import fdump
        fdump(self, sys.stdout, *values)

    def fdump(self, file: TextIO, *values: Any) -> None:
        from .dump import fdump
        fdump(self, file, *values)

    def sdump(self, *values: Any) -> str:
        from .dump import sdump
        return sdump(self, *values)

    # Inline -----------------------------------------------------------------------------------------------------------

    def formatter(self, value: Any):
        """Wrap `value` in a `SpewFormatter` bound to these options."""
        from .format import SpewFormatter
        return SpewFormatter(value, self)

    def sprintf(self, fmt: str, *args: Any, **kwargs: Any) -> str:
        from .format import sprintf
        return sprintf(self, fmt, *args, **kwargs)

    def fprintf(self, file: TextIO, fmt: str, *args: Any, **kwargs: Any) -> int:
        from .format import fprintf
        return fprintf(self, file, fmt, *args, **kwargs)

    def printf(self, fmt: str, *args: Any, **kwargs: Any) -> int:
        from .format import fprintf
        return fprintf(self, sys.stdout, fmt, *args, **kwargs)

    def sprint(self, *args: Any) -> str:
        from .format import sprint
        return sprint(self, *args)

    def sprintln(self, *args: Any) -> str:
        from .format import sprint
        return sprint(self, *args) + "\n"

    def fprint(self, file: TextIO, *args: Any) -> int:
        from .format import fprint
        return fprint(self, file, *args)

    def fprintln(self, file: TextIO, *args: Any) -> int:
        from .format import fprint
        return fprint(self, file, *args, end="\n")

    def print(self, *args: Any) -> int:
        from .format import fprint
        return fprint(self, sys.stdout, *args)

    def println(self, *args: Any) -> int:
        from .format import fprint
        return fprint(self, sys.stdout, *args, end="\n")

    def errorf(self, fmt: str, *args: Any, **kwargs: Any):
        """Return a `SpewError` carrying the Inline-formatted message."""
        from .format import SpewError, sprintf
        return SpewError(sprintf(self, fmt, *args, **kwargs))


# Methods --------------------------------------------------------------------------------------------------------------

Preset = Literal["default", "stable", "compact", "debug"]

_PRESETS = {
    "default": SpewOptions,
    "stable": SpewOptions.stable,
    "compact": SpewOptions.compact,
    "debug": SpewOptions.debug,
}

_default_options: SpewOptions = SpewOptions()


def get_options() -> SpewOptions:
    """Return the current process-wide default options."""
    return _default_options


def configure(preset: Preset | None = None, **kwargs: Any) -> SpewOptions:
    """
    Rebind the process-wide default options.

    Starts from `preset` when given, otherwise from the current default, and
    applies `kwargs` on top. Calls in flight keep the instance they captured.

    Args:
        preset: One of "default", "stable", "compact", "debug".
        **kwargs: SpewOptions fields to override.

    Returns:
        SpewOptions: The new default.

    Raises:
        ValueError: If the preset is unknown.
        TypeError: If an option name or value type is invalid.

    Examples:
        >>> configure("stable", max_depth=4).max_depth
        4
        >>> configure("default") == SpewOptions()
        True
    """
    global _default_options

    if preset is None:
        base = _default_options
    else:
        if not isinstance(preset, str):
            raise TypeError(f"preset must be str or None, but got {fmt_type(preset)}")
        if preset not in _PRESETS:
            raise ValueError(f"preset expected one of {', '.join(map(repr, _PRESETS))} but found {preset!r}")
        base = _PRESETS[preset]()

    _default_options = base.merge(**kwargs) if kwargs else base
    return _default_options
