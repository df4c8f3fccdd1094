"""
Field access policy for private data.

Two interchangeable accessors decide whether the engine may hand a value to
user code (its `__str__`, or the generic `str()` fallback). The permissive
accessor reads anything; the restrictive one refuses values reached through a
private (`_name`) field, and the engine renders a placeholder instead.

The accessor is selected once, at import time, from the `PYSPEW_SAFE`
environment variable. It never changes for the lifetime of the process.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import os
import warnings
from typing import Protocol, runtime_checkable

# Local ----------------------------------------------------------------------------------------------------------------
from .reflect import ReflectValue

__all__ = [
    "ACCESSOR",
    "UNSAFE_DISABLED",
    "FieldAccessor",
    "PermissiveAccessor",
    "RestrictiveAccessor",
    "select_accessor",
]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("", "0", "false", "no", "off")


# Classes --------------------------------------------------------------------------------------------------------------

@runtime_checkable
class FieldAccessor(Protocol):
    """Answers whether a value may be passed to user-defined conversion code."""

    name: str

    def can_read(self, value: ReflectValue) -> bool: ...


class PermissiveAccessor:
    """Reads private and public data alike."""

    name = "permissive"

    def can_read(self, value: ReflectValue) -> bool:
        return True

    def __repr__(self) -> str:
        return "PermissiveAccessor()"


class RestrictiveAccessor:
    """Reads public data only; anything below a private field is denied."""

    name = "restrictive"

    def can_read(self, value: ReflectValue) -> bool:
        return value.exported

    def __repr__(self) -> str:
        return "RestrictiveAccessor()"


# Methods --------------------------------------------------------------------------------------------------------------

def select_accessor(flag: str | None) -> FieldAccessor:
    """
    Choose the accessor for a `PYSPEW_SAFE` setting.

    Truthy values ("1", "true", "yes", "on") select the restrictive accessor, falsy
    or missing values the permissive one. Anything else warns and falls back to
    permissive.

    Examples:
        >>> select_accessor("1")
        RestrictiveAccessor()
        >>> select_accessor(None)
        PermissiveAccessor()
    """
    if flag is None:
        return PermissiveAccessor()

    normalized = flag.strip().lower()
    if normalized in _TRUTHY:
        return RestrictiveAccessor()
    if normalized not in _FALSY:
        warnings.warn(f"unrecognized PYSPEW_SAFE value {flag!r}, using the permissive accessor",
                      RuntimeWarning, stacklevel=2)
    return PermissiveAccessor()


ACCESSOR: FieldAccessor = select_accessor(os.environ.get("PYSPEW_SAFE"))

# True when private data is off limits for this process
UNSAFE_DISABLED: bool = isinstance(ACCESSOR, RestrictiveAccessor)
