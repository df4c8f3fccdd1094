"""
Custom textual conversion of values.

A value converts through its own textual capability when it has one: an
exception converts to its message, any other object to its `__str__` as long
as that method is implemented outside the builtins (a user class, `Enum`,
`datetime`, `pathlib.Path`, ...). Plain builtin containers and scalars never
convert, they are rendered structurally.

Conversions run user code. Any `Exception` raised there is caught and turned
into a `(PANIC=...)` placeholder; `BaseException` subclasses such as
`KeyboardInterrupt` propagate.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .reflect import Kind, ReflectValue

_NEVER_CONVERTED = frozenset({Kind.INVALID, Kind.NIL, Kind.INTERFACE})


# Methods --------------------------------------------------------------------------------------------------------------

def has_custom_str(cls: type) -> bool:
    """
    Check whether `cls` resolves `__str__` to an implementation outside the builtins.

    Examples:
        >>> has_custom_str(int)
        False
        >>> import pathlib
        >>> has_custom_str(pathlib.PurePosixPath)
        True
    """
    for klass in getattr(cls, "__mro__", ()):
        if "__str__" in klass.__dict__:
            return klass is not object and getattr(klass, "__module__", None) != "builtins"
    return False


def find_conversion(value: ReflectValue) -> Callable[[], str] | None:
    """
    Return a zero-argument callable producing the value's own text, or None.

    Exceptions prefer their message and fall back to the exception type name
    when the message is empty.
    """
    if value.kind in _NEVER_CONVERTED:
        return None

    obj = value.obj
    if isinstance(obj, BaseException):
        return lambda: _error_text(obj)
    if has_custom_str(type(obj)):
        return lambda: str(obj)
    return None


def panic_text(exc: BaseException) -> str:
    """
    Describe an exception raised by user code for the `(PANIC=...)` placeholder.

    Examples:
        >>> panic_text(ValueError("boom"))
        'ValueError: boom'
        >>> panic_text(RuntimeError())
        'RuntimeError'
    """
    name = type(exc).__name__
    try:
        message = str(exc)
    except Exception:
        message = ""
    return f"{name}: {message}" if message else name


def panic(exc: BaseException) -> str:
    return f"(PANIC={panic_text(exc)})"


def safe_str(obj: Any) -> str:
    """Return `str(obj)`, or a panic placeholder when the conversion raises."""
    try:
        return str(obj)
    except Exception as exc:
        return panic(exc)


def handle_methods(ctx, value: ReflectValue) -> bool:
    """
    Render `value` through its own conversion when it is eligible.

    A value is eligible when methods are enabled, its kind can carry a conversion,
    the active accessor lets user code see it and its type offers one.

    Returns:
        bool: True when the conversion output (or a panic placeholder) replaced the
        structural rendering. With `continue_on_method` the text is written in
        parentheses followed by a space and False is returned, so the caller
        renders the structure as well.
    """
    if ctx.options.disable_methods:
        return False
    if not ctx.accessor.can_read(value):
        return False

    conversion = find_conversion(value)
    if conversion is None:
        return False

    try:
        text = conversion()
    except Exception as exc:
        ctx.write(panic(exc))
        return True

    if ctx.options.continue_on_method:
        ctx.write(f"({text}) ")
        return False

    ctx.write(text)
    return True


# Private Methods ------------------------------------------------------------------------------------------------------

def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
