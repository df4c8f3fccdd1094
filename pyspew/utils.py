"""
Pyspew utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import json
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.
    Builtins are never qualified with their module.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns `module.QualName` for non-builtin classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> class C: ...
        >>> class_name(C())
        'C'
        >>> class_name(C, fully_qualified=True)
        'pyspew.utils.C'
    """
    cls = obj if isinstance(obj, type) else type(obj)

    # Broken metaclasses may hide these attributes
    name = getattr(cls, "__name__", None) or "?"
    module = getattr(cls, "__module__", None)

    if not fully_qualified or module in (None, "builtins"):
        return name

    qualname = getattr(cls, "__qualname__", None) or name
    return f"{module}.{qualname}"


def hex_ptr(addr: int) -> str:
    """
    Format a reference identity the way debug output shows pointers.

    Examples:
        >>> hex_ptr(0xc000012345)
        '0xc000012345'
        >>> hex_ptr(0)
        '<nil>'
    """
    if not addr:
        return "<nil>"
    return f"0x{addr:x}"


def quote(s: str) -> str:
    """
    Return a double-quoted, escaped string literal.

    Control characters are escaped, printable unicode is kept as is.

    Examples:
        >>> quote("one")
        '"one"'
    """
    return json.dumps(s, ensure_ascii=False)


def fmt_type(obj: Any) -> str:
    """
    Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        '<type: int>'
        >>> fmt_type(ValueError)
        '<type: ValueError>'
    """
    return f"<type: {class_name(obj)}>"
