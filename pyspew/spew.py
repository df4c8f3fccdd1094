"""
Pyspew public API bound to the process-wide default options.

Indented dumps:

    >>> from pyspew.spew import sdump
    >>> print(sdump({"a": [1, 2]}), end="")
    (dict) (len=1) {
     (str) (len=1) "a": (list) (len=2) {
      (int) 1,
      (int) 2
     }
    }

Inline formatting follows `str.format` syntax, every argument is wrapped in a
`SpewFormatter` so that "+", "#" and "+#" specs select the Inline variants:

    >>> from pyspew.spew import sprintf
    >>> sprintf("{} {:#}", [1, 2], 3)
    '[1 2] (int)3'

Use `configure()` to change the defaults, or a `SpewOptions` instance for
per-call options.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import sys
from typing import Any, TextIO

# Local ----------------------------------------------------------------------------------------------------------------
from . import dump as _dump
from . import format as _format
from .config import SpewOptions, configure, get_options
from .format import SpewError, SpewFormatter

__all__ = [
    "SpewError",
    "SpewFormatter",
    "SpewOptions",
    "configure",
    "dump",
    "errorf",
    "fdump",
    "fprint",
    "fprintf",
    "fprintln",
    "get_options",
    "new_formatter",
    "print_",
    "printf",
    "println",
    "sdump",
    "sprint",
    "sprintf",
    "sprintln",
]


# Methods --------------------------------------------------------------------------------------------------------------

def dump(*values: Any) -> None:
    """Write the Indented rendering of each value to stdout."""
    _dump.fdump(get_options(), sys.stdout, *values)


def fdump(file: TextIO, *values: Any) -> None:
    """Write the Indented rendering of each value to `file`."""
    _dump.fdump(get_options(), file, *values)


def sdump(*values: Any) -> str:
    """Return the Indented rendering of each value."""
    return _dump.sdump(get_options(), *values)


def new_formatter(value: Any) -> SpewFormatter:
    """Wrap `value` for use as a `str.format` argument."""
    return SpewFormatter(value, get_options())


def printf(fmt: str, *args: Any, **kwargs: Any) -> int:
    return _format.fprintf(get_options(), sys.stdout, fmt, *args, **kwargs)


def sprintf(fmt: str, *args: Any, **kwargs: Any) -> str:
    return _format.sprintf(get_options(), fmt, *args, **kwargs)


def fprintf(file: TextIO, fmt: str, *args: Any, **kwargs: Any) -> int:
    return _format.fprintf(get_options(), file, fmt, *args, **kwargs)


def print_(*args: Any) -> int:
    """Write the Inline rendering of the arguments to stdout, separated by spaces."""
    return _format.fprint(get_options(), sys.stdout, *args)


def println(*args: Any) -> int:
    """Like `print_()`, followed by a newline."""
    return _format.fprint(get_options(), sys.stdout, *args, end="\n")


def sprint(*args: Any) -> str:
    return _format.sprint(get_options(), *args)


def sprintln(*args: Any) -> str:
    return _format.sprint(get_options(), *args) + "\n"


def fprint(file: TextIO, *args: Any) -> int:
    return _format.fprint(get_options(), file, *args)


def fprintln(file: TextIO, *args: Any) -> int:
    return _format.fprint(get_options(), file, *args, end="\n")


def errorf(fmt: str, *args: Any, **kwargs: Any) -> SpewError:
    """
    Return a `SpewError` whose message is `sprintf(fmt, *args, **kwargs)`.

    Example:
        >>> raise errorf("bad config {:+}", {"port": -1})
        Traceback (most recent call last):
        ...
        pyspew.format.SpewError: bad config map[port:-1]
    """
    return SpewError(_format.sprintf(get_options(), fmt, *args, **kwargs))
