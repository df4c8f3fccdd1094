"""
Sentinel object for reflective handles that carry no underlying value.

`NO_VALUE` stands in for "nothing here at all", which is different from
`None` (a perfectly valid value that renders as `<nil>`). All checks use
identity (`is`), never equality.

Example:
    >>> from pyspew.reflect import ReflectValue
    >>> ReflectValue(NO_VALUE).is_valid()
    False
"""

from typing import Final

__all__ = [
    'NO_VALUE',
    'NoValueType',
]


class NoValueType:
    """
    Sentinel type for NO_VALUE.

    Singleton optimized for identity checks, falsy, and stable across pickling.
    """
    __slots__ = ()

    _instance: 'NoValueType | None' = None

    def __new__(cls) -> 'NoValueType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<NO_VALUE>'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


NO_VALUE: Final[NoValueType] = NoValueType()
