"""
Sentinel objects used by the settings layers and lookups.

Sentinels are singletons compared by identity ('is'), never by equality.

Sentinels:
    UNSET: A settings flag not assigned in this layer (distinct from None,
           which is a legal tri-state value that callers may read back)
    NOT_FOUND: A lookup that matched nothing (a registered formatter
               may itself legitimately return None)

Helper Functions:
    ifnotunset: Return default if value is UNSET, otherwise return value
    iffound: Return default if value is NOT_FOUND, otherwise return value

Example:
    >>> fn = settings.get_member_formatter(user, "password")
    >>> if fn is NOT_FOUND:
    ...     text = pretty(user.password)
"""

from typing import Any, Callable, Final

__all__ = [
    'UNSET',
    'NOT_FOUND',
    'UnsetType',
    'NotFoundType',
    'ifnotunset',
    'iffound',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for sentinel objects.

    Falsy, hashable by identity, and pickled back to the same singleton.
    """
    __slots__ = ('_name',)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False


# Sentinel Types -------------------------------------------------------------------------------------------------------

class NotFoundType(_SentinelBase):
    """Sentinel type for NOT_FOUND, the result of a registry lookup that matched nothing."""
    _instance: 'NotFoundType | None' = None

    def __new__(cls) -> 'NotFoundType':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("NOT_FOUND")

    def __reduce__(self) -> tuple:
        return (self.__class__, ())


class UnsetType(_SentinelBase):
    """
    Sentinel type for UNSET.

    Marks a settings flag that was never assigned in a layer, so that reads
    fall through to the parent layer.
    """
    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("UNSET")

    def __reduce__(self) -> tuple:
        return (self.__class__, ())


# Sentinel Objects -----------------------------------------------------------------------------------------------------

NOT_FOUND: Final[NotFoundType] = NotFoundType()
"""Sentinel representing a failed registry lookup."""

UNSET: Final[UnsetType] = UnsetType()
"""
Sentinel representing a flag not assigned in the current settings layer.

Use with identity check: `if flag is UNSET:`
"""


# Helper Functions -----------------------------------------------------------------------------------------------------

def _if_sentinel(
        value: Any,
        sentinel: Any,
        *,
        default: Any = None,
        default_factory: Callable[[], Any] | None = None
) -> Any:
    """
    Return value if it is not the sentinel, otherwise the default.

    Raises:
        ValueError: If both default and default_factory are provided.
    """
    if value is not sentinel:
        return value

    if default_factory is not None and default is not None:
        raise ValueError("Cannot specify both default and default_factory")

    if default_factory is not None:
        return default_factory()

    return default


def ifnotunset(value: Any, *, default: Any = None, default_factory: Callable[[], Any] | None = None) -> Any:
    """
    Return value if it's not UNSET, otherwise return default.

    Examples:
        >>> ifnotunset(True, default=None)
        True
        >>> ifnotunset(UNSET, default_factory=lambda: parent.prefers_multiline)
    """
    return _if_sentinel(value, UNSET, default=default, default_factory=default_factory)


def iffound(value: Any, *, default: Any = None, default_factory: Callable[[], Any] | None = None) -> Any:
    """
    Return value if it's not NOT_FOUND, otherwise return default.

    Examples:
        >>> iffound(settings.get_member_formatter(user, "email"), default=str)
    """
    return _if_sentinel(value, NOT_FOUND, default=default, default_factory=default_factory)
