"""
Sentinel objects and symbols for marking special values and well-known hooks.

This module provides singleton sentinels, which stand for values that have no
natural Python spelling, and a small `Symbol` type used as unique keys for the
inspection and promisify hook protocols. All sentinels and symbols use identity
checks (using 'is') rather than equality checks.

Sentinels:
    UNDEFINED: A value that was never assigned (rendered as ``undefined``)
    NOT_FOUND: Indicates failed lookup operations (alternative to None)

Symbols:
    Symbol: Unique identity-compared key with an optional registry (``Symbol.for_``)
    INSPECT_CUSTOM, INSPECT_CUSTOM_COMPAT: Custom inspection hook markers
    INSPECT_IGNORE: Marker suppressing a custom inspection hook
    PROMISIFY_CUSTOM: Custom promisify override marker
    PROMISIFY_ARGS: Named callback result slots marker

Helper Functions:
    iffound: Return default if value is NOT_FOUND, otherwise return value
    symbol_get: Look up a symbol-keyed entry on a mapping or an object
    symbol_set: Store a symbol-keyed entry on a mapping or an object

Example:
    >>> class Point:
    ...     def __inspect__(self, depth, options, inspect):
    ...         return "<Point>"
    >>> symbol_get(Point(), INSPECT_CUSTOM) is not NOT_FOUND
    True
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
import threading
from typing import Any, Callable, ClassVar, Final

__all__ = [
    'UNDEFINED',
    'NOT_FOUND',
    'UndefinedType',
    'NotFoundType',
    'Symbol',
    'INSPECT_CUSTOM',
    'INSPECT_CUSTOM_COMPAT',
    'INSPECT_IGNORE',
    'PROMISIFY_CUSTOM',
    'PROMISIFY_ARGS',
    'iffound',
    'symbol_get',
    'symbol_set',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for all sentinel objects.

    Sentinels are singleton objects optimized for identity checks.
    They provide clean representations and consistent behavior.
    """
    __slots__ = ('_name',)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        """Returns a clean string representation for debugging."""
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        """Ensures identity-based comparison."""
        return self is other

    def __hash__(self) -> int:
        """Returns a hash based on object identity."""
        return id(self)

    def __bool__(self) -> bool:
        """Returns False by default (sentinels are typically falsy)."""
        return False

    def __reduce__(self) -> tuple:
        """Ensures proper behavior during pickling."""
        return (self.__class__, (self._name,))


# Sentinel Types -------------------------------------------------------------------------------------------------------

class NotFoundType(_SentinelBase):
    """
    Sentinel type for NOT_FOUND.

    Return value for lookup operations that fail, where None might be ambiguous.
    Probes in this package return it instead of raising.
    """
    _instance: 'NotFoundType | None' = None

    def __new__(cls) -> 'NotFoundType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("NOT_FOUND")

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


class UndefinedType(_SentinelBase):
    """
    Sentinel type for UNDEFINED.

    Marks a slot that exists but never received a value. It is distinct from
    None, which the inspector renders as ``null``.
    """
    _instance: 'UndefinedType | None' = None

    def __new__(cls) -> 'UndefinedType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, '_name'):
            super().__init__("UNDEFINED")

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


class Symbol(_SentinelBase):
    """
    Unique, identity-compared key.

    Plain ``Symbol("desc")`` calls always create a new symbol. ``Symbol.for_(key)``
    returns the one registered symbol for ``key``, creating it on first use.

    Python attributes must be strings, so a symbol may carry an ``attribute``
    name: objects expose a symbol-keyed value through that attribute, while
    mappings may store it under the symbol itself. See `symbol_get`.
    """
    __slots__ = ('attribute', '_registered')

    _registry: ClassVar[dict[str, 'Symbol']] = {}
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, description: str = "", attribute: str | None = None) -> None:
        super().__init__(str(description))
        if attribute is not None and not re.fullmatch(r"[A-Za-z_]\w*", attribute):
            raise ValueError(f"attribute must be a valid identifier, but found {attribute!r}")
        self.attribute = attribute
        self._registered = False

    @classmethod
    def for_(cls, key: str, attribute: str | None = None) -> 'Symbol':
        """Return the registered symbol for key, creating it on first use."""
        key = str(key)
        with cls._registry_lock:
            symbol = cls._registry.get(key)
            if symbol is None:
                symbol = cls(key, attribute=attribute)
                symbol._registered = True
                cls._registry[key] = symbol
        return symbol

    @classmethod
    def key_for(cls, symbol: 'Symbol') -> str | None:
        """Return the registry key of a registered symbol, None otherwise."""
        if isinstance(symbol, Symbol) and symbol._registered:
            return symbol._name
        return None

    @property
    def description(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f'Symbol({self._name})'

    def __str__(self) -> str:
        return f'Symbol({self._name})'

    def __bool__(self) -> bool:
        return True

    def __reduce__(self) -> tuple:
        if self._registered:
            return (Symbol.for_, (self._name, self.attribute))
        return (self.__class__, (self._name, self.attribute))


# Sentinel Objects -----------------------------------------------------------------------------------------------------

NOT_FOUND: Final[NotFoundType] = NotFoundType()
"""
Sentinel representing a failed lookup operation.

Useful for attribute probes where None is a valid stored value but you need to
signal absence.
"""

UNDEFINED: Final[UndefinedType] = UndefinedType()
"""
Sentinel representing a value that was never assigned.

Use with identity check: `if value is UNDEFINED:`
"""

# Well-known Symbols ---------------------------------------------------------------------------------------------------

INSPECT_CUSTOM: Final[Symbol] = Symbol.for_("vinspect.inspect.custom", attribute="__inspect__")
INSPECT_CUSTOM_COMPAT: Final[Symbol] = Symbol.for_("nodejs.util.inspect.custom", attribute="__inspect_custom__")
INSPECT_IGNORE: Final[Symbol] = Symbol.for_("vinspect.inspect.ignore", attribute="__inspect_ignore__")
PROMISIFY_CUSTOM: Final[Symbol] = Symbol.for_("nodejs.util.promisify.custom", attribute="__promisify__")
PROMISIFY_ARGS: Final[Symbol] = Symbol.for_("nodejs.util.promisify.args", attribute="__promisify_args__")


# Helper Functions -----------------------------------------------------------------------------------------------------

def iffound(value: Any, *, default: Any = None, default_factory: Callable[[], Any] | None = None) -> Any:
    """
    Return value if it's not NOT_FOUND, otherwise return default.

    Args:
        value: The value to check. If not NOT_FOUND, this value is returned.
        default: The fallback value when value is NOT_FOUND.
        default_factory: Callable returning the fallback value. Takes precedence over default.

    Returns:
        The value itself if not NOT_FOUND, otherwise the default (or result of default_factory).

    Raises:
        ValueError: If both default and default_factory are provided.

    Example:
        >>> iffound(symbol_get({}, PROMISIFY_ARGS), default=())
        ()
    """
    if value is not NOT_FOUND:
        return value

    if default_factory is not None and default is not None:
        raise ValueError("Cannot specify both default and default_factory")

    if default_factory is not None:
        return default_factory()

    return default


def symbol_get(obj: Any, symbol: Symbol) -> Any:
    """
    Look up the value keyed by symbol on obj, or NOT_FOUND.

    Dicts are searched for the symbol itself; any other object is searched for
    the symbol's attribute name. Lookup failures of any kind yield NOT_FOUND.
    """
    if isinstance(obj, dict):
        try:
            return obj.get(symbol, NOT_FOUND)
        except Exception:
            return NOT_FOUND

    if not symbol.attribute:
        return NOT_FOUND
    try:
        return getattr(obj, symbol.attribute, NOT_FOUND)
    except Exception:
        return NOT_FOUND


def symbol_set(obj: Any, symbol: Symbol, value: Any) -> None:
    """
    Store value keyed by symbol on obj.

    Raises:
        AttributeError: obj does not accept new attributes.
        TypeError: symbol has no attribute name and obj is not a dict.
    """
    if isinstance(obj, dict):
        obj[symbol] = value
        return

    if not symbol.attribute:
        raise TypeError(f"{symbol!r} can only be stored on a dict")
    setattr(obj, symbol.attribute, value)
