"""
Utilities shared across the package.

Contains class-name helpers and exception-suppressing probes used by multiple
modules to avoid circular imports. Every probe returns a fallback value instead
of raising, so that hostile objects cannot break formatting.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import NOT_FOUND


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(
    obj: Any,
    fully_qualified: bool = False,
    fully_qualified_builtins: bool = False,
) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns the fully qualified name for user objects or classes.
        fully_qualified_builtins (bool): If true, returns the fully qualified name for builtin objects or classes.

    Returns:
        str: The class name, or 'object' when the class cannot be determined.

    Examples:
        >>> class_name(10)
        'int'
        >>> class_name(10, fully_qualified_builtins=True)
        'builtins.int'
    """
    cls = obj if isinstance(obj, type) else type(obj)

    name = getattr(cls, "__name__", None) or "object"
    module = getattr(cls, "__module__", None) or "builtins"

    if module == "builtins":
        return f"{module}.{name}" if fully_qualified_builtins else name
    return f"{module}.{name}" if fully_qualified else name


def fmt_type(obj: Any) -> str:
    """Format type name for exception messages, e.g. '<int>'."""
    return f"<{class_name(obj)}>"


def safe_getattr(obj: Any, name: str) -> Any:
    """Return getattr(obj, name) or NOT_FOUND if the lookup fails for any reason."""
    try:
        return getattr(obj, name)
    except Exception:
        return NOT_FOUND


def safe_len(obj: Any) -> int | None:
    """Return len(obj) or None if obj has no usable length."""
    try:
        size = len(obj)
    except Exception:
        return None
    return size if isinstance(size, int) else None


def safe_vars(obj: Any) -> dict[str, Any]:
    """
    Return a snapshot of the instance namespace of obj.

    Objects without a __dict__, or whose __dict__ cannot be read, give an empty dict.
    """
    try:
        namespace = object.__getattribute__(obj, "__dict__")
    except Exception:
        return {}
    try:
        return {k: v for k, v in namespace.items() if isinstance(k, str)}
    except Exception:
        return {}


def safe_slots(obj: Any) -> dict[str, Any]:
    """Return the assigned __slots__ members of obj, across its class hierarchy."""
    values: dict[str, Any] = {}
    try:
        mro = type(obj).__mro__
    except Exception:
        return values

    for cls in mro:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if not isinstance(name, str) or name in ("__dict__", "__weakref__") or name in values:
                continue
            try:
                values[name] = object.__getattribute__(obj, name)
            except Exception:
                # Unassigned slot
                continue
    return values


def has_own_property(obj: Any, key: Any) -> bool:
    """
    Check whether key is an own entry of obj.

    Dicts are checked for the key itself, other objects for an instance
    attribute or assigned slot named str(key).
    """
    if isinstance(obj, dict):
        try:
            return key in obj
        except Exception:
            return False
    name = str(key)
    return name in safe_vars(obj) or name in safe_slots(obj)
