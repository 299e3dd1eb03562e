"""
Adapt callback-style functions into coroutine functions.

A callback-style function takes a trailing ``callback(error, *results)``
argument and reports its outcome through it exactly once. `promisify` wraps
such a function into an ``async def`` that appends the callback itself and
awaits the outcome: the first result is returned, and an error is raised.

Namespaces (dicts, modules, SimpleNamespace objects and plain instances) are
adapted member by member into a new namespace.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import asyncio
import functools
import logging
import threading
from enum import Enum
from types import ModuleType, SimpleNamespace
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .classify import Kind, classify
from .sentinels import NOT_FOUND, PROMISIFY_ARGS, PROMISIFY_CUSTOM, Symbol, symbol_get, symbol_set
from .utils import fmt_type, safe_getattr, safe_vars

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class CallbackError(Exception):
    """
    Raised by an adapted function whose callback reported a non-exception error.

    Attributes:
        error: The error value exactly as passed to the callback.
    """

    def __init__(self, error: Any) -> None:
        super().__init__(f"callback reported an error: {error!r}")
        self.error = error


# Methods --------------------------------------------------------------------------------------------------------------

def promisify(original: Any) -> Any:
    """
    Adapt a callback-style callable, or every member of a namespace.

    Callables:
        If original carries a callable ``__promisify__`` override (see
        `PROMISIFY_CUSTOM`), the override is returned. Otherwise an ``async def``
        wrapper is returned that calls ``original(*args, callback, **kwargs)``.
        When the callback receives a non-None error the await raises it (wrapped
        in `CallbackError` if it is not an exception). Otherwise the await
        returns the first result, or a dict of named results when original
        declares ``__promisify_args__`` (see `PROMISIFY_ARGS`). Repeated
        callback calls are ignored. If the callback is never called the await
        never completes; cancel it or wrap it in ``asyncio.wait_for``.

    Namespaces:
        A dict, module, SimpleNamespace or plain instance is adapted into its
        ``__promisify__`` namespace if it has one, else into its ``promises``
        namespace, else into a new dict (for dicts) or SimpleNamespace. Callable
        members are adapted, namespace members other than modules and enum
        members are adapted recursively, other members are copied. The result is
        tagged with itself as its ``__promisify__`` value, so adapting it again
        returns it as is.

    Raises:
        TypeError: original is neither callable nor a namespace.

    Examples:
        >>> def read(path, callback):
        ...     callback(None, f"<{path}>")
        >>> asyncio.run(promisify(read)("a.txt"))
        '<a.txt>'
    """
    if _is_namespace(original):
        return _promisify_namespace(original, {})

    if not callable(original):
        raise TypeError(f"original must be a callable or a namespace, but found {fmt_type(original)}")

    custom = symbol_get(original, PROMISIFY_CUSTOM)
    if custom is not NOT_FOUND and callable(custom):
        _tag(custom)
        return custom

    names = _result_names(original)

    @functools.wraps(original)
    async def adapted(*args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        lock = threading.Lock()
        settled = False

        def callback(error: Any = None, *results: Any) -> None:
            nonlocal settled
            with lock:
                if settled:
                    logger.debug("Ignoring repeated callback of %s", getattr(original, "__qualname__", original))
                    return
                settled = True
            loop.call_soon_threadsafe(_settle, future, error, results, names)

        original(*args, callback, **kwargs)
        return await future

    _tag(adapted)
    return adapted


promisify.custom = PROMISIFY_CUSTOM
promisify.args = PROMISIFY_ARGS


# Private Methods ------------------------------------------------------------------------------------------------------

def _settle(future: asyncio.Future, error: Any, results: tuple, names: list[str]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error if isinstance(error, BaseException) else CallbackError(error))
    elif names:
        future.set_result({name: results[i] if i < len(results) else None for i, name in enumerate(names)})
    else:
        future.set_result(results[0] if results else None)


def _result_names(original: Any) -> list[str]:
    names = symbol_get(original, PROMISIFY_ARGS)
    if isinstance(names, (list, tuple)) and all(isinstance(name, str) for name in names):
        return list(names)
    return []


def _is_namespace(value: Any) -> bool:
    if callable(value):
        return False
    if isinstance(value, (dict, ModuleType, SimpleNamespace)):
        return True
    return classify(value) in (Kind.PLAIN_OBJECT, Kind.NULL_PROTOTYPE_OBJECT) and not isinstance(value, tuple)


def _is_nested_namespace(value: Any) -> bool:
    # Modules and enum members are shared globals and are copied as they are
    return _is_namespace(value) and not isinstance(value, (ModuleType, Enum))


def _promisify_namespace(original: Any, memo: dict[int, Any]) -> Any:
    if id(original) in memo:
        return memo[id(original)]

    target = _target_namespace(original)
    memo[id(original)] = target

    for key, value in _namespace_items(original):
        if value is target:
            continue
        if _is_nested_namespace(value):
            value = _promisify_namespace(value, memo)
        elif callable(value) and not isinstance(value, type):
            value = promisify(value)
        _store(target, key, value)

    _tag(target)
    return target


def _target_namespace(original: Any) -> Any:
    custom = symbol_get(original, PROMISIFY_CUSTOM)
    if custom is not NOT_FOUND and _is_namespace(custom):
        return custom

    if isinstance(original, dict):
        promises = original.get("promises", NOT_FOUND)
    else:
        promises = safe_getattr(original, "promises")
    if promises is not NOT_FOUND and _is_namespace(promises):
        return promises

    return {} if isinstance(original, dict) else SimpleNamespace()


def _namespace_items(original: Any) -> list[tuple[Any, Any]]:
    if isinstance(original, dict):
        return [(key, value) for key, value in original.items() if not isinstance(key, Symbol)]

    if isinstance(original, ModuleType):
        namespace = safe_vars(original)
        exported = namespace.get("__all__")
        if isinstance(exported, (list, tuple)):
            names = [name for name in exported if isinstance(name, str)]
        else:
            names = [name for name in namespace if not name.startswith("_")]
    else:
        try:
            names = [name for name in dir(original) if not name.startswith("_")]
        except Exception:
            names = list(safe_vars(original))

    items = []
    for name in names:
        value = safe_getattr(original, name)
        if value is not NOT_FOUND:
            items.append((name, value))
    return items


def _store(target: Any, key: Any, value: Any) -> None:
    if isinstance(target, dict):
        target[key] = value
    else:
        setattr(target, str(key), value)


def _tag(target: Any) -> None:
    """Mark target as its own promisify override."""
    try:
        symbol_set(target, PROMISIFY_CUSTOM, target)
    except (AttributeError, TypeError):
        # Builtins and slotted objects reject new attributes
        logger.debug("Cannot tag %s as promisified", fmt_type(target))
