"""
Value classification for the inspector.

Resolves any Python value to a closed `Kind` tag through an ordered chain of
capability probes. The order matters: kinds overlap by shape (a dict key view
is a Set and an Iterable, a WeakSet is a MutableSet), so the first matching
probe wins. Classification never raises; a value whose probes fail is treated
as a plain object.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import array
import collections.abc as abc
import datetime as dt
import functools
import inspect
import numbers
import re
import types
import weakref
from enum import Enum, unique
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import UNDEFINED, Symbol

MAX_SAFE_INTEGER = 2 ** 53 - 1

_SET_ITERATOR_TYPES = (type(iter(set())),)
_MAP_ITERATOR_TYPES = (
    type(iter({})),
    type(iter({}.values())),
    type(iter({}.items())),
)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Kind(str, Enum):
    """
    Enumerates the semantic kinds the inspector renders differently.

    Members are str subclasses, so they compare equal to their plain names.
    """
    SYMBOL = "symbol"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    NULL = "null"
    UNDEFINED = "undefined"
    BUFFER = "buffer"
    FUNCTION = "function"
    ASYNC_FUNCTION = "async-function"
    GENERATOR_FUNCTION = "generator-function"
    CLASS = "class"
    DATE = "date"
    REGEXP = "regexp"
    ERROR = "error"
    ARGUMENTS = "arguments"
    MAP = "map"
    SET = "set"
    WEAK_MAP = "weak-map"
    WEAK_SET = "weak-set"
    ARRAY_LIKE = "array-like"
    ITERATOR = "iterator"
    PLAIN_OBJECT = "plain-object"
    NULL_PROTOTYPE_OBJECT = "null-prototype-object"

    @property
    def is_primitive(self) -> bool:
        return self in _PRIMITIVE_KINDS

    @property
    def is_function(self) -> bool:
        return self in _FUNCTION_KINDS


_PRIMITIVE_KINDS = frozenset({
    Kind.SYMBOL, Kind.STRING, Kind.NUMBER, Kind.BOOLEAN, Kind.BIGINT,
    Kind.NULL, Kind.UNDEFINED, Kind.BUFFER,
})

_FUNCTION_KINDS = frozenset({
    Kind.FUNCTION, Kind.ASYNC_FUNCTION, Kind.GENERATOR_FUNCTION, Kind.CLASS,
})


# Methods --------------------------------------------------------------------------------------------------------------

def classify(value: Any) -> Kind:
    """
    Classify value into a `Kind`.

    Precedence, highest first: symbol, scalars, raw buffers, weak collections,
    maps, sets, regular expressions, dates, errors, bound arguments, iterators,
    array-likes, the function family, null-prototype objects, plain objects.

    Examples:
        >>> classify("abc")
        <Kind.STRING: 'string'>
        >>> classify(2 ** 64)
        <Kind.BIGINT: 'bigint'>
        >>> classify(frozenset())
        <Kind.SET: 'set'>
    """
    try:
        return _classify(value)
    except Exception:
        return Kind.PLAIN_OBJECT


def _classify(value: Any) -> Kind:
    if isinstance(value, Symbol):
        return Kind.SYMBOL
    if value is UNDEFINED:
        return Kind.UNDEFINED
    if value is None:
        return Kind.NULL
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.BIGINT if abs(value) > MAX_SAFE_INTEGER else Kind.NUMBER
    if isinstance(value, numbers.Number):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray)):
        return Kind.BUFFER

    # Weak collections are MutableSet/MutableMapping too, so they go first
    if isinstance(value, weakref.WeakSet):
        return Kind.WEAK_SET
    if isinstance(value, (weakref.WeakKeyDictionary, weakref.WeakValueDictionary)):
        return Kind.WEAK_MAP
    if isinstance(value, abc.Mapping) and type(value) is not dict:
        return Kind.MAP
    if isinstance(value, abc.Set):
        return Kind.SET

    if isinstance(value, re.Pattern):
        return Kind.REGEXP
    if isinstance(value, (dt.date, dt.time)):
        return Kind.DATE
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, inspect.BoundArguments):
        return Kind.ARGUMENTS
    if isinstance(value, (abc.Iterator, abc.AsyncIterator)):
        return Kind.ITERATOR
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        # Named tuples render by field name
        return Kind.PLAIN_OBJECT
    if is_array_like(value):
        return Kind.ARRAY_LIKE

    if isinstance(value, type):
        return Kind.CLASS
    if is_function(value):
        if inspect.iscoroutinefunction(value):
            return Kind.ASYNC_FUNCTION
        if inspect.isgeneratorfunction(value) or inspect.isasyncgenfunction(value):
            return Kind.GENERATOR_FUNCTION
        return Kind.FUNCTION

    if isinstance(value, types.ModuleType) or type(value) is object:
        return Kind.NULL_PROTOTYPE_OBJECT
    return Kind.PLAIN_OBJECT


def iterator_type_name(value: Any) -> str:
    """Return the display tag of an iterator-family value, e.g. 'Set Iterator'."""
    if isinstance(value, types.GeneratorType):
        return "Generator"
    if isinstance(value, types.AsyncGeneratorType):
        return "AsyncGenerator"
    if isinstance(value, _SET_ITERATOR_TYPES):
        return "Set Iterator"
    if isinstance(value, _MAP_ITERATOR_TYPES):
        return "Map Iterator"
    if isinstance(value, abc.AsyncIterator):
        return "AsyncIterator"
    return "Iterator"


def function_type_name(value: Any, kind: Kind | None = None) -> str:
    """
    Return the display tag of a function-family value.

    Examples:
        >>> function_type_name(len)
        '[Function: len]'
        >>> function_type_name(ValueError)
        '[class ValueError extends Exception]'
    """
    kind = kind or classify(value)
    name = getattr(value, "__name__", None)
    name = name if isinstance(name, str) else ""

    if kind is Kind.CLASS:
        base = _first_base(value)
        extends = f" extends {base}" if base else ""
        return f"[class {name or '(anonymous)'}{extends}]"

    if kind is Kind.ASYNC_FUNCTION:
        label = "AsyncFunction"
    elif kind is Kind.GENERATOR_FUNCTION:
        label = "AsyncGeneratorFunction" if inspect.isasyncgenfunction(value) else "GeneratorFunction"
    else:
        label = "Function"
    return f"[{label}: {name}]" if name else f"[{label}]"


def _first_base(cls: type) -> str:
    try:
        bases = cls.__bases__
    except Exception:
        return ""
    if not bases or bases[0] is object:
        return ""
    return getattr(bases[0], "__name__", "")


# Predicates -----------------------------------------------------------------------------------------------------------

def is_symbol(value: Any) -> bool:
    return isinstance(value, Symbol)


def is_number(value: Any) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_primitive(value: Any) -> bool:
    """Check if value renders as a scalar: None, UNDEFINED, numbers, strings, bytes or symbols."""
    return classify(value).is_primitive


def is_buffer_like(value: Any) -> bool:
    """Check if value is raw binary data or a typed view over it."""
    return isinstance(value, (bytes, bytearray, memoryview, array.array))


def is_array_like(value: Any) -> bool:
    """
    Check if value is an indexed, non-textual sequence.

    Lists, tuples, deques, ranges, typed arrays and memoryviews qualify; str and
    the raw bytes/bytearray buffers do not. Dict value views are included since
    they are ordered and indexed by position only.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, (array.array, memoryview, abc.ValuesView)):
        return True
    return isinstance(value, abc.Sequence)


def is_date(value: Any) -> bool:
    return isinstance(value, (dt.date, dt.time))


def is_regexp(value: Any) -> bool:
    return isinstance(value, re.Pattern)


def is_error(value: Any) -> bool:
    return isinstance(value, BaseException)


def is_error_like(value: Any) -> bool:
    """Check if value is an exception or carries both 'name' and 'message' attributes."""
    if isinstance(value, BaseException):
        return True
    if isinstance(value, abc.Mapping):
        return "name" in value and "message" in value
    try:
        return hasattr(value, "name") and hasattr(value, "message")
    except Exception:
        return False


def is_class(value: Any) -> bool:
    return isinstance(value, type)


def is_function(value: Any) -> bool:
    """Check if value is a routine (function, method, builtin) or a functools.partial, but not a class."""
    if isinstance(value, type):
        return False
    return inspect.isroutine(value) or isinstance(value, functools.partial)


def is_async_function(value: Any) -> bool:
    return is_function(value) and inspect.iscoroutinefunction(value)


def is_plain_object(value: Any) -> bool:
    """Check if value is an exact dict or a bare object() instance."""
    return type(value) in (dict, object)


def is_promise_like(value: Any) -> bool:
    """Check if value can be awaited."""
    try:
        return inspect.isawaitable(value)
    except Exception:
        return False
