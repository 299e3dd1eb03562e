#
# VINSPECT - Classify Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import array
import asyncio
import collections
import datetime as dt
import functools
import inspect
import math
import re
import sys
import types
import weakref
from decimal import Decimal
from fractions import Fraction
from typing import NamedTuple

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from vinspect.classify import (
    Kind, MAX_SAFE_INTEGER, classify, function_type_name, iterator_type_name,
    is_array_like, is_async_function, is_boolean, is_buffer_like, is_class, is_date, is_error,
    is_error_like, is_function, is_number, is_plain_object, is_primitive, is_promise_like,
    is_regexp, is_symbol,
)
from vinspect.sentinels import UNDEFINED, Symbol


# Local Classes & Methods ----------------------------------------------------------------------------------------------

class Pair(NamedTuple):
    left: int
    right: int


class Base:
    pass


class Derived(Base):
    pass


class Hostile:
    @property
    def __class__(self):
        raise RuntimeError("hostile")


def plain():
    pass


async def coroutine():
    pass


def generator():
    yield 1


async def async_generator():
    yield 1


def _bound_arguments():
    return inspect.signature(lambda a, b=2: None).bind(1)


class TestClassify:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            pytest.param(Symbol("s"), Kind.SYMBOL, id="symbol"),
            pytest.param(UNDEFINED, Kind.UNDEFINED, id="undefined"),
            pytest.param(None, Kind.NULL, id="none"),
            pytest.param(True, Kind.BOOLEAN, id="bool"),
            pytest.param(42, Kind.NUMBER, id="int"),
            pytest.param(MAX_SAFE_INTEGER, Kind.NUMBER, id="int-safe-max"),
            pytest.param(MAX_SAFE_INTEGER + 1, Kind.BIGINT, id="int-big"),
            pytest.param(-(MAX_SAFE_INTEGER + 1), Kind.BIGINT, id="int-big-negative"),
            pytest.param(math.nan, Kind.NUMBER, id="nan"),
            pytest.param(Decimal("1.5"), Kind.NUMBER, id="decimal"),
            pytest.param(Fraction(1, 3), Kind.NUMBER, id="fraction"),
            pytest.param("abc", Kind.STRING, id="str"),
            pytest.param(b"abc", Kind.BUFFER, id="bytes"),
            pytest.param(bytearray(b"abc"), Kind.BUFFER, id="bytearray"),
            pytest.param(weakref.WeakSet(), Kind.WEAK_SET, id="weakset"),
            pytest.param(weakref.WeakKeyDictionary(), Kind.WEAK_MAP, id="weakkeydict"),
            pytest.param(weakref.WeakValueDictionary(), Kind.WEAK_MAP, id="weakvaluedict"),
            pytest.param(collections.OrderedDict(), Kind.MAP, id="ordereddict"),
            pytest.param(collections.defaultdict(list), Kind.MAP, id="defaultdict"),
            pytest.param(types.MappingProxyType({}), Kind.MAP, id="mappingproxy"),
            pytest.param(frozendict(a=1), Kind.MAP, id="frozendict"),
            pytest.param(set(), Kind.SET, id="set"),
            pytest.param(frozenset(), Kind.SET, id="frozenset"),
            pytest.param({}.keys(), Kind.SET, id="dict-keys"),
            pytest.param(re.compile("a"), Kind.REGEXP, id="regexp"),
            pytest.param(dt.date(2024, 1, 2), Kind.DATE, id="date"),
            pytest.param(dt.datetime(2024, 1, 2), Kind.DATE, id="datetime"),
            pytest.param(dt.time(12, 30), Kind.DATE, id="time"),
            pytest.param(ValueError("x"), Kind.ERROR, id="error"),
            pytest.param(KeyboardInterrupt(), Kind.ERROR, id="base-exception"),
            pytest.param(_bound_arguments(), Kind.ARGUMENTS, id="arguments"),
            pytest.param(iter([]), Kind.ITERATOR, id="list-iterator"),
            pytest.param(generator(), Kind.ITERATOR, id="generator"),
            pytest.param(async_generator(), Kind.ITERATOR, id="async-generator"),
            pytest.param([], Kind.ARRAY_LIKE, id="list"),
            pytest.param((), Kind.ARRAY_LIKE, id="tuple"),
            pytest.param(collections.deque(), Kind.ARRAY_LIKE, id="deque"),
            pytest.param(range(3), Kind.ARRAY_LIKE, id="range"),
            pytest.param(array.array("i"), Kind.ARRAY_LIKE, id="array"),
            pytest.param(memoryview(b"ab"), Kind.ARRAY_LIKE, id="memoryview"),
            pytest.param({}.values(), Kind.ARRAY_LIKE, id="dict-values"),
            pytest.param(Pair(1, 2), Kind.PLAIN_OBJECT, id="namedtuple"),
            pytest.param(Base, Kind.CLASS, id="class"),
            pytest.param(plain, Kind.FUNCTION, id="function"),
            pytest.param(len, Kind.FUNCTION, id="builtin"),
            pytest.param("abc".upper, Kind.FUNCTION, id="bound-builtin"),
            pytest.param(functools.partial(plain), Kind.FUNCTION, id="partial"),
            pytest.param(coroutine, Kind.ASYNC_FUNCTION, id="coroutine-function"),
            pytest.param(generator, Kind.GENERATOR_FUNCTION, id="generator-function"),
            pytest.param(async_generator, Kind.GENERATOR_FUNCTION, id="async-generator-function"),
            pytest.param(sys, Kind.NULL_PROTOTYPE_OBJECT, id="module"),
            pytest.param(object(), Kind.NULL_PROTOTYPE_OBJECT, id="bare-object"),
            pytest.param({}, Kind.PLAIN_OBJECT, id="dict"),
            pytest.param(Derived(), Kind.PLAIN_OBJECT, id="instance"),
        ],
    )
    def test_classify(self, value, expected):
        assert classify(value) is expected

    def test_never_raises(self):
        """Failing attribute lookups degrade to plain-object."""
        assert classify(Hostile()) is Kind.PLAIN_OBJECT

    def test_kind_is_str(self):
        assert Kind.MAP == "map"
        assert Kind("array-like") is Kind.ARRAY_LIKE

    @pytest.mark.parametrize(
        ("kind", "primitive", "function"),
        [
            pytest.param(Kind.STRING, True, False, id="string"),
            pytest.param(Kind.BUFFER, True, False, id="buffer"),
            pytest.param(Kind.CLASS, False, True, id="class"),
            pytest.param(Kind.MAP, False, False, id="map"),
        ],
    )
    def test_kind_properties(self, kind, primitive, function):
        assert kind.is_primitive is primitive
        assert kind.is_function is function


class TestTypeNames:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            pytest.param(plain, "[Function: plain]", id="function"),
            pytest.param(len, "[Function: len]", id="builtin"),
            pytest.param(lambda: None, "[Function: <lambda>]", id="lambda"),
            pytest.param(functools.partial(plain), "[Function]", id="partial"),
            pytest.param(coroutine, "[AsyncFunction: coroutine]", id="async"),
            pytest.param(generator, "[GeneratorFunction: generator]", id="generator"),
            pytest.param(async_generator, "[AsyncGeneratorFunction: async_generator]", id="async-generator"),
            pytest.param(Base, "[class Base]", id="class"),
            pytest.param(Derived, "[class Derived extends Base]", id="subclass"),
            pytest.param(ValueError, "[class ValueError extends Exception]", id="builtin-class"),
        ],
    )
    def test_function_type_name(self, value, expected):
        assert function_type_name(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            pytest.param(generator(), "Generator", id="generator"),
            pytest.param(async_generator(), "AsyncGenerator", id="async-generator"),
            pytest.param(iter(set()), "Set Iterator", id="set"),
            pytest.param(iter({}), "Map Iterator", id="dict-keys"),
            pytest.param(iter({}.items()), "Map Iterator", id="dict-items"),
            pytest.param(iter([]), "Iterator", id="list"),
        ],
    )
    def test_iterator_type_name(self, value, expected):
        assert iterator_type_name(value) == expected


class TestPredicates:
    def test_scalars(self):
        assert is_symbol(Symbol("s"))
        assert is_number(1.5) and not is_number(True)
        assert is_boolean(False) and not is_boolean(0)
        assert is_primitive("a") and is_primitive(None) and is_primitive(UNDEFINED)
        assert not is_primitive([])

    def test_buffers_and_sequences(self):
        assert is_buffer_like(b"") and is_buffer_like(memoryview(b""))
        assert not is_buffer_like([])
        assert is_array_like([1]) and is_array_like(range(1))
        assert not is_array_like("abc") and not is_array_like(b"abc")

    def test_objects(self):
        assert is_date(dt.date.today())
        assert is_regexp(re.compile("x"))
        assert is_error(ValueError())
        assert is_class(Base) and not is_class(Base())
        assert is_plain_object({}) and is_plain_object(object())
        assert not is_plain_object(collections.OrderedDict())

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            pytest.param(ValueError(), True, id="exception"),
            pytest.param({"name": "E", "message": "m"}, True, id="mapping"),
            pytest.param(types.SimpleNamespace(name="E", message="m"), True, id="object"),
            pytest.param({"name": "E"}, False, id="mapping-partial"),
        ],
    )
    def test_is_error_like(self, value, expected):
        assert is_error_like(value) is expected

    def test_functions(self):
        assert is_function(plain) and is_function(len)
        assert not is_function(Base)
        assert is_async_function(coroutine)
        assert not is_async_function(plain)

    def test_is_promise_like(self):
        loop = asyncio.new_event_loop()
        try:
            future = loop.create_future()
            assert is_promise_like(future)
        finally:
            loop.close()
        assert not is_promise_like(1)
