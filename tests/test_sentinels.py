#
# VINSPECT - Sentinels Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import pickle
import threading
from types import SimpleNamespace

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from vinspect.sentinels import (
    INSPECT_CUSTOM, INSPECT_CUSTOM_COMPAT, INSPECT_IGNORE, PROMISIFY_ARGS, PROMISIFY_CUSTOM,
    NOT_FOUND, UNDEFINED, NotFoundType, UndefinedType, Symbol,
    iffound, symbol_get, symbol_set,
)


# Local Classes & Methods ----------------------------------------------------------------------------------------------

class TestSentinels:
    def test_singleton_identity(self):
        """Ensure each sentinel is a singleton object."""
        assert NOT_FOUND is NotFoundType()
        assert UNDEFINED is UndefinedType()

    @pytest.mark.parametrize(
        ("sentinel", "expected"),
        [
            pytest.param(NOT_FOUND, "<NOT_FOUND>", id="not_found"),
            pytest.param(UNDEFINED, "<UNDEFINED>", id="undefined"),
        ],
    )
    def test_repr_clean(self, sentinel, expected):
        """Assert repr shows clean angle-bracketed name."""
        assert repr(sentinel) == expected

    @pytest.mark.parametrize("sentinel", [NOT_FOUND, UNDEFINED], ids=["not_found", "undefined"])
    def test_falsy_and_pickle(self, sentinel):
        """Sentinels are falsy and survive pickling as the same singleton."""
        assert not sentinel
        assert pickle.loads(pickle.dumps(sentinel)) is sentinel

    def test_undefined_is_not_none(self):
        assert UNDEFINED is not None
        assert UNDEFINED != None  # noqa: E711


class TestSymbol:
    def test_plain_symbols_are_unique(self):
        """Two symbols with the same description are different keys."""
        a, b = Symbol("tag"), Symbol("tag")
        assert a is not b
        assert a != b
        assert {a: 1, b: 2}[a] == 1

    def test_for_returns_registered(self):
        """Symbol.for_ interns by key."""
        first = Symbol.for_("tests.symbol.for")
        assert Symbol.for_("tests.symbol.for") is first
        assert Symbol.key_for(first) == "tests.symbol.for"
        assert Symbol.key_for(Symbol("tests.symbol.for")) is None

    def test_for_threaded(self):
        """Concurrent registrations agree on one symbol."""
        found = []
        threads = [threading.Thread(target=lambda: found.append(Symbol.for_("tests.symbol.threads")))
                   for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(item is found[0] for item in found)

    def test_repr_and_truthy(self):
        symbol = Symbol("desc")
        assert repr(symbol) == "Symbol(desc)"
        assert str(symbol) == "Symbol(desc)"
        assert symbol.description == "desc"
        assert symbol

    def test_registered_pickle(self):
        """Registered symbols unpickle to the registered instance."""
        assert pickle.loads(pickle.dumps(INSPECT_CUSTOM)) is INSPECT_CUSTOM

    def test_invalid_attribute(self):
        with pytest.raises(ValueError, match=r"valid identifier"):
            Symbol("bad", attribute="not an identifier")

    @pytest.mark.parametrize(
        ("symbol", "attribute"),
        [
            pytest.param(INSPECT_CUSTOM, "__inspect__", id="inspect_custom"),
            pytest.param(INSPECT_CUSTOM_COMPAT, "__inspect_custom__", id="inspect_compat"),
            pytest.param(INSPECT_IGNORE, "__inspect_ignore__", id="inspect_ignore"),
            pytest.param(PROMISIFY_CUSTOM, "__promisify__", id="promisify_custom"),
            pytest.param(PROMISIFY_ARGS, "__promisify_args__", id="promisify_args"),
        ],
    )
    def test_well_known_attributes(self, symbol, attribute):
        assert symbol.attribute == attribute
        assert Symbol.for_(symbol.description) is symbol

    def test_compat_key(self):
        """The compatibility symbols use the conventional registry keys."""
        assert Symbol.for_("nodejs.util.inspect.custom") is INSPECT_CUSTOM_COMPAT
        assert Symbol.for_("nodejs.util.promisify.custom") is PROMISIFY_CUSTOM


class TestSymbolAccess:
    def test_get_from_dict(self):
        """Dicts are searched by the symbol itself, not its attribute name."""
        assert symbol_get({PROMISIFY_ARGS: ["a"]}, PROMISIFY_ARGS) == ["a"]
        assert symbol_get({"__promisify_args__": ["a"]}, PROMISIFY_ARGS) is NOT_FOUND

    def test_get_from_object(self):
        obj = SimpleNamespace(__promisify_args__=("x", "y"))
        assert symbol_get(obj, PROMISIFY_ARGS) == ("x", "y")
        assert symbol_get(object(), PROMISIFY_ARGS) is NOT_FOUND

    def test_get_swallows_errors(self):
        """A raising attribute reads as NOT_FOUND."""
        class Hostile:
            def __getattr__(self, name):
                raise RuntimeError(name)

        assert symbol_get(Hostile(), INSPECT_CUSTOM) is NOT_FOUND

    def test_get_without_attribute(self):
        """Attribute-less symbols are only found on dicts."""
        key = Symbol("only-dict")
        assert symbol_get({key: 1}, key) == 1
        assert symbol_get(SimpleNamespace(), key) is NOT_FOUND

    def test_set(self):
        mapping, obj = {}, SimpleNamespace()
        symbol_set(mapping, PROMISIFY_CUSTOM, 1)
        symbol_set(obj, PROMISIFY_CUSTOM, 2)
        assert mapping == {PROMISIFY_CUSTOM: 1}
        assert obj.__promisify__ == 2

    def test_set_rejected(self):
        with pytest.raises(TypeError, match=r"can only be stored on a dict"):
            symbol_set(SimpleNamespace(), Symbol("only-dict"), 1)
        with pytest.raises(AttributeError):
            symbol_set(object(), PROMISIFY_CUSTOM, 1)


class TestIffound:
    @pytest.mark.parametrize(
        ("value", "kwargs", "expected"),
        [
            pytest.param(1, {"default": 2}, 1, id="found"),
            pytest.param(None, {"default": 2}, None, id="none-is-found"),
            pytest.param(NOT_FOUND, {"default": 2}, 2, id="default"),
            pytest.param(NOT_FOUND, {"default_factory": list}, [], id="factory"),
            pytest.param(NOT_FOUND, {}, None, id="no-default"),
        ],
    )
    def test_iffound(self, value, kwargs, expected):
        assert iffound(value, **kwargs) == expected

    def test_both_defaults(self):
        with pytest.raises(ValueError, match=r"Cannot specify both"):
            iffound(NOT_FOUND, default=1, default_factory=list)
