"""
Recursive value inspector.

Renders arbitrary Python values as deterministic, human-readable strings for
debugging and logging. The output follows the familiar ``util.inspect`` layout:
containers print inline as ``{ key: value }`` until they grow past the line
width, nested values stop at a depth limit with an ``[Object]`` marker, and
self-references print as ``[Circular]``. Rendering never raises because of the
value being rendered: broken attributes, throwing hooks and unreadable
namespaces degrade to placeholders.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import builtins
import json
import logging
import math
import re
import sys
from dataclasses import dataclass, field, fields, replace as dataclasses_replace
from itertools import islice
from types import ModuleType, TracebackType
from typing import Any, ClassVar, Iterable, Mapping, NamedTuple

# Local ----------------------------------------------------------------------------------------------------------------
from .classify import Kind, classify, function_type_name, iterator_type_name
from .sentinels import INSPECT_CUSTOM, INSPECT_CUSTOM_COMPAT, INSPECT_IGNORE, NOT_FOUND, Symbol, symbol_get
from .stack import StackFormatter
from .utils import class_name, fmt_type, safe_getattr, safe_len, safe_slots, safe_vars

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 2
LINE_WIDTH = 80
INDENT = "  "
MAX_ITEMS = 100

CIRCULAR = "[Circular]"
ELIDED = "[Object]"

_INDEX_KEY = re.compile(r"[0-9]+")
_IDENTIFIER_KEY = re.compile(r"[A-Za-z_$][\w$]*")
_ERROR_HIDDEN_EXCLUDED = re.compile(r"stack|message|name")

_REGEX_FLAGS = (
    (re.ASCII, "a"),
    (re.IGNORECASE, "i"),
    (re.LOCALE, "L"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)

# Global singletons whose own 'inspect' attribute is never treated as a hook
_HOOK_EXCLUDED = (builtins, sys)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class InspectOptions:
    """
    Options controlling a single `inspect` call.

    Attributes:
        depth: Levels of nesting to expand below the top-level value. None means
            unlimited; a negative value elides every composite immediately.
        show_hidden: Include private (underscore) attributes and class-level
            properties as bracketed keys.
        custom_inspect: Honor ``inspect(depth, ctx)`` methods and the
            INSPECT_CUSTOM hooks of rendered values.
        seen: Identity list of values already being rendered. Pass a list to share
            cycle detection with an enclosing inspection; None starts fresh.
        max_items: Maximum elements rendered per array-like, set or map; the rest
            is summarized as ``... N more items``. None disables the cap.
        line_width: Total entry length above which a container goes multi-line.
        indent: Indentation unit for multi-line output.
        stack: Stack frame strategy for exceptions; None uses StackFormatter().

    Examples:
        >>> opts = InspectOptions(depth=0)
        >>> opts.merge(show_hidden=True).show_hidden
        True
        >>> InspectOptions.from_mapping({"showHidden": True, "depth": None}).depth is None
        True
    """
    depth: int | None = DEFAULT_DEPTH
    show_hidden: bool = False
    custom_inspect: bool = True
    seen: list[Any] | None = None
    max_items: int | None = MAX_ITEMS
    line_width: int = LINE_WIDTH
    indent: str = INDENT
    stack: StackFormatter | None = None

    _ALIASES: ClassVar[dict[str, str]] = {
        "showHidden": "show_hidden",
        "customInspect": "custom_inspect",
        "maxItems": "max_items",
        "maxArrayLength": "max_items",
        "breakLength": "line_width",
    }

    def __post_init__(self) -> None:
        if isinstance(self.depth, float) and math.isinf(self.depth) and self.depth > 0:
            self.depth = None
        if self.depth is not None and (isinstance(self.depth, bool) or not isinstance(self.depth, int)):
            raise TypeError(f"depth must be an int or None, but found {fmt_type(self.depth)}")
        if self.max_items is not None and (isinstance(self.max_items, bool) or not isinstance(self.max_items, int)):
            raise TypeError(f"max_items must be an int or None, but found {fmt_type(self.max_items)}")
        if self.seen is not None and not isinstance(self.seen, list):
            raise TypeError(f"seen must be a list or None, but found {fmt_type(self.seen)}")
        if isinstance(self.line_width, bool) or not isinstance(self.line_width, int):
            raise TypeError(f"line_width must be an int, but found {fmt_type(self.line_width)}")
        if not isinstance(self.indent, str):
            raise TypeError(f"indent must be a str, but found {fmt_type(self.indent)}")
        if self.stack is not None and not isinstance(self.stack, StackFormatter):
            raise TypeError(f"stack must be a StackFormatter or None, but found {fmt_type(self.stack)}")
        self.show_hidden = bool(self.show_hidden)
        self.custom_inspect = bool(self.custom_inspect)

    def merge(self, **kwargs: Any) -> "InspectOptions":
        """Return a copy with the given fields replaced."""
        return dataclasses_replace(self, **kwargs)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "InspectOptions":
        """
        Build options from a plain mapping.

        Accepts field names and the camelCase aliases (showHidden, customInspect,
        maxItems, breakLength). Unknown keys are ignored.
        """
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            name = cls._ALIASES.get(key, key)
            if name in names:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: "InspectOptions | Mapping[str, Any] | None") -> "InspectOptions":
        if options is None:
            return cls()
        if isinstance(options, InspectOptions):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise TypeError(f"options must be an InspectOptions, a mapping or None, but found {fmt_type(options)}")

    @classmethod
    def debug(cls) -> "InspectOptions":
        """Deep inspection preset: hidden keys shown, no item cap."""
        return cls(depth=4, show_hidden=True, max_items=None)


@dataclass
class InspectContext:
    """
    Mutable state threaded through one top-level `inspect` call.

    The context is created per call and owned exclusively by it; `seen` grows and
    shrinks as the walk enters and leaves containers.
    """
    options: InspectOptions
    seen: list[Any] = field(default_factory=list)
    depth: int | None = DEFAULT_DEPTH
    show_hidden: bool = False
    custom_inspect: bool = True
    stack: StackFormatter = field(default_factory=StackFormatter)

    @classmethod
    def from_options(cls, options: InspectOptions) -> "InspectContext":
        return cls(
            options=options,
            seen=options.seen if options.seen is not None else [],
            depth=options.depth,
            show_hidden=options.show_hidden,
            custom_inspect=options.custom_inspect,
            stack=options.stack or StackFormatter(),
        )

    def is_seen(self, value: Any) -> bool:
        return any(value is item for item in self.seen)


class PropertyEntry(NamedTuple):
    """One rendered member of a container."""
    key_label: str
    value_label: str
    is_getter_setter: bool = False
    is_array_index: bool = False

    def render(self, separator: str = ": ") -> str:
        if not self.key_label:
            return self.value_label
        return f"{self.key_label}{separator}{self.value_label}"


class _Slot(NamedTuple):
    key: Any
    value: Any
    enumerable: bool = True
    accessor: str = ""
    index: bool = False


class _Shape(NamedTuple):
    head: str
    open: str = "{"
    close: str = "}"
    leaf: bool = False

    @property
    def prefix(self) -> str:
        return f"{self.head} " if self.head else ""


# Methods --------------------------------------------------------------------------------------------------------------

def inspect(value: Any, options: InspectOptions | Mapping[str, Any] | None = None, **overrides: Any) -> str:
    """
    Return a human-readable representation of value.

    Args:
        value: Any Python object.
        options: InspectOptions, a mapping of option names, or None for defaults.
        **overrides: Individual InspectOptions fields applied on top of options.

    Returns:
        The rendered string. Strings are single-quoted, None is ``null``, booleans
        are ``true``/``false``, containers use ``{ k: v }`` / ``[ a, b ]`` layout.

    Raises:
        TypeError: options, or one of the option fields, has the wrong type.

    Examples:
        >>> inspect({"a": 1, "b": [1, 2]})
        '{ a: 1, b: [ 1, 2 ] }'
        >>> inspect("it's")
        "'it\\\\'s'"
        >>> inspect({"a": {"b": {"c": {}}}}, depth=0)
        '{ a: [Object] }'
    """
    opts = InspectOptions.coerce(options)
    if overrides:
        opts = opts.merge(**overrides)
    ctx = InspectContext.from_options(opts)
    return _format_value(ctx, value, ctx.depth)


inspect.custom = INSPECT_CUSTOM
inspect.ignore = INSPECT_IGNORE


def quote_string(text: str) -> str:
    """
    Quote text with single quotes using JSON escaping rules.

    Control characters keep their JSON escapes, single quotes are escaped and
    double quotes are left bare.

    Examples:
        >>> print(quote_string('it\\'s a "test"'))
        'it\\'s a "test"'
    """
    encoded = json.dumps(str(text), ensure_ascii=False)[1:-1]
    return "'" + encoded.replace("'", "\\'").replace('\\"', '"') + "'"


def format_number(value: Any) -> str:
    """Render a number: ints as digits, floats as repr with NaN and Infinity spelled out."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return int.__repr__(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return float.__repr__(value)
    return _safe_str(value)


def format_key(key: Any) -> str:
    """Render a property key: bare when it is an index or identifier, quoted otherwise."""
    text = key if isinstance(key, str) else _safe_str(key)
    if _INDEX_KEY.fullmatch(text) or _IDENTIFIER_KEY.fullmatch(text):
        return text
    return quote_string(text)


def regexp_literal(pattern: re.Pattern) -> str:
    """
    Render a compiled pattern in /source/flags literal form.

    Examples:
        >>> regexp_literal(re.compile("a/b", re.I))
        '/a\\\\/b/i'
    """
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    source = re.sub(r"(?<!\\)/", r"\\/", source) or "(?:)"
    flags = "".join(letter for flag, letter in _REGEX_FLAGS if pattern.flags & flag)
    return f"/{source}/{flags}"


# Private Methods ------------------------------------------------------------------------------------------------------

def _format_value(ctx: InspectContext, value: Any, depth: int | None, *, hooks: bool = True) -> str:
    if not isinstance(ctx, InspectContext):
        raise TypeError(f"ctx must be an InspectContext, but found {fmt_type(ctx)}")

    kind = classify(value)
    if kind.is_primitive or kind in (Kind.WEAK_MAP, Kind.WEAK_SET):
        return _format_primitive(value, kind)

    if hooks and ctx.custom_inspect:
        formatted = _call_inspect_hook(ctx, value, depth)
        if formatted is not NOT_FOUND:
            if isinstance(formatted, str):
                return formatted
            # The returned value is rendered without consulting its own hooks
            return _format_value(ctx, formatted, depth, hooks=False)

    return _format_container(ctx, value, kind, depth)


def _format_primitive(value: Any, kind: Kind) -> str:
    if kind is Kind.SYMBOL:
        return str(value)
    if kind is Kind.UNDEFINED:
        return "undefined"
    if kind is Kind.NULL:
        return "null"
    if kind is Kind.BOOLEAN:
        return "true" if value else "false"
    if kind is Kind.NUMBER:
        return format_number(value)
    if kind is Kind.BIGINT:
        return f"{int.__repr__(value)}n"
    if kind is Kind.STRING:
        return quote_string(value)
    if kind in (Kind.WEAK_MAP, Kind.WEAK_SET):
        return f"{class_name(value)} {{ <items unknown> }}"
    return _safe_repr(value)


def _call_inspect_hook(ctx: InspectContext, value: Any, depth: int | None) -> Any:
    """Invoke the custom inspection hook of value; NOT_FOUND when there is none."""
    if isinstance(value, type) or any(value is excluded for excluded in _HOOK_EXCLUDED):
        return NOT_FOUND

    method = safe_getattr(value, "inspect")
    if _is_hook(method):
        hook, args = method, (depth, ctx)
    else:
        for symbol in (INSPECT_CUSTOM, INSPECT_CUSTOM_COMPAT):
            hook = symbol_get(value, symbol)
            if _is_hook(hook):
                args = (depth, ctx.options, inspect)
                break
        else:
            return NOT_FOUND

    try:
        formatted = hook(*args)
    except Exception as exc:
        logger.debug("Inspection hook of %s failed: %r", fmt_type(value), exc)
        return NOT_FOUND

    return NOT_FOUND if formatted is value else formatted


def _is_hook(candidate: Any) -> bool:
    if candidate is NOT_FOUND or candidate is inspect or isinstance(candidate, type):
        return False
    if not callable(candidate):
        return False
    return symbol_get(candidate, INSPECT_IGNORE) is not True


def _format_container(ctx: InspectContext, value: Any, kind: Kind, depth: int | None) -> str:
    shape = _describe(value, kind)
    slots, remaining = _collect_slots(ctx, value, kind)

    if not slots and not remaining and kind is not Kind.ERROR:
        if shape.leaf:
            return shape.head
        return f"{shape.prefix}{shape.open}{shape.close}"

    if depth is not None and depth < 0:
        if kind is Kind.REGEXP:
            return shape.head
        return ELIDED

    ctx.seen.append(value)
    try:
        output = [_format_property(ctx, kind, slot, depth) for slot in slots]
    finally:
        ctx.seen.pop()

    if remaining:
        output.append(f"... {remaining} more item{'s' if remaining > 1 else ''}")

    if kind is Kind.ERROR:
        return _format_error(ctx, value, output)
    return _layout(ctx, shape, output)


def _format_property(ctx: InspectContext, kind: Kind, slot: _Slot, depth: int | None) -> str:
    child_depth = None if depth is None else depth - 1

    if slot.accessor:
        value_label = f"[{slot.accessor}]"
    elif ctx.is_seen(slot.value):
        value_label = CIRCULAR
    else:
        value_label = _format_value(ctx, slot.value, child_depth)
        if "\n" in value_label:
            value_label = value_label.replace("\n", "\n" + ctx.options.indent)

    if kind is Kind.MAP:
        key_label = CIRCULAR if ctx.is_seen(slot.key) else _format_value(ctx, slot.key, child_depth)
        return PropertyEntry(key_label, value_label).render(" => ")

    if not slot.enumerable:
        key_label = f"[{slot.key}]"
    elif slot.index:
        key_label = ""
    else:
        key_label = format_key(slot.key)

    entry = PropertyEntry(key_label, value_label, bool(slot.accessor), slot.index)
    return entry.render(": ")


def _layout(ctx: InspectContext, shape: _Shape, output: list[str]) -> str:
    if not output:
        return f"{shape.prefix}{shape.open}{shape.close}"

    length = sum(len(entry) + 1 for entry in output)
    if length > ctx.options.line_width or any("\n" in entry for entry in output):
        indent = ctx.options.indent
        body = f",\n{indent}".join(output)
        return f"{shape.prefix}{shape.open}\n{indent}{body}\n{shape.close}"

    # Singleton tuple keeps its trailing comma
    trailing = "," if shape.open == "(" and len(output) == 1 else ""
    return f"{shape.prefix}{shape.open} {', '.join(output)}{trailing} {shape.close}"


def _format_error(ctx: InspectContext, exc: BaseException, output: list[str]) -> str:
    name = class_name(exc)
    message = _safe_str(exc)
    header = f"{name}: {message}" if message else name

    lines = []
    stack = safe_getattr(exc, "stack")
    if isinstance(stack, str) and stack:
        if not stack.startswith(header):
            lines.append(header)
        lines.extend(ctx.stack.format_stack(stack, header))
    else:
        lines.append(header)
        tb = safe_getattr(exc, "__traceback__")
        lines.extend(ctx.stack.format_traceback(tb if isinstance(tb, TracebackType) else None))

    out = "\n".join(lines)
    if output:
        indent = ctx.options.indent
        out += " {\n" + indent + f",\n{indent}".join(output) + "\n}"
    return out.strip()


def _describe(value: Any, kind: Kind) -> _Shape:
    if kind.is_function:
        return _Shape(function_type_name(value, kind), leaf=True)
    if kind is Kind.REGEXP:
        return _Shape(regexp_literal(value), leaf=True)
    if kind is Kind.DATE:
        return _Shape(_safe_call(value.isoformat, default=class_name(value)), leaf=True)
    if kind is Kind.ITERATOR:
        return _Shape(f"[{iterator_type_name(value)}]", leaf=True)
    if kind is Kind.ERROR:
        return _Shape("", "", "")
    if kind is Kind.ARGUMENTS:
        return _Shape("Arguments")
    if kind in (Kind.MAP, Kind.SET):
        size = safe_len(value)
        name = class_name(value)
        return _Shape(name if size is None else f"{name}({size})")
    if kind is Kind.ARRAY_LIKE:
        if isinstance(value, tuple):
            return _Shape("" if type(value) is tuple else class_name(value), "(", ")")
        return _Shape("" if type(value) is list else class_name(value), "[", "]")
    if kind is Kind.NULL_PROTOTYPE_OBJECT:
        if isinstance(value, ModuleType):
            return _Shape(f"[Module: {safe_getattr(value, '__name__') or '(unknown)'}]")
        return _Shape("[Object: null prototype]")
    return _Shape("" if type(value) is dict else class_name(value))


def _collect_slots(ctx: InspectContext, value: Any, kind: Kind) -> tuple[list[_Slot], int]:
    """Enumerate the members of value; returns the slots and the count left out by max_items."""
    limit = ctx.options.max_items

    if kind in (Kind.ARRAY_LIKE, Kind.SET):
        items, remaining = _head(value, limit)
        slots = [_Slot(str(i), item, index=True) for i, item in enumerate(items)]
        if kind is Kind.ARRAY_LIKE:
            slots += _attribute_slots(ctx, value)
        return slots, remaining

    if kind is Kind.MAP:
        items, remaining = _head(_safe_call(value.items, default=()), limit, size=safe_len(value))
        return [_Slot(k, v) for k, v in _pairs(items)], remaining

    if kind is Kind.PLAIN_OBJECT:
        if type(value) is dict:
            return [_Slot(k, v) for k, v in _pairs(_safe_call(value.items, default=())) if not isinstance(k, Symbol)], 0
        if isinstance(value, tuple):
            names = safe_getattr(type(value), "_fields") or ()
            return [_Slot(name, item) for name, item in zip(names, value)], 0
        return _attribute_slots(ctx, value), 0

    if kind is Kind.NULL_PROTOTYPE_OBJECT:
        return (_module_slots(ctx, value) if isinstance(value, ModuleType) else []), 0
    if kind is Kind.ARGUMENTS:
        arguments = safe_getattr(value, "arguments") or {}
        return [_Slot(k, v) for k, v in _pairs(_safe_call(arguments.items, default=()))], 0
    if kind is Kind.ERROR:
        return _error_slots(ctx, value), 0
    if kind is Kind.CLASS:
        return _class_slots(ctx, value), 0
    return _attribute_slots(ctx, value), 0


def _attribute_slots(ctx: InspectContext, value: Any) -> list[_Slot]:
    slots = []
    own = {**safe_vars(value), **safe_slots(value)}
    for key, item in own.items():
        if _is_dunder(key):
            continue
        enumerable = not key.startswith("_")
        if enumerable or ctx.show_hidden:
            slots.append(_Slot(key, item, enumerable))

    if ctx.show_hidden:
        for key, accessor in _property_accessors(type(value)):
            if key not in own:
                slots.append(_Slot(key, NOT_FOUND, False, accessor))
    return slots


def _class_slots(ctx: InspectContext, cls: type) -> list[_Slot]:
    """Class-level data attributes; methods and descriptors belong to instances."""
    slots = []
    for key, item in safe_vars(cls).items():
        if _is_dunder(key) or callable(item) or hasattr(type(item), "__get__"):
            continue
        enumerable = not key.startswith("_")
        if enumerable or ctx.show_hidden:
            slots.append(_Slot(key, item, enumerable))
    return slots


def _module_slots(ctx: InspectContext, module: ModuleType) -> list[_Slot]:
    namespace = safe_vars(module)
    exported = safe_getattr(module, "__all__")
    if isinstance(exported, (list, tuple)):
        names = [name for name in exported if isinstance(name, str)]
    else:
        names = [name for name in namespace if not name.startswith("_")]

    slots = [_Slot(name, namespace.get(name, safe_getattr(module, name))) for name in names]
    if ctx.show_hidden:
        slots += [_Slot(name, item, False) for name, item in namespace.items()
                  if name.startswith("_") and not _is_dunder(name)]
    return slots


def _error_slots(ctx: InspectContext, exc: BaseException) -> list[_Slot]:
    own = safe_vars(exc)
    slots = []
    for key, item in own.items():
        if _is_dunder(key) or key == "stack":
            continue
        enumerable = not key.startswith("_")
        if not enumerable and (not ctx.show_hidden or _ERROR_HIDDEN_EXCLUDED.search(key)):
            continue
        slots.append(_Slot(key, item, enumerable))

    cause = safe_getattr(exc, "__cause__")
    if cause is not None and cause is not NOT_FOUND and "cause" not in own:
        slots.append(_Slot("cause", cause))

    code = safe_getattr(exc, "code")
    if code and "code" not in own:
        slots.append(_Slot("code", code))

    if ctx.show_hidden:
        slots.append(_Slot("args", safe_getattr(exc, "args"), False))
    return slots


def _property_accessors(cls: type) -> Iterable[tuple[str, str]]:
    seen = set()
    for klass in getattr(cls, "__mro__", ()):
        for key, item in safe_vars(klass).items():
            if key in seen or not isinstance(item, property):
                continue
            seen.add(key)
            if item.fget is not None and item.fset is not None:
                yield key, "Getter/Setter"
            elif item.fget is not None:
                yield key, "Getter"
            elif item.fset is not None:
                yield key, "Setter"


def _head(iterable: Any, limit: int | None, size: int | None = None) -> tuple[list[Any], int]:
    """Take up to limit items and report how many were left out."""
    if size is None:
        size = safe_len(iterable)
    items = []
    try:
        iterator = iter(iterable)
        items = list(iterator if limit is None else islice(iterator, max(limit, 0)))
    except Exception:
        return items, 0
    if size is None or size <= len(items):
        return items, 0
    return items, size - len(items)


def _pairs(items: Iterable[Any]) -> list[tuple[Any, Any]]:
    pairs = []
    try:
        for item in items:
            key, value = item
            pairs.append((key, value))
    except Exception:
        pass
    return pairs


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _safe_call(fn: Any, default: Any = None) -> Any:
    try:
        return fn()
    except Exception:
        return default


def _safe_str(obj: Any) -> str:
    try:
        text = str(obj)
    except Exception:
        return _safe_repr(obj)
    return text if isinstance(text, str) else _safe_repr(obj)


def _safe_repr(obj: Any) -> str:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully
    """
    try:
        repr_ = repr(obj)
    except Exception as e:
        # Fallback for broken __repr__: show type and exception info
        repr_ = f"<{class_name(obj)} object (repr failed: {type(e).__name__})>"
    return repr_
