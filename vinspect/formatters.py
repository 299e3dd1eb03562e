"""
Printf-style template formatting.

`format()` substitutes ``%``-directives in a template with converted arguments
and appends whatever arguments are left over, so it doubles as a space-joined
``print``-like renderer for debugging and logging. Non-string arguments that no
directive consumes are rendered with `inspect`.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import builtins
import json
import math
import re
import sys
from enum import Enum, unique
from typing import Any, Callable, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .classify import classify
from .inspector import InspectOptions, format_number, inspect
from .sentinels import UNDEFINED, Symbol
from .utils import class_name

DIRECTIVE_PATTERN = re.compile(r"%(?:llu|lu|ls|zu|[dfijlosuxz%])", re.IGNORECASE)

SYSTEM = "[System]"

_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")
_INT_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|(\d+))")
_LONE_BACKSLASH = re.compile(r"(?<!\\)\\")


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class FormatDirective(str, Enum):
    """
    Template directives with a conversion rule.

    Lookup is case-sensitive: ``%S`` and ``%LS`` are string conversions, while
    ``%D`` matches the directive grammar but has no rule and is left in place.
    """
    DECIMAL = "%d"
    UNSIGNED = "%u"
    LONG = "%l"
    LONG_UNSIGNED = "%lu"
    LONG_LONG_UNSIGNED = "%llu"
    SIZE = "%zu"
    FLOAT = "%f"
    INTEGER = "%i"
    OBJECT_HIDDEN = "%o"
    OBJECT = "%O"
    JSON = "%j"
    JSON_PRETTY = "%J"
    STRING = "%s"
    WIDE_STRING = "%ls"
    STRING_UPPER = "%S"
    WIDE_STRING_UPPER = "%LS"
    PERCENT = "%%"

    @classmethod
    def lookup(cls, token: str) -> "FormatDirective | None":
        """Return the directive spelled exactly as token, None when there is none."""
        return cls._value2member_map_.get(token)

    def convert(self, value: Any, options: InspectOptions) -> str:
        """Apply this directive's conversion rule to one argument."""
        return _CONVERTERS[self](value, options)


# Methods --------------------------------------------------------------------------------------------------------------

def format(template: Any, *args: Any) -> str:
    """
    Build a string from a printf-style template.

    Directives consume arguments left to right:

    - ``%d %u %l %lu %llu %zu``: numeric coercion
    - ``%f``: leading float of the argument's text, ``%i``: leading integer
    - ``%o``: `inspect` with hidden keys, ``%O``: `inspect`
    - ``%j``: compact JSON, ``%J``: JSON indented by one space
    - ``%s %ls %S %LS``: string coercion
    - ``%%``: a literal percent sign, consumes nothing

    When the arguments run out, remaining directives are left as written. The
    remaining arguments are appended separated by spaces. A trailing
    InspectOptions, or a mapping holding a 'seen' list and a numeric or None
    'depth' that builds valid options, is taken as inspection options instead
    of an argument.

    If template is not a str, the template and every argument are inspected
    and joined with spaces.

    Examples:
        >>> format("%d-%s", 3, "x")
        '3-x'
        >>> format("100%%")
        '100%'
        >>> format("no directive", {"a": 1})
        'no directive { a: 1 }'
        >>> format({"a": 1}, [2])
        '{ a: 1 } [ 2 ]'
    """
    args = list(args)
    options = _trailing_options(args[-1]) if args else None
    if options is None:
        options = InspectOptions()
    else:
        args.pop()

    if not isinstance(template, str):
        return " ".join(inspect(value, options) for value in [template, *args])

    index = 0

    def substitute(match: re.Match) -> str:
        nonlocal index
        token = match.group(0)
        if token == FormatDirective.PERCENT:
            return "%"
        if index >= len(args):
            return token

        if args[index] is builtins:
            index += 1
            if index >= len(args):
                return token
        if args[index] is sys:
            index += 1
            return SYSTEM

        directive = FormatDirective.lookup(token)
        if directive is None:
            return token
        value = args[index]
        index += 1
        return directive.convert(value, options)

    output = DIRECTIVE_PATTERN.sub(substitute, template)

    for value in args[index:]:
        if classify(value).is_primitive:
            output += " " + to_string(value)
        else:
            output += " " + inspect(value, options)
    return output


def to_string(value: Any) -> str:
    """
    Coerce value to text the way ``%s`` does.

    Examples:
        >>> to_string(None), to_string(True), to_string(1.0)
        ('null', 'true', '1.0')
    """
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Symbol):
        return str(value)
    try:
        return str(value)
    except Exception:
        return f"[object {class_name(value)}]"


def to_number(value: Any) -> int | float:
    """
    Coerce value to a number; unconvertible values give NaN.

    Examples:
        >>> to_number(" 42 "), to_number(""), to_number(None)
        (42, 0, 0)
        >>> math.isnan(to_number("4x"))
        True
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text, 0) if not re.fullmatch(r"[+-]?0\d+", text) else int(text)
        except ValueError:
            pass
        if text in ("Infinity", "+Infinity", "-Infinity"):
            return -math.inf if text.startswith("-") else math.inf
        if re.search(r"(?i)nan|inf", text):
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def parse_float(value: Any) -> float:
    """Parse the leading float literal of value's text; NaN when there is none."""
    match = _FLOAT_PREFIX.match(to_string(value))
    if not match:
        return math.nan
    literal = match.group(1)
    if literal.lstrip("+-") == "Infinity":
        return -math.inf if literal.startswith("-") else math.inf
    return float(literal)


def parse_int(value: Any) -> int | float:
    """Parse the leading integer literal of value's text; NaN when there is none."""
    match = _INT_PREFIX.match(to_string(value))
    if not match:
        return math.nan
    sign, hex_digits, digits = match.groups()
    number = int(hex_digits, 16) if hex_digits else int(digits)
    return -number if sign == "-" else number


def parse_json(text: Any) -> Any:
    """
    Parse JSON text, tolerating unescaped backslashes; None when it cannot be parsed.

    Text containing backslashes is first tried with every lone backslash doubled,
    so Windows paths written as ``"C:\\Users"`` survive, then as written.

    Examples:
        >>> parse_json('{"path": "C:\\\\Users"}')
        {'path': 'C:\\\\Users'}
        >>> parse_json("{broken") is None
        True
    """
    if text is None:
        return None
    text = to_string(text)

    if "\\" in text:
        try:
            return json.loads(_LONE_BACKSLASH.sub(r"\\\\", text))
        except ValueError:
            pass
    try:
        return json.loads(text)
    except ValueError:
        return None


def parse_headers(headers: Any) -> list[tuple[str, str]]:
    """
    Parse ``Name: value`` lines into lower-cased (name, value) pairs.

    A list of lines is joined first. Lines without a colon, or with an empty
    name or value, are skipped; anything other than a str or list gives [].

    Examples:
        >>> parse_headers("Content-Type: Text/HTML\\r\\nX-Empty:\\nHost: a:80")
        [('content-type', 'text/html'), ('host', 'a:80')]
    """
    if isinstance(headers, list):
        headers = "\n".join(to_string(line).strip() for line in headers)
    if not isinstance(headers, str):
        return []

    pairs = []
    for line in re.split(r"\r?\n", headers):
        name, colon, value = line.strip().partition(":")
        if not colon:
            continue
        name, value = name.strip().lower(), value.strip().lower()
        if name and value:
            pairs.append((name, value))
    return pairs


# Private Methods ------------------------------------------------------------------------------------------------------

def _trailing_options(value: Any) -> InspectOptions | None:
    """Return value as inspection options, None when it is an ordinary argument."""
    if isinstance(value, InspectOptions):
        return value
    if not isinstance(value, Mapping) or "seen" not in value or "depth" not in value:
        return None

    depth = value["depth"]
    if not isinstance(value["seen"], list) or isinstance(depth, bool):
        return None
    if depth is not None and not isinstance(depth, (int, float)):
        return None
    try:
        return InspectOptions.from_mapping(value)
    except TypeError:
        # Option-shaped data with invalid field values
        return None


def _json(value: Any, indent: str | None = None) -> str:
    if value is UNDEFINED:
        return "undefined"
    try:
        if indent is None:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        return json.dumps(value, indent=indent, ensure_ascii=False)
    except ValueError:
        # Circular reference detected
        return "[Circular]"
    except TypeError:
        return "undefined"


def _numeric(value: Any, options: InspectOptions) -> str:
    return format_number(to_number(value))


_CONVERTERS: dict[FormatDirective, Callable[[Any, InspectOptions], str]] = {
    FormatDirective.DECIMAL: _numeric,
    FormatDirective.UNSIGNED: _numeric,
    FormatDirective.LONG: _numeric,
    FormatDirective.LONG_UNSIGNED: _numeric,
    FormatDirective.LONG_LONG_UNSIGNED: _numeric,
    FormatDirective.SIZE: _numeric,
    FormatDirective.FLOAT: lambda value, options: format_number(parse_float(value)),
    FormatDirective.INTEGER: lambda value, options: format_number(parse_int(value)),
    FormatDirective.OBJECT_HIDDEN: lambda value, options: inspect(value, options.merge(show_hidden=True)),
    FormatDirective.OBJECT: lambda value, options: inspect(value, options),
    FormatDirective.JSON: lambda value, options: _json(value),
    FormatDirective.JSON_PRETTY: lambda value, options: _json(value, indent=" "),
    FormatDirective.STRING: lambda value, options: to_string(value),
    FormatDirective.WIDE_STRING: lambda value, options: to_string(value),
    FormatDirective.STRING_UPPER: lambda value, options: to_string(value),
    FormatDirective.WIDE_STRING_UPPER: lambda value, options: to_string(value),
    FormatDirective.PERCENT: lambda value, options: "%",
}
