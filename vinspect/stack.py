"""
Stack trace normalization for rendered exceptions.

Python tracebacks and foreign ``symbol@location`` stack strings (as produced by
WebKit-family JavaScript engines and forwarded with remote errors) are both
rendered as ``    at symbol (context:line:col)`` lines, most recent call first.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Iterable
from urllib.parse import urlsplit

_PACKAGE_DIR = Path(__file__).resolve().parent

_AT_LINE = re.compile(r"^\s*at\s")
_URL_SCHEME = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+\-.]*://|(?:file|blob|node|socket):)")

FRAME_PREFIX = "    at"


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class StackFormatter:
    """
    Strategy that turns stack frames into normalized ``at`` lines.

    Attributes:
        root: Path prefix stripped from frame locations. Defaults to the directory
            containing this package, so project files render relative to it.
        scheme_packages: Package directories rewritten into a scheme-style prefix,
            e.g. ``vinspect/inspector.py`` becomes ``vinspect:inspector``.
        script_suffixes: Extensions dropped from rewritten package paths.
    """
    root: str | None = None
    scheme_packages: tuple[str, ...] = (_PACKAGE_DIR.name,)
    script_suffixes: tuple[str, ...] = (".py", ".js")
    _root: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        root = self.root if self.root is not None else _PACKAGE_DIR.parent.as_posix()
        self._root = root if not root or root.endswith("/") else root + "/"

    def format_stack(self, stack: str, header: str) -> list[str]:
        """
        Normalize a foreign stack string.

        Lines already in ``at`` form and lines repeating the error header are kept
        as they are, blank lines are dropped, and every other line is parsed as
        ``symbol@location``.
        """
        lines = []
        for line in stack.split("\n"):
            if not line.strip():
                continue
            if (header and header in line) or _AT_LINE.match(line):
                lines.append(line)
            else:
                lines.append(self.format_frame_line(line))
        return [line for line in lines if line]

    def format_frame_line(self, line: str) -> str:
        """
        Rebuild one ``symbol@location`` frame.

        Examples:
            >>> StackFormatter(root="/").format_frame_line("run@http://host/app/main.js:10:4")
            '    at run (app/main.js:10:4)'
            >>> StackFormatter(root="/").format_frame_line("@")
            '    at <anonymous>'
        """
        if line.endswith("@"):
            symbol, location = line[:-1], ""
        elif line.startswith("@"):
            symbol, location = "", line[1:]
        else:
            symbol, _, location = line.partition("@")

        context, lineno, colno = self._split_location(location)
        return self._format_parts(symbol, context, lineno, colno)

    def format_traceback(self, tb: TracebackType | None) -> list[str]:
        """Render a Python traceback as ``at`` lines, most recent call first."""
        if tb is None:
            return []
        try:
            frames = traceback.extract_tb(tb)
        except Exception:
            return []
        return self.format_frames(reversed(frames))

    def format_frames(self, frames: Iterable[traceback.FrameSummary]) -> list[str]:
        lines = []
        for frame in frames:
            colno = getattr(frame, "colno", None)
            lines.append(self._format_parts(
                frame.name or "",
                frame.filename or "",
                str(frame.lineno) if frame.lineno else "",
                str(colno + 1) if isinstance(colno, int) else "",
            ))
        return [line for line in lines if line]

    def relative_context(self, context: str) -> str:
        """Strip the root prefix and rewrite package paths into scheme form."""
        context = context.replace("\\", "/")
        if self._root and context.startswith(self._root):
            context = context[len(self._root):]
        for package in self.scheme_packages:
            marker = f"{package}/"
            if marker in context:
                context = context.replace(marker, f"{package}:", 1)
                for suffix in self.script_suffixes:
                    if context.endswith(suffix):
                        context = context[:-len(suffix)]
                        break
                break
        return context

    def _split_location(self, location: str) -> tuple[str, str, str]:
        if _URL_SCHEME.match(location):
            try:
                location = urlsplit(location).path or location
            except ValueError:
                pass
        parts = location.split(":") if location else []
        parts += [""] * (3 - len(parts))
        return parts[0], parts[1], parts[2]

    def _format_parts(self, symbol: str, context: str, lineno: str, colno: str) -> str:
        output = []
        if symbol:
            output.append(symbol)

        if context:
            context = self.relative_context(context)

        if context and lineno and colno:
            output.append(f"({context}:{lineno}:{colno})")
        elif context and lineno:
            output.append(f"({context}:{lineno})")
        elif context:
            output.append(context)
        elif not symbol:
            output.append("<anonymous>")

        output = [entry.strip() for entry in output if entry.strip()]
        if not output:
            return ""
        return " ".join([FRAME_PREFIX, *output])
