"""
Section-gated debug loggers.

`debuglog("net")` returns a callable that renders its arguments with `format`
and emits them at DEBUG level on the ``vinspect.debug.net`` logger, but only
when the section is listed in the VINSPECT_DEBUG or NODE_DEBUG environment
variables (comma-separated). The environment is read once, when the logger is
created, from the mapping passed as env or from os.environ.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import os
from typing import Any, Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import format
from .utils import fmt_type

ENV_VARS = ("VINSPECT_DEBUG", "NODE_DEBUG")

LOGGER_PREFIX = "vinspect.debug"


# Classes --------------------------------------------------------------------------------------------------------------

class DebugLogger:
    """
    Callable debug channel for one section.

    The ``enabled`` flag may be toggled at runtime; assigning anything other
    than True or False leaves it unchanged.
    """

    def __init__(self, section: str, enabled: bool = False) -> None:
        if not isinstance(section, str):
            raise TypeError(f"section must be a str, but found {fmt_type(section)}")
        self.section = section
        self.logger = logging.getLogger(f"{LOGGER_PREFIX}.{section}" if section else LOGGER_PREFIX)
        self._enabled = bool(enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: Any) -> None:
        if value is True or value is False:
            self._enabled = value

    def __call__(self, *args: Any) -> None:
        if self._enabled and args:
            self.logger.debug("%s", format(*args))

    def __repr__(self) -> str:
        return f"DebugLogger(section={self.section!r}, enabled={self._enabled})"


# Methods --------------------------------------------------------------------------------------------------------------

def debuglog(section: str, env: Mapping[str, str] | None = None) -> DebugLogger:
    """
    Create the debug logger for section.

    Args:
        section: Section name matched against the debug environment variables.
        env: Environment mapping; defaults to os.environ.

    Examples:
        >>> debuglog("net", env={"NODE_DEBUG": "fs, net"}).enabled
        True
        >>> debuglog("net", env={}).enabled
        False
    """
    env = os.environ if env is None else env
    return DebugLogger(section, enabled=bool(section) and section in enabled_sections(env))


def enabled_sections(env: Mapping[str, str]) -> set[str]:
    """Return the section names listed in the debug environment variables."""
    sections = set()
    for name in ENV_VARS:
        value = env.get(name) or ""
        sections.update(part.strip() for part in str(value).split(","))
    sections.discard("")
    return sections
