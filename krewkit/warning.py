"""Warnings and security notices written to the user's terminal."""

from __future__ import annotations

import json
import os
import sys
from typing import TextIO

KREW_PLUGIN_NAME = "krew"
WARNING_PREFIX = "WARNING: "

_RED_BOLD = "\x1b[31;1m"
_RESET = "\x1b[0m"

_SECURITY_NOTICE = (
    "You installed plugin %s from the krew-index plugin repository.\n"
    "   These plugins are not audited for security by the Krew maintainers.\n"
    "   Run them at your own risk."
)


def _use_color(out: TextIO) -> bool:
    if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(out, "isatty", None)
    return bool(isatty and isatty())


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def print_warning(out: TextIO, message: str, *args: object) -> None:
    """Write a highlighted ``WARNING:`` prefix followed by the message.

    When ``args`` are given, ``message`` is a ``%``-style format for them;
    otherwise it is written verbatim.
    """
    prefix = WARNING_PREFIX
    if _use_color(out):
        prefix = f"{_RED_BOLD}{WARNING_PREFIX}{_RESET}"
    out.write(prefix)
    out.write(message % args if args else message)


def print_security_notice(plugin: str, out: TextIO | None = None) -> None:
    """Warn that a plugin from the default index has not been audited.

    Nothing is written for the plugin manager itself.
    """
    if plugin == KREW_PLUGIN_NAME:
        return
    print_warning(out if out is not None else sys.stderr, _SECURITY_NOTICE + "\n", _quote(plugin))