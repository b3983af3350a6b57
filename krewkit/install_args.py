"""Collecting and checking the arguments of the install command."""

from __future__ import annotations

from typing import Iterable, TextIO

_BOTH_MANIFEST_SOURCES = "cannot specify --manifest and --manifest-url at the same time"
_NAMES_AND_MANIFEST = (
    "must specify either specify either plugin names (via positional arguments or STDIN), "
    "or --manifest/--manifest-url; not both"
)
_ARCHIVE_WITHOUT_MANIFEST = "--archive can be specified only with --manifest or --manifest-url"


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def read_plugin_names(stream: TextIO) -> list[str]:
    """Read newline-delimited plugin names from ``stream``, skipping empty lines."""
    return [name for name in map(_strip_line_ending, stream) if name]


def check_install_args(
    plugin_names: Iterable[str],
    manifest: str = "",
    manifest_url: str = "",
    archive: str = "",
) -> list[str]:
    """Check that the install arguments can be used together.

    Plugins come either from names or from a single manifest (a file or a
    URL); a local archive may only override the download of a manifest.
    Returns the plugin names; raises ``ValueError`` for a conflicting
    combination.
    """
    names = list(plugin_names)
    if manifest and manifest_url:
        raise ValueError(_BOTH_MANIFEST_SOURCES)
    if names and (manifest or manifest_url):
        raise ValueError(_NAMES_AND_MANIFEST)
    if archive and not manifest and not manifest_url:
        raise ValueError(_ARCHIVE_WITHOUT_MANIFEST)
    return names