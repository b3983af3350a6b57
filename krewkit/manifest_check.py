"""Checks of a plugin manifest's platform selectors and of installed files."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Sequence

log = logging.getLogger(__name__)

OP_IN = "In"
OP_NOT_IN = "NotIn"
OP_EXISTS = "Exists"
OP_DOES_NOT_EXIST = "DoesNotExist"

_LICENSE_FILES = frozenset(
    {
        "license",
        "license.txt",
        "license.md",
        "licenses",
        "licenses.txt",
        "licenses.md",
        "copying",
        "copying.txt",
    }
)


@dataclass(frozen=True)
class OSArchPair:
    """An operating system and CPU architecture combination."""

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@dataclass(frozen=True)
class SelectorRequirement:
    """A single label expression such as ``os In (darwin, linux)``."""

    key: str
    operator: str
    values: tuple[str, ...] = ()

    def _check(self) -> None:
        if self.operator in (OP_IN, OP_NOT_IN):
            if not self.values:
                raise ValueError(
                    f"for {self.operator!r} operator, values set can't be empty (key {self.key!r})"
                )
        elif self.operator in (OP_EXISTS, OP_DOES_NOT_EXIST):
            if self.values:
                raise ValueError(
                    f"values set must be empty for {self.operator!r} operator (key {self.key!r})"
                )
        else:
            raise ValueError(f"{self.operator!r} is not a valid label selector operator")

    def matches(self, labels: Mapping[str, str]) -> bool:
        """Tell whether the labels satisfy this requirement."""
        self._check()
        present = self.key in labels
        if self.operator == OP_IN:
            return present and labels[self.key] in self.values
        if self.operator == OP_NOT_IN:
            return not present or labels[self.key] not in self.values
        if self.operator == OP_EXISTS:
            return present
        return not present


@dataclass(frozen=True)
class LabelSelector:
    """Label equalities and expressions that must all hold for a match.

    A selector with neither labels nor expressions matches everything.
    """

    match_labels: Mapping[str, str] = field(default_factory=dict)
    match_expressions: tuple[SelectorRequirement, ...] = ()

    def _requirements(self) -> list[SelectorRequirement]:
        requirements = [
            SelectorRequirement(key, OP_IN, (value,))
            for key, value in sorted(self.match_labels.items())
        ]
        requirements.extend(self.match_expressions)
        for requirement in requirements:
            requirement._check()
        return requirements

    def matches(self, labels: Mapping[str, str]) -> bool:
        """Tell whether the labels satisfy the selector.

        Raises ``ValueError`` when the selector itself is malformed.
        """
        return all(requirement.matches(labels) for requirement in self._requirements())


def all_platforms() -> list[OSArchPair]:
    """Return every OS/architecture pair plugins can be installed on."""
    return [
        OSArchPair("windows", "386"),
        OSArchPair("windows", "amd64"),
        OSArchPair("windows", "arm64"),
        OSArchPair("linux", "386"),
        OSArchPair("linux", "amd64"),
        OSArchPair("linux", "arm"),
        OSArchPair("linux", "arm64"),
        OSArchPair("darwin", "386"),
        OSArchPair("darwin", "amd64"),
        OSArchPair("darwin", "arm64"),
    ]


def selector_matches_os_arch(selector: LabelSelector | None, env: OSArchPair) -> bool:
    """Tell whether the selector picks the given platform.

    A missing or malformed selector matches nothing.
    """
    if selector is None:
        return False
    try:
        return selector.matches({"os": env.os, "arch": env.arch})
    except ValueError:
        log.warning("Failed to convert label selector: %r", selector)
        return False


def find_any_matching_platform(selector: LabelSelector | None) -> OSArchPair | None:
    """Return the first supported platform the selector matches, or ``None``."""
    for env in all_platforms():
        if selector_matches_os_arch(selector, env):
            log.debug("%r MATCHED <%s>", selector, env)
            return env
        log.debug("%r didn't match <%s>", selector, env)
    return None


def check_platforms_supported(selectors: Iterable[LabelSelector | None]) -> None:
    """Raise ``ValueError`` if a selector matches no supported platform."""
    for i, selector in enumerate(selectors):
        if find_any_matching_platform(selector) is None:
            raise ValueError(
                f"spec.platform[{i}]'s selector ({selector!r}) "
                "doesn't match any supported platforms"
            )


def check_overlapping_platform_selectors(selectors: Sequence[LabelSelector | None]) -> None:
    """Raise ``ValueError`` if several selectors match the same supported platform."""
    selectors = list(selectors)
    for env in all_platforms():
        matched = [i for i, selector in enumerate(selectors) if selector_matches_os_arch(selector, env)]
        if len(matched) > 1:
            indexes = "[" + " ".join(str(i) for i in matched) + "]"
            raise ValueError(
                f"multiple spec.platforms (at indexes {indexes}) "
                f"have overlapping selectors that select {env}"
            )


def _regular_files(path: str) -> Iterator[str]:
    info = os.lstat(path)
    if stat.S_ISREG(info.st_mode):
        yield os.path.basename(path)
    elif stat.S_ISDIR(info.st_mode):
        for name in sorted(os.listdir(path)):
            yield from _regular_files(os.path.join(path, name))


def validate_license_file_exists(install_dir: str) -> str:
    """Return the name of a license file found under ``install_dir``.

    Raises ``FileNotFoundError`` when there is none and ``OSError`` when the
    directory cannot be walked.
    """
    try:
        files = list(_regular_files(install_dir))
    except OSError as err:
        raise OSError(f"failed to walk installation directory: {err}") from err

    for name in files:
        log.debug("found installed file: %s", name)
        if name.lower() in _LICENSE_FILES:
            log.debug("found license file %r", name)
            return name
    raise FileNotFoundError(f"could not find license file among [{', '.join(files)}]")