"""Checking for a newer release of the plugin manager."""

from __future__ import annotations

import json
import logging
import os
import random
import urllib.error
import urllib.request
from typing import Protocol

import semver

log = logging.getLogger(__name__)

GITHUB_VERSION_URL = "https://api.github.com/repos/kubernetes-sigs/krew/releases/latest"

UPGRADE_CHECK_RATE = 0.4
"""Share of runs for which the upgrade check is performed."""

NO_UPGRADE_CHECK_ENV = "KREW_NO_UPGRADE_CHECK"

_UPGRADE_NOTIFICATION = (
    "A newer version of krew is available ({} -> {}).\n"
    'Run "kubectl krew upgrade" to get the newest version!\n'
)


class _RandomSource(Protocol):
    def random(self) -> float: ...


def _parse_version(tag: str) -> semver.Version:
    """Parse a release tag such as ``v0.4.1`` as a semantic version."""
    text = tag[1:] if tag.startswith("v") else tag
    return semver.Version.parse(text)


def fetch_latest_tag(url: str = GITHUB_VERSION_URL, timeout: float = 10.0) -> str:
    """Return the tag name of the latest release published at ``url``.

    An empty string is returned when the response carries no tag name.
    Raises ``OSError`` when the request fails and ``ValueError`` when the
    response cannot be parsed.
    """
    log.debug("Fetching latest tag from %s", url)
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            status = response.status
            reason = response.reason
            body = response.read()
    except urllib.error.HTTPError as err:
        raise OSError(f"expected HTTP status 200 OK, got {err.code} {err.reason}") from err
    except (urllib.error.URLError, OSError) as err:
        raise OSError(f"could not GET the latest release: {err}") from err

    if status != 200:
        raise OSError(f"expected HTTP status 200 OK, got {status} {reason}")

    log.debug("Parsing response")
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ValueError(f"could not parse the response: {err}") from err
    if not isinstance(document, dict):
        raise ValueError("could not parse the response: expected a JSON object")

    tag = document.get("tag_name", "")
    if tag is None:
        tag = ""
    if not isinstance(tag, str):
        raise ValueError("could not parse the response: tag_name is not a string")
    log.debug("Fetched latest tag name (%s)", tag)
    return tag


def is_development_build(tag: str) -> bool:
    """Tell whether the build tag is not a release version."""
    try:
        _parse_version(tag)
    except (ValueError, TypeError):
        return True
    return False


def upgrade_notification(current_tag: str, latest_tag: str) -> str | None:
    """Return the upgrade notice when ``latest_tag`` is newer than ``current_tag``.

    ``None`` is returned when the check was skipped (empty ``latest_tag``),
    when either tag is not a valid version, or when no newer version exists.
    """
    if not latest_tag:
        log.debug("Upgrade check was skipped or has not finished")
        return None
    try:
        latest = _parse_version(latest_tag)
    except (ValueError, TypeError) as err:
        log.debug("Could not parse remote tag as semver: %s", err)
        return None
    try:
        current = _parse_version(current_tag)
    except (ValueError, TypeError) as err:
        log.debug("Could not parse current tag as semver: %s", err)
        return None
    if current < latest:
        return _UPGRADE_NOTIFICATION.format(current_tag, latest_tag)
    log.debug("upgrade check found no new versions (%s>=%s)", current, latest)
    return None


def should_check_for_upgrade(
    current_tag: str,
    rate: float = UPGRADE_CHECK_RATE,
    rng: _RandomSource | None = None,
) -> bool:
    """Decide whether this run should look for a newer release.

    The check is skipped when disabled through the environment, for
    development builds, and otherwise for all but a ``rate`` share of runs.
    """
    if NO_UPGRADE_CHECK_ENV in os.environ:
        log.debug("skipping upgrade check")
        return False
    if is_development_build(current_tag):
        log.debug("skipping upgrade check")
        return False
    source = rng if rng is not None else random
    if rate < source.random():
        log.debug("skipping upgrade check")
        return False
    return True