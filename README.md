# krewkit

Building blocks for a kubectl plugin manager. The package is a library of four
modules; each can be used on its own.

## Modules

### `krewkit.warning`

- `print_warning(out, message, *args)` writes a `WARNING: ` prefix and then the
  message to the stream `out`. When `args` are given, `message` is a
  `%`-style format for them; otherwise it is written as it is. The prefix is
  drawn in bold red when `out` is a terminal, unless `NO_COLOR` is set or
  `TERM` is `dumb`.
- `print_security_notice(plugin, out=None)` warns that a plugin installed from
  the central plugin index has not been audited for security. It writes to
  standard error unless another stream is given, and writes nothing for the
  plugin named `krew`.

### `krewkit.update_check`

- `fetch_latest_tag(url=GITHUB_VERSION_URL, timeout=10.0)` requests a JSON
  release document and returns its `tag_name` (an empty string when the field
  is missing). A failed request or a status other than 200 raises `OSError`;
  a body that is not a JSON object with a string tag raises `ValueError`.
- `is_development_build(tag)` is true when the tag (with or without a leading
  `v`) is not a semantic version.
- `upgrade_notification(current_tag, latest_tag)` returns the text telling the
  user to run `kubectl krew upgrade` when `latest_tag` is a newer version than
  `current_tag`, and `None` when `latest_tag` is empty, either tag does not
  parse, or there is nothing newer.
- `should_check_for_upgrade(current_tag, rate=UPGRADE_CHECK_RATE, rng=None)`
  returns `False` when `KREW_NO_UPGRADE_CHECK` is set in the environment, for
  development builds, and when a random draw exceeds `rate` (0.4 by default);
  otherwise `True`. Any object with a `random()` method can be passed as `rng`.

### `krewkit.install_args`

- `read_plugin_names(stream)` reads newline-separated plugin names and skips
  empty lines.
- `check_install_args(plugin_names, manifest="", manifest_url="", archive="")`
  returns the names as a list, or raises `ValueError` when both a manifest
  file and a manifest URL are given, when names are combined with a manifest,
  or when an archive is given without a manifest.

### `krewkit.manifest_check`

- `OSArchPair(os, arch)` is a platform; `str()` gives `os/arch`.
- `SelectorRequirement(key, operator, values)` is one label expression with
  operator `In`, `NotIn`, `Exists` or `DoesNotExist`.
- `LabelSelector(match_labels, match_expressions)` matches a label mapping with
  `matches(labels)`; all labels and expressions must hold, and an empty selector
  matches everything. A malformed selector raises `ValueError`.
- `all_platforms()` lists the supported platforms: windows 386/amd64/arm64,
  linux 386/amd64/arm/arm64 and darwin 386/amd64/arm64.
- `selector_matches_os_arch(selector, env)` tests a selector against a
  platform's `os` and `arch` labels; a missing or malformed selector matches
  nothing.
- `find_any_matching_platform(selector)` returns the first supported platform
  the selector matches, or `None`.
- `check_platforms_supported(selectors)` raises `ValueError` if any selector
  matches no supported platform.
- `check_overlapping_platform_selectors(selectors)` raises `ValueError` if two
  or more selectors match the same supported platform.
- `validate_license_file_exists(install_dir)` walks a directory and returns the
  name of the first license file found (`LICENSE`, `COPYING` and similar names,
  in any case); it raises `FileNotFoundError` when there is none.

## Example

```python
from krewkit.install_args import check_install_args
from krewkit.manifest_check import (
    LabelSelector,
    check_overlapping_platform_selectors,
    find_any_matching_platform,
)

darwin = LabelSelector(match_labels={"os": "darwin"})
print(find_any_matching_platform(darwin))  # darwin/386

# raises ValueError: both selectors select the darwin platforms
check_overlapping_platform_selectors([darwin, LabelSelector(match_labels={"os": "darwin"})])

check_install_args(["ctx", "ns"])  # ["ctx", "ns"]
```

```python
from krewkit.update_check import upgrade_notification

print(upgrade_notification("v0.4.0", "v0.4.1"))
```

## What it does not do

The package provides no command-line program. It does not download, install,
upgrade or uninstall plugins, does not clone or update plugin indexes, does
not read or write plugin manifests or installation receipts, and has no
search or listing of plugins. Those have to be supplied by the program that
uses these modules.

## Requirements

Python 3.10 or later. Version comparison uses the `semver` library.