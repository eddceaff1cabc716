# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""YAML settings loader."""

from __future__ import annotations

import dataclasses
import logging
import os
import pathlib

import yaml

from splitnat.core._errors import ConfigError

from ._keys import SettingKey, SudoMode
from ._schemas import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)

ENV_VAR = 'SPLITNAT_CONFIG'

SEARCH_PATHS = (
    pathlib.Path('~/.config/splitnat/config.yml'),
    pathlib.Path('/etc/splitnat/config.yml'),
)

_FIELD_TYPES = {f.name: f.type for f in dataclasses.fields(Settings)}


def find_settings_file() -> pathlib.Path | None:
    """Return the first existing settings file in search order, or None."""
    env = os.environ.get(ENV_VAR)
    if env:
        return pathlib.Path(env).expanduser()
    for candidate in SEARCH_PATHS:
        path = candidate.expanduser()
        if path.is_file():
            return path
    return None


def _coerce(key: str, value):
    """Check *value* against the declared type of settings field *key*."""
    declared = _FIELD_TYPES[key]
    if declared is bool:
        if not isinstance(value, bool):
            raise ConfigError(f"Setting '{key}' must be true or false, got {value!r}")
        return value
    if declared is str:
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Setting '{key}' must be a non-empty string, got {value!r}")
        return value
    # tuple[str, ...]
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"Setting '{key}' must be a list of strings, got {value!r}")
    return tuple(value)


def settings_from_dict(data: dict | None) -> Settings:
    """Build a ``Settings`` from a mapping, rejecting unknown keys."""
    if not data:
        return DEFAULT_SETTINGS
    if not isinstance(data, dict):
        raise ConfigError('Settings file must contain a mapping at the top level')

    known = {k.value for k in SettingKey}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f'Unknown setting(s): {", ".join(unknown)}',
            hint=f'Known settings: {", ".join(sorted(known))}',
        )

    values = {key: _coerce(key, value) for key, value in data.items()}

    sudo = values.get(SettingKey.USE_SUDO)
    if sudo is not None and sudo not in {m.value for m in SudoMode}:
        raise ConfigError(
            f"Setting 'use_sudo' must be one of auto, always, never, got {sudo!r}",
        )

    return dataclasses.replace(DEFAULT_SETTINGS, **values)


def load_settings(path: str | os.PathLike | None = None) -> Settings:
    """Load settings from *path*, the search path, or fall back to defaults."""
    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug('No settings file found, using defaults')
            return DEFAULT_SETTINGS

    path = pathlib.Path(path)
    logger.debug('Loading settings from %s', path)
    try:
        with path.open(encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f'Cannot read settings file {path}: {e.strerror}') from e
    except yaml.YAMLError as e:
        raise ConfigError(f'Invalid YAML in settings file {path}', hint=str(e)) from e

    return settings_from_dict(data)
