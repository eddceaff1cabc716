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

"""Typed settings keys, schema and YAML loader.

This module provides:

- **StrEnum keys**: the names accepted in the settings file
- **Dataclass schema**: typed defaults used by every pipeline stage
- **Loader**: reads the YAML settings file and validates it

Usage::

    from splitnat.core.options import load_settings

    settings = load_settings()          # search path or defaults
    settings.guest_member               # 'vmenet0'
"""

from splitnat.core.options._keys import SettingKey, SudoMode
from splitnat.core.options._loader import (
    ENV_VAR,
    find_settings_file,
    load_settings,
    settings_from_dict,
)
from splitnat.core.options._schemas import DEFAULT_SETTINGS, Settings

__all__ = [
    'DEFAULT_SETTINGS',
    'ENV_VAR',
    'SettingKey',
    'Settings',
    'SudoMode',
    'find_settings_file',
    'load_settings',
    'settings_from_dict',
]
