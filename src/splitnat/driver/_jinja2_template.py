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

"""Jinja2 templates for the pf anchor and the stock ``pf.conf``.

A template placed in ``~/.config/splitnat/templates/pf/`` replaces the
packaged one of the same name.  The directory sits next to the user's
``config.yml`` so that site tweaks to the generated anchor (extra
comments, a different rule layout) survive package upgrades and are
found without any extra setting.  Templates render with
``StrictUndefined``, so an override that references a variable the
renderer does not provide fails loudly instead of emitting an empty
token into pf syntax.
"""

from __future__ import annotations

import importlib.resources
from pathlib import Path

import jinja2


def _get_package_resources_dir() -> Path:
    """Return the path to the package's resources directory."""
    ref = importlib.resources.files('splitnat') / 'resources'
    return Path(str(ref))


def user_template_dir(platform: str) -> Path:
    return Path.home() / '.config' / 'splitnat' / 'templates' / platform


class Jinja2Template:
    """Load and render a Jinja2 template by platform and name."""

    def __init__(self, platform: str, template_name: str) -> None:
        search_paths: list[str] = []

        # User override directory (checked first)
        user_dir = user_template_dir(platform)
        if user_dir.is_dir():
            search_paths.append(str(user_dir))

        # Package resources directory (fallback)
        pkg_dir = _get_package_resources_dir() / 'templates' / platform
        search_paths.append(str(pkg_dir))

        loader = jinja2.FileSystemLoader(search_paths)
        self._env = jinja2.Environment(
            loader=loader,
            undefined=jinja2.StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._template = self._env.get_template(template_name)

    def render(self, context: dict) -> str:
        """Render the template with the given context variables."""
        return self._template.render(context)
