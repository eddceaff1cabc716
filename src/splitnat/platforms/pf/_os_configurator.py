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

"""OS configurator for pf.

Hooks the generated anchor into the main ``pf.conf``.  pf requires
statements in a fixed order (options, normalization, queueing,
translation, filtering), so the anchor references are inserted next
to their existing siblings rather than appended.
"""

from __future__ import annotations

import logging
import re

from splitnat.core.options import DEFAULT_SETTINGS, Settings
from splitnat.driver._jinja2_template import Jinja2Template

logger = logging.getLogger(__name__)

# Statements that belong to the filtering section or later
_FILTER_SECTION_RE = re.compile(
    r'^\s*(anchor|load\s+anchor|pass|block|antispoof|table)\b',
)
_TRANSLATION_SECTION_RE = re.compile(
    r'^\s*(nat-anchor|rdr-anchor|binat-anchor|nat|rdr|binat|dummynet-anchor)\b',
)


class OSConfigurator_pf:
    """Generate and patch the main pf configuration."""

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        self.settings = settings
        name = re.escape(settings.anchor_name)
        self._nat_anchor_re = re.compile(rf'^\s*nat-anchor\s+"{name}"', re.MULTILINE)
        self._anchor_re = re.compile(rf'^\s*anchor\s+"{name}"', re.MULTILINE)
        self._load_re = re.compile(rf'^\s*load\s+anchor\s+"{name}"', re.MULTILINE)

    # -- Lines --

    def nat_anchor_line(self) -> str:
        return f'nat-anchor "{self.settings.anchor_name}"'

    def anchor_line(self) -> str:
        return f'anchor "{self.settings.anchor_name}"'

    def load_anchor_line(self) -> str:
        return (
            f'load anchor "{self.settings.anchor_name}" '
            f'from "{self.settings.anchor_path}"'
        )

    # -- Detection --

    def has_anchor_references(self, text: str) -> bool:
        """True if *text* already references and loads the anchor."""
        return all(
            regex.search(text)
            for regex in (self._nat_anchor_re, self._anchor_re, self._load_re)
        )

    # -- Generation --

    def generate_pf_conf(self) -> str:
        """A stock macOS ``pf.conf`` with the SplitNAT anchor added."""
        template = Jinja2Template('pf', 'pf.conf.j2')
        return template.render(
            {
                'anchor_name': self.settings.anchor_name,
                'anchor_path': self.settings.anchor_path,
            },
        )

    def patch_pf_conf(self, text: str) -> str:
        """Return *text* with any missing anchor reference inserted.

        An empty *text* yields ``generate_pf_conf()``.  Existing
        references are left where they are.
        """
        if not text.strip():
            return self.generate_pf_conf()

        lines = text.splitlines()

        if not self._nat_anchor_re.search(text):
            idx = self._insert_after_last(lines, r'^\s*nat-anchor\b')
            if idx is None:
                idx = self._first_index(lines, _TRANSLATION_SECTION_RE)
            if idx is None:
                idx = self._first_index(lines, _FILTER_SECTION_RE)
            if idx is None:
                idx = len(lines)
            lines.insert(idx, self.nat_anchor_line())
            logger.debug('Inserted nat-anchor at line %d', idx + 1)

        if not self._anchor_re.search('\n'.join(lines)):
            idx = self._insert_after_last(lines, r'^\s*anchor\b')
            if idx is None:
                idx = self._first_index(lines, re.compile(r'^\s*load\s+anchor\b'))
            if idx is None:
                idx = len(lines)
            lines.insert(idx, self.anchor_line())
            logger.debug('Inserted anchor at line %d', idx + 1)

        if not self._load_re.search('\n'.join(lines)):
            idx = self._insert_after_last(lines, r'^\s*load\s+anchor\b')
            if idx is None:
                idx = len(lines)
            lines.insert(idx, self.load_anchor_line())
            logger.debug('Inserted load anchor at line %d', idx + 1)

        return '\n'.join(lines) + '\n'

    @staticmethod
    def _insert_after_last(lines: list[str], pattern: str) -> int | None:
        regex = re.compile(pattern)
        last = None
        for i, line in enumerate(lines):
            if regex.match(line):
                last = i
        return None if last is None else last + 1

    @staticmethod
    def _first_index(lines: list[str], regex: re.Pattern) -> int | None:
        for i, line in enumerate(lines):
            if regex.match(line):
                return i
        return None

    # -- Kernel --

    def ip_forward_command(self) -> list[str]:
        return [self.settings.sysctl, '-w', 'net.inet.ip.forwarding=1']
