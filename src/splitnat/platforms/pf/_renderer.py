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

"""Render a ``RuleSet`` into the complete pf anchor file."""

from __future__ import annotations

import splitnat
from splitnat.core.objects import RuleSet
from splitnat.core.options import DEFAULT_SETTINGS, Settings
from splitnat.driver._jinja2_template import Jinja2Template

from ._print_rule import PrintRule_pf


class AnchorRenderer:
    """Fill ``anchor.conf.j2`` from a rule set.

    The output carries no timestamp: the same rule set always renders to
    the same bytes, so an unchanged anchor can be detected by comparison.
    """

    template_name = 'anchor.conf.j2'

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        self.settings = settings

    def context(self, ruleset: RuleSet) -> dict:
        printer = PrintRule_pf(ruleset)
        return {
            'anchor_path': self.settings.anchor_path,
            'version': splitnat.__version__,
            'warnings': list(ruleset.warnings),
            'interface_macros': printer.print_interface_macros(),
            'network_macros': printer.print_network_macros(),
            'nat_rules': printer.print_nat_rules(),
            'filter_rules': printer.print_filter_rules(),
        }

    def render(self, ruleset: RuleSet) -> str:
        return Jinja2Template('pf', self.template_name).render(self.context(ruleset))
