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

"""Print rules in pf syntax.

Interfaces and destinations are referenced through macros
(``$bridge_if``, ``$vpn_if``, ``$wan_if``, ``$vpn_net1`` ...) declared
at the top of the anchor, so the rule text itself does not change when
the interfaces are renumbered.
"""

from __future__ import annotations

from splitnat.core.objects import (
    ANY,
    FilterRule,
    InterfaceNetwork,
    InterfaceRef,
    NATRule,
    RuleSet,
)

# Macro name and trailing comment per interface role
INTERFACE_MACROS = (
    ('bridge_if', 'VM bridge'),
    ('vpn_if', 'VPN tunnel'),
    ('wan_if', 'Internet egress'),
)

NETWORK_MACRO_PREFIX = 'vpn_net'


class PrintRule_pf:
    """Render a ``RuleSet`` into pf macro, NAT and filter lines."""

    def __init__(self, ruleset: RuleSet) -> None:
        self.ruleset = ruleset
        self._iface_macros = {
            ruleset.bridge.name: 'bridge_if',
            ruleset.vpn.name: 'vpn_if',
            ruleset.wan.name: 'wan_if',
        }
        self._net_macros = {
            str(dst): f'{NETWORK_MACRO_PREFIX}{idx}'
            for idx, dst in enumerate(ruleset.destinations, start=1)
        }

    # -- Macros --

    def print_interface_macros(self) -> list[str]:
        ifaces = (self.ruleset.bridge, self.ruleset.vpn, self.ruleset.wan)
        width = max(len(name) for name, _ in INTERFACE_MACROS)
        value_width = max(len(iface.name) for iface in ifaces) + 2
        lines = []
        for (macro, comment), iface in zip(INTERFACE_MACROS, ifaces, strict=True):
            value = f'"{iface.name}"'
            lines.append(f'{macro:<{width}} = {value:<{value_width}}  # {comment}')
        return lines

    def print_network_macros(self) -> list[str]:
        if not self._net_macros:
            return []
        width = max(len(m) for m in self._net_macros.values())
        return [
            f'{macro:<{width}} = "{dst}"' for dst, macro in self._net_macros.items()
        ]

    # -- Operands --

    def _iface(self, iface: InterfaceRef) -> str:
        macro = self._iface_macros.get(iface.name)
        return f'${macro}' if macro else iface.name

    def _addr(self, operand) -> str:
        if operand is ANY:
            return 'any'
        if isinstance(operand, InterfaceNetwork):
            return f'{self._iface(operand.interface)}:network'
        macro = self._net_macros.get(str(operand))
        return f'${macro}' if macro else str(operand)

    # -- Rules --

    def print_nat_rule(self, rule: NATRule) -> str:
        iface = self._iface(rule.interface)
        return (
            f'nat on {iface} from {self._addr(rule.source)} '
            f'to {self._addr(rule.destination)} -> ({self._iface(rule.translation)})'
        )

    def print_filter_rule(self, rule: FilterRule) -> str:
        # 'in ' padding aligns 'pass in  on' with 'pass out on'
        parts = ['pass', f'{rule.direction.value:<3}']
        if rule.quick:
            parts.append('quick')
        parts += ['on', self._iface(rule.interface), rule.family]
        if rule.source is not None or rule.destination is not None:
            src = self._addr(rule.source) if rule.source is not None else 'any'
            dst = self._addr(rule.destination) if rule.destination is not None else 'any'
            parts += ['from', src, 'to', dst]
        if rule.keep_state:
            parts += ['keep', 'state']
        return ' '.join(parts)

    def print_nat_rules(self) -> str:
        return self._print_section(self.ruleset.nat_rules, self.print_nat_rule)

    def print_filter_rules(self) -> str:
        return self._print_section(self.ruleset.filter_rules, self.print_filter_rule)

    @staticmethod
    def _print_section(rules, printer) -> str:
        """Print rules, starting a commented paragraph whenever the comment changes."""
        lines: list[str] = []
        current = None
        for rule in rules:
            if rule.comment and rule.comment != current:
                if lines:
                    lines.append('')
                lines.append(f'# {rule.comment}')
                current = rule.comment
            lines.append(printer(rule))
        return '\n'.join(lines)
