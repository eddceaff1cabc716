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

"""Rule models: NAT rules, filter rules and the rule set holding both.

NAT rules are evaluated first-match-wins, filter rules last-match-wins
(no rule is ``quick``).  The order of the tuples in ``RuleSet`` is
therefore part of the semantics.
"""

from __future__ import annotations

import dataclasses
import enum

from ._addresses import ANY, CIDRBlock, Destination, InterfaceNetwork, Unrecognized
from ._interfaces import InterfaceRef

Operand = CIDRBlock | Unrecognized | InterfaceNetwork | type(ANY)


class Direction(enum.StrEnum):
    IN = 'in'
    OUT = 'out'


@dataclasses.dataclass(frozen=True)
class NATRule:
    """Source NAT onto the address of ``interface``."""

    interface: InterfaceRef
    source: Operand
    destination: Operand
    comment: str = ''

    @property
    def translation(self) -> InterfaceRef:
        return self.interface

    def is_catch_all(self) -> bool:
        return self.destination is ANY


@dataclasses.dataclass(frozen=True)
class FilterRule:
    """A ``pass`` rule restricted to one interface."""

    direction: Direction
    interface: InterfaceRef
    source: Operand | None = None
    destination: Operand | None = None
    family: str = 'inet'
    keep_state: bool = True
    quick: bool = False
    comment: str = ''

    def is_catch_all(self) -> bool:
        return self.destination is ANY


@dataclasses.dataclass(frozen=True)
class RuleSet:
    bridge: InterfaceRef
    vpn: InterfaceRef
    wan: InterfaceRef
    destinations: tuple[Destination, ...]
    nat_rules: tuple[NATRule, ...]
    filter_rules: tuple[FilterRule, ...]
    warnings: tuple[str, ...] = ()

    def vpn_nat_rules(self) -> tuple[NATRule, ...]:
        return tuple(r for r in self.nat_rules if r.interface == self.vpn)

    def catch_all_nat_index(self) -> int:
        """Position of the WAN catch-all NAT rule, -1 if absent."""
        for i, rule in enumerate(self.nat_rules):
            if rule.interface == self.wan and rule.is_catch_all():
                return i
        return -1
