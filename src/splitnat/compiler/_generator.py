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

"""Rule set generation for split-tunnel guest NAT.

NAT in pf is first-match-wins, so every per-destination VPN rule must
come before the WAN catch-all.  Filter rules are last-match-wins and
none of them is ``quick``; each pass rule is bound to the interface the
NAT step already routed the packet onto, which is what keeps the final
``to any`` rule on the WAN interface from overriding the VPN rules.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from splitnat.core.objects import (
    ANY,
    Destination,
    Direction,
    FilterRule,
    InterfaceNetwork,
    InterfaceRef,
    NATRule,
    RuleSet,
)

from ._base import BaseCompiler

logger = logging.getLogger(__name__)


class RuleGenerator(BaseCompiler):
    def generate(
        self,
        bridge: InterfaceRef,
        vpn: InterfaceRef,
        wan: InterfaceRef,
        destinations: Sequence[Destination],
        warnings: Sequence[str] = (),
    ) -> RuleSet:
        """Build the rule set.

        *warnings* from earlier stages are carried into the result ahead
        of this stage's own.
        """
        guests = InterfaceNetwork(bridge)
        destinations = tuple(destinations)

        nat_rules = [
            NATRule(
                interface=vpn,
                source=guests,
                destination=dst,
                comment='VPN networks go out the VPN interface',
            )
            for dst in destinations
        ]
        nat_rules.append(
            NATRule(
                interface=wan,
                source=guests,
                destination=ANY,
                comment='Everything else goes out the WAN interface',
            ),
        )

        filter_rules = [
            FilterRule(
                direction=Direction.IN,
                interface=bridge,
                comment='Host <-> VM traffic on the bridge',
            ),
            FilterRule(direction=Direction.OUT, interface=bridge),
        ]
        filter_rules.extend(
            FilterRule(
                direction=Direction.OUT,
                interface=vpn,
                source=guests,
                destination=dst,
                comment='Egress to VPN networks',
            )
            for dst in destinations
        )
        filter_rules.append(
            FilterRule(
                direction=Direction.OUT,
                interface=wan,
                source=guests,
                destination=ANY,
                comment='Egress to the internet',
            ),
        )

        logger.debug(
            'Generated %d NAT and %d filter rules', len(nat_rules), len(filter_rules),
        )
        return RuleSet(
            bridge=bridge,
            vpn=vpn,
            wan=wan,
            destinations=destinations,
            nat_rules=tuple(nat_rules),
            filter_rules=tuple(filter_rules),
            warnings=(*warnings, *self.get_warnings()),
        )
