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

"""NetworkInspector interface and the point-in-time snapshot it produces.

The pipeline never talks to the OS directly.  It asks an inspector for
one ``NetworkSnapshot`` and every later stage reads only that snapshot,
so all decisions are made against a single consistent view.
"""

from __future__ import annotations

import abc
import dataclasses

from splitnat.core.objects import InterfaceKind, InterfaceRef, RouteEntry
from splitnat.core.options import DEFAULT_SETTINGS, Settings


@dataclasses.dataclass(frozen=True)
class NetworkSnapshot:
    interfaces: tuple[InterfaceRef, ...]
    default_interface: str | None
    routes: tuple[RouteEntry, ...]

    def list_interfaces(self) -> tuple[InterfaceRef, ...]:
        return self.interfaces

    def interface(self, name: str) -> InterfaceRef | None:
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None

    def interfaces_of_kind(self, kind: InterfaceKind) -> tuple[InterfaceRef, ...]:
        return tuple(i for i in self.interfaces if i.kind == kind)

    def default_route_interface(self) -> InterfaceRef | None:
        """The interface the OS reports for the default route.

        Names missing from the interface list still yield a physical
        ``InterfaceRef``; the route lookup is authoritative.
        """
        if not self.default_interface:
            return None
        return self.interface(self.default_interface) or InterfaceRef(
            self.default_interface
        )

    def default_routes(self) -> tuple[RouteEntry, ...]:
        return tuple(r for r in self.routes if r.is_default)

    def routes_for(self, name: str) -> tuple[RouteEntry, ...]:
        return tuple(r for r in self.routes if r.interface == name)


def classify_interface(name: str, settings: Settings = DEFAULT_SETTINGS) -> InterfaceKind:
    """Derive the interface kind from its name prefix."""
    for prefixes, kind in (
        (settings.bridge_prefixes, InterfaceKind.BRIDGE),
        (settings.tunnel_prefixes, InterfaceKind.TUNNEL),
        (settings.loopback_prefixes, InterfaceKind.LOOPBACK),
    ):
        if name.startswith(tuple(prefixes)):
            return kind
    return InterfaceKind.PHYSICAL


class NetworkInspector(abc.ABC):
    """Read-only access to interfaces and the IPv4 routing table."""

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        self.settings = settings

    @abc.abstractmethod
    def list_interfaces(self) -> list[InterfaceRef]: ...

    @abc.abstractmethod
    def default_route_interface(self) -> InterfaceRef | None: ...

    @abc.abstractmethod
    def routing_table(self) -> list[RouteEntry]: ...

    def routes_for(self, interface: InterfaceRef | str) -> list[RouteEntry]:
        name = interface if isinstance(interface, str) else interface.name
        return [r for r in self.routing_table() if r.interface == name]

    def snapshot(self) -> NetworkSnapshot:
        """Query the OS once and freeze the result."""
        interfaces = tuple(self.list_interfaces())
        default = self.default_route_interface()
        routes = tuple(self.routing_table())
        return NetworkSnapshot(
            interfaces=interfaces,
            default_interface=default.name if default else None,
            routes=routes,
        )
