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

"""NetworkInspector backed by the macOS ``ifconfig``, ``route`` and
``netstat`` tools.

The parsers are plain functions over command output so they can be
tested against captured text without a Mac.
"""

from __future__ import annotations

import logging
import re

from splitnat.core._commands import CommandRunner
from splitnat.core.objects import InterfaceRef, RouteEntry
from splitnat.core.options import DEFAULT_SETTINGS, Settings

from ._base import NetworkInspector, classify_interface

logger = logging.getLogger(__name__)

_IFACE_HEADER_RE = re.compile(r'^([A-Za-z0-9_.-]+): flags=')
_MEMBER_RE = re.compile(r'^\s+member:\s+(\S+)')
_ROUTE_IFACE_RE = re.compile(r'^\s*interface:\s*(\S+)', re.MULTILINE)


def parse_ifconfig(text: str, settings: Settings = DEFAULT_SETTINGS) -> list[InterfaceRef]:
    """Parse ``ifconfig`` output into interface refs, in output order."""
    blocks: list[tuple[str, list[str]]] = []
    for line in text.splitlines():
        m = _IFACE_HEADER_RE.match(line)
        if m:
            blocks.append((m.group(1), []))
            continue
        if not blocks:
            continue
        m = _MEMBER_RE.match(line)
        if m:
            blocks[-1][1].append(m.group(1))

    interfaces = []
    for name, members in blocks:
        kind = classify_interface(name, settings)
        interfaces.append(
            InterfaceRef(name=name, kind=kind, members=tuple(members)),
        )
    return interfaces


def parse_route_get(text: str) -> str | None:
    """Extract the interface name from ``route -n get default`` output."""
    m = _ROUTE_IFACE_RE.search(text)
    return m.group(1) if m else None


def parse_netstat(text: str) -> list[RouteEntry]:
    """Parse the IPv4 section(s) of ``netstat -rn`` output.

    Column positions are taken from the ``Destination ... Netif`` header
    because the set of columns differs between macOS releases (older
    ones print ``Refs`` and ``Use``).  The ``Expire`` column is often
    blank, so the interface is never read from the last field.
    """
    routes: list[RouteEntry] = []
    columns: dict[str, int] | None = None
    in_inet = True

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            columns = None
            continue
        if line.endswith(':') and ' ' not in line:
            # Section titles: 'Internet:', 'Internet6:', 'Routing'
            in_inet = line == 'Internet:'
            columns = None
            continue
        if not in_inet:
            continue

        parts = line.split()
        if parts[0] == 'Destination':
            columns = {name: idx for idx, name in enumerate(parts)}
            continue
        if columns is None or 'Netif' not in columns:
            continue

        netif_idx = columns['Netif']
        if len(parts) <= netif_idx:
            logger.debug('Skipping short routing table line: %s', line)
            continue

        flags_idx = columns.get('Flags')
        gateway_idx = columns.get('Gateway')
        routes.append(
            RouteEntry(
                destination=parts[0],
                interface=parts[netif_idx],
                flags=parts[flags_idx] if flags_idx is not None else '',
                gateway=parts[gateway_idx] if gateway_idx is not None else '',
            ),
        )
    return routes


class DarwinInspector(NetworkInspector):
    """Live inspector for macOS hosts."""

    def __init__(
        self,
        settings: Settings = DEFAULT_SETTINGS,
        runner: CommandRunner | None = None,
    ) -> None:
        super().__init__(settings)
        self.runner = runner or CommandRunner()

    def list_interfaces(self) -> list[InterfaceRef]:
        out = self.runner.output([self.settings.ifconfig])
        return parse_ifconfig(out, self.settings)

    def default_route_interface(self) -> InterfaceRef | None:
        # Exits non-zero ("not in table") when there is no default route
        proc = self.runner.run(
            [self.settings.route, '-n', 'get', 'default'],
            check=False,
        )
        if proc.returncode != 0:
            logger.debug('route -n get default failed: %s', proc.stderr.strip())
            return None
        name = parse_route_get(proc.stdout)
        if name is None:
            return None
        return InterfaceRef(name=name, kind=classify_interface(name, self.settings))

    def routing_table(self) -> list[RouteEntry]:
        out = self.runner.output([self.settings.netstat, '-rn', '-f', 'inet'])
        return parse_netstat(out)
