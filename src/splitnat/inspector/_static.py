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

"""Inspector serving a fixed topology from a mapping or a YAML file.

Used by the test suite and by ``splitnat --snapshot FILE`` to generate
an anchor for a host other than the one running SplitNAT.  Document
layout::

    interfaces:
      - name: en0
      - name: bridge100
        members: [vmenet0]
      - name: utun3
        kind: tunnel        # optional, derived from the name otherwise
    default_interface: en0  # optional
    routes:
      - {destination: default, gateway: 192.168.1.1, flags: UGScg, interface: en0}
      - {destination: "10.110.1/27", flags: UCS, interface: utun3}

Quote route destinations: YAML reads a bare ``10.10`` as the float 10.1.
"""

from __future__ import annotations

import logging
import os
import pathlib

import yaml

from splitnat.core._errors import ConfigError
from splitnat.core.objects import InterfaceKind, InterfaceRef, RouteEntry
from splitnat.core.options import DEFAULT_SETTINGS, Settings

from ._base import NetworkInspector, classify_interface

logger = logging.getLogger(__name__)


def _interface_name(item: dict, key: str) -> str:
    name = item[key]
    if not isinstance(name, str) or not name:
        raise ConfigError(
            f'Invalid snapshot entry: {key!r} must be an interface name, got {name!r}',
        )
    return name


class StaticInspector(NetworkInspector):
    def __init__(
        self,
        interfaces: list[InterfaceRef],
        routes: list[RouteEntry],
        default_interface: str | None = None,
        settings: Settings = DEFAULT_SETTINGS,
    ) -> None:
        super().__init__(settings)
        self._interfaces = list(interfaces)
        self._routes = list(routes)
        self._default_interface = default_interface

    @classmethod
    def from_dict(cls, data: dict, settings: Settings = DEFAULT_SETTINGS) -> StaticInspector:
        if not isinstance(data, dict):
            raise ConfigError('Snapshot must be a mapping')
        try:
            interfaces = []
            for item in data.get('interfaces') or []:
                name = _interface_name(item, 'name')
                kind = item.get('kind')
                interfaces.append(
                    InterfaceRef(
                        name=name,
                        kind=InterfaceKind(kind) if kind else classify_interface(name, settings),
                        members=tuple(item.get('members') or ()),
                    ),
                )
            routes = [
                RouteEntry(
                    destination=str(item['destination']),
                    interface=_interface_name(item, 'interface'),
                    flags=str(item.get('flags') or ''),
                    gateway=str(item.get('gateway') or ''),
                )
                for item in data.get('routes') or []
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f'Invalid snapshot entry: {e}') from e

        return cls(
            interfaces=interfaces,
            routes=routes,
            default_interface=data.get('default_interface'),
            settings=settings,
        )

    @classmethod
    def from_yaml(
        cls,
        path: str | os.PathLike,
        settings: Settings = DEFAULT_SETTINGS,
    ) -> StaticInspector:
        path = pathlib.Path(path)
        logger.debug('Loading network snapshot from %s', path)
        try:
            with path.open(encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f'Cannot read snapshot file {path}: {e.strerror}') from e
        except yaml.YAMLError as e:
            raise ConfigError(f'Invalid YAML in snapshot file {path}', hint=str(e)) from e
        return cls.from_dict(data or {}, settings)

    def list_interfaces(self) -> list[InterfaceRef]:
        return list(self._interfaces)

    def default_route_interface(self) -> InterfaceRef | None:
        if not self._default_interface:
            return None
        for iface in self._interfaces:
            if iface.name == self._default_interface:
                return iface
        return InterfaceRef(
            self._default_interface,
            kind=classify_interface(self._default_interface, self.settings),
        )

    def routing_table(self) -> list[RouteEntry]:
        return list(self._routes)
