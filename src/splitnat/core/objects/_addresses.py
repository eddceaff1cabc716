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

"""Address operands used in rules: CIDR blocks, interface networks, any."""

from __future__ import annotations

import dataclasses
import ipaddress

from ._interfaces import InterfaceRef


@dataclasses.dataclass(frozen=True, order=True)
class CIDRBlock:
    """Canonical IPv4 network: base address with host bits zeroed."""

    address: str
    prefixlen: int

    def __post_init__(self) -> None:
        net = ipaddress.IPv4Network(f'{self.address}/{self.prefixlen}', strict=False)
        if str(net.network_address) != self.address:
            msg = f'{self.address}/{self.prefixlen} has host bits set'
            raise ValueError(msg)

    @classmethod
    def from_network(cls, address: str, prefixlen: int | str) -> CIDRBlock:
        """Build a block, zeroing any host bits.

        Raises ``ValueError`` if the address or prefix length is not a
        valid IPv4 network.
        """
        net = ipaddress.IPv4Network(f'{address}/{prefixlen}', strict=False)
        return cls(str(net.network_address), net.prefixlen)

    @property
    def network(self) -> ipaddress.IPv4Network:
        return ipaddress.IPv4Network(str(self))

    def __str__(self) -> str:
        return f'{self.address}/{self.prefixlen}'


@dataclasses.dataclass(frozen=True)
class Unrecognized:
    """A route token no normalization pattern understood, kept verbatim."""

    raw: str

    def __str__(self) -> str:
        return self.raw


@dataclasses.dataclass(frozen=True)
class InterfaceNetwork:
    """The network(s) attached to an interface (pf ``iface:network``)."""

    interface: InterfaceRef

    def __str__(self) -> str:
        return f'{self.interface.name}:network'


class _Any:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ANY'

    def __str__(self) -> str:
        return 'any'


ANY = _Any()

Destination = CIDRBlock | Unrecognized
