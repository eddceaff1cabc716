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

"""Tests for VPN interface and route extraction."""

import pytest

from splitnat.compiler import RouteExtractor, is_private_destination, is_vpn_route
from splitnat.core import NoVPNInterface, NoVPNRoutes
from splitnat.core.objects import InterfaceKind, InterfaceRef, RouteEntry
from splitnat.inspector import NetworkSnapshot

UTUN0 = InterfaceRef('utun0', InterfaceKind.TUNNEL)
UTUN3 = InterfaceRef('utun3', InterfaceKind.TUNNEL)
UTUN4 = InterfaceRef('utun4', InterfaceKind.TUNNEL)


def _snapshot(interfaces, routes):
    return NetworkSnapshot(
        interfaces=(InterfaceRef('en0'), *interfaces),
        default_interface='en0',
        routes=tuple(RouteEntry(*r) for r in routes),
    )


@pytest.mark.parametrize(
    ('destination', 'expected'),
    [
        ('10/8', True),
        ('10.9', True),
        ('10.110.1/27', True),
        ('10.0.0.0/8', True),
        ('172.16', True),
        ('172.20.1/24', True),
        ('172.31', True),
        ('172.15.1/24', False),
        ('172.32', False),
        ('172.160.1', False),
        ('100.64/10', False),
        ('1.10/16', False),
        ('192.168.1', False),
        ('default', False),
    ],
)
def test_is_private_destination(destination, expected):
    assert is_private_destination(destination) is expected


def test_host_routes_are_not_vpn_routes():
    assert not is_vpn_route(RouteEntry('10.110.1.5', 'utun3', 'UH'))
    assert not is_vpn_route(RouteEntry('10.110.1.5/32', 'utun3', 'UHWIi'))
    assert is_vpn_route(RouteEntry('10.110.1/27', 'utun3', 'UGSc'))


def test_extract():
    snapshot = _snapshot(
        [UTUN0, UTUN3],
        [
            ('default', 'en0', 'UGScg', '192.168.1.1'),
            ('10.110.2', 'utun3', 'UCS'),
            ('10.110.1/27', 'utun3', 'UGSc'),
            ('10.110.1.5', 'utun3', 'UH'),
            ('192.168.99', 'utun3', 'UCS'),
            ('10.110.2', 'utun3', 'UCS'),
            ('172.16', 'utun3', 'UCS'),
        ],
    )
    extractor = RouteExtractor()
    vpn, routes = extractor.extract(snapshot)
    assert vpn == UTUN3
    # First-seen order, duplicates and host routes dropped
    assert routes == ['10.110.2', '10.110.1/27', '172.16']
    assert extractor.get_warnings() == []


def test_first_qualifying_tunnel_wins():
    snapshot = _snapshot(
        [UTUN0, UTUN3, UTUN4],
        [
            ('172.20.1/24', 'utun4', 'UGSc'),
            ('10.110.1/27', 'utun3', 'UGSc'),
        ],
    )
    extractor = RouteExtractor()
    vpn, routes = extractor.extract(snapshot)
    assert vpn == UTUN3
    assert routes == ['10.110.1/27']
    assert extractor.get_warnings() == [
        'Several tunnels carry private routes; using utun3, ignoring utun4',
    ]


def test_explicit_tunnel_list():
    snapshot = _snapshot(
        [UTUN3, UTUN4],
        [
            ('10.110.1/27', 'utun3', 'UGSc'),
            ('172.20.1/24', 'utun4', 'UGSc'),
        ],
    )
    vpn, routes = RouteExtractor().extract(snapshot, [UTUN4])
    assert vpn == UTUN4
    assert routes == ['172.20.1/24']


def test_no_tunnels():
    with pytest.raises(NoVPNInterface) as excinfo:
        RouteExtractor().extract(_snapshot([], []))
    assert excinfo.value.exit_code == 4
    assert 'Connect to your VPN' in excinfo.value.hint


def test_tunnels_without_private_routes():
    snapshot = _snapshot(
        [UTUN0, UTUN3],
        [
            ('10.110.1.5', 'utun3', 'UH'),
            ('192.168.99', 'utun3', 'UCS'),
        ],
    )
    with pytest.raises(NoVPNInterface) as excinfo:
        RouteExtractor().extract(snapshot)
    assert 'utun0, utun3' in excinfo.value.hint


def test_empty_route_list():
    with pytest.raises(NoVPNRoutes) as excinfo:
        RouteExtractor.check_routes(UTUN3, [])
    assert excinfo.value.exit_code == 5
    assert 'utun3' in excinfo.value.message


def test_check_routes_accepts_routes():
    RouteExtractor.check_routes(UTUN3, ['10/8'])
