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

"""Tests for the pipeline driver."""

from pathlib import Path

import pytest

from splitnat.compiler import RouteExtractor
from splitnat.core import NoBridgeFound, NoVPNInterface, NoVPNRoutes
from splitnat.core.objects import InterfaceKind, InterfaceRef
from splitnat.driver import PipelineDriver
from splitnat.platforms.pf._renderer import AnchorRenderer


def test_compile(load_snapshot, capsys):
    result = PipelineDriver(load_snapshot('aws_vpn')).compile()

    assert result.bridge.name == 'bridge100'
    assert result.wan.name == 'en0'
    assert result.vpn.name == 'utun3'
    assert result.raw_routes == ('10.110.1/27', '10.110.2', '172.16')
    assert [str(d) for d in result.ruleset.destinations] == [
        '10.110.1.0/27',
        '10.110.2.0/24',
        '172.16.0.0/12',
    ]
    assert result.warnings == ()
    assert result.anchor_text.startswith('# /etc/pf.anchors/multipass_vpn\n')

    out = capsys.readouterr().out
    assert 'Bridge interface: bridge100' in out
    assert 'VPN interface:    utun3' in out
    assert '172.16.0.0/12' in out


def test_quiet(load_snapshot, capsys):
    driver = PipelineDriver(load_snapshot('aws_vpn'))
    driver.quiet = True
    driver.compile()
    assert capsys.readouterr().out == ''


def test_warnings_are_collected(load_snapshot):
    driver = PipelineDriver(load_snapshot('ambiguous'))
    driver.quiet = True
    result = driver.compile()
    assert result.wan == InterfaceRef('en1', InterfaceKind.PHYSICAL)
    assert len(result.warnings) == 4
    for warning in result.warnings:
        assert f'# Warning: {warning}\n' in result.anchor_text


def test_compile_is_repeatable(load_snapshot):
    driver = PipelineDriver(load_snapshot('ambiguous'))
    driver.quiet = True
    first = driver.compile()
    second = driver.compile()
    assert first.warnings == second.warnings
    assert first.anchor_text == second.anchor_text


def test_no_bridge(load_snapshot):
    with pytest.raises(NoBridgeFound):
        PipelineDriver(load_snapshot('no_bridge')).compile()


def test_vpn_disconnected(load_snapshot):
    with pytest.raises(NoVPNInterface):
        PipelineDriver(load_snapshot('vpn_disconnected')).compile()


def test_empty_route_list_renders_nothing(load_snapshot, monkeypatch):
    vpn = InterfaceRef('utun3', InterfaceKind.TUNNEL)
    monkeypatch.setattr(RouteExtractor, 'extract', lambda self, snapshot, tunnels=None: (vpn, []))

    def _render(self, ruleset):
        pytest.fail('anchor rendered despite an empty route list')

    monkeypatch.setattr(AnchorRenderer, 'render', _render)

    with pytest.raises(NoVPNRoutes):
        PipelineDriver(load_snapshot('aws_vpn')).compile()


def test_snapshot_is_taken_once(load_snapshot):
    inspector = load_snapshot('aws_vpn')
    calls = []
    original = inspector.snapshot

    def _snapshot():
        calls.append(1)
        return original()

    inspector.snapshot = _snapshot
    driver = PipelineDriver(inspector)
    driver.quiet = True
    driver.compile()
    assert calls == [1]


def test_run_installs(load_snapshot, settings, fake_runner):
    driver = PipelineDriver(load_snapshot('aws_vpn', settings), settings)
    driver.quiet = True
    result, install_result = driver.run(runner=fake_runner)

    anchor = Path(settings.anchor_path)
    assert install_result.anchor_changed
    assert anchor.read_text() == result.anchor_text
    assert anchor.read_text().startswith(f'# {settings.anchor_path}\n')
    assert f'load anchor "multipass_vpn" from "{settings.anchor_path}"' in (
        Path(settings.pf_conf).read_text()
    )
