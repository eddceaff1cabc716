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

"""Tests for the splitnat command line interface."""

from pathlib import Path

import pytest

import splitnat
from splitnat.cli.splitnat import main, parse_args
from splitnat.compiler import RouteExtractor
from splitnat.core.objects import InterfaceKind, InterfaceRef

from .conftest import EXPECTED_OUTPUT_DIR, FIXTURES_DIR, FakeRunner
from .normalize import normalize_pf


def _snapshot(name):
    return str(FIXTURES_DIR / f'{name}.yml')


@pytest.fixture()
def config_file(settings, tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text(
        f'anchor_path: {settings.anchor_path}\n'
        f'pf_conf: {settings.pf_conf}\n'
        f'pf_conf_backup: {settings.pf_conf_backup}\n'
        'use_sudo: never\n',
    )
    return str(path)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.CONFIG is None
    assert not args.DRY_RUN
    assert args.OUTPUT == ''
    assert args.SNAPSHOT == ''
    assert args.VERBOSE == 0


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(['-V'])
    assert excinfo.value.code == 0
    assert f'v{splitnat.__version__}' in capsys.readouterr().out


def test_dry_run(capsys):
    assert main(['--snapshot', _snapshot('aws_vpn'), '--dry-run']) == 0
    out = capsys.readouterr().out
    expected = (EXPECTED_OUTPUT_DIR / 'pf' / 'aws_vpn.conf').read_text()
    # Nothing but the anchor on stdout
    assert normalize_pf(out) == expected


def test_output_file(tmp_path, capsys):
    output = tmp_path / 'anchor.conf'
    assert main(['--snapshot', _snapshot('aws_vpn'), '-o', str(output)]) == 0
    assert normalize_pf(output.read_text()) == (
        EXPECTED_OUTPUT_DIR / 'pf' / 'aws_vpn.conf'
    ).read_text()
    assert f'Anchor written to {output}' in capsys.readouterr().out


@pytest.mark.parametrize(
    ('fixture_name', 'exit_code', 'message'),
    [
        ('no_bridge', 2, 'Cannot find the VM bridge interface'),
        ('no_default_route', 3, 'Cannot determine the WAN interface'),
        ('vpn_disconnected', 4, 'Cannot find the VPN tunnel interface'),
    ],
)
def test_failure_exit_codes(fixture_name, exit_code, message, capsys):
    assert main(['--snapshot', _snapshot(fixture_name), '-n']) == exit_code
    err = capsys.readouterr().err
    assert f'Error: {message}' in err


def test_no_vpn_routes_exit_code(monkeypatch, capsys):
    vpn = InterfaceRef('utun3', InterfaceKind.TUNNEL)
    monkeypatch.setattr(RouteExtractor, 'extract', lambda self, snapshot, tunnels=None: (vpn, []))

    assert main(['--snapshot', _snapshot('aws_vpn'), '-n']) == 5
    captured = capsys.readouterr()
    assert 'Error: No VPN routes found' in captured.err
    assert captured.out == ''


def test_snapshot_route_without_interface(tmp_path, capsys):
    snapshot = tmp_path / 'snapshot.yml'
    snapshot.write_text(
        'interfaces:\n'
        '  - {name: bridge100, members: [vmenet0]}\n'
        'routes:\n'
        '  - destination: "10/8"\n'
        '    flags:\n'
        '    interface:\n',
    )
    assert main(['--snapshot', str(snapshot), '-n']) == 1
    assert "'interface' must be an interface name" in capsys.readouterr().err


def test_failure_prints_hint(capsys):
    main(['--snapshot', _snapshot('no_bridge')])
    err = capsys.readouterr().err
    assert 'Multipass is installed' in err
    assert 'Current bridges: bridge100' in err


def test_invalid_config(tmp_path, capsys):
    config = tmp_path / 'config.yml'
    config.write_text('anchorname: x\n')
    assert main(['-c', str(config), '--snapshot', _snapshot('aws_vpn'), '-n']) == 1
    assert 'Unknown setting(s): anchorname' in capsys.readouterr().err


def test_missing_snapshot(tmp_path, capsys):
    assert main(['--snapshot', str(tmp_path / 'missing.yml'), '-n']) == 1
    assert 'Cannot read snapshot file' in capsys.readouterr().err


def test_install(config_file, settings, monkeypatch, capsys):
    runner = FakeRunner()
    monkeypatch.setattr(
        'splitnat.platforms.pf._installer.CommandRunner',
        lambda sudo=False: runner,
    )

    assert main(['-c', config_file, '--snapshot', _snapshot('aws_vpn')]) == 0

    out = capsys.readouterr().out
    assert 'SplitNAT is active.' in out
    assert 'reach 3 VPN network(s) through utun3' in out
    assert f'Original pf.conf saved as {settings.pf_conf_backup}' not in out
    assert Path(settings.anchor_path).exists()
    assert runner.called(settings.pfctl, '-e')


def test_install_validation_failure(config_file, settings, monkeypatch, capsys):
    runner = FakeRunner().on(settings.pfctl, '-n', returncode=1, stderr='syntax error')
    monkeypatch.setattr(
        'splitnat.platforms.pf._installer.CommandRunner',
        lambda sudo=False: runner,
    )

    assert main(['-c', config_file, '--snapshot', _snapshot('aws_vpn')]) == 6
    assert not Path(settings.anchor_path).exists()
