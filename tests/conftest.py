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

"""Shared pytest fixtures: fake command runner, snapshots and settings."""

import subprocess
from pathlib import Path

import pytest

from splitnat.core import CommandFailed
from splitnat.core.options import ENV_VAR, Settings
from splitnat.inspector import StaticInspector

FIXTURES_DIR = Path(__file__).parent / 'fixtures'
EXPECTED_OUTPUT_DIR = Path(__file__).parent / 'expected-output'


class FakeRunner:
    """Stand-in for ``CommandRunner`` that records commands.

    Responses are registered per argv prefix with ``on()``; the longest
    matching prefix wins, unmatched commands succeed with no output.
    """

    def __init__(self, sudo: bool = False) -> None:
        self.sudo = sudo
        self.calls: list[list[str]] = []
        self._responses: list[tuple[tuple[str, ...], int, str, str]] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = '', stderr: str = ''):
        self._responses.append((prefix, returncode, stdout, stderr))
        return self

    def run(self, cmd, *, check=True, privileged=False, input=None):
        argv = list(cmd)
        self.calls.append(argv)
        returncode, stdout, stderr = 0, '', ''
        best = -1
        for prefix, rc, out, err in self._responses:
            if tuple(argv[: len(prefix)]) == prefix and len(prefix) > best:
                best = len(prefix)
                returncode, stdout, stderr = rc, out, err
        if check and returncode != 0:
            raise CommandFailed(argv, returncode, stderr)
        return subprocess.CompletedProcess(argv, returncode, stdout, stderr)

    def output(self, cmd, **kwargs) -> str:
        return self.run(cmd, **kwargs).stdout

    def called(self, *prefix: str) -> list[list[str]]:
        """Recorded commands starting with *prefix*."""
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    """Keep user settings and template overrides out of the tests."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv(ENV_VAR, raising=False)


@pytest.fixture()
def fake_runner():
    return FakeRunner()


@pytest.fixture()
def settings(tmp_path):
    """Settings pointing every system file into *tmp_path*."""
    etc = tmp_path / 'etc'
    (etc / 'pf.anchors').mkdir(parents=True)
    return Settings(
        anchor_path=str(etc / 'pf.anchors' / 'multipass_vpn'),
        pf_conf=str(etc / 'pf.conf'),
        pf_conf_backup=str(etc / 'pf.conf.backup'),
        use_sudo='never',
    )


@pytest.fixture()
def load_snapshot():
    """Return a helper building a ``StaticInspector`` from a fixture name."""

    def _inner(fixture_name: str, settings: Settings | None = None) -> StaticInspector:
        path = FIXTURES_DIR / f'{fixture_name}.yml'
        if settings is None:
            return StaticInspector.from_yaml(path)
        return StaticInspector.from_yaml(path, settings)

    return _inner


def discover_test_cases(platform: str) -> list[str]:
    """Fixture names that have an expected output file for *platform*."""
    platform_dir = EXPECTED_OUTPUT_DIR / platform
    if not platform_dir.exists():
        return []
    return [
        path.stem
        for path in sorted(platform_dir.glob('*.conf'))
        if (FIXTURES_DIR / f'{path.stem}.yml').exists()
    ]
