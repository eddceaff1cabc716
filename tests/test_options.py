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

"""Tests for the settings schema and YAML loader."""

import pytest

from splitnat.core import ConfigError
from splitnat.core.options import (
    DEFAULT_SETTINGS,
    ENV_VAR,
    SettingKey,
    Settings,
    SudoMode,
    find_settings_file,
    load_settings,
    settings_from_dict,
)


def test_every_key_is_a_field():
    fields = set(Settings.__dataclass_fields__)
    assert {k.value for k in SettingKey} == fields


def test_defaults():
    assert DEFAULT_SETTINGS.guest_member == 'vmenet0'
    assert DEFAULT_SETTINGS.anchor_name == 'multipass_vpn'
    assert DEFAULT_SETTINGS.anchor_path == '/etc/pf.anchors/multipass_vpn'
    assert DEFAULT_SETTINGS.tunnel_prefixes == ('utun', 'ipsec', 'ppp')
    assert DEFAULT_SETTINGS.use_sudo == SudoMode.AUTO


def test_load_settings(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text(
        'guest_member: vmenet1\n'
        'anchor_name: vpn_split\n'
        'tunnel_prefixes: [utun, wg]\n'
        'ip_forwarding: false\n'
        'use_sudo: never\n',
    )
    settings = load_settings(path)
    assert settings.guest_member == 'vmenet1'
    assert settings.anchor_name == 'vpn_split'
    assert settings.tunnel_prefixes == ('utun', 'wg')
    assert settings.ip_forwarding is False
    assert settings.use_sudo == 'never'
    # Untouched keys keep their defaults
    assert settings.pf_conf == '/etc/pf.conf'


def test_single_prefix_string():
    assert settings_from_dict({'bridge_prefixes': 'br'}).bridge_prefixes == ('br',)


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text('# nothing configured\n')
    assert load_settings(path) == DEFAULT_SETTINGS


@pytest.mark.parametrize(
    'data',
    [
        {'anchorname': 'x'},
        {'ip_forwarding': 'yes'},
        {'guest_member': ''},
        {'guest_member': 7},
        {'tunnel_prefixes': [1, 2]},
        {'use_sudo': 'sometimes'},
    ],
)
def test_invalid_settings(data):
    with pytest.raises(ConfigError):
        settings_from_dict(data)


def test_unknown_key_hint_lists_known_keys():
    with pytest.raises(ConfigError) as excinfo:
        settings_from_dict({'anchorname': 'x'})
    assert 'anchorname' in excinfo.value.message
    assert 'anchor_name' in excinfo.value.hint


def test_top_level_must_be_mapping():
    with pytest.raises(ConfigError):
        settings_from_dict(['guest_member'])


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError) as excinfo:
        load_settings(tmp_path / 'missing.yml')
    assert excinfo.value.exit_code == 1


def test_invalid_yaml(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text('guest_member: [unclosed\n')
    with pytest.raises(ConfigError):
        load_settings(path)


def test_search_env_var(tmp_path, monkeypatch):
    path = tmp_path / 'custom.yml'
    path.write_text('anchor_name: from_env\n')
    monkeypatch.setenv(ENV_VAR, str(path))
    assert find_settings_file() == path
    assert load_settings().anchor_name == 'from_env'


def test_search_user_config(tmp_path):
    # HOME points into tmp_path, see conftest
    config_dir = tmp_path / 'home' / '.config' / 'splitnat'
    config_dir.mkdir(parents=True)
    (config_dir / 'config.yml').write_text('anchor_name: from_home\n')
    assert load_settings().anchor_name == 'from_home'
