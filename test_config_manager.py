#!/usr/bin/env python3
"""
Tests for settings file loading and environment flags
"""

import json

import pytest

from config_manager import DEFAULT_CONFIG, apply_env_overrides, get_section, is_flag_set, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / 'settings.json')

    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    assert not (tmp_path / 'settings.json').exists()


def test_file_is_merged_over_defaults(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'logging': {'verbose': True}, 'scan': {'device_prefix': '/dev/vd'}}))

    config = load_config(path)
    assert config['logging']['verbose'] is True
    assert config['logging']['debug'] is False
    assert config['scan']['device_prefix'] == '/dev/vd'
    assert config['scan']['smartctl_sudo'] is False


def test_loaded_config_does_not_alias_defaults(tmp_path):
    config = load_config(tmp_path / 'settings.json')
    config['logging']['trace'] = True
    assert DEFAULT_CONFIG['logging']['trace'] is False


def test_invalid_file_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / 'settings.json'
    path.write_text('{not json')

    assert load_config(path) == DEFAULT_CONFIG
    assert 'Error loading config' in capsys.readouterr().err


@pytest.mark.parametrize("value,expected", [
    (None, False),
    ('', False),
    ('0', False),
    ('false', False),
    ('OFF', False),
    ('1', True),
    ('true', True),
    ('yes', True),
])
def test_is_flag_set(value, expected):
    assert is_flag_set(value) is expected


def test_env_flags_enable_tiers(tmp_path):
    config = apply_env_overrides(load_config(tmp_path / 'settings.json'),
                                 {'TRACE': '1', 'VERBOSE': 'true', 'DEBUG': '0'})
    logging_cfg = get_section(config, 'logging')

    assert logging_cfg['trace'] is True
    assert logging_cfg['verbose'] is True
    assert logging_cfg['debug'] is False


def test_absent_env_keeps_quiet_defaults(tmp_path):
    config = apply_env_overrides(load_config(tmp_path / 'settings.json'), {})
    assert config['logging'] == DEFAULT_CONFIG['logging']


def test_color_and_log_overrides(tmp_path):
    config = apply_env_overrides(load_config(tmp_path / 'settings.json'), {
        'NO_COLOR': '1',
        'CI': 'true',
        'DISK_STATUS_LOG': '/var/log/disk-status.log',
    })

    assert config['logging']['color'] is False
    assert config['logging']['force_terminal'] is True
    assert config['logging']['log_file'] == '/var/log/disk-status.log'
