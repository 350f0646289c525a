#!/usr/bin/env python3
# Disk Status
# Copyright (C) 2026 Magnus S. Modig
# Licensed under GPLv3. See LICENSE for details.

import copy
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

# Configuration file location
CONFIG_DIR = Path.home() / '.disk-status'
CONFIG_FILE = CONFIG_DIR / 'settings.json'

# Default configuration
DEFAULT_CONFIG = {
    # Terminal and persistent log
    'logging': {
        'trace': False,
        'debug': False,
        'verbose': False,
        'color': True,
        'force_terminal': False,
        'log_file': str(CONFIG_DIR / 'disk-status.log')
    },

    # Device discovery and smartctl invocation
    'scan': {
        'device_prefix': '/dev/sd',
        'smartctl_sudo': False
    },

    # Report output
    'output': {
        'format': 'text'  # 'text' or 'json'
    }
}

FALSE_VALUES = ('0', 'false', 'no', 'off')


def is_flag_set(value: Optional[str]) -> bool:
    """Environment flag is set when non-empty and not an explicit 'off' value"""
    if value is None:
        return False
    value = value.strip()
    return bool(value) and value.lower() not in FALSE_VALUES


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from file, return defaults if not found"""
    config_file = Path(path) if path else CONFIG_FILE

    if not config_file.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_file, 'r') as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError("top level must be an object")

        # Merge with defaults to add any new fields from updates
        return _deep_merge(copy.deepcopy(DEFAULT_CONFIG), config)
    except (OSError, ValueError) as e:
        print(f"Error loading config {config_file}: {e}, using defaults", file=sys.stderr)
        return copy.deepcopy(DEFAULT_CONFIG)


def apply_env_overrides(config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Apply environment flags on top of a loaded configuration.

    TRACE, DEBUG and VERBOSE enable their terminal tiers. NO_COLOR disables
    colors, CI=true forces terminal rendering and DISK_STATUS_LOG moves the
    persistent log. Unset flags leave the configured value alone.
    """
    environ = os.environ if environ is None else environ
    logging_section = config.setdefault('logging', {})

    for env_name, key in (('TRACE', 'trace'), ('DEBUG', 'debug'), ('VERBOSE', 'verbose')):
        if is_flag_set(environ.get(env_name)):
            logging_section[key] = True

    if environ.get('NO_COLOR'):
        logging_section['color'] = False

    if environ.get('CI', '').lower() == 'true':
        logging_section['force_terminal'] = True

    if environ.get('DISK_STATUS_LOG'):
        logging_section['log_file'] = environ['DISK_STATUS_LOG']

    return config


def get_section(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    """Get a specific configuration section"""
    return config.get(section, DEFAULT_CONFIG.get(section, {}))


def _deep_merge(base: dict, overlay: dict) -> dict:
    """Deep merge two dictionaries, overlay takes precedence"""
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
