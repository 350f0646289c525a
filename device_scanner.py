#!/usr/bin/env python3
# Disk Status
# Copyright (C) 2026 Magnus S. Modig
# Licensed under GPLv3. See LICENSE for details.

import os
from string import ascii_lowercase
from typing import Callable, List, NamedTuple, Optional

from pySMART.smartctl import SMARTCTL, Smartctl

DEFAULT_DEVICE_PREFIX = '/dev/sd'


class DiagnosticResult(NamedTuple):
    """Captured `smartctl -a` output and its exit status"""
    text: str
    returncode: int


def candidate_devices(prefix: str = DEFAULT_DEVICE_PREFIX) -> List[str]:
    """
    Device node names in glob order: sda..sdz, then sdaa..sdzz.

    Args:
        prefix: Path prefix of the device nodes (e.g., '/dev/sd')
    """
    single = [f"{prefix}{a}" for a in ascii_lowercase]
    double = [f"{prefix}{a}{b}" for a in ascii_lowercase for b in ascii_lowercase]
    return single + double


def scan_devices(prefix: str = DEFAULT_DEVICE_PREFIX,
                 exists: Callable[[str], bool] = os.path.exists) -> List[str]:
    """Return the candidate device paths that exist on this system"""
    return [path for path in candidate_devices(prefix) if exists(path)]


def get_smartctl(sudo: bool = False) -> Smartctl:
    """pySMART smartctl wrapper for this run, leaving the module default untouched"""
    return Smartctl(sudo=sudo)


def query_device(device_path: str, smartctl: Optional[Smartctl] = None) -> Optional[DiagnosticResult]:
    """
    Run `smartctl -a` for a device.

    A non-zero exit status is normal for smartctl (it encodes disk problems as
    bit flags), so it is returned instead of raised.

    Returns:
        DiagnosticResult, or None if smartctl could not be executed
    """
    smartctl = smartctl or SMARTCTL
    try:
        lines, returncode = smartctl.generic_call(['-a', device_path])
    except OSError:
        return None
    return DiagnosticResult('\n'.join(lines or []), returncode)
