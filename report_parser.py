#!/usr/bin/env python3
"""
Disk Status - smartctl Report Parser

Copyright (C) 2026 Magnus S. Modig

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.

Turns the text printed by `smartctl -a <device>` into a DeviceReport.
Only the attribute table rows and the overall-health line are read.
"""

import re
from typing import List, Optional

from decision_engine import AttributeType, UpdateFrequency

SMART_CAPABLE_MARKER = 'SMART support is: Available - device has SMART capability.'

HEALTH_PATTERN = re.compile(r'SMART overall-health self-assessment test result:[ \t]*(.*)$', re.M)
ATTRIBUTE_ROW_PATTERN = re.compile(r'(Pre-fail|Old_age)\s+(Always|Offline)')
LEADING_INT_PATTERN = re.compile(r'^\d+')

# ID# ATTRIBUTE_NAME FLAG VALUE WORST THRESH TYPE UPDATED WHEN_FAILED RAW_VALUE
ATTRIBUTE_FIELD_COUNT = 10


class AttributeObservation:
    """One row of the smartctl attribute table"""

    def __init__(self, attr_id: int, name: str, flag: str, value: int, worst: int,
                 threshold: int, attr_type: AttributeType, update_frequency: UpdateFrequency,
                 when_failed: str, raw_value: int, raw_text: str = None):
        self.attr_id = attr_id
        self.name = name
        self.flag = flag
        self.value = value
        self.worst = worst
        self.threshold = threshold
        self.attr_type = attr_type
        self.update_frequency = update_frequency
        self.when_failed = when_failed
        self.raw_value = raw_value
        self.raw_text = raw_text if raw_text is not None else str(raw_value)

    def to_dict(self) -> dict:
        """Serialize to JSON"""
        return {
            'id': self.attr_id,
            'name': self.name,
            'flag': self.flag,
            'value': self.value,
            'worst': self.worst,
            'threshold': self.threshold,
            'type': self.attr_type.value,
            'updated': self.update_frequency.value,
            'when_failed': self.when_failed,
            'raw_value': self.raw_value,
        }

    def __eq__(self, other):
        if not isinstance(other, AttributeObservation):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"AttributeObservation({self.attr_id}, {self.name!r}, raw={self.raw_value})"


class DeviceReport:
    """Parsed smartctl output for a single device"""

    def __init__(self, device_path: str, smart_capable: bool = False, overall_health: str = "",
                 observations: Optional[List[AttributeObservation]] = None,
                 skipped_lines: Optional[List[str]] = None):
        self.device_path = device_path
        self.smart_capable = smart_capable
        self.overall_health = overall_health
        self.observations = observations or []
        self.skipped_lines = skipped_lines or []

    def to_dict(self) -> dict:
        return {
            'device': self.device_path,
            'smart_capable': self.smart_capable,
            'health': self.overall_health,
            'attributes': [obs.to_dict() for obs in self.observations],
        }


def parse_attribute_line(line: str) -> Optional[AttributeObservation]:
    """
    Split one attribute row into its ten columns.

    The raw value column may contain spaces (e.g. "35 (Min/Max 20/45)"), so the
    line is split at most nine times and the integer raw value is taken from
    the start of the last field.

    Returns:
        AttributeObservation, or None for a malformed row
    """
    fields = [f.strip() for f in line.split(None, ATTRIBUTE_FIELD_COUNT - 1)]
    if len(fields) < ATTRIBUTE_FIELD_COUNT:
        return None

    attr_id, name, flag, value, worst, thresh, attr_type, updated, when_failed, raw_text = fields

    raw_match = LEADING_INT_PATTERN.match(raw_text)
    if not raw_match:
        return None

    try:
        return AttributeObservation(
            attr_id=int(attr_id),
            name=name,
            flag=flag,
            value=int(value),
            worst=int(worst),
            threshold=int(thresh),
            attr_type=AttributeType.from_text(attr_type),
            update_frequency=UpdateFrequency.from_text(updated),
            when_failed='' if when_failed == '-' else when_failed,
            raw_value=int(raw_match.group(0)),
            raw_text=raw_text,
        )
    except ValueError:
        return None


def parse_overall_health(text: str) -> str:
    """Return the self-assessment verdict, or an empty string if absent"""
    match = HEALTH_PATTERN.search(text)
    if not match:
        return ""
    return match.group(1).strip()


def parse_device_report(device_path: str, text: Optional[str]) -> DeviceReport:
    """
    Parse the full `smartctl -a` output of one device.

    A report without the capability marker is returned with
    smart_capable=False and nothing else filled in.
    """
    report = DeviceReport(device_path)
    if not text or SMART_CAPABLE_MARKER not in text:
        return report

    report.smart_capable = True
    report.overall_health = parse_overall_health(text)

    for line in text.splitlines():
        if not ATTRIBUTE_ROW_PATTERN.search(line):
            continue
        observation = parse_attribute_line(line)
        if observation is None:
            report.skipped_lines.append(line)
            continue
        report.observations.append(observation)

    return report
