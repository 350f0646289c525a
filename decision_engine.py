#!/usr/bin/env python3
"""
Disk Status - S.M.A.R.T. Attribute Decision Engine

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

This module provides a deterministic decision engine that maps a single
S.M.A.R.T. attribute observation to a severity level. It performs no I/O
and knows nothing about terminals or log files.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class Severity(Enum):
    """Message severity levels, ordered by increasing urgency"""
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    NOTICE = "NOTICE"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @property
    def tag(self) -> str:
        """Fixed-width tag used in decorated log lines, e.g. 'INFO  '"""
        return f"{self.value:<6}"

    def __ge__(self, other):
        return self.rank >= other.rank

    def __gt__(self, other):
        return self.rank > other.rank

    def __le__(self, other):
        return self.rank <= other.rank

    def __lt__(self, other):
        return self.rank < other.rank


_SEVERITY_ORDER = list(Severity)


class AttributeType(Enum):
    """smartctl TYPE column"""
    PRE_FAIL = "Pre-fail"
    OLD_AGE = "Old_age"
    OTHER = "Other"

    @classmethod
    def from_text(cls, text: str) -> 'AttributeType':
        for member in (cls.PRE_FAIL, cls.OLD_AGE):
            if member.value == text:
                return member
        return cls.OTHER


class UpdateFrequency(Enum):
    """smartctl UPDATED column"""
    ALWAYS = "Always"
    OFFLINE = "Offline"
    OTHER = "Other"

    @classmethod
    def from_text(cls, text: str) -> 'UpdateFrequency':
        for member in (cls.ALWAYS, cls.OFFLINE):
            if member.value == text:
                return member
        return cls.OTHER


# https://en.wikipedia.org/wiki/S.M.A.R.T.#Known_ATA_S.M.A.R.T._attributes
# Known failure predictors. A triggered Pre-fail attribute listed here is an ERROR.
ERROR_ATTRIBUTES: Mapping[int, str] = MappingProxyType({
    5: 'Reallocated_Sector_Ct',
    10: 'Spin_Retry_Count',
    184: 'End-to-End_Error',
    187: 'Reported_Uncorrect',
    188: 'Command_Timeout',
    196: 'Reallocated_Event_Count',
    197: 'Current_Pending_Sector',
    198: 'Offline_Uncorrectable',
})

# Aging indicators. A triggered Old_age attribute listed here is a NOTICE.
WARN_ATTRIBUTES: Mapping[int, str] = MappingProxyType({
    9: 'Power_On_Hours',
    194: 'Temperature',
})

# Only continuously or periodically updated attributes are assessed
ASSESSED_UPDATE_FREQUENCIES = frozenset({UpdateFrequency.ALWAYS, UpdateFrequency.OFFLINE})


def matches_table(attr_id: int, attr_name: str, table: Mapping[int, str]) -> bool:
    """True only when both id and name match a table entry"""
    return table.get(attr_id) == attr_name


def is_assessed(observation) -> bool:
    """Check whether an observation takes part in health assessment at all"""
    return observation.update_frequency in ASSESSED_UPDATE_FREQUENCIES


def classify_attribute(observation,
                       error_attributes: Mapping[int, str] = ERROR_ATTRIBUTES,
                       warn_attributes: Mapping[int, str] = WARN_ATTRIBUTES) -> Optional[Severity]:
    """
    Classify one attribute observation.

    Args:
        observation: AttributeObservation (anything with attr_id, name,
                     attr_type, threshold and raw_value)
        error_attributes: id -> name table of failure predictors
        warn_attributes: id -> name table of aging indicators

    Returns:
        Severity for the observation, or None when the attribute type is
        neither Pre-fail nor Old_age (nothing should be reported).

    Pre-fail attributes trigger on any nonzero raw value, even one below the
    threshold. Old_age attributes trigger only above the threshold.
    """
    raw = observation.raw_value
    threshold = observation.threshold

    if observation.attr_type == AttributeType.PRE_FAIL:
        if raw > 0 or raw > threshold:
            if matches_table(observation.attr_id, observation.name, error_attributes):
                return Severity.ERROR
            return Severity.WARN
        return Severity.INFO

    if observation.attr_type == AttributeType.OLD_AGE:
        if raw > threshold and matches_table(observation.attr_id, observation.name, warn_attributes):
            return Severity.NOTICE
        return Severity.INFO

    return None


def evaluate_health_verdict(verdict: str) -> Severity:
    """Overall health is only good when smartctl says exactly PASSED"""
    return Severity.NOTICE if verdict == "PASSED" else Severity.ERROR
