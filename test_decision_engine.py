#!/usr/bin/env python3
"""
Test suite for the S.M.A.R.T. attribute decision engine
"""

import pytest

from decision_engine import (
    ERROR_ATTRIBUTES,
    WARN_ATTRIBUTES,
    AttributeType,
    Severity,
    UpdateFrequency,
    classify_attribute,
    evaluate_health_verdict,
    is_assessed,
)
from report_parser import AttributeObservation


def make_observation(attr_id, name, attr_type, raw_value, threshold=0,
                     update_frequency=UpdateFrequency.ALWAYS):
    return AttributeObservation(
        attr_id=attr_id,
        name=name,
        flag='0x0033',
        value=100,
        worst=100,
        threshold=threshold,
        attr_type=attr_type,
        update_frequency=update_frequency,
        when_failed='',
        raw_value=raw_value,
    )


def test_severity_order():
    order = [Severity.TRACE, Severity.DEBUG, Severity.INFO, Severity.NOTICE,
             Severity.WARN, Severity.ERROR, Severity.FATAL]
    assert sorted(reversed(order)) == order
    assert Severity.NOTICE >= Severity.NOTICE
    assert Severity.ERROR > Severity.WARN
    assert max([Severity.INFO, Severity.ERROR, Severity.NOTICE]) == Severity.ERROR


def test_severity_tags_are_fixed_width():
    assert Severity.INFO.tag == 'INFO  '
    assert Severity.NOTICE.tag == 'NOTICE'
    assert all(len(s.tag) == 6 for s in Severity)


def test_tables_are_disjoint_and_immutable():
    assert set(ERROR_ATTRIBUTES) == {5, 10, 184, 187, 188, 196, 197, 198}
    assert set(WARN_ATTRIBUTES) == {9, 194}
    assert not set(ERROR_ATTRIBUTES) & set(WARN_ATTRIBUTES)
    with pytest.raises(TypeError):
        ERROR_ATTRIBUTES[1] = 'Raw_Read_Error_Rate'


@pytest.mark.parametrize("attr_id,name", sorted(ERROR_ATTRIBUTES.items()))
def test_triggered_prefail_error_attribute_is_error(attr_id, name):
    obs = make_observation(attr_id, name, AttributeType.PRE_FAIL, raw_value=3, threshold=10)
    assert classify_attribute(obs) == Severity.ERROR


def test_prefail_nonzero_raw_below_threshold_still_triggers():
    # Any nonzero raw count matters for Pre-fail, threshold or not
    obs = make_observation(5, 'Reallocated_Sector_Ct', AttributeType.PRE_FAIL, raw_value=1, threshold=36)
    assert classify_attribute(obs) == Severity.ERROR


def test_prefail_unknown_attribute_is_warn():
    obs = make_observation(1, 'Raw_Read_Error_Rate', AttributeType.PRE_FAIL, raw_value=1234, threshold=6)
    assert classify_attribute(obs) == Severity.WARN


def test_prefail_name_mismatch_is_not_error():
    obs = make_observation(5, 'Retired_Block_Count', AttributeType.PRE_FAIL, raw_value=2, threshold=10)
    assert classify_attribute(obs) == Severity.WARN


def test_prefail_zero_raw_is_info():
    obs = make_observation(5, 'Reallocated_Sector_Ct', AttributeType.PRE_FAIL, raw_value=0, threshold=10)
    assert classify_attribute(obs) == Severity.INFO


@pytest.mark.parametrize("attr_id,name", sorted(WARN_ATTRIBUTES.items()))
def test_old_age_warn_attribute_above_threshold_is_notice(attr_id, name):
    obs = make_observation(attr_id, name, AttributeType.OLD_AGE, raw_value=40000, threshold=0)
    assert classify_attribute(obs) == Severity.NOTICE


def test_old_age_at_threshold_is_info():
    obs = make_observation(9, 'Power_On_Hours', AttributeType.OLD_AGE, raw_value=0, threshold=0)
    assert classify_attribute(obs) == Severity.INFO


def test_old_age_unknown_attribute_is_info():
    obs = make_observation(12, 'Power_Cycle_Count', AttributeType.OLD_AGE, raw_value=900, threshold=0)
    assert classify_attribute(obs) == Severity.INFO


def test_old_age_error_table_entry_is_only_info():
    # Error table only applies to Pre-fail rows
    obs = make_observation(197, 'Current_Pending_Sector', AttributeType.OLD_AGE, raw_value=8, threshold=0)
    assert classify_attribute(obs) == Severity.INFO


def test_other_type_is_not_classified():
    obs = make_observation(5, 'Reallocated_Sector_Ct', AttributeType.OTHER, raw_value=50, threshold=0)
    assert classify_attribute(obs) is None


def test_custom_tables_are_used():
    obs = make_observation(1, 'Raw_Read_Error_Rate', AttributeType.PRE_FAIL, raw_value=5, threshold=6)
    assert classify_attribute(obs, error_attributes={1: 'Raw_Read_Error_Rate'}) == Severity.ERROR


def test_update_frequency_filter():
    assert is_assessed(make_observation(9, 'Power_On_Hours', AttributeType.OLD_AGE, 1))
    assert is_assessed(make_observation(9, 'Power_On_Hours', AttributeType.OLD_AGE, 1,
                                        update_frequency=UpdateFrequency.OFFLINE))
    assert not is_assessed(make_observation(9, 'Power_On_Hours', AttributeType.OLD_AGE, 1,
                                            update_frequency=UpdateFrequency.OTHER))


@pytest.mark.parametrize("verdict,expected", [
    ("PASSED", Severity.NOTICE),
    ("FAILED!", Severity.ERROR),
    ("passed", Severity.ERROR),
    ("PASSED ", Severity.ERROR),
    ("", Severity.ERROR),
])
def test_health_verdict(verdict, expected):
    assert evaluate_health_verdict(verdict) == expected
