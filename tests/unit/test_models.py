"""Unit tests for day rule parsing and account construction"""

import pytest
from payment_schedule.domain.exceptions import InvalidDayRuleError, InvalidPaymentShiftError
from payment_schedule.domain.models import (
    MONTH_END,
    BillingAccount,
    NumericDay,
    ScheduleFilters,
    format_day_rule,
    parse_day_rule,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (27, NumericDay(27)),
        ("27", NumericDay(27)),
        (" 5 ", NumericDay(5)),
        ("month-end", MONTH_END),
        ("Month-End", MONTH_END),
        ("月末", MONTH_END),
        (NumericDay(10), NumericDay(10)),
        (MONTH_END, MONTH_END),
    ],
)
def test_parse_day_rule_accepts_stored_forms(value, expected):
    """Test ints, digit strings and month-end sentinels"""
    assert parse_day_rule(value) == expected


@pytest.mark.parametrize("value", [0, 32, -1, "0", "32", "abc", "", None, True, 2.5])
def test_parse_day_rule_rejects_invalid(value):
    """Test out-of-range and malformed rules"""
    with pytest.raises(InvalidDayRuleError):
        parse_day_rule(value)


def test_format_day_rule():
    """Test rules render the way they are stored"""
    assert format_day_rule(NumericDay(2)) == "2"
    assert format_day_rule(MONTH_END) == "month-end"


def test_billing_account_parses_rules():
    """Test accounts accept stored string/int rules"""
    account = BillingAccount(
        id="card",
        name="Card",
        bank_id="bank",
        closing_day="月末",
        payment_day="27",
        payment_month_shift=1,
        weekend_adjustment=False,
    )

    assert account.closing_day is MONTH_END
    assert account.payment_day == NumericDay(27)


def test_billing_account_rejects_invalid_rule():
    """Test a bad rule fails at construction, not at scheduling time"""
    with pytest.raises(InvalidDayRuleError):
        BillingAccount(
            id="card",
            name="Card",
            bank_id="bank",
            closing_day=40,
            payment_day=27,
            payment_month_shift=1,
            weekend_adjustment=False,
        )


@pytest.mark.parametrize("shift", [-1, 3, 12, True])
def test_billing_account_rejects_invalid_month_shift(shift):
    """Test payment month shift is limited to 0, 1 or 2"""
    with pytest.raises(InvalidPaymentShiftError):
        BillingAccount(
            id="card",
            name="Card",
            bank_id="bank",
            closing_day=10,
            payment_day=27,
            payment_month_shift=shift,
            weekend_adjustment=False,
        )


@pytest.mark.parametrize("shift", [0, 1, 2])
def test_billing_account_accepts_month_shift(shift):
    """Test every supported payment pattern"""
    account = BillingAccount("card", "Card", "bank", 10, 27, shift, False)
    assert account.payment_month_shift == shift


def test_schedule_filters_is_active():
    """Test blank search text alone does not activate filtering"""
    assert ScheduleFilters().is_active is False
    assert ScheduleFilters(search_text="   ").is_active is False
    assert ScheduleFilters(min_amount=0).is_active is True
    assert ScheduleFilters(bank_ids=("bank-1",)).is_active is True
