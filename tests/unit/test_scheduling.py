"""Unit tests for withdrawal date calculation"""

import pytest
from datetime import date
from payment_schedule.domain.exceptions import MissingBillingAccountError
from payment_schedule.domain.models import BillingAccount, Transaction
from payment_schedule.domain.scheduling import (
    analyze_payment_timing,
    calculate_card_payment,
    check_account_configuration,
    compute_scheduled_date,
    compute_transaction_schedule,
    describe_closing_rule,
    describe_payment_rule,
    recalculate_payment_dates,
)


def make_account(closing_day, payment_day, shift=1, weekend_adjustment=False) -> BillingAccount:
    return BillingAccount(
        id="card",
        name="Card",
        bank_id="bank",
        closing_day=closing_day,
        payment_day=payment_day,
        payment_month_shift=shift,
        weekend_adjustment=weekend_adjustment,
    )


def test_month_end_closing_pays_next_month():
    """Test purchase before a month-end close is paid the following month"""
    account = make_account("month-end", 27, weekend_adjustment=True)

    calculation = calculate_card_payment(date(2025, 2, 15), account)

    assert calculation.closing_date == date(2025, 2, 28)
    assert calculation.scheduled_pay_date == date(2025, 3, 27)
    assert calculation.is_adjusted is False


def test_purchase_on_or_before_closing_day():
    """Test closes the 10th, pays the 2nd next month"""
    account = make_account(10, 2)

    calculation = calculate_card_payment(date(2025, 8, 4), account)

    assert calculation.closing_date == date(2025, 8, 10)
    assert calculation.scheduled_pay_date == date(2025, 9, 2)


def test_purchase_on_closing_day_stays_in_cycle():
    """Test the closing day itself belongs to the current cycle"""
    account = make_account(10, 2)
    assert compute_scheduled_date(date(2025, 8, 10), account) == date(2025, 9, 2)


def test_purchase_after_closing_day_rolls_to_next_cycle():
    """Test a purchase after the close waits a full cycle"""
    account = make_account(10, 2)

    calculation = calculate_card_payment(date(2025, 8, 11), account)

    assert calculation.closing_date == date(2025, 9, 10)
    assert calculation.scheduled_pay_date == date(2025, 10, 2)


def test_cycle_rolls_over_year_end():
    """Test December purchase after close is paid in February"""
    account = make_account(10, 2)
    assert compute_scheduled_date(date(2025, 12, 15), account) == date(2026, 2, 2)


def test_month_end_payment_day():
    """Test month-end payment in a 30-day month"""
    account = make_account(15, "month-end")
    assert compute_scheduled_date(date(2025, 3, 10), account) == date(2025, 4, 30)


def test_closing_day_clamped_in_short_month():
    """Test closing day 30 closes on Feb 28 in 2025"""
    account = make_account(30, 10)

    calculation = calculate_card_payment(date(2025, 2, 28), account)

    assert calculation.closing_date == date(2025, 2, 28)
    assert calculation.scheduled_pay_date == date(2025, 3, 10)


def test_same_month_payment():
    """Test shift 0 pays within the closing month"""
    account = make_account(5, 25, shift=0)
    assert compute_scheduled_date(date(2025, 6, 3), account) == date(2025, 6, 25)


def test_two_month_shift():
    """Test shift 2 pays the month after next"""
    account = make_account(15, 10, shift=2)
    assert compute_scheduled_date(date(2025, 6, 3), account) == date(2025, 8, 10)


def test_weekend_adjustment_reported():
    """Test is_adjusted and the original payment date when moved off a Sunday"""
    account = make_account("month-end", 27, weekend_adjustment=True)

    calculation = calculate_card_payment(date(2025, 6, 10), account)

    assert calculation.original_payment_date == date(2025, 7, 27)
    assert calculation.scheduled_pay_date == date(2025, 7, 28)
    assert calculation.is_adjusted is True


def test_bank_debit_withdrawn_on_transaction_date():
    """Test direct debits are not moved, even on a weekend"""
    saturday = date(2025, 5, 31)
    assert compute_transaction_schedule(saturday, "bank") == saturday


def test_card_requires_account():
    """Test card transactions cannot be scheduled without their account"""
    with pytest.raises(MissingBillingAccountError):
        compute_transaction_schedule(date(2025, 6, 1), "card")


def test_unknown_payment_type():
    """Test an unsupported payment type is rejected"""
    with pytest.raises(ValueError):
        compute_transaction_schedule(date(2025, 6, 1), "cash", make_account(10, 2))


def test_card_schedule_uses_account():
    """Test the write-path entry point for card purchases"""
    assert compute_transaction_schedule(date(2025, 8, 4), "card", make_account(10, 2)) == date(2025, 9, 2)


def test_recalculate_payment_dates_only_own_card_transactions():
    """Test transactions of other accounts and bank debits are ignored"""
    account = make_account(10, 2)
    transactions = [
        Transaction("t1", date(2025, 8, 4), 100, "card", date(2025, 9, 1), card_id="card"),
        Transaction("t2", date(2025, 8, 4), 100, "card", date(2025, 9, 1), card_id="other"),
        Transaction("t3", date(2025, 8, 4), 100, "bank", date(2025, 8, 4), bank_id="bank"),
    ]

    assert recalculate_payment_dates(transactions, account) == {"t1": date(2025, 9, 2)}


def test_describe_rules():
    """Test human-readable rule summaries"""
    account = make_account("month-end", 27)

    assert describe_closing_rule(account) == "closes month-end"
    assert describe_payment_rule(account) == "next month, 27"
    assert describe_closing_rule(make_account(10, "month-end", shift=2)) == "closes day 10"
    assert describe_payment_rule(make_account(10, "month-end", shift=2)) == "month after next, month-end"


def test_analyze_payment_timing():
    """Test purchase-to-withdrawal delays across August 2025"""
    timing = analyze_payment_timing(make_account(10, 2), 2025, 8)

    # Aug 10 -> Sep 2 is the shortest wait, Aug 11 -> Oct 2 the longest
    assert timing.min_delay_days == 23
    assert timing.max_delay_days == 52
    assert timing.average_delay_days == 37
    assert timing.payment_pattern == "next month"


def test_check_configuration_same_month_warning():
    """Test same-month payment is flagged as unusual"""
    check = check_account_configuration(make_account(5, 25, shift=0, weekend_adjustment=True))

    assert check.is_valid is False
    assert any("Same-month" in w for w in check.warnings)
    assert check.suggestions == ()


def test_check_configuration_suggestions():
    """Test suggestions never make a configuration invalid"""
    numeric = check_account_configuration(make_account(10, 2, weekend_adjustment=False))
    month_end = check_account_configuration(make_account(10, "month-end", weekend_adjustment=True))

    assert numeric.is_valid is True
    assert len(numeric.suggestions) == 1
    assert month_end.is_valid is True
    assert "month-end" in month_end.suggestions[0]
