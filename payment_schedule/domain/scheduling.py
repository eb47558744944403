"""Withdrawal date calculation for card and direct-debit transactions"""

import math
from datetime import date
from typing import Dict, Iterable, Optional

from payment_schedule.domain.cycle_rules import day_of_rule, resolve, resolve_unadjusted
from payment_schedule.domain.exceptions import MissingBillingAccountError
from payment_schedule.domain.models import (
    BANK,
    CARD,
    BillingAccount,
    ConfigurationCheck,
    MonthEnd,
    NumericDay,
    PaymentCalculation,
    PaymentTiming,
    Transaction,
    format_day_rule,
)
from payment_schedule.utils.date_utils import add_months, generate_date_range, month_bounds

PAYMENT_PATTERNS = {
    0: "same month",
    1: "next month",
    2: "month after next",
}


def calculate_card_payment(transaction_date: date, account: BillingAccount) -> PaymentCalculation:
    """
    Work out when a card purchase is withdrawn.

    Steps:
    1. Closing month: the purchase month if the purchase day is on/before
       that month's closing day, otherwise the following month. A month-end
       closing day therefore always closes in the purchase month.
    2. Payment month: closing month + payment_month_shift.
    3. Payment day resolved in the payment month, then moved off the weekend
       if the account asks for it.

    Example:
        closes 10th, pays 2nd next month, purchase 2025-08-04
        -> closes 2025-08-10 -> paid 2025-09-02
    """
    closing_day = day_of_rule(transaction_date.year, transaction_date.month, account.closing_day)

    if transaction_date.day <= closing_day:
        closing_year, closing_month = transaction_date.year, transaction_date.month
    else:
        closing_year, closing_month = add_months(transaction_date.year, transaction_date.month, 1)

    closing_date = date(
        closing_year,
        closing_month,
        day_of_rule(closing_year, closing_month, account.closing_day),
    )

    payment_year, payment_month = add_months(closing_year, closing_month, account.payment_month_shift)
    original_payment_date = resolve_unadjusted(payment_year, payment_month, account.payment_day)
    scheduled_pay_date = resolve(
        payment_year,
        payment_month,
        account.payment_day,
        month_shift=0,
        weekend_adjustment=account.weekend_adjustment,
    )

    return PaymentCalculation(
        scheduled_pay_date=scheduled_pay_date,
        closing_date=closing_date,
        original_payment_date=original_payment_date,
        is_adjusted=scheduled_pay_date != original_payment_date,
    )


def compute_scheduled_date(transaction_date: date, account: BillingAccount) -> date:
    """Scheduled withdrawal date for a card purchase"""
    return calculate_card_payment(transaction_date, account).scheduled_pay_date


def compute_transaction_schedule(
    transaction_date: date,
    payment_type: str,
    account: Optional[BillingAccount] = None,
) -> date:
    """
    Write-path entry point: the value to persist as scheduled_pay_date.

    Direct debits leave on the transaction date itself. Card purchases follow
    the owning account's cycle.

    Raises:
        MissingBillingAccountError: Card payment without its account
        ValueError: Unknown payment type
    """
    if payment_type == BANK:
        return transaction_date
    if payment_type == CARD:
        if account is None:
            raise MissingBillingAccountError("Card payments need the billing account that owns them")
        return compute_scheduled_date(transaction_date, account)
    raise ValueError(f"Unknown payment type: {payment_type!r}")


def recalculate_payment_dates(
    transactions: Iterable[Transaction],
    account: BillingAccount,
) -> Dict[str, date]:
    """Dates this account configuration would give its card transactions (id -> date)"""
    return {
        t.id: compute_scheduled_date(t.date, account)
        for t in transactions
        if t.payment_type == CARD and t.card_id == account.id
    }


def describe_closing_rule(account: BillingAccount) -> str:
    if isinstance(account.closing_day, MonthEnd):
        return "closes month-end"
    return f"closes day {account.closing_day.day}"


def describe_payment_rule(account: BillingAccount) -> str:
    pattern = payment_pattern(account.payment_month_shift)
    return f"{pattern}, {format_day_rule(account.payment_day)}"


def payment_pattern(month_shift: int) -> str:
    return PAYMENT_PATTERNS.get(month_shift, f"{month_shift} months later")


def analyze_payment_timing(account: BillingAccount, year: int, month: int) -> PaymentTiming:
    """
    Delay between purchase and withdrawal for a purchase on every day of a month.

    Useful for previewing what an account configuration means before saving it.
    """
    first, last = month_bounds(year, month)
    delays = [
        (compute_scheduled_date(day, account) - day).days
        for day in generate_date_range(first, last)
    ]

    average = sum(delays) / len(delays)

    return PaymentTiming(
        average_delay_days=math.floor(average + 0.5),
        min_delay_days=min(delays),
        max_delay_days=max(delays),
        payment_pattern=payment_pattern(account.payment_month_shift),
    )


def check_account_configuration(account: BillingAccount) -> ConfigurationCheck:
    """
    Flag unusual but legal account setups.

    Warnings make the check invalid; suggestions never do.
    """
    warnings = []
    suggestions = []

    if account.payment_month_shift == 0:
        warnings.append("Same-month payment is unusual for credit cards")

    if isinstance(account.payment_day, NumericDay) and not account.weekend_adjustment:
        suggestions.append("Consider enabling weekend adjustment for more accurate payment dates")

    if isinstance(account.payment_day, MonthEnd) and account.weekend_adjustment:
        suggestions.append(
            "Disable weekend adjustment so month-end withdrawals stay inside the month"
        )

    return ConfigurationCheck(
        is_valid=not warnings,
        warnings=tuple(warnings),
        suggestions=tuple(suggestions),
    )
