"""Billing-cycle rule resolution: day rule + month shift -> calendar date"""

from datetime import date

from payment_schedule.domain.models import DayRule, MonthEnd, NumericDay
from payment_schedule.utils.date_utils import add_months, days_in_month, next_business_day


def day_of_rule(year: int, month: int, day_rule: DayRule) -> int:
    """
    Day of month a rule lands on in the given month.

    - NumericDay(n): n, clamped to the month length (31 -> 30 in April)
    - MonthEnd: the month length (28/29/30/31)
    """
    last_day = days_in_month(year, month)
    if isinstance(day_rule, MonthEnd):
        return last_day
    if isinstance(day_rule, NumericDay):
        return min(day_rule.day, last_day)
    raise TypeError(f"Unsupported day rule: {day_rule!r}")


def resolve_unadjusted(year: int, month: int, day_rule: DayRule, month_shift: int = 0) -> date:
    """Resolve a rule in (year, month + month_shift) without weekend adjustment"""
    target_year, target_month = add_months(year, month, month_shift)
    return date(target_year, target_month, day_of_rule(target_year, target_month, day_rule))


def resolve(
    year: int,
    month: int,
    day_rule: DayRule,
    month_shift: int = 0,
    weekend_adjustment: bool = False,
) -> date:
    """
    Resolve a closing/payment rule to a concrete date.

    Args:
        year: Reference year
        month: Reference month (1-12)
        day_rule: NumericDay or MonthEnd
        month_shift: Months after the reference month (0, 1 or 2)
        weekend_adjustment: Move Saturday/Sunday to the following Monday

    Returns:
        Resolved calendar date

    Note:
        MonthEnd combined with weekend_adjustment can produce a date in the
        following month (e.g. Saturday 2025-05-31 -> Monday 2025-06-02). That
        is the arithmetically correct answer; the configuration auditor is what
        flags it as unintended.
    """
    resolved = resolve_unadjusted(year, month, day_rule, month_shift)
    if weekend_adjustment:
        return next_business_day(resolved)
    return resolved
