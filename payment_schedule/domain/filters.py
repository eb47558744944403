"""Narrowing a monthly view without recomputing schedules"""

from dataclasses import replace

from payment_schedule.domain.models import MonthlyView, ScheduleEntry, ScheduleFilters
from payment_schedule.domain.schedule_view import calculate_bank_totals


def _matches_date(entry: ScheduleEntry, filters: ScheduleFilters) -> bool:
    if filters.start_date and entry.date < filters.start_date:
        return False
    if filters.end_date and entry.date > filters.end_date:
        return False
    return True


def _matches_amount(entry: ScheduleEntry, filters: ScheduleFilters) -> bool:
    if filters.min_amount is not None and entry.total_amount < filters.min_amount:
        return False
    if filters.max_amount is not None and entry.total_amount > filters.max_amount:
        return False
    return True


def _matches_text(entry: ScheduleEntry, filters: ScheduleFilters) -> bool:
    needle = (filters.search_text or "").strip().casefold()
    if not needle:
        return True

    if needle in entry.label.casefold():
        return True

    # store name / usage of any underlying transaction
    return any(
        needle in (t.store_name or "").casefold() or needle in (t.usage or "").casefold()
        for t in entry.transactions
    )


def _matches_banks(entry: ScheduleEntry, filters: ScheduleFilters) -> bool:
    if not filters.bank_ids:
        return True
    return any(p.bank_id in filters.bank_ids and p.amount > 0 for p in entry.bank_payments)


def _matches_payment_types(entry: ScheduleEntry, filters: ScheduleFilters) -> bool:
    if not filters.payment_types:
        return True
    return any(t.payment_type in filters.payment_types for t in entry.transactions)


def filter_monthly_view(view: MonthlyView, filters: ScheduleFilters) -> MonthlyView:
    """
    Keep the entries matching every active filter and recompute the totals.

    Returns the view unchanged when no filter is active.
    """
    if not filters.is_active:
        return view

    entries = tuple(
        entry
        for entry in view.entries
        if _matches_date(entry, filters)
        and _matches_amount(entry, filters)
        and _matches_text(entry, filters)
        and _matches_banks(entry, filters)
        and _matches_payment_types(entry, filters)
    )

    active_bank_ids = {p.bank_id for entry in entries for p in entry.bank_payments if p.amount > 0}

    return replace(
        view,
        entries=entries,
        bank_totals=calculate_bank_totals(entries),
        month_total=sum(entry.total_amount for entry in entries),
        unique_banks=tuple(bank for bank in view.unique_banks if bank.id in active_bank_ids),
    )
