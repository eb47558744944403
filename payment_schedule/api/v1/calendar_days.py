"""POST /v1/calendar/day-totals - per-day calendar totals"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from payment_schedule.api.v1.schemas import DayTotalSchema, DayTotalsResponse, ScheduleDataRequest
from payment_schedule.api.dependencies import data_version, get_request_id, get_schedule_cache
from payment_schedule.config import settings
from payment_schedule.domain.day_totals import build_month_calendar
from payment_schedule.infrastructure.cache import ScheduleCache
from payment_schedule.infrastructure.observability.logging import log_schedule_view
from payment_schedule.infrastructure.observability.metrics import record_schedule_view

router = APIRouter()


@router.post("/calendar/day-totals", response_model=DayTotalsResponse)
def get_day_totals(
    request_body: ScheduleDataRequest,
    request: Request,
    cache: ScheduleCache = Depends(get_schedule_cache),
):
    """
    Day totals for one calendar month.

    Each day carries the transactions dated that day and the schedule entries
    withdrawn that day, grouped by settlement bank.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    def compute():
        banks, accounts, transactions = request_body.to_domain()
        return build_month_calendar(
            transactions,
            banks,
            accounts,
            request_body.year,
            request_body.month,
            bank_debit_label=settings.bank_debit_label,
        )

    try:
        key = cache.make_key("day_totals", request_body.year, request_body.month, data_version(request_body))
        (view, day_totals), cache_hit = cache.get_or_compute(key, compute)

    except Exception as e:
        logging.error(f"Day totals failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration = time.time() - start_time
    if not cache_hit:
        record_schedule_view("day_totals", len(view.skipped_transaction_ids), duration)
    log_schedule_view(
        request_id,
        "day_totals",
        request_body.year,
        request_body.month,
        len(day_totals),
        view.month_total,
        view.skipped_transaction_ids,
        cache_hit,
        duration * 1000,
    )

    return DayTotalsResponse(
        year=request_body.year,
        month=request_body.month,
        schedule_month_total=view.month_total,
        day_totals={key: DayTotalSchema.from_domain(day) for key, day in day_totals.items()},
        skipped_transaction_ids=list(view.skipped_transaction_ids),
    )
