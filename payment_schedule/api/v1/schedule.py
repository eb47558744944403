"""POST /v1/schedule/* - withdrawal date and monthly schedule endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from payment_schedule.api.v1.schemas import (
    MonthlyViewRequest,
    MonthlyViewResponse,
    ScheduledDateRequest,
    ScheduledDateResponse,
)
from payment_schedule.api.dependencies import data_version, get_request_id, get_schedule_cache
from payment_schedule.config import settings
from payment_schedule.domain.exceptions import DomainException
from payment_schedule.domain.filters import filter_monthly_view
from payment_schedule.domain.models import CARD
from payment_schedule.domain.schedule_view import build_monthly_view
from payment_schedule.domain.scheduling import calculate_card_payment, compute_transaction_schedule
from payment_schedule.infrastructure.cache import ScheduleCache
from payment_schedule.infrastructure.observability.logging import log_schedule_view
from payment_schedule.infrastructure.observability.metrics import record_schedule_view

router = APIRouter()


@router.post("/schedule/scheduled-date", response_model=ScheduledDateResponse)
def compute_scheduled_date(request_body: ScheduledDateRequest, request: Request):
    """
    Compute the withdrawal date to store on a new or edited transaction.

    Card purchases need the owning account; direct debits are withdrawn on
    the transaction date.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    account = request_body.account.to_domain() if request_body.account else None

    try:
        if request_body.payment_type == CARD and account is not None:
            calculation = calculate_card_payment(request_body.transaction_date, account)
            response = ScheduledDateResponse(
                scheduled_pay_date=calculation.scheduled_pay_date,
                closing_date=calculation.closing_date,
                original_payment_date=calculation.original_payment_date,
                is_adjusted=calculation.is_adjusted,
            )
        else:
            scheduled = compute_transaction_schedule(
                request_body.transaction_date,
                request_body.payment_type,
                account,
            )
            response = ScheduledDateResponse(scheduled_pay_date=scheduled)

    except DomainException as e:
        logging.warning(f"Cannot schedule transaction: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except ValueError as e:
        # withdrawal date past the last representable year
        logging.warning(f"Scheduled date out of range: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail="Scheduled date is out of range")

    record_schedule_view("scheduled_date", 0, time.time() - start_time)
    return response


@router.post("/schedule/monthly-view", response_model=MonthlyViewResponse)
def get_monthly_view(
    request_body: MonthlyViewRequest,
    request: Request,
    cache: ScheduleCache = Depends(get_schedule_cache),
):
    """
    Build the cross table of withdrawals for one month.

    Rows are (withdrawal date, payer), columns are settlement banks. The
    unfiltered view is cached per (year, month, data version); filters are
    applied on the way out.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    def compute():
        banks, accounts, transactions = request_body.to_domain()
        return build_monthly_view(
            transactions,
            banks,
            accounts,
            request_body.year,
            request_body.month,
            bank_debit_label=settings.bank_debit_label,
        )

    try:
        key = cache.make_key("monthly_view", request_body.year, request_body.month, data_version(request_body))
        view, cache_hit = cache.get_or_compute(key, compute)

        if request_body.filters is not None:
            view = filter_monthly_view(view, request_body.filters.to_domain())

    except Exception as e:
        logging.error(f"Monthly view failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration = time.time() - start_time
    if not cache_hit:
        record_schedule_view("monthly_view", len(view.skipped_transaction_ids), duration)
    log_schedule_view(
        request_id,
        "monthly_view",
        view.year,
        view.month,
        len(view.entries),
        view.month_total,
        view.skipped_transaction_ids,
        cache_hit,
        duration * 1000,
    )

    return MonthlyViewResponse.from_domain(view)
