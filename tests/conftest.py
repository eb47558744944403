"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Dict, List, Optional
from fastapi.testclient import TestClient
from payment_schedule.api.main import create_app
from payment_schedule.domain.models import BANK, CARD, Bank, BillingAccount, Transaction
from payment_schedule.domain.scheduling import compute_transaction_schedule


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a fresh schedule cache"""
    return TestClient(create_app())


@pytest.fixture
def banks() -> List[Bank]:
    return [
        Bank(id="bank-1", name="Blue Bank"),
        Bank(id="bank-2", name="Alpha Bank"),
    ]


@pytest.fixture
def accounts() -> List[BillingAccount]:
    """
    Three cards covering the common cycle shapes:
    - card-a: closes month-end, pays the 27th next month, weekend adjustment on
    - card-b: closes the 10th, pays the 2nd next month, no adjustment
    - card-c: closes the 15th, pays month-end next month, weekend adjustment on
      (the month-end/weekend conflict)
    """
    return [
        BillingAccount(
            id="card-a",
            name="Visa Gold",
            bank_id="bank-1",
            closing_day="month-end",
            payment_day=27,
            payment_month_shift=1,
            weekend_adjustment=True,
        ),
        BillingAccount(
            id="card-b",
            name="Amex",
            bank_id="bank-2",
            closing_day=10,
            payment_day=2,
            payment_month_shift=1,
            weekend_adjustment=False,
        ),
        BillingAccount(
            id="card-c",
            name="Month End Card",
            bank_id="bank-1",
            closing_day=15,
            payment_day="month-end",
            payment_month_shift=1,
            weekend_adjustment=True,
        ),
    ]


@pytest.fixture
def accounts_by_id(accounts: List[BillingAccount]) -> Dict[str, BillingAccount]:
    return {a.id: a for a in accounts}


@pytest.fixture
def make_transaction(accounts_by_id: Dict[str, BillingAccount]) -> Callable[..., Transaction]:
    """Build a transaction the way the write path does: scheduled date computed once"""

    def _make(
        transaction_id: str,
        day: date,
        amount: int,
        card_id: Optional[str] = None,
        bank_id: Optional[str] = None,
        store_name: Optional[str] = None,
    ) -> Transaction:
        payment_type = CARD if card_id else BANK
        account = accounts_by_id.get(card_id) if card_id else None
        return Transaction(
            id=transaction_id,
            date=day,
            amount=amount,
            payment_type=payment_type,
            scheduled_pay_date=compute_transaction_schedule(day, payment_type, account),
            card_id=card_id,
            bank_id=bank_id,
            store_name=store_name,
        )

    return _make


@pytest.fixture
def transactions(make_transaction: Callable[..., Transaction]) -> List[Transaction]:
    """
    Withdrawals in July 2025:
    - 2025-07-02 Amex            3000 (bank-2)
    - 2025-07-10 bank debit      8000 (bank-1)
    - 2025-07-28 Visa Gold       4000 (bank-1, the 27th is a Sunday)
    - 2025-07-31 Month End Card  4000 (bank-1)
    tx-6 is withdrawn 2025-06-02: May 31 2025 is a Saturday.
    """
    return [
        make_transaction("tx-1", date(2025, 6, 10), 2500, card_id="card-a", store_name="Grocer"),
        make_transaction("tx-2", date(2025, 6, 20), 1500, card_id="card-a", store_name="Bookshop"),
        make_transaction("tx-3", date(2025, 6, 5), 3000, card_id="card-b", store_name="Airline"),
        make_transaction("tx-4", date(2025, 7, 10), 8000, bank_id="bank-1", store_name="Electricity"),
        make_transaction("tx-5", date(2025, 6, 10), 4000, card_id="card-c", store_name="Hardware"),
        make_transaction("tx-6", date(2025, 4, 10), 1200, card_id="card-c", store_name="Cafe"),
    ]
