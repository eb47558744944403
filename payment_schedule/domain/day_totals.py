"""Per-day calendar totals combining actual transactions and projected withdrawals"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from payment_schedule.domain.models import (
    CARD,
    SCHEDULE_SOURCE,
    TRANSACTION_SOURCE,
    Bank,
    BankGroup,
    BillingAccount,
    DayItem,
    DayTotal,
    MonthlyView,
    ScheduleEntry,
    Transaction,
)
from payment_schedule.domain.schedule_view import (
    BANK_DEBIT_LABEL,
    build_monthly_view,
    index_by_id,
    resolve_settlement,
)
from payment_schedule.utils.collation import collation_key
from payment_schedule.utils.date_utils import date_key, in_month


@dataclass
class _BankGroupBuilder:
    bank_id: str
    bank_name: str
    order: int
    items: List[DayItem] = field(default_factory=list)

    def build(self) -> BankGroup:
        return BankGroup(
            bank_id=self.bank_id,
            bank_name=self.bank_name,
            total_amount=sum(item.amount for item in self.items),
            item_count=len(self.items),
            items=tuple(self.items),
        )


@dataclass
class _DayBuilder:
    day: date
    transactions: List[Transaction] = field(default_factory=list)
    schedule_entries: List[ScheduleEntry] = field(default_factory=list)
    card_transaction_total: int = 0
    bank_transaction_total: int = 0
    card_schedule_total: int = 0
    bank_schedule_total: int = 0
    groups: Dict[str, _BankGroupBuilder] = field(default_factory=dict)

    def _add_item(self, item: DayItem) -> None:
        group = self.groups.get(item.bank_id)
        if group is None:
            group = _BankGroupBuilder(item.bank_id, item.bank_name, order=len(self.groups))
            self.groups[item.bank_id] = group
        group.items.append(item)

    def add_transaction(self, transaction: Transaction, bank: Bank, payer_label: str) -> None:
        self.transactions.append(transaction)
        if transaction.payment_type == CARD:
            self.card_transaction_total += transaction.amount
        else:
            self.bank_transaction_total += transaction.amount

        self._add_item(
            DayItem(
                id=transaction.id,
                source=TRANSACTION_SOURCE,
                amount=transaction.amount,
                payment_type=transaction.payment_type,
                bank_id=bank.id,
                bank_name=bank.name,
                payer_label=payer_label,
                store_name=transaction.store_name,
            )
        )

    def add_schedule_entry(self, entry: ScheduleEntry) -> None:
        self.schedule_entries.append(entry)
        if entry.payment_type == CARD:
            self.card_schedule_total += entry.total_amount
        else:
            self.bank_schedule_total += entry.total_amount

        # one item per settlement bank of the entry
        for payment in entry.bank_payments:
            self._add_item(
                DayItem(
                    id=entry.key,
                    source=SCHEDULE_SOURCE,
                    amount=payment.amount,
                    payment_type=entry.payment_type,
                    bank_id=payment.bank_id,
                    bank_name=payment.bank_name,
                    payer_label=entry.label,
                )
            )

    def build(self) -> DayTotal:
        groups = sorted(self.groups.values(), key=lambda g: (collation_key(g.bank_name), g.order))
        return DayTotal(
            date=self.day,
            transaction_count=len(self.transactions),
            schedule_count=len(self.schedule_entries),
            transaction_total=self.card_transaction_total + self.bank_transaction_total,
            card_transaction_total=self.card_transaction_total,
            bank_transaction_total=self.bank_transaction_total,
            schedule_total=self.card_schedule_total + self.bank_schedule_total,
            card_schedule_total=self.card_schedule_total,
            bank_schedule_total=self.bank_schedule_total,
            bank_groups=tuple(group.build() for group in groups),
            transactions=tuple(self.transactions),
            schedule_entries=tuple(self.schedule_entries),
        )


def build_day_totals(
    transactions: Iterable[Transaction],
    schedule_entries: Iterable[ScheduleEntry],
    banks: Sequence[Bank],
    accounts: Sequence[BillingAccount],
    bank_debit_label: str = BANK_DEBIT_LABEL,
) -> Dict[str, DayTotal]:
    """
    Build one DayTotal per calendar day that has data.

    - Transactions land on their own date (the purchase/debit day)
    - Schedule entries land on their withdrawal date, independent of when the
      underlying purchases happened
    - Within a day, items are grouped by settlement bank; groups are ordered by
      bank name, ties by first appearance
    - Transactions whose account/bank no longer exists are skipped

    Returns:
        Dict keyed by ISO date (YYYY-MM-DD), in ascending date order
    """
    banks_by_id = index_by_id(banks)
    accounts_by_id = index_by_id(accounts)
    days: Dict[str, _DayBuilder] = {}

    def day_for(day: date) -> _DayBuilder:
        key = date_key(day)
        if key not in days:
            days[key] = _DayBuilder(day)
        return days[key]

    for transaction in transactions:
        settlement = resolve_settlement(transaction, banks_by_id, accounts_by_id)
        if settlement is None:
            continue
        bank, account = settlement
        payer_label = account.name if account else bank_debit_label
        day_for(transaction.date).add_transaction(transaction, bank, payer_label)

    for entry in schedule_entries:
        day_for(entry.date).add_schedule_entry(entry)

    return {key: days[key].build() for key in sorted(days)}


def build_month_calendar(
    transactions: Iterable[Transaction],
    banks: Sequence[Bank],
    accounts: Sequence[BillingAccount],
    year: int,
    month: int,
    bank_debit_label: str = BANK_DEBIT_LABEL,
) -> Tuple[MonthlyView, Dict[str, DayTotal]]:
    """Monthly view plus the day totals of the transactions dated in that month"""
    transactions = list(transactions)
    view = build_monthly_view(transactions, banks, accounts, year, month, bank_debit_label)
    month_transactions = [t for t in transactions if in_month(t.date, year, month)]
    day_totals = build_day_totals(month_transactions, view.entries, banks, accounts, bank_debit_label)
    return view, day_totals


def month_total(day_totals: Dict[str, DayTotal]) -> int:
    return sum(day.total_amount for day in day_totals.values())


def get_day_total(day_totals: Dict[str, DayTotal], day: date) -> Optional[DayTotal]:
    return day_totals.get(date_key(day))


def has_day_data(day_totals: Dict[str, DayTotal], day: date) -> bool:
    day_total = get_day_total(day_totals, day)
    return day_total.has_data if day_total else False
