"""Monthly withdrawal schedule: transactions grouped by date, payer and bank"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from payment_schedule.domain.models import (
    CARD,
    BANK,
    Bank,
    BankPayment,
    BillingAccount,
    MonthlyView,
    ScheduleEntry,
    Transaction,
)
from payment_schedule.domain.scheduling import describe_closing_rule, describe_payment_rule
from payment_schedule.utils.collation import collation_key
from payment_schedule.utils.date_utils import in_month

BANK_DEBIT_LABEL = "bank debit"
BANK_DEBIT_PAYER_ID = "bank-debit"


def index_by_id(items: Iterable) -> Dict[str, object]:
    return {item.id: item for item in items}


def resolve_settlement(
    transaction: Transaction,
    banks_by_id: Dict[str, Bank],
    accounts_by_id: Dict[str, BillingAccount],
) -> Optional[Tuple[Bank, Optional[BillingAccount]]]:
    """
    Bank a transaction is withdrawn from, plus its billing account for card payments.

    Returns None when the account or bank has since been deleted; callers skip
    such transactions instead of failing.
    """
    if transaction.payment_type == CARD:
        account = accounts_by_id.get(transaction.card_id) if transaction.card_id else None
        if account is None:
            return None
        bank = banks_by_id.get(account.bank_id)
        if bank is None:
            return None
        return bank, account

    if transaction.payment_type == BANK:
        bank = banks_by_id.get(transaction.bank_id) if transaction.bank_id else None
        if bank is None:
            return None
        return bank, None

    return None


@dataclass
class _EntryBuilder:
    date: date
    payment_type: str
    payer_id: str
    label: str
    account: Optional[BillingAccount] = None
    transactions: List[Transaction] = field(default_factory=list)
    # bank_id -> (bank_name, amount, count)
    by_bank: Dict[str, Tuple[str, int, int]] = field(default_factory=dict)

    def add(self, transaction: Transaction, bank: Bank) -> None:
        self.transactions.append(transaction)
        _, amount, count = self.by_bank.get(bank.id, (bank.name, 0, 0))
        self.by_bank[bank.id] = (bank.name, amount + transaction.amount, count + 1)

    def build(self) -> ScheduleEntry:
        bank_payments = sorted(
            (
                BankPayment(bank_id=bank_id, bank_name=name, amount=amount, transaction_count=count)
                for bank_id, (name, amount, count) in self.by_bank.items()
            ),
            key=lambda p: (collation_key(p.bank_name), p.bank_id),
        )
        return ScheduleEntry(
            date=self.date,
            payment_type=self.payment_type,
            payer_id=self.payer_id,
            label=self.label,
            total_amount=sum(t.amount for t in self.transactions),
            bank_payments=tuple(bank_payments),
            transactions=tuple(self.transactions),
            closing_rule=describe_closing_rule(self.account) if self.account else None,
            payment_rule=describe_payment_rule(self.account) if self.account else None,
        )


def _entry_sort_key(entry: ScheduleEntry):
    return entry.date, collation_key(entry.label), entry.payer_id


def calculate_bank_totals(entries: Iterable[ScheduleEntry]) -> Dict[str, int]:
    """Total withdrawn per bank across entries"""
    totals: Dict[str, int] = {}
    for entry in entries:
        for payment in entry.bank_payments:
            totals[payment.bank_id] = totals.get(payment.bank_id, 0) + payment.amount
    return totals


def extract_unique_banks(entries: Iterable[ScheduleEntry], banks: Sequence[Bank]) -> Tuple[Bank, ...]:
    """Banks that appear in the entries, sorted by name (column order of the cross table)"""
    bank_ids = {payment.bank_id for entry in entries for payment in entry.bank_payments}
    return tuple(
        sorted(
            (bank for bank in banks if bank.id in bank_ids),
            key=lambda b: (collation_key(b.name), b.id),
        )
    )


def build_monthly_view(
    transactions: Iterable[Transaction],
    banks: Sequence[Bank],
    accounts: Sequence[BillingAccount],
    year: int,
    month: int,
    bank_debit_label: str = BANK_DEBIT_LABEL,
) -> MonthlyView:
    """
    Build the cross table of withdrawals for one month.

    - Only transactions whose stored scheduled_pay_date is in (year, month)
    - One entry per (withdrawal date, payer); the payer is the billing account
      for card purchases and a single direct-debit payer for bank debits
    - Entries sorted by date, then label, then payer id
    - Transactions pointing at deleted accounts/banks are skipped and their ids
      reported in skipped_transaction_ids

    Never raises for empty input; an empty month yields zero totals.
    """
    banks = list(banks)
    banks_by_id = index_by_id(banks)
    accounts_by_id = index_by_id(accounts)

    builders: Dict[Tuple[date, str], _EntryBuilder] = {}
    skipped: List[str] = []

    for transaction in transactions:
        if not in_month(transaction.scheduled_pay_date, year, month):
            continue

        settlement = resolve_settlement(transaction, banks_by_id, accounts_by_id)
        if settlement is None:
            skipped.append(transaction.id)
            continue

        bank, account = settlement
        payer_id = account.id if account else BANK_DEBIT_PAYER_ID
        key = (transaction.scheduled_pay_date, payer_id)

        builder = builders.get(key)
        if builder is None:
            builder = _EntryBuilder(
                date=transaction.scheduled_pay_date,
                payment_type=transaction.payment_type,
                payer_id=payer_id,
                label=account.name if account else bank_debit_label,
                account=account,
            )
            builders[key] = builder

        builder.add(transaction, bank)

    entries = tuple(sorted((b.build() for b in builders.values()), key=_entry_sort_key))

    return MonthlyView(
        year=year,
        month=month,
        entries=entries,
        bank_totals=calculate_bank_totals(entries),
        month_total=sum(entry.total_amount for entry in entries),
        unique_banks=extract_unique_banks(entries, banks),
        skipped_transaction_ids=tuple(skipped),
    )
