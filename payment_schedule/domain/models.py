"""Domain models - pure Python dataclasses representing billing entities and derived views"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Tuple, Union

from payment_schedule.domain.exceptions import InvalidDayRuleError, InvalidPaymentShiftError

CARD = "card"
BANK = "bank"
PAYMENT_TYPES = (CARD, BANK)
PAYMENT_MONTH_SHIFTS = (0, 1, 2)

TRANSACTION_SOURCE = "transaction"
SCHEDULE_SOURCE = "schedule"

MONTH_END_SENTINELS = ("month-end", "月末")


@dataclass(frozen=True)
class NumericDay:
    """Fixed day of month, clamped to the last day of shorter months"""

    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.day <= 31:
            raise InvalidDayRuleError(f"Day of month must be 1-31, got {self.day}")


@dataclass(frozen=True)
class MonthEnd:
    """Last calendar day of whichever month the rule is resolved for"""


MONTH_END = MonthEnd()

DayRule = Union[NumericDay, MonthEnd]


def parse_day_rule(value: Any) -> DayRule:
    """
    Convert a stored closing/payment day into a DayRule.

    Accepts an existing rule, an int, a numeric string ("27") or one of the
    month-end sentinels ("month-end", "月末").

    Raises:
        InvalidDayRuleError: For anything else, including out-of-range days
    """
    if isinstance(value, (NumericDay, MonthEnd)):
        return value

    # bool is an int subclass; True/False are never valid days
    if isinstance(value, bool):
        raise InvalidDayRuleError(f"Invalid day rule: {value!r}")

    if isinstance(value, int):
        return NumericDay(value)

    if isinstance(value, str):
        text = value.strip()
        if text.lower() in MONTH_END_SENTINELS:
            return MONTH_END
        if text.isdigit():
            return NumericDay(int(text))

    raise InvalidDayRuleError(f"Invalid day rule: {value!r}. Must be 1-31 or 'month-end'")


def format_day_rule(rule: DayRule) -> str:
    """Render a rule the way it is stored ("27" or "month-end")"""
    if isinstance(rule, MonthEnd):
        return "month-end"
    return str(rule.day)


@dataclass
class Bank:
    """Settlement bank; grouping key for withdrawals"""

    id: str
    name: str
    memo: Optional[str] = None


@dataclass
class BillingAccount:
    """Credit card with its billing-cycle rules"""

    id: str
    name: str
    bank_id: str
    closing_day: DayRule
    payment_day: DayRule
    payment_month_shift: int  # 0 = same month, 1 = next month, 2 = month after next
    weekend_adjustment: bool
    memo: Optional[str] = None

    def __post_init__(self) -> None:
        self.closing_day = parse_day_rule(self.closing_day)
        self.payment_day = parse_day_rule(self.payment_day)
        if isinstance(self.payment_month_shift, bool) or self.payment_month_shift not in PAYMENT_MONTH_SHIFTS:
            raise InvalidPaymentShiftError(
                f"Payment month shift must be 0, 1 or 2, got {self.payment_month_shift!r}"
            )


@dataclass
class Transaction:
    """Recorded purchase or direct debit with its withdrawal date fixed at creation"""

    id: str
    date: date
    amount: int
    payment_type: str  # "card" or "bank"
    scheduled_pay_date: date
    card_id: Optional[str] = None
    bank_id: Optional[str] = None
    store_name: Optional[str] = None
    usage: Optional[str] = None
    memo: Optional[str] = None


@dataclass(frozen=True)
class PaymentCalculation:
    """Breakdown of how a card transaction's withdrawal date was derived"""

    scheduled_pay_date: date
    closing_date: date
    original_payment_date: date
    is_adjusted: bool


@dataclass(frozen=True)
class BankPayment:
    """Amount withdrawn from one bank within a schedule entry"""

    bank_id: str
    bank_name: str
    amount: int
    transaction_count: int


@dataclass(frozen=True)
class ScheduleEntry:
    """Transactions sharing a withdrawal date and payer"""

    date: date
    payment_type: str
    payer_id: str  # billing account id, or the direct-debit payer id
    label: str
    total_amount: int
    bank_payments: Tuple[BankPayment, ...]
    transactions: Tuple[Transaction, ...]
    closing_rule: Optional[str] = None
    payment_rule: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.date.isoformat()}:{self.payer_id}"

    def amount_for_bank(self, bank_id: str) -> int:
        for payment in self.bank_payments:
            if payment.bank_id == bank_id:
                return payment.amount
        return 0


@dataclass(frozen=True)
class MonthlyView:
    """Month-scoped cross table of withdrawal dates by bank"""

    year: int
    month: int
    entries: Tuple[ScheduleEntry, ...]
    bank_totals: Dict[str, int]
    month_total: int
    unique_banks: Tuple[Bank, ...]
    skipped_transaction_ids: Tuple[str, ...] = ()

    @property
    def transaction_count(self) -> int:
        return sum(len(entry.transactions) for entry in self.entries)


@dataclass(frozen=True)
class ScheduleFilters:
    """Optional narrowing criteria applied to a monthly view"""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_amount: Optional[int] = None
    max_amount: Optional[int] = None
    search_text: Optional[str] = None
    bank_ids: Tuple[str, ...] = ()
    payment_types: Tuple[str, ...] = ()

    @property
    def is_active(self) -> bool:
        return bool(
            self.start_date
            or self.end_date
            or self.min_amount is not None
            or self.max_amount is not None
            or (self.search_text and self.search_text.strip())
            or self.bank_ids
            or self.payment_types
        )


@dataclass(frozen=True)
class DayItem:
    """Single line shown under a bank on a calendar day"""

    id: str
    source: str  # "transaction" or "schedule"
    amount: int
    payment_type: str
    bank_id: str
    bank_name: str
    payer_label: str
    store_name: Optional[str] = None


@dataclass(frozen=True)
class BankGroup:
    """Calendar-day items settling through one bank"""

    bank_id: str
    bank_name: str
    total_amount: int
    item_count: int
    items: Tuple[DayItem, ...]


@dataclass(frozen=True)
class DayTotal:
    """Actual transactions and projected withdrawals for one calendar day"""

    date: date
    transaction_count: int
    schedule_count: int
    transaction_total: int
    card_transaction_total: int
    bank_transaction_total: int
    schedule_total: int
    card_schedule_total: int
    bank_schedule_total: int
    bank_groups: Tuple[BankGroup, ...]
    transactions: Tuple[Transaction, ...]
    schedule_entries: Tuple[ScheduleEntry, ...]

    @property
    def key(self) -> str:
        return self.date.isoformat()

    @property
    def total_amount(self) -> int:
        return self.transaction_total + self.schedule_total

    @property
    def has_transactions(self) -> bool:
        return self.transaction_count > 0

    @property
    def has_card_transactions(self) -> bool:
        return any(t.payment_type == CARD for t in self.transactions)

    @property
    def has_bank_transactions(self) -> bool:
        return any(t.payment_type == BANK for t in self.transactions)

    @property
    def has_schedule(self) -> bool:
        return self.schedule_count > 0

    @property
    def has_data(self) -> bool:
        return self.has_transactions or self.has_schedule


@dataclass(frozen=True)
class PaymentTiming:
    """Purchase-to-withdrawal delay for an account across one month"""

    average_delay_days: int
    min_delay_days: int
    max_delay_days: int
    payment_pattern: str


@dataclass(frozen=True)
class ConfigurationCheck:
    """Advisory review of a single account's rules"""

    is_valid: bool
    warnings: Tuple[str, ...]
    suggestions: Tuple[str, ...]


@dataclass(frozen=True)
class ConfigurationIssue:
    """Account whose month-end payment day can be pushed into the next month"""

    account_id: str
    account_name: str
    payment_day: DayRule
    weekend_adjustment: bool
    recommended_weekend_adjustment: bool
    description: str


@dataclass(frozen=True)
class AccountSettings:
    """Subset of account settings the auditor reports on"""

    payment_day: str
    weekend_adjustment: bool


@dataclass(frozen=True)
class AccountFix:
    """Proposed change to an account; unset fields are left as they are"""

    weekend_adjustment: Optional[bool] = None


@dataclass(frozen=True)
class FixRecommendation:
    """Recommended correction for one problematic account"""

    account_id: str
    account_name: str
    current_settings: AccountSettings
    recommended_settings: AccountFix
    reason: str


@dataclass(frozen=True)
class AffectedTransaction:
    """Withdrawal date delta a fix would cause for one stored transaction"""

    transaction_id: str
    account_id: str
    current_scheduled_date: date
    recalculated_date: date
    day_difference: int


@dataclass(frozen=True)
class FixValidation:
    """Outcome of checking proposed fixes before they are applied"""

    is_valid: bool
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]


@dataclass(frozen=True)
class AuditSummary:
    """Account counts behind an audit"""

    total_accounts: int
    weekend_adjusted_accounts: int
    month_end_payment_accounts: int
    problematic_accounts: int


@dataclass(frozen=True)
class AuditAnalysis:
    """Output of scanning accounts for the month-end/weekend conflict"""

    problematic_accounts: Tuple[BillingAccount, ...]
    issues: Tuple[ConfigurationIssue, ...]
    summary: AuditSummary


@dataclass(frozen=True)
class FixImpact:
    """Aggregate effect of a set of recalculated withdrawal dates"""

    total_transactions: int
    earlier_payments: int
    later_payments: int
    unchanged_payments: int
    average_days_difference: float
    max_days_difference: int


@dataclass(frozen=True)
class FixPreview:
    """Everything an operator needs to approve a repair pass"""

    recommendations: Tuple[FixRecommendation, ...]
    fixes: Dict[str, AccountFix]
    affected_transactions: Tuple[AffectedTransaction, ...]
    impact: FixImpact
