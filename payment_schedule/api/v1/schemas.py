"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from payment_schedule.domain.exceptions import InvalidDayRuleError
from payment_schedule.domain.models import (
    Bank,
    BillingAccount,
    DayTotal,
    ConfigurationIssue,
    AccountFix,
    MonthlyView,
    ScheduleEntry,
    ScheduleFilters,
    Transaction,
    format_day_rule,
    parse_day_rule,
)

PaymentType = Literal["card", "bank"]


class BankSchema(BaseModel):
    """Settlement bank"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=50)
    memo: Optional[str] = Field(None, max_length=200)

    def to_domain(self) -> Bank:
        return Bank(id=self.id, name=self.name, memo=self.memo)


class BillingAccountSchema(BaseModel):
    """Credit card and its billing-cycle rules"""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=50)
    bank_id: str = Field(..., min_length=1)
    closing_day: Union[int, str] = Field(..., description="1-31 or 'month-end'")
    payment_day: Union[int, str] = Field(..., description="1-31 or 'month-end'")
    payment_month_shift: int = Field(..., ge=0, le=2, description="0 = same month, 1 = next, 2 = month after")
    weekend_adjustment: bool
    memo: Optional[str] = Field(None, max_length=200)

    @field_validator("closing_day", "payment_day")
    @classmethod
    def normalize_day_rule(cls, value: Union[int, str]) -> str:
        try:
            return format_day_rule(parse_day_rule(value))
        except InvalidDayRuleError as e:
            raise ValueError(str(e)) from e

    def to_domain(self) -> BillingAccount:
        return BillingAccount(
            id=self.id,
            name=self.name,
            bank_id=self.bank_id,
            closing_day=parse_day_rule(self.closing_day),
            payment_day=parse_day_rule(self.payment_day),
            payment_month_shift=self.payment_month_shift,
            weekend_adjustment=self.weekend_adjustment,
            memo=self.memo,
        )


class TransactionSchema(BaseModel):
    """Stored transaction with its withdrawal date already computed"""

    id: str = Field(..., min_length=1)
    date: date
    amount: int = Field(..., gt=0, description="Amount in whole currency units")
    payment_type: PaymentType
    scheduled_pay_date: date
    card_id: Optional[str] = None
    bank_id: Optional[str] = None
    store_name: Optional[str] = Field(None, max_length=100)
    usage: Optional[str] = Field(None, max_length=100)
    memo: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def check_reference(self) -> "TransactionSchema":
        if self.payment_type == "card" and not self.card_id:
            raise ValueError("card transactions require card_id")
        if self.payment_type == "bank" and not self.bank_id:
            raise ValueError("bank transactions require bank_id")
        return self

    def to_domain(self) -> Transaction:
        return Transaction(**self.model_dump())


class ScheduleDataRequest(BaseModel):
    """Reference data and transactions for one month"""

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)
    banks: List[BankSchema] = Field(default_factory=list)
    accounts: List[BillingAccountSchema] = Field(default_factory=list)
    transactions: List[TransactionSchema] = Field(default_factory=list)
    version: Optional[str] = Field(None, description="Caller's data version; bump to invalidate cached views")

    def to_domain(self) -> Tuple[List[Bank], List[BillingAccount], List[Transaction]]:
        return (
            [b.to_domain() for b in self.banks],
            [a.to_domain() for a in self.accounts],
            [t.to_domain() for t in self.transactions],
        )


class ScheduleFiltersSchema(BaseModel):
    """Optional monthly view filters"""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_amount: Optional[int] = Field(None, ge=0)
    max_amount: Optional[int] = Field(None, ge=0)
    search_text: Optional[str] = None
    bank_ids: List[str] = Field(default_factory=list)
    payment_types: List[PaymentType] = Field(default_factory=list)

    def to_domain(self) -> ScheduleFilters:
        return ScheduleFilters(
            start_date=self.start_date,
            end_date=self.end_date,
            min_amount=self.min_amount,
            max_amount=self.max_amount,
            search_text=self.search_text,
            bank_ids=tuple(self.bank_ids),
            payment_types=tuple(self.payment_types),
        )


class MonthlyViewRequest(ScheduleDataRequest):
    """Request body for POST /v1/schedule/monthly-view"""

    filters: Optional[ScheduleFiltersSchema] = None


class ScheduledDateRequest(BaseModel):
    """Request body for POST /v1/schedule/scheduled-date"""

    transaction_date: date
    payment_type: PaymentType
    account: Optional[BillingAccountSchema] = None


class ScheduledDateResponse(BaseModel):
    """Withdrawal date to persist on a new transaction"""

    scheduled_pay_date: date
    closing_date: Optional[date] = None
    original_payment_date: Optional[date] = None
    is_adjusted: bool = False


class BankPaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bank_id: str
    bank_name: str
    amount: int
    transaction_count: int


class ScheduleEntrySchema(BaseModel):
    """One row of the cross table"""

    key: str
    date: date
    payment_type: PaymentType
    payer_id: str
    label: str
    total_amount: int
    bank_payments: List[BankPaymentSchema]
    transaction_ids: List[str]
    closing_rule: Optional[str] = None
    payment_rule: Optional[str] = None

    @classmethod
    def from_domain(cls, entry: ScheduleEntry) -> "ScheduleEntrySchema":
        return cls(
            key=entry.key,
            date=entry.date,
            payment_type=entry.payment_type,
            payer_id=entry.payer_id,
            label=entry.label,
            total_amount=entry.total_amount,
            bank_payments=[BankPaymentSchema.model_validate(p) for p in entry.bank_payments],
            transaction_ids=[t.id for t in entry.transactions],
            closing_rule=entry.closing_rule,
            payment_rule=entry.payment_rule,
        )


class MonthlyViewResponse(BaseModel):
    """Response for POST /v1/schedule/monthly-view"""

    year: int
    month: int
    entries: List[ScheduleEntrySchema]
    bank_totals: Dict[str, int]
    month_total: int
    unique_banks: List[BankSchema]
    skipped_transaction_ids: List[str]

    @classmethod
    def from_domain(cls, view: MonthlyView) -> "MonthlyViewResponse":
        return cls(
            year=view.year,
            month=view.month,
            entries=[ScheduleEntrySchema.from_domain(e) for e in view.entries],
            bank_totals=dict(view.bank_totals),
            month_total=view.month_total,
            unique_banks=[BankSchema.model_validate(b) for b in view.unique_banks],
            skipped_transaction_ids=list(view.skipped_transaction_ids),
        )


class DayItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    source: Literal["transaction", "schedule"]
    amount: int
    payment_type: PaymentType
    bank_id: str
    bank_name: str
    payer_label: str
    store_name: Optional[str] = None


class BankGroupSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bank_id: str
    bank_name: str
    total_amount: int
    item_count: int
    items: List[DayItemSchema]


class DayTotalSchema(BaseModel):
    """One calendar cell"""

    date: date
    total_amount: int
    transaction_count: int
    schedule_count: int
    transaction_total: int
    card_transaction_total: int
    bank_transaction_total: int
    schedule_total: int
    card_schedule_total: int
    bank_schedule_total: int
    has_transactions: bool
    has_schedule: bool
    has_data: bool
    bank_groups: List[BankGroupSchema]
    transaction_ids: List[str]
    schedule_entry_keys: List[str]

    @classmethod
    def from_domain(cls, day: DayTotal) -> "DayTotalSchema":
        return cls(
            date=day.date,
            total_amount=day.total_amount,
            transaction_count=day.transaction_count,
            schedule_count=day.schedule_count,
            transaction_total=day.transaction_total,
            card_transaction_total=day.card_transaction_total,
            bank_transaction_total=day.bank_transaction_total,
            schedule_total=day.schedule_total,
            card_schedule_total=day.card_schedule_total,
            bank_schedule_total=day.bank_schedule_total,
            has_transactions=day.has_transactions,
            has_schedule=day.has_schedule,
            has_data=day.has_data,
            bank_groups=[BankGroupSchema.model_validate(g) for g in day.bank_groups],
            transaction_ids=[t.id for t in day.transactions],
            schedule_entry_keys=[e.key for e in day.schedule_entries],
        )


class DayTotalsResponse(BaseModel):
    """Response for POST /v1/calendar/day-totals"""

    year: int
    month: int
    schedule_month_total: int
    day_totals: Dict[str, DayTotalSchema]
    skipped_transaction_ids: List[str]


class AuditRequest(BaseModel):
    """Request body for POST /v1/audit/report"""

    accounts: List[BillingAccountSchema] = Field(default_factory=list)
    transactions: List[TransactionSchema] = Field(default_factory=list)


class AccountFixSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    weekend_adjustment: Optional[bool] = None

    def to_domain(self) -> AccountFix:
        return AccountFix(weekend_adjustment=self.weekend_adjustment)


class ValidateFixesRequest(BaseModel):
    """Request body for POST /v1/audit/validate"""

    accounts: List[BillingAccountSchema] = Field(default_factory=list)
    fixes: Dict[str, AccountFixSchema]


class AuditSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_accounts: int
    weekend_adjusted_accounts: int
    month_end_payment_accounts: int
    problematic_accounts: int


class ConfigurationIssueSchema(BaseModel):
    account_id: str
    account_name: str
    payment_day: str
    weekend_adjustment: bool
    recommended_weekend_adjustment: bool
    description: str

    @classmethod
    def from_domain(cls, issue: ConfigurationIssue) -> "ConfigurationIssueSchema":
        return cls(
            account_id=issue.account_id,
            account_name=issue.account_name,
            payment_day=format_day_rule(issue.payment_day),
            weekend_adjustment=issue.weekend_adjustment,
            recommended_weekend_adjustment=issue.recommended_weekend_adjustment,
            description=issue.description,
        )


class AccountSettingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_day: str
    weekend_adjustment: bool


class FixRecommendationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: str
    account_name: str
    current_settings: AccountSettingsSchema
    recommended_settings: AccountFixSchema
    reason: str


class AffectedTransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    account_id: str
    current_scheduled_date: date
    recalculated_date: date
    day_difference: int


class FixImpactSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_transactions: int
    earlier_payments: int
    later_payments: int
    unchanged_payments: int
    average_days_difference: float
    max_days_difference: int


class AuditReportResponse(BaseModel):
    """Response for POST /v1/audit/report"""

    summary: AuditSummarySchema
    issues: List[ConfigurationIssueSchema]
    recommendations: List[FixRecommendationSchema]
    affected_transactions: List[AffectedTransactionSchema]
    impact: FixImpactSchema
    report: str


class FixValidationResponse(BaseModel):
    """Response for POST /v1/audit/validate"""

    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    errors: List[str]
    warnings: List[str]
