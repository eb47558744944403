"""
Configuration audit for month-end payment days combined with weekend adjustment.

A month-end payment day that lands on a Saturday/Sunday is moved to the next
Monday, which is in the following month. Accounts configured that way get
withdrawals scheduled in the wrong month. The functions below find those
accounts, propose turning weekend adjustment off, and show what that would do
to already-scheduled transactions. Nothing here mutates accounts or
transactions; applying a fix is the caller's job.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Sequence

from payment_schedule.domain.models import (
    CARD,
    AccountFix,
    AccountSettings,
    AffectedTransaction,
    AuditAnalysis,
    AuditSummary,
    BillingAccount,
    ConfigurationIssue,
    FixImpact,
    FixPreview,
    FixRecommendation,
    FixValidation,
    MonthEnd,
    Transaction,
    format_day_rule,
)
from payment_schedule.domain.schedule_view import index_by_id
from payment_schedule.domain.scheduling import compute_scheduled_date

MONTH_END_WEEKEND_REASON = (
    "Month-end payment days should keep the actual last day of the month; "
    "weekend adjustment moves them into the next month, so disable it"
)


def is_problematic(account: BillingAccount) -> bool:
    return isinstance(account.payment_day, MonthEnd) and account.weekend_adjustment


def analyze(accounts: Iterable[BillingAccount]) -> AuditAnalysis:
    """Flag exactly the accounts with a month-end payment day and weekend adjustment on"""
    accounts = list(accounts)
    problematic = tuple(a for a in accounts if is_problematic(a))

    issues = tuple(
        ConfigurationIssue(
            account_id=a.id,
            account_name=a.name,
            payment_day=a.payment_day,
            weekend_adjustment=a.weekend_adjustment,
            recommended_weekend_adjustment=False,
            description=f"{a.name}: month-end payment with weekend adjustment enabled",
        )
        for a in problematic
    )

    summary = AuditSummary(
        total_accounts=len(accounts),
        weekend_adjusted_accounts=sum(1 for a in accounts if a.weekend_adjustment),
        month_end_payment_accounts=sum(1 for a in accounts if isinstance(a.payment_day, MonthEnd)),
        problematic_accounts=len(problematic),
    )

    return AuditAnalysis(problematic_accounts=problematic, issues=issues, summary=summary)


def recommend_fixes(accounts: Iterable[BillingAccount]) -> List[FixRecommendation]:
    return [
        FixRecommendation(
            account_id=a.id,
            account_name=a.name,
            current_settings=AccountSettings(
                payment_day=format_day_rule(a.payment_day),
                weekend_adjustment=a.weekend_adjustment,
            ),
            recommended_settings=AccountFix(weekend_adjustment=False),
            reason=MONTH_END_WEEKEND_REASON,
        )
        for a in accounts
        if is_problematic(a)
    ]


def create_fixes(accounts: Iterable[BillingAccount]) -> Dict[str, AccountFix]:
    """Fix set for every problematic account (account id -> change)"""
    return {a.id: AccountFix(weekend_adjustment=False) for a in accounts if is_problematic(a)}


def apply_fix(account: BillingAccount, fix: AccountFix) -> BillingAccount:
    """New account record with the fix applied; the original is left alone"""
    if fix.weekend_adjustment is None:
        return replace(account)
    return replace(account, weekend_adjustment=fix.weekend_adjustment)


def compute_affected_transactions(
    transactions: Iterable[Transaction],
    fixes: Mapping[str, AccountFix],
    accounts: Sequence[BillingAccount],
) -> List[AffectedTransaction]:
    """
    Recalculate every card transaction of a fixed account under its new rules.

    day_difference is recalculated minus stored date, so negative means the
    withdrawal moves earlier. Unchanged transactions are included with a
    difference of 0. Fixes for unknown accounts are ignored here; see
    validate_fixes.
    """
    accounts_by_id = index_by_id(accounts)
    fixed_accounts = {
        account_id: apply_fix(accounts_by_id[account_id], fix)
        for account_id, fix in fixes.items()
        if account_id in accounts_by_id
    }

    affected = []
    for t in transactions:
        if t.payment_type != CARD or t.card_id not in fixed_accounts:
            continue

        recalculated = compute_scheduled_date(t.date, fixed_accounts[t.card_id])
        affected.append(
            AffectedTransaction(
                transaction_id=t.id,
                account_id=t.card_id,
                current_scheduled_date=t.scheduled_pay_date,
                recalculated_date=recalculated,
                day_difference=(recalculated - t.scheduled_pay_date).days,
            )
        )

    return affected


def validate_fixes(fixes: Mapping[str, AccountFix], accounts: Sequence[BillingAccount]) -> FixValidation:
    """
    Check proposed fixes before applying them.

    - Unknown account id: error (fix set is invalid)
    - Disabling weekend adjustment on a non-month-end payment day: warning only
    """
    accounts_by_id = index_by_id(accounts)
    errors = []
    warnings = []

    for account_id, fix in fixes.items():
        account = accounts_by_id.get(account_id)
        if account is None:
            errors.append(f"Account {account_id} not found")
            continue

        if fix.weekend_adjustment is False and not isinstance(account.payment_day, MonthEnd):
            warnings.append(
                f"Account {account.name}: disabling weekend adjustment for non-month-end "
                f"payment day ({format_day_rule(account.payment_day)})"
            )

    return FixValidation(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def estimate_fix_impact(affected: Sequence[AffectedTransaction]) -> FixImpact:
    differences = [abs(a.day_difference) for a in affected]
    average = sum(differences) / len(differences) if differences else 0.0

    return FixImpact(
        total_transactions=len(affected),
        earlier_payments=sum(1 for a in affected if a.day_difference < 0),
        later_payments=sum(1 for a in affected if a.day_difference > 0),
        unchanged_payments=sum(1 for a in affected if a.day_difference == 0),
        average_days_difference=round(average, 2),
        max_days_difference=max(differences) if differences else 0,
    )


def generate_fix_preview(
    accounts: Sequence[BillingAccount],
    transactions: Iterable[Transaction],
) -> FixPreview:
    """Recommendations, fix set, per-transaction deltas and their impact in one pass"""
    fixes = create_fixes(accounts)
    affected = compute_affected_transactions(transactions, fixes, accounts)

    return FixPreview(
        recommendations=tuple(recommend_fixes(accounts)),
        fixes=fixes,
        affected_transactions=tuple(affected),
        impact=estimate_fix_impact(affected),
    )


def create_fix_report(accounts: Sequence[BillingAccount], transactions: Iterable[Transaction]) -> str:
    """Plain-text report for an operator reviewing the repair"""
    summary = analyze(accounts).summary
    preview = generate_fix_preview(accounts, transactions)
    impact = preview.impact
    moved = impact.earlier_payments + impact.later_payments

    lines = [
        "Data fix report",
        "===============",
        "",
        "## Analysis",
        f"Total accounts: {summary.total_accounts}",
        f"Accounts with weekend adjustment: {summary.weekend_adjusted_accounts}",
        f"Accounts paying at month-end: {summary.month_end_payment_accounts}",
        f"Problematic accounts (month-end + weekend adjustment): {summary.problematic_accounts}",
        "",
        "## Fix targets",
        f"- Accounts to fix: {len(preview.recommendations)}",
        f"- Transactions recalculated: {impact.total_transactions}",
        "",
        "## Impact",
        f"- Earlier withdrawals: {impact.earlier_payments}",
        f"- Later withdrawals: {impact.later_payments}",
        f"- Unchanged withdrawals: {impact.unchanged_payments}",
        f"- Average change (days): {impact.average_days_difference}",
        f"- Largest change (days): {impact.max_days_difference}",
        "",
        "## Recommendations",
        f"- Disable weekend adjustment on {len(preview.recommendations)} account(s)",
        f"- Reschedule {moved} transaction(s) after approval",
    ]
    return "\n".join(lines)
