"""Unit tests for the month-end/weekend configuration audit"""

from datetime import date
from payment_schedule.domain.audit import (
    analyze,
    apply_fix,
    compute_affected_transactions,
    create_fix_report,
    create_fixes,
    estimate_fix_impact,
    generate_fix_preview,
    recommend_fixes,
    validate_fixes,
)
from payment_schedule.domain.models import MONTH_END, AccountFix, AffectedTransaction, Transaction


def test_analyze_flags_month_end_with_weekend_adjustment(accounts):
    """Test only the month-end + weekend adjustment account is flagged"""
    analysis = analyze(accounts)

    assert [a.id for a in analysis.problematic_accounts] == ["card-c"]
    assert analysis.summary.total_accounts == 3
    assert analysis.summary.weekend_adjusted_accounts == 2
    assert analysis.summary.month_end_payment_accounts == 1
    assert analysis.summary.problematic_accounts == 1

    [issue] = analysis.issues
    assert issue.payment_day is MONTH_END
    assert issue.recommended_weekend_adjustment is False


def test_analyze_empty():
    """Test no accounts means nothing to fix"""
    analysis = analyze([])
    assert analysis.problematic_accounts == ()
    assert analysis.summary.total_accounts == 0


def test_recommend_fixes(accounts):
    """Test recommendation turns weekend adjustment off"""
    [recommendation] = recommend_fixes(accounts)

    assert recommendation.account_id == "card-c"
    assert recommendation.current_settings.payment_day == "month-end"
    assert recommendation.current_settings.weekend_adjustment is True
    assert recommendation.recommended_settings == AccountFix(weekend_adjustment=False)


def test_apply_fix_leaves_original_untouched(accounts):
    """Test fixes produce a new account record"""
    original = accounts[2]

    fixed = apply_fix(original, AccountFix(weekend_adjustment=False))

    assert fixed.weekend_adjustment is False
    assert original.weekend_adjustment is True
    assert apply_fix(original, AccountFix()) == original


def test_affected_transactions_compare_stored_dates(transactions, accounts):
    """Test May 31 (Saturday) moves back from June 2; unaffected dates report 0"""
    affected = compute_affected_transactions(transactions, create_fixes(accounts), accounts)

    by_id = {a.transaction_id: a for a in affected}
    assert set(by_id) == {"tx-5", "tx-6"}

    assert by_id["tx-6"].current_scheduled_date == date(2025, 6, 2)
    assert by_id["tx-6"].recalculated_date == date(2025, 5, 31)
    assert by_id["tx-6"].day_difference == -2

    assert by_id["tx-5"].day_difference == 0


def test_affected_transactions_use_stored_not_recomputed(accounts):
    """Test the delta is measured from whatever date was persisted"""
    stale = Transaction("s", date(2025, 4, 10), 100, "card", date(2025, 6, 5), card_id="card-c")

    [affected] = compute_affected_transactions([stale], {"card-c": AccountFix(weekend_adjustment=False)}, accounts)

    assert affected.day_difference == -5


def test_affected_transactions_ignore_unknown_accounts(transactions, accounts):
    """Test fixes for missing accounts produce no rows"""
    assert compute_affected_transactions(transactions, {"nope": AccountFix(False)}, accounts) == []


def test_validate_fixes(accounts):
    """Test unknown ids are errors; non-month-end disable is a warning"""
    validation = validate_fixes(
        {
            "card-c": AccountFix(weekend_adjustment=False),
            "card-a": AccountFix(weekend_adjustment=False),
            "missing": AccountFix(weekend_adjustment=False),
        },
        accounts,
    )

    assert validation.is_valid is False
    assert validation.errors == ("Account missing not found",)
    assert len(validation.warnings) == 1
    assert "Visa Gold" in validation.warnings[0]
    assert "(27)" in validation.warnings[0]


def test_validate_recommended_fixes_are_clean(accounts):
    """Test the auditor's own fix set passes validation"""
    validation = validate_fixes(create_fixes(accounts), accounts)

    assert validation.is_valid is True
    assert validation.errors == ()
    assert validation.warnings == ()


def test_estimate_fix_impact():
    """Test impact counts and absolute averages"""
    affected = [
        AffectedTransaction("a", "c", date(2025, 6, 2), date(2025, 5, 31), -2),
        AffectedTransaction("b", "c", date(2025, 7, 31), date(2025, 7, 31), 0),
        AffectedTransaction("c", "c", date(2025, 7, 1), date(2025, 7, 2), 1),
    ]

    impact = estimate_fix_impact(affected)

    assert impact.total_transactions == 3
    assert impact.earlier_payments == 1
    assert impact.later_payments == 1
    assert impact.unchanged_payments == 1
    assert impact.average_days_difference == 1.0
    assert impact.max_days_difference == 2


def test_estimate_fix_impact_empty():
    """Test no affected transactions"""
    impact = estimate_fix_impact([])
    assert impact.total_transactions == 0
    assert impact.average_days_difference == 0.0
    assert impact.max_days_difference == 0


def test_generate_fix_preview(transactions, accounts):
    """Test preview bundles recommendations, fixes and impact"""
    preview = generate_fix_preview(accounts, transactions)

    assert list(preview.fixes) == ["card-c"]
    assert len(preview.recommendations) == 1
    assert preview.impact.total_transactions == 2
    assert preview.impact.earlier_payments == 1
    assert preview.impact.unchanged_payments == 1


def test_create_fix_report(transactions, accounts):
    """Test report text carries the key figures"""
    report = create_fix_report(accounts, transactions)

    assert report.startswith("Data fix report")
    assert "Problematic accounts (month-end + weekend adjustment): 1" in report
    assert "- Earlier withdrawals: 1" in report
    assert "- Reschedule 1 transaction(s) after approval" in report


def test_audit_is_read_only(transactions, accounts):
    """Test nothing is mutated by a full preview"""
    stored = [t.scheduled_pay_date for t in transactions]

    generate_fix_preview(accounts, transactions)

    assert [t.scheduled_pay_date for t in transactions] == stored
    assert accounts[2].weekend_adjustment is True
