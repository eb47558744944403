"""POST /v1/audit/* - billing configuration audit endpoints"""

import time
import logging
from fastapi import APIRouter, HTTPException, Request

from payment_schedule.api.v1.schemas import (
    AffectedTransactionSchema,
    AuditReportResponse,
    AuditRequest,
    AuditSummarySchema,
    ConfigurationIssueSchema,
    FixImpactSchema,
    FixRecommendationSchema,
    FixValidationResponse,
    ValidateFixesRequest,
)
from payment_schedule.api.dependencies import get_request_id
from payment_schedule.domain.audit import analyze, create_fix_report, generate_fix_preview, validate_fixes
from payment_schedule.infrastructure.observability.logging import log_audit
from payment_schedule.infrastructure.observability.metrics import record_audit

router = APIRouter()


@router.post("/audit/report", response_model=AuditReportResponse)
def create_audit_report(request_body: AuditRequest, request: Request):
    """
    Audit account configurations and preview the repair.

    Read-only: nothing is changed. Affected transactions compare the stored
    withdrawal date against the date the fixed configuration would give.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        accounts = [a.to_domain() for a in request_body.accounts]
        transactions = [t.to_domain() for t in request_body.transactions]

        analysis = analyze(accounts)
        preview = generate_fix_preview(accounts, transactions)
        report = create_fix_report(accounts, transactions)

    except Exception as e:
        logging.error(f"Audit failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_audit(analysis.summary.problematic_accounts)
    log_audit(
        request_id,
        analysis.summary.total_accounts,
        analysis.summary.problematic_accounts,
        len(preview.affected_transactions),
        (time.time() - start_time) * 1000,
    )

    return AuditReportResponse(
        summary=AuditSummarySchema.model_validate(analysis.summary),
        issues=[ConfigurationIssueSchema.from_domain(i) for i in analysis.issues],
        recommendations=[FixRecommendationSchema.model_validate(r) for r in preview.recommendations],
        affected_transactions=[AffectedTransactionSchema.model_validate(a) for a in preview.affected_transactions],
        impact=FixImpactSchema.model_validate(preview.impact),
        report=report,
    )


@router.post("/audit/validate", response_model=FixValidationResponse)
def validate_audit_fixes(request_body: ValidateFixesRequest, request: Request):
    """Check a proposed fix set before the caller applies it"""
    request_id = get_request_id(request)

    accounts = [a.to_domain() for a in request_body.accounts]
    fixes = {account_id: fix.to_domain() for account_id, fix in request_body.fixes.items()}
    validation = validate_fixes(fixes, accounts)

    if not validation.is_valid:
        logging.warning(
            "Fix set rejected",
            extra={"request_id": request_id, "errors": list(validation.errors)},
        )

    return FixValidationResponse.model_validate(validation)
