"""
Fee Ledger Router - monthly fee generation, payment status and finance reports
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from schemas.finance import (
    GenerateFeesRequest, PaymentStatusRequest, MonthlyFeeGenerationResult, FinanceSummarySchema,
    PaymentDetails, PaymentUpdateResult, StudentOutstandingBalance, MonthlyPaymentReport,
)
from services.fee_generator import generate_monthly_fees
from services.payment_status import mark_payment_status
from services import finance_aggregator
from typing import List, Optional

router = APIRouter(prefix="/api/v1/finance", tags=["Fee Ledger System"])

# =====================
# FEE GENERATION
# =====================

@router.post("/generate", response_model=MonthlyFeeGenerationResult)
def generate_fees(req: GenerateFeesRequest, db: Session = Depends(get_db)):
    """Bill every active student for the month. Safe to repeat."""
    return generate_monthly_fees(db, req.month)

# =====================
# SUMMARY & PAYMENTS
# =====================

@router.get("/summary", response_model=List[FinanceSummarySchema])
def finance_summary(month: Optional[str] = None, db: Session = Depends(get_db)):
    """Per-class expected / paid / balance, for one month or all"""
    return finance_aggregator.get_finance_summary(db, month)

@router.get("/payments", response_model=List[PaymentDetails])
def list_payments(month: Optional[str] = None, db: Session = Depends(get_db)):
    return finance_aggregator.get_payments(db, month)

@router.patch("/payments/{payment_id}", response_model=PaymentUpdateResult)
def update_payment_status(payment_id: int, req: PaymentStatusRequest, db: Session = Depends(get_db)):
    """Mark a payment paid or unpaid"""
    return mark_payment_status(db, payment_id, req.status)

# =====================
# ARREARS & REPORTS
# =====================

@router.get("/outstanding", response_model=List[StudentOutstandingBalance])
def outstanding_balances(current_month: Optional[str] = None, db: Session = Depends(get_db)):
    """Students with unpaid fees from any month"""
    return finance_aggregator.get_student_outstanding_balances(db, current_month)

@router.get("/reports", response_model=List[MonthlyPaymentReport])
def monthly_reports(db: Session = Depends(get_db)):
    return finance_aggregator.get_monthly_reports(db)
