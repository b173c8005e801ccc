"""
Monthly fee generation.

Bills every active student once for a month: one unpaid Payment carrying
max(0, fee - discount), then refreshes the finance summary of each class that
received new payments. Re-running for the same month creates nothing.
"""
from decimal import ROUND_HALF_UP

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app_logger import get_logger
from constants import CENT, InsertOutcome, ZERO
from errors import StoreError
from months import parse_month
from repositories.finance import FinanceSummaryRepository
from repositories.payments import BillableStudent, PaymentRepository
from schemas.finance import MonthlyFeeGenerationResult

logger = get_logger(__name__)


def net_amount(student: BillableStudent):
    """fee - discount, clamped at zero and rounded to cents."""
    return max(ZERO, student.fee - student.discount).quantize(CENT, ROUND_HALF_UP)


def generate_monthly_fees(db: Session, month: str) -> MonthlyFeeGenerationResult:
    key = parse_month(month)
    payments = PaymentRepository(db)
    summaries = FinanceSummaryRepository(db)

    created = 0
    skipped = 0
    touched_classes = set()

    try:
        already_billed = payments.billed_student_ids(key.period)
        for student in payments.billable_students():
            if student.student_id in already_billed:
                skipped += 1
                continue
            outcome = payments.insert_payment(student, key.label, key.period, net_amount(student))
            if outcome is InsertOutcome.CREATED:
                created += 1
                touched_classes.add(student.class_id)
            else:
                skipped += 1

        for class_id in sorted(touched_classes):
            summaries.recompute(class_id, key)

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Fee generation for %s failed", key.label)
        raise StoreError(f"Could not generate fees for {key.label}") from e

    logger.info(
        "Generated fees for %s: %d created, %d skipped, %d class summaries updated",
        key.label, created, skipped, len(touched_classes),
    )
    return MonthlyFeeGenerationResult(
        payments_created=created,
        finance_records_updated=len(touched_classes),
        month=key.label,
    )
