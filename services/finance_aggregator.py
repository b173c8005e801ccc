"""
Read-side of the ledger: class summaries, payment tables, per-student
arrears and month-by-month reports. Nothing here writes.
"""
from collections import OrderedDict
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app_logger import get_logger
from constants import CurrentMonthStatus, PaymentStatus, ZERO
from errors import StoreError
from months import MonthKey, parse_month
from repositories.finance import FinanceSummaryRepository, to_money
from repositories.payments import PaymentRepository
from schemas.finance import (
    FinanceSummarySchema, MonthlyPaymentReport, PaymentDetails, StudentOutstandingBalance,
)
from schemas.roster import ClassSchema

logger = get_logger(__name__)


def _period_or_none(month: Optional[str]):
    return parse_month(month).period if month else None


def get_finance_summary(db: Session, month: Optional[str] = None) -> List[FinanceSummarySchema]:
    period = _period_or_none(month)
    try:
        rows = FinanceSummaryRepository(db).list(period)
    except SQLAlchemyError as e:
        logger.exception("Reading finance summary failed")
        raise StoreError("Could not read finance summary") from e

    return [
        FinanceSummarySchema(
            id=s.id,
            class_id=s.class_id,
            month=s.month,
            total_expected=float(to_money(s.total_expected)),
            total_paid=float(to_money(s.total_paid)),
            balance=float(to_money(s.balance)),
            status=s.status,
            created_at=s.created_at,
            class_ref=ClassSchema.model_validate(s.class_val) if s.class_val else None,
        )
        for s in rows
    ]


def get_payments(db: Session, month: Optional[str] = None) -> List[PaymentDetails]:
    period = _period_or_none(month)
    try:
        rows = PaymentRepository(db).with_details(period=period)
    except SQLAlchemyError as e:
        logger.exception("Reading payments failed")
        raise StoreError("Could not read payments") from e

    details = []
    # Table order: month, then student name
    for p in sorted(rows, key=lambda r: (r.period, r.student.student_name.lower())):
        student = p.student
        parent = student.parent_val
        details.append(PaymentDetails(
            id=p.id,
            student_id=p.student_id,
            month=p.month,
            amount=float(to_money(p.amount)),
            status=p.status,
            payment_date=p.payment_date,
            student_name=student.student_name,
            student_fee=float(to_money(student.fee)),
            student_discount=float(to_money(student.discount)),
            class_name=p.class_val.class_name if p.class_val else "-",
            class_id=p.class_id,
            parent_name=parent.name if parent else "-",
            parent_phone=parent.phone if parent else "",
        ))
    return details


def get_student_outstanding_balances(db: Session,
                                     current_month: Optional[str] = None) -> List[StudentOutstandingBalance]:
    """
    Sum every unpaid payment per student across all months.

    With current_month, each row also says whether that month's payment is
    unpaid, paid, or was never generated (no_record).
    """
    current_key = parse_month(current_month) if current_month else None
    payments = PaymentRepository(db)

    try:
        unpaid = payments.with_details(status=PaymentStatus.UNPAID)
        groups = OrderedDict()
        for p in unpaid:
            group = groups.setdefault(p.student_id, {"student": p.student, "total": ZERO, "periods": []})
            group["total"] += to_money(p.amount)
            group["periods"].append(p.period)

        this_month = {}
        if current_key is not None:
            this_month = payments.for_students_in_period(groups.keys(), current_key.period)
    except SQLAlchemyError as e:
        logger.exception("Reading outstanding balances failed")
        raise StoreError("Could not read outstanding balances") from e

    balances = []
    for student_id in sorted(groups):
        group = groups[student_id]
        student = group["student"]
        parent = student.parent_val

        month_status = None
        month_payment_id = None
        if current_key is not None:
            record = this_month.get(student_id)
            if record is None:
                month_status = CurrentMonthStatus.NO_RECORD
            else:
                month_status = CurrentMonthStatus(record.status)
                month_payment_id = record.id

        balances.append(StudentOutstandingBalance(
            student_id=student_id,
            student_name=student.student_name,
            parent_name=parent.name if parent else "-",
            parent_phone=parent.phone if parent else "",
            class_name=student.class_val.class_name if student.class_val else "-",
            total_outstanding=float(group["total"]),
            unpaid_months=[MonthKey.from_period(p).label for p in sorted(group["periods"])],
            current_month_status=month_status,
            current_month_payment_id=month_payment_id,
        ))
    return balances


def get_monthly_reports(db: Session) -> List[MonthlyPaymentReport]:
    """One entry per billed month, most recent first."""
    try:
        rows = PaymentRepository(db).all_payments()
    except SQLAlchemyError as e:
        logger.exception("Reading payment reports failed")
        raise StoreError("Could not read payment reports") from e

    by_period = OrderedDict()
    for p in rows:
        report = by_period.setdefault(p.period, {
            "records": 0, "paid": 0, "unpaid": 0, "amount": ZERO, "collected": ZERO,
        })
        amount = to_money(p.amount)
        report["records"] += 1
        report["amount"] += amount
        if p.status == PaymentStatus.PAID.value:
            report["paid"] += 1
            report["collected"] += amount
        else:
            report["unpaid"] += 1

    return [
        MonthlyPaymentReport(
            month=MonthKey.from_period(period).label,
            total_records=r["records"],
            paid_count=r["paid"],
            unpaid_count=r["unpaid"],
            total_amount=float(r["amount"]),
            total_paid=float(r["collected"]),
        )
        for period, r in sorted(by_period.items(), key=lambda item: item[0], reverse=True)
    ]
