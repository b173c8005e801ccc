import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from constants import CENT, ZERO, PaymentStatus, SummaryStatus
from models.fee_models import FinanceSummary, Payment
from models.masters import ClassMaster
from months import MonthKey


def to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, ROUND_HALF_UP)


class FinanceSummaryRepository:
    def __init__(self, db: Session):
        self.db = db

    def summary_query(self, class_id: int, period: datetime.date):
        return (
            self.db.query(FinanceSummary)
            .filter(FinanceSummary.class_id == class_id, FinanceSummary.period == period)
            .with_for_update()
        )

    def find_summary(self, class_id: int, period: datetime.date) -> Optional[FinanceSummary]:
        return self.summary_query(class_id, period).first()

    def lock_summary(self, class_id: int, key: MonthKey) -> FinanceSummary:
        """
        Return the (class, month) summary row locked for this transaction,
        creating an empty one if none exists yet.

        Concurrent writers queue on this lock, so whoever holds it aggregates
        payments committed by the ones before it.
        """
        summary = self.find_summary(class_id, key.period)
        if summary is not None:
            return summary

        summary = FinanceSummary(
            class_id=class_id, period=key.period, month=key.label,
            total_expected=ZERO, total_paid=ZERO, balance=ZERO,
            status=SummaryStatus.PENDING.value,
        )
        try:
            with self.db.begin_nested():
                self.db.add(summary)
                self.db.flush()
        except IntegrityError:
            # Created by another writer after our lookup
            existing = self.find_summary(class_id, key.period)
            if existing is None:
                raise
            return existing
        return summary

    def recompute(self, class_id: int, key: MonthKey) -> FinanceSummary:
        """Upsert the (class, month) summary from the payments currently in the session."""
        self.db.flush()
        period = key.period
        summary = self.lock_summary(class_id, key)

        paid_amount = case((Payment.status == PaymentStatus.PAID.value, Payment.amount), else_=0)
        row = (
            self.db.query(
                func.count(Payment.id).label("records"),
                func.sum(Payment.amount).label("expected"),
                func.sum(paid_amount).label("paid"),
            )
            .filter(Payment.class_id == class_id, Payment.period == period)
            .one()
        )
        expected = to_money(row.expected)
        paid = to_money(row.paid)
        balance = expected - paid
        completed = row.records > 0 and balance == 0

        summary.total_expected = expected
        summary.total_paid = paid
        summary.balance = balance
        summary.status = (SummaryStatus.COMPLETED if completed else SummaryStatus.PENDING).value
        self.db.flush()
        return summary

    def list(self, period: Optional[datetime.date] = None) -> List[FinanceSummary]:
        query = (
            self.db.query(FinanceSummary)
            .join(ClassMaster, FinanceSummary.class_id == ClassMaster.id)
            .options(joinedload(FinanceSummary.class_val))
        )
        if period is not None:
            query = query.filter(FinanceSummary.period == period)
        return query.order_by(FinanceSummary.period, ClassMaster.class_name).all()
