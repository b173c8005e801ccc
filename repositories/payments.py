"""
Payment Ledger access.

Every query the finance engine runs against payments lives here, returning
ORM rows or small typed records, so the services never touch raw columns.
"""
import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app_logger import get_logger
from constants import InsertOutcome, PaymentStatus, StudentStatus
from models.fee_models import Payment
from models.students import Student

logger = get_logger(__name__)


@dataclass(frozen=True)
class BillableStudent:
    student_id: int
    class_id: int
    fee: Decimal
    discount: Decimal


class PaymentRepository:
    def __init__(self, db: Session):
        self.db = db

    # --- fee generation ---
    def billable_students(self) -> List[BillableStudent]:
        rows = (
            self.db.query(Student.id, Student.class_id, Student.fee, Student.discount)
            .filter(Student.status == StudentStatus.ACTIVE.value)
            .order_by(Student.id)
            .all()
        )
        return [
            BillableStudent(
                student_id=r.id,
                class_id=r.class_id,
                fee=Decimal(str(r.fee or 0)),
                discount=Decimal(str(r.discount or 0)),
            )
            for r in rows
        ]

    def billed_student_ids(self, period: datetime.date) -> Set[int]:
        rows = self.db.query(Payment.student_id).filter(Payment.period == period).all()
        return {r.student_id for r in rows}

    def insert_payment(self, student: BillableStudent, month: str, period: datetime.date,
                       amount: Decimal) -> InsertOutcome:
        """
        Insert one unpaid payment inside a SAVEPOINT.

        A concurrent writer that got there first trips the unique constraint;
        only this savepoint is rolled back and the insert counts as a skip.
        """
        payment = Payment(
            student_id=student.student_id,
            class_id=student.class_id,
            month=month,
            period=period,
            amount=amount,
            status=PaymentStatus.UNPAID.value,
            payment_date=None,
        )
        try:
            with self.db.begin_nested():
                self.db.add(payment)
                self.db.flush()
        except IntegrityError:
            # Only the (student, period) key counts as a duplicate
            if not self.exists(student.student_id, period):
                raise
            logger.debug("Payment for student %s in %s already exists", student.student_id, month)
            return InsertOutcome.DUPLICATE_SKIPPED
        return InsertOutcome.CREATED

    def exists(self, student_id: int, period: datetime.date) -> bool:
        query = self.db.query(Payment.id).filter(
            Payment.student_id == student_id, Payment.period == period,
        )
        return self.db.query(query.exists()).scalar()

    # --- single payment ---
    def get(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        query = self.db.query(Payment).filter(Payment.id == payment_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    # --- read models ---
    def with_details(self, period: Optional[datetime.date] = None,
                     status: Optional[PaymentStatus] = None) -> List[Payment]:
        query = self.db.query(Payment).options(
            joinedload(Payment.student).joinedload(Student.parent_val),
            joinedload(Payment.student).joinedload(Student.class_val),
            joinedload(Payment.class_val),
        )
        if period is not None:
            query = query.filter(Payment.period == period)
        if status is not None:
            query = query.filter(Payment.status == status.value)
        return query.order_by(Payment.period, Payment.student_id, Payment.id).all()

    def for_students_in_period(self, student_ids: Iterable[int],
                               period: datetime.date) -> Dict[int, Payment]:
        ids = list(student_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(Payment)
            .filter(Payment.period == period, Payment.student_id.in_(ids))
            .all()
        )
        return {p.student_id: p for p in rows}

    def all_payments(self) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.period.desc(), Payment.id).all()
