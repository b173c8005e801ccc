"""
Fee Ledger Models - one Payment per student per month, plus the per-class
monthly FinanceSummary derived from it.
"""
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from constants import PaymentStatus, SummaryStatus


# 1. PAYMENT - monthly obligation of a single student (CORE TABLE)
class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)

    # Class the fee was billed under (snapshot, like amount)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)

    # "October 2025" for display; period (first of month) for keys and ordering
    month = Column(String(20), nullable=False)
    period = Column(Date, nullable=False, index=True)

    # fee - discount at generation time, never recomputed
    amount = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(String(10), nullable=False, default=PaymentStatus.UNPAID.value, index=True)
    payment_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # At most one payment per student per month
    __table_args__ = (
        UniqueConstraint("student_id", "period", name="uq_payment_student_period"),
    )

    student = relationship("models.students.Student")
    class_val = relationship("models.masters.ClassMaster")


# 2. FINANCE SUMMARY - expected vs paid per class per month
class FinanceSummary(Base):
    __tablename__ = "finance_summaries"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    month = Column(String(20), nullable=False)
    period = Column(Date, nullable=False, index=True)

    total_expected = Column(Numeric(12, 2), nullable=False, default=0)
    total_paid = Column(Numeric(12, 2), nullable=False, default=0)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String(10), nullable=False, default=SummaryStatus.PENDING.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("class_id", "period", name="uq_summary_class_period"),
    )

    class_val = relationship("models.masters.ClassMaster")
