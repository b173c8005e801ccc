from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base
from constants import StudentStatus

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    student_name = Column(String(100), nullable=False)

    # --- ROSTER LINKS ---
    parent_id = Column(Integer, ForeignKey("parents.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)

    # --- MONTHLY FEE ---
    fee = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)

    # Only active students are billed
    status = Column(String(10), nullable=False, default=StudentStatus.ACTIVE.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("fee >= 0", name="ck_student_fee_non_negative"),
        CheckConstraint("discount >= 0", name="ck_student_discount_non_negative"),
    )

    # --- RELATIONSHIPS ---
    parent_val = relationship("models.masters.Parent")
    class_val = relationship("models.masters.ClassMaster")
