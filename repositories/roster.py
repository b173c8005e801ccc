"""
Roster passthrough: parents, classes and students.

Plain create/read/update/delete with the referential checks the ledger
relies on. Writes commit immediately; last write wins.
"""
from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app_logger import get_logger
from errors import ConflictError, NotFoundError, StoreError, ValidationError
from models.fee_models import Payment
from models.masters import ClassMaster, Parent
from models.students import Student
from schemas.roster import (
    ClassCreate, ClassUpdate, ParentCreate, ParentUpdate, StudentCreate, StudentUpdate,
)

logger = get_logger(__name__)


class RosterRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, what: str):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"{what} conflicts with existing records") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Roster write failed: %s", what)
            raise StoreError(f"Could not save {what}") from e

    # =======================
    # 1. PARENTS
    # =======================
    def list_parents(self) -> List[Parent]:
        return self.db.query(Parent).order_by(Parent.created_at.desc(), Parent.id.desc()).all()

    def get_parent(self, parent_id: int) -> Parent:
        parent = self.db.query(Parent).filter(Parent.id == parent_id).first()
        if not parent:
            raise NotFoundError(f"Parent {parent_id} not found")
        return parent

    def add_parent(self, data: ParentCreate) -> Parent:
        parent = Parent(**data.model_dump())
        self.db.add(parent)
        self._commit("parent")
        return parent

    def update_parent(self, parent_id: int, data: ParentUpdate) -> Parent:
        parent = self.get_parent(parent_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(parent, field, value)
        self._commit("parent")
        return parent

    def delete_parent(self, parent_id: int):
        parent = self.get_parent(parent_id)
        if self.db.query(Student).filter(Student.parent_id == parent_id).count():
            raise ConflictError("Parent still has students")
        self.db.delete(parent)
        self._commit("parent")

    # =======================
    # 2. CLASSES
    # =======================
    def list_classes(self) -> List[ClassMaster]:
        return self.db.query(ClassMaster).order_by(ClassMaster.class_name).all()

    def get_class(self, class_id: int) -> ClassMaster:
        cls = self.db.query(ClassMaster).filter(ClassMaster.id == class_id).first()
        if not cls:
            raise NotFoundError(f"Class {class_id} not found")
        return cls

    def add_class(self, data: ClassCreate) -> ClassMaster:
        existing = self.db.query(ClassMaster).filter(ClassMaster.class_name == data.class_name).first()
        if existing:
            raise ConflictError("Class already exists")
        cls = ClassMaster(**data.model_dump())
        self.db.add(cls)
        self._commit("class")
        return cls

    def update_class(self, class_id: int, data: ClassUpdate) -> ClassMaster:
        cls = self.get_class(class_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(cls, field, value)
        self._commit("class")
        return cls

    def delete_class(self, class_id: int):
        cls = self.get_class(class_id)
        if self.db.query(Student).filter(Student.class_id == class_id).count():
            raise ConflictError("Class still has students")
        if self.db.query(Payment).filter(Payment.class_id == class_id).count():
            raise ConflictError("Class has billed payments")
        self.db.delete(cls)
        self._commit("class")

    # =======================
    # 3. STUDENTS
    # =======================
    def _students(self):
        return self.db.query(Student).options(
            joinedload(Student.parent_val),
            joinedload(Student.class_val),
        )

    def list_students(self) -> List[Student]:
        return self._students().order_by(Student.created_at.desc(), Student.id.desc()).all()

    def get_student(self, student_id: int) -> Student:
        student = self._students().populate_existing().filter(Student.id == student_id).first()
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def add_student(self, data: StudentCreate) -> Student:
        self.get_parent(data.parent_id)
        self.get_class(data.class_id)
        values = data.model_dump()
        values["status"] = data.status.value
        values["fee"] = Decimal(str(data.fee))
        values["discount"] = Decimal(str(data.discount))
        student = Student(**values)
        self.db.add(student)
        self._commit("student")
        return self.get_student(student.id)

    def update_student(self, student_id: int, data: StudentUpdate) -> Student:
        student = self.get_student(student_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("parent_id") is not None:
            self.get_parent(changes["parent_id"])
        if changes.get("class_id") is not None:
            self.get_class(changes["class_id"])

        fee = Decimal(str(changes["fee"])) if changes.get("fee") is not None else Decimal(str(student.fee))
        discount = (Decimal(str(changes["discount"])) if changes.get("discount") is not None
                    else Decimal(str(student.discount)))
        if discount > fee:
            raise ValidationError("discount cannot exceed fee")

        for field, value in changes.items():
            if value is None:
                continue
            if field == "status":
                value = value.value
            elif field in ("fee", "discount"):
                value = Decimal(str(value))
            setattr(student, field, value)
        self._commit("student")
        return self.get_student(student_id)

    def delete_student(self, student_id: int):
        student = self.get_student(student_id)
        if self.db.query(Payment).filter(Payment.student_id == student_id).count():
            raise ConflictError("Student has payment history; mark the student inactive instead")
        self.db.delete(student)
        self._commit("student")

    # =======================
    # 4. COUNTS (dashboard)
    # =======================
    def counts(self) -> dict:
        return {
            "students": self.db.query(Student).count(),
            "classes": self.db.query(ClassMaster).count(),
            "parents": self.db.query(Parent).count(),
        }
