from collections import OrderedDict
from typing import List

from sqlalchemy.orm import Session, joinedload

from constants import StudentStatus, ZERO
from repositories.finance import to_money
from repositories.roster import RosterRepository
from models.students import Student
from schemas.finance import DashboardStats, MonthlyIncome


def _active_students(db: Session) -> List[Student]:
    return (
        db.query(Student)
        .options(joinedload(Student.class_val))
        .filter(Student.status == StudentStatus.ACTIVE.value)
        .order_by(Student.id)
        .all()
    )


def _net(student: Student):
    return max(ZERO, to_money(student.fee) - to_money(student.discount))


def get_dashboard_stats(db: Session) -> DashboardStats:
    counts = RosterRepository(db).counts()
    active = _active_students(db)
    return DashboardStats(
        total_students=counts["students"],
        active_students=len(active),
        inactive_students=counts["students"] - len(active),
        total_classes=counts["classes"],
        total_parents=counts["parents"],
        monthly_income=float(sum((_net(s) for s in active), ZERO)),
    )


def get_monthly_income(db: Session) -> List[MonthlyIncome]:
    """Expected income per class from the current active roster."""
    by_class = OrderedDict()
    for s in _active_students(db):
        row = by_class.setdefault(s.class_id, {
            "class_name": s.class_val.class_name if s.class_val else "-",
            "students": 0, "fee": ZERO, "discount": ZERO, "net": ZERO,
        })
        row["students"] += 1
        row["fee"] += to_money(s.fee)
        row["discount"] += to_money(s.discount)
        row["net"] += _net(s)

    return [
        MonthlyIncome(
            class_name=row["class_name"],
            total_students=row["students"],
            total_fee=float(row["fee"]),
            total_discount=float(row["discount"]),
            net_income=float(row["net"]),
        )
        for row in sorted(by_class.values(), key=lambda r: r["class_name"])
    ]
