from decimal import Decimal

from constants import CurrentMonthStatus, PaymentStatus
from models.fee_models import Payment
from services.fee_generator import generate_monthly_fees
from services.finance_aggregator import (
    get_finance_summary, get_monthly_reports, get_payments, get_student_outstanding_balances,
)
from services.payment_status import mark_payment_status


def _payment(db, student, month_label):
    return next(p for p in db.query(Payment).all()
                if p.student_id == student.id and p.month == month_label)


def test_class_summary_tracks_paid_and_unpaid(db, add_class, add_student):
    cls = add_class("Grade 2")
    first = add_student("Mohamed Omar", cls, 55, 5)
    second = add_student("Khadija Ali", cls, 55)
    generate_monthly_fees(db, "October 2025")

    mark_payment_status(db, _payment(db, first, "October 2025").id, PaymentStatus.PAID)
    [summary] = get_finance_summary(db, "October 2025")

    assert summary.class_id == cls.id
    assert summary.class_ref.class_name == "Grade 2"
    assert summary.total_expected == 105
    assert summary.total_paid == 50
    assert summary.balance == 55
    assert summary.status == "pending"

    mark_payment_status(db, _payment(db, second, "October 2025").id, PaymentStatus.PAID)
    [summary] = get_finance_summary(db, "October 2025")

    assert summary.balance == 0
    assert summary.total_paid == 105
    assert summary.status == "completed"


def test_summary_month_filter(db, add_class, add_student):
    grade1 = add_class("Grade 1")
    grade3 = add_class("Grade 3")
    add_student("Abdirahman Ahmed", grade1, 50, 5)
    add_student("Halima Amina", grade3, 60)
    generate_monthly_fees(db, "October 2025")
    generate_monthly_fees(db, "November 2025")

    october = get_finance_summary(db, "Oct 2025")
    everything = get_finance_summary(db)

    assert [(s.month, s.class_ref.class_name) for s in october] == [
        ("October 2025", "Grade 1"), ("October 2025", "Grade 3"),
    ]
    assert len(everything) == 4
    assert [s.month for s in everything][:2] == ["October 2025", "October 2025"]
    assert get_finance_summary(db, "December 2025") == []


def test_outstanding_balance_spans_months(db, add_class, add_student):
    student = add_student("Yusuf Mohamed", add_class(), 40)
    generate_monthly_fees(db, "March 2025")
    student.fee = Decimal("45")
    db.commit()
    generate_monthly_fees(db, "January 2025")

    [balance] = get_student_outstanding_balances(db)

    assert balance.student_id == student.id
    assert balance.total_outstanding == 85
    assert balance.unpaid_months == ["January 2025", "March 2025"]
    assert balance.current_month_status is None
    assert balance.current_month_payment_id is None


def test_unpaid_months_are_chronological_across_years(db, add_class, add_student):
    add_student("Aisha Omar", add_class(), 45)
    for label in ["January 2026", "April 2025", "December 2025"]:
        generate_monthly_fees(db, label)

    [balance] = get_student_outstanding_balances(db)

    assert balance.unpaid_months == ["April 2025", "December 2025", "January 2026"]


def test_current_month_status_has_three_states(db, add_class, add_student):
    cls = add_class()
    unpaid = add_student("Abdirahman Ahmed", cls, 50)
    paid = add_student("Maryam Fatima", cls, 50)
    generate_monthly_fees(db, "September 2025")
    generate_monthly_fees(db, "October 2025")
    missing = add_student("Mohamed Omar", cls, 55)
    generate_monthly_fees(db, "September 2025")

    paid_october = _payment(db, paid, "October 2025")
    mark_payment_status(db, paid_october.id, "paid")

    rows = {b.student_id: b for b in get_student_outstanding_balances(db, "October 2025")}

    assert rows[unpaid.id].current_month_status == CurrentMonthStatus.UNPAID
    assert rows[unpaid.id].current_month_payment_id == _payment(db, unpaid, "October 2025").id
    assert rows[unpaid.id].total_outstanding == 100
    assert rows[paid.id].current_month_status == CurrentMonthStatus.PAID
    assert rows[paid.id].current_month_payment_id == paid_october.id
    assert rows[paid.id].unpaid_months == ["September 2025"]
    assert rows[missing.id].current_month_status == CurrentMonthStatus.NO_RECORD
    assert rows[missing.id].current_month_payment_id is None


def test_outstanding_rows_sorted_by_student_and_skip_settled(db, add_class, add_student):
    cls = add_class()
    students = [add_student(name, cls, 50) for name in ("Zainab", "Abdi", "Hodan")]
    generate_monthly_fees(db, "October 2025")
    mark_payment_status(db, _payment(db, students[1], "October 2025").id, "paid")

    rows = get_student_outstanding_balances(db)

    assert [r.student_id for r in rows] == [students[0].id, students[2].id]
    assert rows[0].parent_name == "Ahmed Hassan"
    assert rows[0].class_name == "Grade 1"


def test_payment_details_are_denormalized(db, add_class, add_student):
    cls = add_class("Kindergarten")
    add_student("Ibrahim Hassan", cls, 45, 5, parent_name="Hassan Ibrahim")
    add_student("Aisha Omar", cls, 45, parent_name="Omar Ali")
    generate_monthly_fees(db, "October 2025")
    generate_monthly_fees(db, "November 2025")

    october = get_payments(db, "October 2025")

    assert [p.student_name for p in october] == ["Aisha Omar", "Ibrahim Hassan"]
    ibrahim = october[1]
    assert ibrahim.amount == 40
    assert ibrahim.student_fee == 45
    assert ibrahim.student_discount == 5
    assert ibrahim.class_name == "Kindergarten"
    assert ibrahim.class_id == cls.id
    assert ibrahim.parent_name == "Hassan Ibrahim"
    assert ibrahim.status == PaymentStatus.UNPAID
    assert len(get_payments(db)) == 4


def test_monthly_reports_newest_first(db, add_class, add_student):
    cls = add_class()
    first = add_student("Abdirahman Ahmed", cls, 50, 5)
    add_student("Maryam Fatima", cls, 50)
    generate_monthly_fees(db, "December 2025")
    generate_monthly_fees(db, "January 2026")
    mark_payment_status(db, _payment(db, first, "January 2026").id, "paid")

    reports = get_monthly_reports(db)

    assert [r.month for r in reports] == ["January 2026", "December 2025"]
    january = reports[0]
    assert january.total_records == 2
    assert january.paid_count == 1
    assert january.unpaid_count == 1
    assert january.total_amount == 95
    assert january.total_paid == 45
