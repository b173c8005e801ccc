from decimal import Decimal

from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from models.fee_models import FinanceSummary, Payment
from months import parse_month
from repositories.finance import FinanceSummaryRepository
from services.fee_generator import generate_monthly_fees
from services.payment_status import mark_payment_status


def test_summary_lookup_locks_the_row(db):
    key = parse_month("October 2025")
    query = FinanceSummaryRepository(db).summary_query(1, key.period)

    sql = str(query.statement.compile(dialect=postgresql.dialect()))

    assert "FROM finance_summaries" in sql
    assert sql.rstrip().endswith("FOR UPDATE")


def test_summary_is_locked_before_payments_are_aggregated(db, engine, add_class, add_student):
    add_student("Abdirahman Ahmed", add_class(), 50, 5)
    generate_monthly_fees(db, "October 2025")
    payment_id = db.query(Payment).one().id

    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    try:
        mark_payment_status(db, payment_id, "paid")
    finally:
        event.remove(engine, "before_cursor_execute", record)

    summary_lookup = next(i for i, s in enumerate(statements) if "FROM finance_summaries" in s)
    aggregate = next(i for i, s in enumerate(statements) if "count(payments.id)" in s)
    assert summary_lookup < aggregate


def test_summary_created_by_another_writer_is_reused(db, add_class, add_student, monkeypatch):
    cls = add_class()
    add_student("Abdirahman Ahmed", cls, 50, 5)
    generate_monthly_fees(db, "October 2025")
    key = parse_month("October 2025")

    # First lookup misses, as if the row was committed right after it
    real_find = FinanceSummaryRepository.find_summary
    calls = []

    def find_after_race(self, class_id, period):
        calls.append(period)
        if len(calls) == 1:
            return None
        return real_find(self, class_id, period)

    monkeypatch.setattr(FinanceSummaryRepository, "find_summary", find_after_race)

    summary = FinanceSummaryRepository(db).recompute(cls.id, key)
    db.commit()

    assert len(calls) == 2
    assert db.query(FinanceSummary).count() == 1
    assert summary.total_expected == Decimal("45.00")
    assert summary.balance == Decimal("45.00")
