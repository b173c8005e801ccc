import datetime
from typing import Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app_logger import get_logger
from constants import PaymentStatus
from errors import NotFoundError, StoreError, ValidationError
from months import MonthKey
from repositories.finance import FinanceSummaryRepository
from repositories.payments import PaymentRepository
from schemas.finance import PaymentUpdateResult

logger = get_logger(__name__)


def _coerce_status(status: Union[PaymentStatus, str]) -> PaymentStatus:
    try:
        return PaymentStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid payment status '{status}', expected 'paid' or 'unpaid'")


def mark_payment_status(db: Session, payment_id: int,
                        status: Union[PaymentStatus, str]) -> PaymentUpdateResult:
    """
    Set a payment paid or unpaid and refresh its class summary in the same commit.

    Paid stamps payment_date (kept if the payment was already paid); unpaid clears it.
    """
    new_status = _coerce_status(status)
    payments = PaymentRepository(db)

    try:
        payment = payments.get(payment_id, for_update=True)
        if payment is None:
            raise NotFoundError(f"Payment {payment_id} not found")

        previous = payment.status
        if new_status is PaymentStatus.PAID:
            if previous != PaymentStatus.PAID.value or payment.payment_date is None:
                payment.payment_date = datetime.datetime.now(datetime.timezone.utc)
        else:
            payment.payment_date = None
        payment.status = new_status.value

        FinanceSummaryRepository(db).recompute(payment.class_id, MonthKey.from_period(payment.period))
        db.commit()
    except NotFoundError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Updating payment %s failed", payment_id)
        raise StoreError(f"Could not update payment {payment_id}") from e

    logger.info("Payment %s: %s -> %s", payment_id, previous, new_status.value)
    return PaymentUpdateResult(success=True, payment_id=payment_id, status=new_status)
