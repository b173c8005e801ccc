from decimal import Decimal
from enum import Enum

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class SummaryStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class CurrentMonthStatus(str, Enum):
    NO_RECORD = "no_record"
    PAID = "paid"
    UNPAID = "unpaid"


class InsertOutcome(Enum):
    CREATED = "created"
    DUPLICATE_SKIPPED = "duplicate_skipped"
