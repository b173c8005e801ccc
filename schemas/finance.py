from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from constants import CurrentMonthStatus, PaymentStatus, SummaryStatus
from schemas.roster import ClassSchema

# 1. REQUESTS
class GenerateFeesRequest(BaseModel):
    month: str = Field(min_length=1, max_length=40)

class PaymentStatusRequest(BaseModel):
    status: PaymentStatus

# 2. FEE GENERATION
class MonthlyFeeGenerationResult(BaseModel):
    payments_created: int
    finance_records_updated: int
    month: str

# 3. FINANCE SUMMARY (per class per month)
class FinanceSummarySchema(BaseModel):
    id: int
    class_id: int
    month: str
    total_expected: float
    total_paid: float
    balance: float
    status: SummaryStatus
    created_at: Optional[datetime] = None
    class_ref: Optional[ClassSchema] = Field(default=None, alias="class")

    class Config:
        populate_by_name = True

# 4. PAYMENT DETAILS (denormalized row for tables)
class PaymentDetails(BaseModel):
    id: int
    student_id: int
    month: str
    amount: float
    status: PaymentStatus
    payment_date: Optional[datetime] = None
    student_name: str
    student_fee: float
    student_discount: float
    class_name: str
    class_id: int
    parent_name: str
    parent_phone: str

class PaymentUpdateResult(BaseModel):
    success: bool
    payment_id: int
    status: PaymentStatus

# 5. OUTSTANDING BALANCES (cross-month, per student)
class StudentOutstandingBalance(BaseModel):
    student_id: int
    student_name: str
    parent_name: str
    parent_phone: str
    class_name: str
    total_outstanding: float
    unpaid_months: List[str]
    current_month_status: Optional[CurrentMonthStatus] = None
    current_month_payment_id: Optional[int] = None

# 6. REPORTS
class MonthlyPaymentReport(BaseModel):
    month: str
    total_records: int
    paid_count: int
    unpaid_count: int
    total_amount: float
    total_paid: float

class DashboardStats(BaseModel):
    total_students: int
    active_students: int
    inactive_students: int
    total_classes: int
    total_parents: int
    monthly_income: float

class MonthlyIncome(BaseModel):
    class_name: str
    total_students: int
    total_fee: float
    total_discount: float
    net_income: float
