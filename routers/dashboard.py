from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from schemas.finance import DashboardStats, MonthlyIncome
from services.dashboard import get_dashboard_stats, get_monthly_income
from typing import List

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])

@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db)):
    # Roster counts + expected monthly income from active students
    return get_dashboard_stats(db)

@router.get("/monthly-income", response_model=List[MonthlyIncome])
def monthly_income(db: Session = Depends(get_db)):
    return get_monthly_income(db)
