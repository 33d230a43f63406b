from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from fintools.core.dependencies import get_db, get_current_active_user
from fintools.models.user import User
from fintools.schemas.auth import FounderContribution
from fintools.schemas.common import ApiResponse
from fintools.schemas.dashboard import CashFlowInterval, CashFlowPoint, FinancialSummary
from fintools.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/summary", response_model=ApiResponse[FinancialSummary], response_model_exclude_none=True)
def get_summary(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Totals for expenses, revenue, assets and founder contributions,
    plus the running balance of every ledger account.
    """
    summary = DashboardService(db).get_financial_summary()
    return ApiResponse(data=FinancialSummary(**summary))


@router.get("/cash-flow", response_model=ApiResponse[List[CashFlowPoint]], response_model_exclude_none=True)
def get_cash_flow(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    interval: CashFlowInterval = Query(CashFlowInterval.month),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    points = DashboardService(db).get_cash_flow(start_date, end_date, interval.value)
    return ApiResponse(data=[CashFlowPoint(**p) for p in points], count=len(points))


@router.get("/founder-contributions", response_model=ApiResponse[List[FounderContribution]], response_model_exclude_none=True)
def get_founder_contributions(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    founders = DashboardService(db).get_founder_contributions()
    return ApiResponse(
        data=[FounderContribution.model_validate(f) for f in founders],
        count=len(founders),
    )
