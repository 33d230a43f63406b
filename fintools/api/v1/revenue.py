from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from fintools.core.dependencies import get_db, get_current_active_user
from fintools.models.revenue import RevenueCategory
from fintools.models.user import User
from fintools.schemas.common import ApiResponse
from fintools.schemas.revenue import RevenueCreate, RevenueResponse, RevenueUpdate
from fintools.services.revenue_service import (
    create_revenue,
    delete_revenue,
    get_all_revenues,
    get_revenue_by_id,
    update_revenue,
    verify_revenue,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[List[RevenueResponse]], response_model_exclude_none=True)
def list_revenues(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    category: Optional[RevenueCategory] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_active_user),
):
    """List revenues, newest first."""
    rows, total_count = get_all_revenues(
        db,
        skip=skip,
        limit=limit,
        category=category,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    return ApiResponse(
        data=[RevenueResponse.model_validate(r) for r in rows],
        count=total_count,
    )


@router.get("/{revenue_id}", response_model=ApiResponse[RevenueResponse], response_model_exclude_none=True)
def get_revenue(
    revenue_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    revenue = get_revenue_by_id(db, revenue_id)
    if not revenue:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Revenue not found"
        )
    return ApiResponse(data=RevenueResponse.model_validate(revenue))


@router.post("", response_model=ApiResponse[RevenueResponse], status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
def create_revenue_route(
    data: RevenueCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        revenue = create_revenue(db, current_user, data.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=RevenueResponse.model_validate(revenue))


@router.put("/{revenue_id}", response_model=ApiResponse[RevenueResponse], response_model_exclude_none=True)
def update_revenue_route(
    revenue_id: str,
    data: RevenueUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        revenue = update_revenue(db, revenue_id, data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=RevenueResponse.model_validate(revenue))


@router.delete("/{revenue_id}", response_model=ApiResponse[dict], response_model_exclude_none=True)
def delete_revenue_route(
    revenue_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        delete_revenue(db, revenue_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return ApiResponse(data={})


@router.put("/{revenue_id}/verify", response_model=ApiResponse[RevenueResponse], response_model_exclude_none=True)
def verify_revenue_route(
    revenue_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Verify a revenue. Admins and managers only."""
    revenue = verify_revenue(db, revenue_id, current_user)
    return ApiResponse(data=RevenueResponse.model_validate(revenue))
