from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from fintools.core.dependencies import get_db, get_current_active_user
from fintools.models.expense import ExpenseCategory
from fintools.models.user import User
from fintools.schemas.common import ApiResponse
from fintools.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    ExpenseWithProductResponse,
)
from fintools.schemas.product import ProductResponse
from fintools.services.expense_service import (
    approve_expense,
    create_expense,
    delete_expense,
    get_all_expenses,
    get_expense_by_id,
    get_expense_product,
    update_expense,
)
from fintools.logger_config import logger

router = APIRouter()


@router.get("", response_model=ApiResponse[List[ExpenseResponse]], response_model_exclude_none=True)
def list_expenses(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    category: Optional[ExpenseCategory] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_active_user),
):
    """List expenses, newest first, with optional category/date/search filters."""
    rows, total_count = get_all_expenses(
        db,
        skip=skip,
        limit=limit,
        category=category,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    return ApiResponse(
        data=[ExpenseResponse.model_validate(r) for r in rows],
        count=total_count,
    )


@router.get("/{expense_id}", response_model=ApiResponse[ExpenseResponse], response_model_exclude_none=True)
def get_expense(
    expense_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    expense = get_expense_by_id(db, expense_id)
    if not expense:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )
    return ApiResponse(data=ExpenseResponse.model_validate(expense))


@router.post("", response_model=ExpenseWithProductResponse, status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
def create_single_expense(
    data: ExpenseCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Create an expense; date defaults to today.
    Phone and Accessories expenses also create a stock product.
    """
    try:
        expense, product, warnings = create_expense(
            db,
            user=current_user,
            description=data.description,
            amount=data.amount,
            category=data.category,
            expense_date=data.date,
            notes=data.notes,
            receipt=data.receipt,
            is_asset=data.is_asset,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ExpenseWithProductResponse(
        data=ExpenseResponse.model_validate(expense),
        product=ProductResponse.model_validate(product) if product else None,
        warnings=warnings or None,
    )


@router.put("/{expense_id}", response_model=ExpenseWithProductResponse, response_model_exclude_none=True)
def update_single_expense(
    expense_id: str,
    data: ExpenseUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        expense, product, warnings = update_expense(
            db, expense_id, current_user, data.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info(f"Expense {expense_id} updated by {current_user.email}")
    return ExpenseWithProductResponse(
        data=ExpenseResponse.model_validate(expense),
        product=ProductResponse.model_validate(product) if product else None,
        warnings=warnings or None,
    )


@router.delete("/{expense_id}", response_model=ApiResponse[dict], response_model_exclude_none=True)
def delete_single_expense(
    expense_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Delete an expense and its unsold products.
    Refused when any related product has been sold.
    """
    try:
        delete_expense(db, expense_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    logger.info(f"Expense {expense_id} deleted by {current_user.email}")
    return ApiResponse(data={})


@router.put("/{expense_id}/approve", response_model=ApiResponse[ExpenseResponse], response_model_exclude_none=True)
def approve_single_expense(
    expense_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Approve an expense. Admins and managers only."""
    expense = approve_expense(db, expense_id, current_user)
    return ApiResponse(data=ExpenseResponse.model_validate(expense))


@router.get("/{expense_id}/product", response_model=ApiResponse[ProductResponse], response_model_exclude_none=True)
def get_product_of_expense(
    expense_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    product = get_expense_product(db, expense_id)
    return ApiResponse(data=ProductResponse.model_validate(product))
