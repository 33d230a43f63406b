from fastapi import APIRouter, Body, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from fintools.core.dependencies import get_db, get_current_active_user
from fintools.models.product import ProductCategory
from fintools.models.user import User
from fintools.schemas.common import ApiResponse
from fintools.schemas.product import (
    MarkSoldRequest,
    ProductCreate,
    ProductFromExpense,
    ProductResponse,
    ProductUpdate,
    SaleResult,
)
from fintools.schemas.revenue import RevenueResponse
from fintools.services.product_service import (
    create_product,
    create_product_from_expense,
    delete_product,
    get_all_products,
    get_product_by_id,
    mark_product_sold,
    update_product,
)
from fintools.logger_config import logger

router = APIRouter()


@router.get("", response_model=ApiResponse[List[ProductResponse]], response_model_exclude_none=True)
def get_products(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    search: Optional[str] = Query(None),
    category: Optional[ProductCategory] = Query(None),
    in_stock: Optional[bool] = Query(None, alias="inStock"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Get all products, newest first.
    Requires authentication.
    """
    products, total = get_all_products(
        db, skip=skip, limit=limit, search=search, category=category, in_stock=in_stock
    )
    return ApiResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        count=total,
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse], response_model_exclude_none=True)
def get_product(
    product_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    product = get_product_by_id(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )
    return ApiResponse(data=ProductResponse.model_validate(product))


@router.post("", response_model=ApiResponse[ProductResponse], status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
def create_product_route(
    product_data: ProductCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Create a new product. Asset value is derived from price and quantity.
    """
    try:
        product = create_product(db, current_user, product_data.model_dump())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return ApiResponse(data=ProductResponse.model_validate(product))


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse], response_model_exclude_none=True)
def update_product_route(
    product_id: str,
    product_data: ProductUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        product = update_product(db, product_id, product_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    logger.info(f"Product {product_id} updated by {current_user.email}")
    return ApiResponse(data=ProductResponse.model_validate(product))


@router.delete("/{product_id}", response_model=ApiResponse[dict], response_model_exclude_none=True)
def delete_product_route(
    product_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Delete an unsold product.
    """
    try:
        warnings = delete_product(db, product_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    logger.info(f"Product {product_id} deleted by {current_user.email}")
    return ApiResponse(data={}, warnings=warnings or None)


@router.put("/{product_id}/mark-sold", response_model=ApiResponse[SaleResult], response_model_exclude_none=True)
def mark_sold_route(
    product_id: str,
    sale: MarkSoldRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Sell some or all units of a product and book the revenue.
    """
    products, revenue = mark_product_sold(
        db,
        product_id,
        current_user,
        selling_price=sale.selling_price,
        sold_date=sale.sold_date,
        quantity=sale.quantity,
        notes=sale.notes,
    )
    return ApiResponse(data=SaleResult(
        products=[ProductResponse.model_validate(p) for p in products],
        revenue=RevenueResponse.model_validate(revenue),
    ))


@router.post("/from-expense/{expense_id}", response_model=ApiResponse[ProductResponse],
             status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
def create_from_expense_route(
    expense_id: str,
    overrides: Optional[ProductFromExpense] = Body(None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Create a stock product out of an existing expense.
    """
    try:
        product = create_product_from_expense(
            db,
            expense_id,
            current_user,
            overrides.model_dump(exclude_unset=True) if overrides else None,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    return ApiResponse(data=ProductResponse.model_validate(product))
