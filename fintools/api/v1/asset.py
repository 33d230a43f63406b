from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from fintools.core.dependencies import get_db, get_current_active_user
from fintools.models.asset import AssetCategory
from fintools.models.user import User
from fintools.schemas.asset import AssetCreate, AssetResponse, AssetUpdate, AssetValueUpdate
from fintools.schemas.common import ApiResponse
from fintools.services.asset_service import (
    create_asset,
    delete_asset,
    get_all_assets,
    get_asset_by_id,
    get_assets_by_category,
    update_asset,
    update_asset_value,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[List[AssetResponse]], response_model_exclude_none=True)
def list_assets(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """All assets sorted by name."""
    assets = get_all_assets(db)
    return ApiResponse(data=[AssetResponse.model_validate(a) for a in assets], count=len(assets))


# Declared before /{asset_id} so "category" is not taken for an id
@router.get("/category/{category}", response_model=ApiResponse[List[AssetResponse]],
            response_model_exclude_none=True)
def list_assets_by_category(
    category: AssetCategory,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    assets = get_assets_by_category(db, category)
    return ApiResponse(data=[AssetResponse.model_validate(a) for a in assets], count=len(assets))


@router.get("/{asset_id}", response_model=ApiResponse[AssetResponse], response_model_exclude_none=True)
def get_asset(
    asset_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    asset = get_asset_by_id(db, asset_id)
    if not asset:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Asset not found"
        )
    return ApiResponse(data=AssetResponse.model_validate(asset))


@router.post("", response_model=ApiResponse[AssetResponse], status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
def create_asset_route(
    data: AssetCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        asset = create_asset(db, data.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=AssetResponse.model_validate(asset))


@router.put("/{asset_id}", response_model=ApiResponse[AssetResponse], response_model_exclude_none=True)
def update_asset_route(
    asset_id: str,
    data: AssetUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        asset = update_asset(db, asset_id, data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=AssetResponse.model_validate(asset))


@router.put("/{asset_id}/update-value", response_model=ApiResponse[AssetResponse],
            response_model_exclude_none=True)
def update_asset_value_route(
    asset_id: str,
    data: AssetValueUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Record a revaluation of the asset.
    """
    try:
        asset = update_asset_value(db, asset_id, data.current_value, data.last_valuation_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=AssetResponse.model_validate(asset))


@router.delete("/{asset_id}", response_model=ApiResponse[dict], response_model_exclude_none=True)
def delete_asset_route(
    asset_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        delete_asset(db, asset_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return ApiResponse(data={})
