from datetime import date
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from fintools.core.dependencies import get_db, get_current_active_user
from fintools.logger_config import logger
from fintools.models.transaction import LedgerAccount, TransactionType
from fintools.models.user import User
from fintools.schemas.common import ApiResponse
from fintools.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from fintools.services.transaction_service import (
    create_transaction,
    delete_transaction,
    get_all_transactions,
    get_transaction_by_id,
    update_transaction,
)
from fintools.common.exceptions import NotFoundError

router = APIRouter()

_ASSET_FIELDS = {"is_asset", "asset_details"}


@router.get("", response_model=ApiResponse[List[TransactionResponse]], response_model_exclude_none=True)
def list_transactions(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    type: Optional[TransactionType] = Query(None),
    account: Optional[LedgerAccount] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    rows, total = get_all_transactions(
        db,
        skip=skip,
        limit=limit,
        type=type,
        account=account,
        start_date=start_date,
        end_date=end_date,
    )
    return ApiResponse(data=[TransactionResponse.model_validate(t) for t in rows], count=total)


@router.get("/{transaction_id}", response_model=ApiResponse[TransactionResponse],
            response_model_exclude_none=True)
def get_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    txn = get_transaction_by_id(db, transaction_id)
    if not txn:
        raise NotFoundError("Transaction not found")
    return ApiResponse(data=TransactionResponse.model_validate(txn))


@router.post("", response_model=ApiResponse[TransactionResponse], status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
def create_transaction_route(
    data: TransactionCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Record a ledger movement. An expense flagged isAsset with assetDetails
    also records the asset and links it to the transaction.
    """
    txn = create_transaction(
        db,
        current_user,
        data.model_dump(exclude=_ASSET_FIELDS),
        is_asset=data.is_asset,
        asset_details=data.asset_details.model_dump() if data.asset_details else None,
    )
    return ApiResponse(data=TransactionResponse.model_validate(txn))


@router.put("/{transaction_id}", response_model=ApiResponse[TransactionResponse],
            response_model_exclude_none=True)
def update_transaction_route(
    transaction_id: str,
    data: TransactionUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Only the creator may update a transaction."""
    txn = update_transaction(
        db,
        transaction_id,
        current_user,
        data.model_dump(exclude_unset=True, exclude=_ASSET_FIELDS),
        is_asset=data.is_asset,
        asset_details=data.asset_details.model_dump() if data.asset_details else None,
    )
    logger.info(f"Transaction {transaction_id} updated by {current_user.email}")
    return ApiResponse(data=TransactionResponse.model_validate(txn))


@router.delete("/{transaction_id}", response_model=ApiResponse[dict], response_model_exclude_none=True)
def delete_transaction_route(
    transaction_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    delete_transaction(db, transaction_id, current_user)
    return ApiResponse(data={})
