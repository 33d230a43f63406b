"""
Transaction service: ledger movements, optionally booking the purchased asset.

An expense transaction flagged as an asset creates (or on update refreshes) a
linked Asset. The asset and the transaction are written in one database
transaction: both are stored or neither is.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintools.common.exceptions import ForbiddenError, NotFoundError
from fintools.logger_config import logger
from fintools.models.asset import Asset, AssetCategory, AssetCondition
from fintools.models.transaction import EntityKind, LedgerAccount, Transaction, TransactionType
from fintools.models.user import User


def _asset_category(value: Any) -> AssetCategory:
    """Asset details may omit the category; a free-form transaction category rarely matches one."""
    if isinstance(value, AssetCategory):
        return value
    try:
        return AssetCategory(value)
    except ValueError:
        return AssetCategory.OTHER


def _new_asset(details: Dict[str, Any], txn: Transaction) -> Asset:
    return Asset(
        name=details.get("name") or txn.description,
        category=_asset_category(details.get("category") or txn.category),
        purchase_value=details.get("purchase_value") or txn.amount,
        current_value=details.get("current_value") or txn.amount,
        acquisition_date=details.get("acquisition_date") or txn.date,
        description=details.get("description") or txn.notes,
        condition=details.get("condition") or AssetCondition.GOOD,
        depreciation_rate=details.get("depreciation_rate") or 0,
        last_valuation_date=datetime.now(timezone.utc),
    )


def _refresh_asset(asset: Asset, details: Dict[str, Any], txn: Transaction) -> None:
    asset.name = details.get("name") or txn.description or asset.name
    if details.get("category"):
        asset.category = _asset_category(details["category"])
    asset.purchase_value = details.get("purchase_value") or txn.amount or asset.purchase_value
    asset.current_value = details.get("current_value") or txn.amount or asset.current_value
    asset.acquisition_date = details.get("acquisition_date") or txn.date or asset.acquisition_date
    asset.description = details.get("description") or txn.notes or asset.description
    asset.condition = details.get("condition") or asset.condition
    if details.get("depreciation_rate") is not None:
        asset.depreciation_rate = details["depreciation_rate"]
    asset.last_valuation_date = datetime.now(timezone.utc)


def _ensure_owner(txn: Transaction, user: User) -> None:
    if txn.created_by_id is not None and txn.created_by_id != user.id:
        raise ForbiddenError("User not authorized")


# ==================== QUERY OPERATIONS ====================

def get_transaction_by_id(db: Session, transaction_id: str) -> Optional[Transaction]:
    return db.query(Transaction).filter(Transaction.id == transaction_id).first()


def get_all_transactions(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    type: Optional[TransactionType] = None,
    account: Optional[LedgerAccount] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[List[Transaction], int]:
    """Transactions, newest first."""
    query = db.query(Transaction)
    if type:
        query = query.filter(Transaction.type == type)
    if account:
        query = query.filter(Transaction.account == account)
    if start_date is not None:
        query = query.filter(Transaction.date >= start_date)
    if end_date is not None:
        query = query.filter(Transaction.date <= end_date)

    total = query.count()
    rows = (
        query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return rows, total


# ==================== MUTATIONS ====================

def create_transaction(
    db: Session,
    user: User,
    data: Dict[str, Any],
    is_asset: bool = False,
    asset_details: Optional[Dict[str, Any]] = None,
) -> Transaction:
    data = {k: v for k, v in data.items() if v is not None}
    txn = Transaction(created_by_id=user.id, **data)
    if txn.date is None:
        txn.date = date.today()

    try:
        if txn.type == TransactionType.expense and is_asset and asset_details is not None:
            asset = _new_asset(asset_details, txn)
            db.add(asset)
            db.flush()
            txn.link(EntityKind.Asset, asset.id)
            logger.info(f"Asset {asset.id} recorded for expense transaction")

        db.add(txn)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating transaction")
        raise

    db.refresh(txn)
    logger.info(f"Transaction {txn.id} ({txn.type.value} {txn.amount}) created by {user.email}")
    return txn


def update_transaction(
    db: Session,
    transaction_id: str,
    user: User,
    changes: Dict[str, Any],
    is_asset: bool = False,
    asset_details: Optional[Dict[str, Any]] = None,
) -> Transaction:
    txn = get_transaction_by_id(db, transaction_id)
    if not txn:
        raise NotFoundError("Transaction not found")
    _ensure_owner(txn, user)

    for field, value in changes.items():
        if value is not None:
            setattr(txn, field, value)

    try:
        if txn.type == TransactionType.expense and is_asset:
            linked = None
            if txn.related_entity_kind == EntityKind.Asset:
                linked = db.query(Asset).filter(Asset.id == txn.related_entity_id).first()

            if linked is not None:
                _refresh_asset(linked, asset_details or {}, txn)
            elif asset_details is not None:
                asset = _new_asset(asset_details, txn)
                db.add(asset)
                db.flush()
                txn.link(EntityKind.Asset, asset.id)

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating transaction {transaction_id}")
        raise

    db.refresh(txn)
    return txn


def delete_transaction(db: Session, transaction_id: str, user: User) -> None:
    """Delete a transaction; a linked asset is kept."""
    txn = get_transaction_by_id(db, transaction_id)
    if not txn:
        raise NotFoundError("Transaction not found")
    _ensure_owner(txn, user)

    db.delete(txn)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting transaction {transaction_id}")
        raise
    logger.info(f"Transaction {transaction_id} removed")
