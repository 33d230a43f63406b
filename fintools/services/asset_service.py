from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintools.common.exceptions import NotFoundError
from fintools.logger_config import logger
from fintools.models.asset import Asset, AssetCategory

# ==================== QUERY OPERATIONS ====================

def get_asset_by_id(db: Session, asset_id: str) -> Optional[Asset]:
    """Get asset by ID."""
    return db.query(Asset).filter(Asset.id == asset_id).first()


def get_all_assets(db: Session, category: Optional[AssetCategory] = None) -> List[Asset]:
    """Assets sorted by name, optionally limited to one category."""
    query = db.query(Asset)
    if category:
        query = query.filter(Asset.category == category)
    return query.order_by(Asset.name).all()


def get_assets_by_category(db: Session, category: AssetCategory) -> List[Asset]:
    return get_all_assets(db, category=category)


# ==================== MUTATIONS ====================

def create_asset(db: Session, data: Dict[str, Any]) -> Asset:
    data = {k: v for k, v in data.items() if v is not None}
    data.setdefault("last_valuation_date", datetime.now(timezone.utc))
    asset = Asset(**data)
    db.add(asset)
    try:
        db.commit()
        db.refresh(asset)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating asset")
        raise ValueError("Failed to create asset.")

    logger.info(f"Asset {asset.id} ({asset.name}) created")
    return asset


def update_asset(db: Session, asset_id: str, changes: Dict[str, Any]) -> Asset:
    asset = get_asset_by_id(db, asset_id)
    if not asset:
        raise NotFoundError("Asset not found")

    for field, value in changes.items():
        if value is not None:
            setattr(asset, field, value)

    try:
        db.commit()
        db.refresh(asset)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating asset {asset_id}")
        raise ValueError("Failed to update asset.")
    return asset


def update_asset_value(
    db: Session,
    asset_id: str,
    current_value: Decimal,
    last_valuation_date: Optional[datetime] = None,
) -> Asset:
    """Record a revaluation; the valuation date defaults to now."""
    return update_asset(db, asset_id, {
        "current_value": current_value,
        "last_valuation_date": last_valuation_date or datetime.now(timezone.utc),
    })


def delete_asset(db: Session, asset_id: str) -> None:
    asset = get_asset_by_id(db, asset_id)
    if not asset:
        raise NotFoundError("Asset not found")

    db.delete(asset)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting asset {asset_id}")
        raise ValueError("Failed to delete asset. Please try again.")
    logger.info(f"Asset {asset_id} deleted")
