from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from fintools.common.exceptions import ForbiddenError, NotFoundError
from fintools.logger_config import logger
from fintools.models.revenue import Revenue, RevenueCategory
from fintools.models.user import User, UserRole

REVIEWER_ROLES = (UserRole.admin, UserRole.manager)


def get_revenue_by_id(db: Session, revenue_id: str) -> Optional[Revenue]:
    """Get revenue by ID."""
    return (
        db.query(Revenue)
        .options(joinedload(Revenue.received_by), joinedload(Revenue.verified_by))
        .filter(Revenue.id == revenue_id)
        .first()
    )


def get_all_revenues(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    category: Optional[RevenueCategory] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> Tuple[List[Revenue], int]:
    """List revenues, newest first. Returns (rows, total_count)."""
    query = db.query(Revenue)
    if category:
        query = query.filter(Revenue.category == category)
    if start_date is not None:
        query = query.filter(Revenue.date >= start_date)
    if end_date is not None:
        query = query.filter(Revenue.date <= end_date)
    if search and search.strip():
        term = f"%{search.strip()}%"
        query = query.filter(or_(Revenue.description.ilike(term), Revenue.client.ilike(term)))

    total_count = query.count()

    rows = (
        query.options(joinedload(Revenue.received_by), joinedload(Revenue.verified_by))
        .order_by(Revenue.date.desc(), Revenue.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return rows, total_count


def create_revenue(db: Session, user: User, data: Dict[str, Any]) -> Revenue:
    data = {k: v for k, v in data.items() if v is not None}
    revenue = Revenue(received_by_id=user.id, **data)
    db.add(revenue)
    try:
        db.commit()
        db.refresh(revenue)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating revenue")
        raise ValueError("Failed to create revenue.")

    logger.info(f"Revenue {revenue.id} of {revenue.amount} recorded by {user.email}")
    return revenue


def update_revenue(db: Session, revenue_id: str, changes: Dict[str, Any]) -> Revenue:
    revenue = get_revenue_by_id(db, revenue_id)
    if not revenue:
        raise NotFoundError("Revenue not found")

    for field, value in changes.items():
        if value is not None:
            setattr(revenue, field, value)

    try:
        db.commit()
        db.refresh(revenue)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating revenue {revenue_id}")
        raise ValueError("Failed to update revenue.")
    return revenue


def delete_revenue(db: Session, revenue_id: str) -> None:
    revenue = get_revenue_by_id(db, revenue_id)
    if not revenue:
        raise NotFoundError("Revenue not found")

    db.delete(revenue)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting revenue {revenue_id}")
        raise ValueError("Failed to delete revenue. Please try again.")
    logger.info(f"Revenue {revenue_id} deleted")


def verify_revenue(db: Session, revenue_id: str, user: User) -> Revenue:
    revenue = get_revenue_by_id(db, revenue_id)
    if not revenue:
        raise NotFoundError("Revenue not found")

    if user.role not in REVIEWER_ROLES:
        raise ForbiddenError("Not authorized to verify revenues")

    revenue.verified = True
    revenue.verified_by_id = user.id
    revenue.verification_date = datetime.now(timezone.utc)
    db.commit()
    db.refresh(revenue)
    logger.info(f"Revenue {revenue_id} verified by {user.email}")
    return revenue
