from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from fintools.common.exceptions import ConflictError, ForbiddenError, NotFoundError
from fintools.logger_config import logger
from fintools.models.expense import AUTO_ASSET_CATEGORIES, Expense, ExpenseCategory
from fintools.models.product import Product
from fintools.models.user import User, UserRole
from fintools.services.product_service import build_product_from_expense, get_products_for_expense

REVIEWER_ROLES = (UserRole.admin, UserRole.manager)


def _today() -> date:
    return date.today()


def _spawn_product(db: Session, expense: Expense, user_id: int) -> Tuple[Optional[Product], Optional[str]]:
    """
    Auto-asset rule: create the stock product for a qualifying expense inside a
    savepoint. A failure leaves the expense untouched and comes back as a warning.
    """
    if not expense.qualifies_for_product:
        return None, None

    try:
        with db.begin_nested():
            product = build_product_from_expense(expense, user_id)
            db.add(product)
            expense.is_product_created = True
        return product, None
    except SQLAlchemyError:
        logger.exception(f"Error creating product from expense {expense.id}")
        expense.is_product_created = False
        return None, "Expense saved but its product could not be created"


def get_expense_by_id(db: Session, expense_id: str) -> Optional[Expense]:
    """Get expense by ID."""
    return (
        db.query(Expense)
        .options(joinedload(Expense.paid_by), joinedload(Expense.approved_by))
        .filter(Expense.id == expense_id)
        .first()
    )


def get_all_expenses(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    category: Optional[ExpenseCategory] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> Tuple[List[Expense], int]:
    """List expenses, newest first. Returns (rows, total_count)."""
    query = db.query(Expense)
    if category:
        query = query.filter(Expense.category == category)
    if start_date is not None:
        query = query.filter(Expense.date >= start_date)
    if end_date is not None:
        query = query.filter(Expense.date <= end_date)
    if search and search.strip():
        term = f"%{search.strip()}%"
        query = query.filter(or_(Expense.description.ilike(term), Expense.notes.ilike(term)))

    total_count = query.count()

    rows = (
        query.options(joinedload(Expense.paid_by), joinedload(Expense.approved_by))
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return rows, total_count


def create_expense(
    db: Session,
    user: User,
    description: str,
    amount: Decimal,
    category: ExpenseCategory,
    expense_date: Optional[date] = None,
    notes: Optional[str] = None,
    receipt: Optional[str] = None,
    is_asset: Optional[bool] = None,
) -> Tuple[Expense, Optional[Product], List[str]]:
    """
    Create an expense paid by `user`. Phone and Accessories expenses are
    assets unless told otherwise, and qualifying assets get a stock product.
    Returns (expense, product or None, warnings).
    """
    effective_is_asset = is_asset if is_asset is not None else category in AUTO_ASSET_CATEGORIES
    expense = Expense(
        description=description,
        amount=amount,
        category=category,
        date=expense_date or _today(),
        notes=notes,
        receipt=receipt,
        paid_by_id=user.id,
        is_asset=effective_is_asset,
        is_product_created=False,
    )
    db.add(expense)
    try:
        db.flush()  # get expense.id for the product link
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating expense")
        raise ValueError("Failed to create expense.")

    product, warning = _spawn_product(db, expense, user.id)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating expense")
        raise ValueError("Failed to create expense.")

    db.refresh(expense)
    if product is not None:
        db.refresh(product)
    logger.info(f"Expense {expense.id} created by {user.email} (product={product.id if product else None})")
    return expense, product, [warning] if warning else []


def update_expense(
    db: Session,
    expense_id: str,
    user: User,
    changes: Dict[str, Any],
) -> Tuple[Expense, Optional[Product], List[str]]:
    """
    Update an expense. Switching it into an asset category (or flagging it as
    an asset) spawns its product if none exists yet.
    """
    expense = get_expense_by_id(db, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")

    changes = {k: v for k, v in changes.items() if v is not None}
    category_changed = "category" in changes and changes["category"] != expense.category
    asset_status_changed = "is_asset" in changes and changes["is_asset"] != expense.is_asset

    for field, value in changes.items():
        setattr(expense, field, value)

    product, warning = None, None
    if (category_changed or asset_status_changed) and not expense.is_product_created:
        db.flush()
        product, warning = _spawn_product(db, expense, user.id)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating expense {expense_id}")
        raise ValueError("Failed to update expense.")

    db.refresh(expense)
    if product is not None:
        db.refresh(product)
    return expense, product, [warning] if warning else []


def delete_expense(db: Session, expense_id: str) -> None:
    """
    Delete an expense together with its products. Refused while any of those
    products has been sold; otherwise all rows go in one transaction.
    """
    expense = get_expense_by_id(db, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")

    products: List[Product] = []
    if expense.is_product_created:
        products = get_products_for_expense(db, expense.id)
        logger.debug(f"Found {len(products)} products associated with expense {expense.id}")

        sold = [p for p in products if not p.in_stock]
        if sold:
            raise ConflictError(
                f"This expense cannot be deleted because it has {len(sold)} "
                f"related products that have been sold"
            )

    try:
        for product in products:
            db.delete(product)
        db.flush()
        db.delete(expense)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting expense {expense_id}")
        raise ValueError("Failed to delete expense and its products.")

    logger.info(f"Deleted expense {expense_id} and {len(products)} related product(s)")


def approve_expense(db: Session, expense_id: str, user: User) -> Expense:
    expense = get_expense_by_id(db, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")

    if user.role not in REVIEWER_ROLES:
        raise ForbiddenError("Not authorized to approve expenses")

    expense.approved = True
    expense.approved_by_id = user.id
    expense.approval_date = datetime.now(timezone.utc)
    db.commit()
    db.refresh(expense)
    logger.info(f"Expense {expense_id} approved by {user.email}")
    return expense


def get_expense_product(db: Session, expense_id: str) -> Product:
    expense = get_expense_by_id(db, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")

    if not expense.is_product_created:
        raise NotFoundError("No product associated with this expense")

    products = get_products_for_expense(db, expense.id)
    if not products:
        raise NotFoundError("Product not found")
    return products[0]
