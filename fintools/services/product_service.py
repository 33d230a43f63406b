"""
Product service: inventory CRUD and the sale workflow.

A sale either closes a product record (whole quantity sold) or splits it into
the remaining stock and a new, already-sold record for the sold portion. Every
sale books exactly one "Sales" revenue.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from fintools.common.exceptions import ConflictError, NotFoundError, ValidationFailed
from fintools.logger_config import logger
from fintools.models.expense import AUTO_ASSET_CATEGORIES, Expense
from fintools.models.product import Product, ProductCategory, prorate_asset_value
from fintools.models.revenue import Revenue, RevenueCategory
from fintools.models.user import User

# Fields carried over from a product to the record of its sold portion
_SPLIT_COPY_FIELDS = (
    "name", "description", "category", "purchase_price", "selling_price",
    "purchase_date", "supplier", "serial_number", "related_expense_id",
    "is_asset", "created_by_id",
)


# ==================== QUERY OPERATIONS ====================

def get_product_by_id(db: Session, product_id: str) -> Optional[Product]:
    """Get product by ID."""
    return db.query(Product).filter(Product.id == product_id).first()


def get_all_products(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    category: Optional[ProductCategory] = None,
    in_stock: Optional[bool] = None,
) -> Tuple[List[Product], int]:
    """Get all products, newest first, with optional filtering."""
    query = db.query(Product)

    if category:
        query = query.filter(Product.category == category)

    if in_stock is not None:
        query = query.filter(Product.in_stock == in_stock)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Product.name.ilike(search_term),
                Product.serial_number.ilike(search_term),
                Product.id.ilike(search_term),
            )
        )

    total = query.count()
    products = (
        query.options(joinedload(Product.created_by))
        .order_by(Product.created_at.desc(), Product.id)
        .offset(skip)
        .limit(limit)
        .all()
    )
    return products, total


def get_products_for_expense(db: Session, expense_id: str) -> List[Product]:
    return db.query(Product).filter(Product.related_expense_id == expense_id).all()


def count_products_for_expense(db: Session, expense_id: str) -> int:
    return (
        db.query(func.count(Product.id))
        .filter(Product.related_expense_id == expense_id)
        .scalar()
    )


# ==================== CREATE / UPDATE ====================

def build_product_from_expense(
    expense: Expense,
    created_by_id: int,
    overrides: Optional[Dict[str, Any]] = None,
) -> Product:
    """Product populated from an expense; not added to the session."""
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    quantity = overrides.pop("quantity", 1)

    if expense.category in AUTO_ASSET_CATEGORIES:
        category = ProductCategory(expense.category.value)
    else:
        category = ProductCategory.OTHER

    product = Product(
        name=expense.description[:100],
        description=f"Product from expense: {expense.description}"[:200],
        category=category,
        purchase_price=expense.amount,
        quantity=quantity,
        in_stock=True,
        purchase_date=expense.date,
        related_expense_id=expense.id,
        is_asset=True,
        created_by_id=created_by_id,
    )
    for field, value in overrides.items():
        setattr(product, field, value)
    product.recompute_asset_value()
    return product


def create_product(db: Session, user: User, data: Dict[str, Any]) -> Product:
    """Create a product; asset value is always derived from price and quantity."""
    data = dict(data)
    data.pop("asset_value", None)
    if data.get("purchase_date") is None:
        data.pop("purchase_date", None)

    expense = None
    if data.get("related_expense_id"):
        expense = db.query(Expense).filter(Expense.id == data["related_expense_id"]).first()
        if not expense:
            raise NotFoundError("Expense not found")

    product = Product(created_by_id=user.id, in_stock=True, **data)
    product.recompute_asset_value()
    db.add(product)
    if expense is not None:
        expense.is_product_created = True

    try:
        db.commit()
        db.refresh(product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating product")
        raise ValueError("Failed to create product.")

    logger.info(f"Product {product.id} ({product.name}) created by {user.email}")
    return product


def update_product(db: Session, product_id: str, changes: Dict[str, Any]) -> Product:
    """Apply `changes`; price or quantity changes re-derive the asset value."""
    product = get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")

    changes = {k: v for k, v in changes.items() if v is not None}
    touches_value = "purchase_price" in changes or "quantity" in changes

    if touches_value and not product.in_stock:
        raise ConflictError("Cannot change quantity or price of a sold product")

    for field, value in changes.items():
        setattr(product, field, value)
    if touches_value:
        product.recompute_asset_value()

    try:
        db.commit()
        db.refresh(product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating product {product_id}")
        raise ValueError("Failed to update product.")

    return product


def create_product_from_expense(
    db: Session,
    expense_id: str,
    user: User,
    overrides: Optional[Dict[str, Any]] = None,
) -> Product:
    """Manually convert an expense into a stock product."""
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("Expense not found")

    if count_products_for_expense(db, expense.id) > 0:
        raise ConflictError("A product already exists for this expense")

    product = build_product_from_expense(expense, user.id, overrides)
    db.add(product)
    expense.is_product_created = True

    try:
        db.commit()
        db.refresh(product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error creating product from expense {expense_id}")
        raise ValueError("Failed to create product from expense.")

    logger.info(f"Product {product.id} created from expense {expense.id}")
    return product


# ==================== SALE ====================

def mark_product_sold(
    db: Session,
    product_id: str,
    user: User,
    selling_price: Decimal,
    sold_date: date,
    quantity: int = 1,
    notes: Optional[str] = None,
) -> Tuple[List[Product], Revenue]:
    """
    Sell `quantity` units of a product.

    Returns the touched product records (the closed product, or the remaining
    stock followed by the sold portion) and the revenue booked for the sale.
    Product changes and the revenue are committed together.
    """
    product = get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")

    if not product.in_stock:
        raise ConflictError("Product is already marked as sold")

    if quantity > product.quantity:
        raise ValidationFailed([f"Only {product.quantity} item(s) available"])

    selling_price = Decimal(str(selling_price))
    original_quantity = product.quantity
    remaining = original_quantity - quantity
    touched: List[Product] = []

    try:
        if remaining == 0:
            product.in_stock = False
            product.sold_date = sold_date
            product.sold_price = selling_price
            product.notes = notes or product.notes
            touched.append(product)
        else:
            sold_portion = Product(
                **{field: getattr(product, field) for field in _SPLIT_COPY_FIELDS},
                quantity=quantity,
                in_stock=False,
                sold_date=sold_date,
                sold_price=selling_price,
                asset_value=prorate_asset_value(product.asset_value, original_quantity, quantity),
                notes=notes or product.notes,
            )
            product.asset_value = prorate_asset_value(product.asset_value, original_quantity, remaining)
            product.quantity = remaining
            db.add(sold_portion)
            touched.extend([product, sold_portion])

        revenue = Revenue(
            description=f"Sale of {quantity} {product.name}"[:200],
            amount=selling_price * quantity,
            category=RevenueCategory.SALES,
            date=sold_date,
            notes=notes or f"Revenue from selling {product.name}",
            received_by_id=user.id,
        )
        db.add(revenue)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error marking product {product_id} as sold")
        raise

    for record in touched:
        db.refresh(record)
    db.refresh(revenue)

    logger.info(
        f"Sold {quantity} of product {product.id} at {selling_price}; "
        f"remaining={remaining}, revenue={revenue.id}"
    )
    return touched, revenue


# ==================== DELETE ====================

def delete_product(db: Session, product_id: str) -> List[str]:
    """
    Delete an unsold product. When it was the last product of its expense the
    expense's product flag is cleared; failing that step does not undo the
    deletion and is returned as a warning.
    """
    product = get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")

    if not product.in_stock:
        raise ConflictError("Cannot delete a product that has been sold")

    expense_id = product.related_expense_id
    warnings: List[str] = []

    db.delete(product)
    try:
        db.flush()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting product {product_id}")
        raise ValueError("Failed to delete product. Please try again.")

    if expense_id:
        try:
            with db.begin_nested():
                if count_products_for_expense(db, expense_id) == 0:
                    expense = db.query(Expense).filter(Expense.id == expense_id).first()
                    if expense:
                        expense.is_product_created = False
        except SQLAlchemyError as e:
            logger.warning(f"Could not update related expense {expense_id}: {e}")
            warnings.append(f"Product deleted but expense {expense_id} could not be updated")

    db.commit()
    logger.info(f"Product {product_id} deleted")
    return warnings
