import enum
from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fintools.core.database import Base
from fintools.models.common import enum_column, generate_custom_id


class ProductCategory(str, enum.Enum):
    PHONE = "Phone"
    ACCESSORIES = "Accessories"
    OTHER = "Other"


class Product(Base):
    """
    Inventory record. A product leaves stock (in_stock=False) when sold and is
    then frozen: no deletion, no second sale, no quantity change.
    """
    __tablename__ = "products"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("PRD"))
    name = Column(String(100), nullable=False)
    description = Column(String(200), nullable=True)
    category = Column(enum_column(ProductCategory, "product_category"), nullable=False, index=True)

    purchase_price = Column(Numeric(15, 2), nullable=False)
    selling_price = Column(Numeric(15, 2), nullable=True)
    sold_price = Column(Numeric(15, 2), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    in_stock = Column(Boolean, nullable=False, default=True, index=True)

    purchase_date = Column(Date, nullable=False, default=date.today, index=True)
    sold_date = Column(Date, nullable=True)
    supplier = Column(String(100), nullable=True)
    serial_number = Column(String(100), nullable=True)

    related_expense_id = Column(String(20), ForeignKey("expenses.id"), nullable=True, index=True)
    is_asset = Column(Boolean, nullable=False, default=True)
    asset_value = Column(Numeric(15, 2), nullable=True)
    notes = Column(Text, nullable=True)

    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    related_expense = relationship("Expense", back_populates="products")
    created_by = relationship("User")

    def recompute_asset_value(self) -> Decimal:
        self.asset_value = compute_asset_value(self.purchase_price, self.quantity)
        return self.asset_value

    def __repr__(self):
        return f"<Product(id='{self.id}', name='{self.name}', quantity={self.quantity}, in_stock={self.in_stock})>"


def compute_asset_value(purchase_price, quantity) -> Decimal:
    return (Decimal(str(purchase_price)) * int(quantity)).quantize(Decimal("0.01"))


def prorate_asset_value(asset_value, quantity: int, portion: int):
    """Share of `asset_value` carried by `portion` units out of `quantity`."""
    if asset_value is None or not quantity:
        return None
    return (Decimal(str(asset_value)) / quantity * portion).quantize(Decimal("0.01"))
