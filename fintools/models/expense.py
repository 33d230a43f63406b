import enum
from datetime import date

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fintools.core.database import Base
from fintools.models.common import enum_column, generate_custom_id


class ExpenseCategory(str, enum.Enum):
    SALARY = "Salary"
    RENTAL = "Rental"
    UTILITIES = "Utilities"
    OFFICE_SUPPLIES = "Office Supplies"
    EQUIPMENT = "Equipment"
    MARKETING = "Marketing"
    TRANSPORT = "Transport"
    INSURANCE = "Insurance"
    TAXES = "Taxes"
    PHONE = "Phone"
    ACCESSORIES = "Accessories"
    COURIER = "Courier"
    BONUS = "Bonus"
    ADVERTISEMENT = "Advertisement"
    OTHER = "Other"


# Categories whose expenses are stock bought for resale
AUTO_ASSET_CATEGORIES = (ExpenseCategory.PHONE, ExpenseCategory.ACCESSORIES)


class Expense(Base):
    """Money paid out; Phone/Accessories purchases may spawn inventory products."""
    __tablename__ = "expenses"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("EXP"))
    description = Column(String(200), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    category = Column(enum_column(ExpenseCategory, "expense_category"), nullable=False, index=True)
    date = Column(Date, nullable=False, default=date.today, index=True)
    paid_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receipt = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    approved = Column(Boolean, nullable=False, default=False)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    approval_date = Column(DateTime(timezone=True), nullable=True)

    is_asset = Column(Boolean, nullable=False, default=False, index=True)
    is_product_created = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    paid_by = relationship("User", back_populates="expenses", foreign_keys=[paid_by_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])
    products = relationship("Product", back_populates="related_expense")

    @property
    def qualifies_for_product(self) -> bool:
        return bool(self.is_asset) and self.category in AUTO_ASSET_CATEGORIES
