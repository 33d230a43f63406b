from decimal import Decimal
from pydantic import Field
from typing import Optional
from datetime import date, datetime

from fintools.models.expense import ExpenseCategory
from fintools.schemas.common import ApiResponse, CamelModel, UserRef
from fintools.schemas.product import ProductResponse

# Alias to avoid field name 'date' shadowing type 'date' in annotations (Pydantic v2)
DateType = date


class ExpenseCreate(CamelModel):
    """Date defaults to today on the server if not provided."""
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0)
    category: ExpenseCategory
    date: Optional[DateType] = None
    notes: Optional[str] = Field(None, max_length=500)
    receipt: Optional[str] = None
    # None lets the category decide (Phone/Accessories are assets)
    is_asset: Optional[bool] = None


class ExpenseUpdate(CamelModel):
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0)
    category: Optional[ExpenseCategory] = None
    date: Optional[DateType] = None
    notes: Optional[str] = Field(None, max_length=500)
    receipt: Optional[str] = None
    is_asset: Optional[bool] = None


class ExpenseResponse(CamelModel):
    id: str
    description: str
    amount: Decimal
    category: ExpenseCategory
    date: DateType
    notes: Optional[str] = None
    receipt: Optional[str] = None
    paid_by_id: int
    paid_by: Optional[UserRef] = None
    approved: bool
    approved_by: Optional[UserRef] = None
    approval_date: Optional[datetime] = None
    is_asset: bool
    is_product_created: bool
    created_at: Optional[datetime] = None


class ExpenseWithProductResponse(ApiResponse[ExpenseResponse]):
    """Create/update reply: the auto-created product rides alongside the expense."""
    product: Optional[ProductResponse] = None
