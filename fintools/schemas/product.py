from decimal import Decimal
from pydantic import AliasChoices, Field
from typing import List, Optional
from datetime import date, datetime

from fintools.models.product import ProductCategory
from fintools.schemas.common import CamelModel
from fintools.schemas.revenue import RevenueResponse


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=200)
    category: ProductCategory
    purchase_price: Decimal = Field(..., ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    quantity: int = Field(1, ge=0)
    purchase_date: Optional[date] = None
    supplier: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    is_asset: bool = True
    notes: Optional[str] = Field(None, max_length=500)


class ProductCreate(ProductBase):
    related_expense_id: Optional[str] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=200)
    category: Optional[ProductCategory] = None
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    supplier: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)


class ProductFromExpense(CamelModel):
    """Overrides for the defaults taken from the expense."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=200)
    category: Optional[ProductCategory] = None
    quantity: Optional[int] = Field(None, ge=1)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    supplier: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)


class MarkSoldRequest(CamelModel):
    selling_price: Decimal = Field(..., gt=0)
    sold_date: date
    quantity: int = Field(
        1, ge=1, validation_alias=AliasChoices("quantity", "quantityToSell", "quantity_to_sell")
    )
    notes: Optional[str] = Field(None, max_length=500)


class ProductResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category: ProductCategory
    purchase_price: Decimal
    selling_price: Optional[Decimal] = None
    sold_price: Optional[Decimal] = None
    quantity: int
    in_stock: bool
    purchase_date: date
    sold_date: Optional[date] = None
    supplier: Optional[str] = None
    serial_number: Optional[str] = None
    related_expense_id: Optional[str] = None
    is_asset: bool
    asset_value: Optional[Decimal] = None
    notes: Optional[str] = None
    created_by_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SaleResult(CamelModel):
    products: List[ProductResponse]
    revenue: RevenueResponse
