from decimal import Decimal
from pydantic import Field
from typing import Optional
from datetime import date, datetime

from fintools.models.asset import AssetCategory, AssetCondition
from fintools.schemas.common import CamelModel


class AssetBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: AssetCategory
    purchase_value: Decimal = Field(..., ge=0)
    current_value: Decimal = Field(..., ge=0)
    acquisition_date: date
    description: Optional[str] = Field(None, max_length=500)
    condition: AssetCondition = AssetCondition.GOOD
    location: Optional[str] = Field(None, max_length=100)
    depreciation_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=500)


class AssetCreate(AssetBase):
    last_valuation_date: Optional[datetime] = None


class AssetUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[AssetCategory] = None
    purchase_value: Optional[Decimal] = Field(None, ge=0)
    current_value: Optional[Decimal] = Field(None, ge=0)
    acquisition_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=500)
    condition: Optional[AssetCondition] = None
    location: Optional[str] = Field(None, max_length=100)
    depreciation_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    last_valuation_date: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=500)


class AssetValueUpdate(CamelModel):
    current_value: Decimal = Field(..., ge=0)
    last_valuation_date: Optional[datetime] = None


class AssetResponse(AssetBase):
    id: str
    last_valuation_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
