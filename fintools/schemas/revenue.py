from decimal import Decimal
from pydantic import Field
from typing import Optional
from datetime import date, datetime

from fintools.models.revenue import RevenueCategory
from fintools.schemas.common import CamelModel, UserRef

DateType = date


class RevenueCreate(CamelModel):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0)
    category: RevenueCategory
    date: Optional[DateType] = None
    client: Optional[str] = Field(None, max_length=100)
    invoice: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)


class RevenueUpdate(CamelModel):
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0)
    category: Optional[RevenueCategory] = None
    date: Optional[DateType] = None
    client: Optional[str] = Field(None, max_length=100)
    invoice: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=500)


class RevenueResponse(CamelModel):
    id: str
    description: str
    amount: Decimal
    category: RevenueCategory
    date: DateType
    client: Optional[str] = None
    invoice: Optional[str] = None
    notes: Optional[str] = None
    received_by_id: int
    received_by: Optional[UserRef] = None
    verified: bool
    verified_by: Optional[UserRef] = None
    verification_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
