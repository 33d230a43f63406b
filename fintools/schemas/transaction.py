from decimal import Decimal
from pydantic import Field
from typing import Optional
from datetime import date, datetime

from fintools.models.asset import AssetCategory, AssetCondition
from fintools.models.transaction import EntityKind, LedgerAccount, TransactionType
from fintools.schemas.common import CamelModel

DateType = date


class AssetDetails(CamelModel):
    """Asset to record alongside an expense transaction; blanks fall back to the transaction."""
    name: Optional[str] = Field(None, max_length=100)
    category: Optional[AssetCategory] = None
    purchase_value: Optional[Decimal] = Field(None, ge=0)
    current_value: Optional[Decimal] = Field(None, ge=0)
    acquisition_date: Optional[DateType] = None
    description: Optional[str] = Field(None, max_length=500)
    condition: Optional[AssetCondition] = None
    depreciation_rate: Optional[Decimal] = Field(None, ge=0, le=100)


class TransactionCreate(CamelModel):
    type: TransactionType
    amount: Decimal = Field(..., ge=0)
    description: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    date: Optional[DateType] = None
    account: LedgerAccount = LedgerAccount.main
    notes: Optional[str] = Field(None, max_length=500)
    is_asset: bool = False
    asset_details: Optional[AssetDetails] = None


class TransactionUpdate(CamelModel):
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[DateType] = None
    account: Optional[LedgerAccount] = None
    notes: Optional[str] = Field(None, max_length=500)
    reconciled: Optional[bool] = None
    is_asset: bool = False
    asset_details: Optional[AssetDetails] = None


class EntityRef(CamelModel):
    kind: EntityKind
    id: str


class TransactionResponse(CamelModel):
    id: str
    type: TransactionType
    amount: Decimal
    description: str
    category: str
    date: DateType
    account: LedgerAccount
    related_entity: Optional[EntityRef] = None
    created_by_id: int
    notes: Optional[str] = None
    reconciled: bool
    created_at: Optional[datetime] = None
