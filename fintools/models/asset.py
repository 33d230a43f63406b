import enum
from datetime import date

from sqlalchemy import Column, Date, DateTime, Numeric, String, Text
from sqlalchemy.sql import func

from fintools.core.database import Base
from fintools.models.common import enum_column, generate_custom_id


class AssetCategory(str, enum.Enum):
    REAL_ESTATE = "Real Estate"
    VEHICLE = "Vehicle"
    EQUIPMENT = "Equipment"
    TECHNOLOGY = "Technology"
    FURNITURE = "Furniture"
    INTELLECTUAL_PROPERTY = "Intellectual Property"
    INVESTMENT = "Investment"
    OTHER = "Other"


class AssetCondition(str, enum.Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class Asset(Base):
    __tablename__ = "assets"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("AST"))
    name = Column(String(100), nullable=False)
    category = Column(enum_column(AssetCategory, "asset_category"), nullable=False, index=True)
    purchase_value = Column(Numeric(15, 2), nullable=False)
    current_value = Column(Numeric(15, 2), nullable=False)
    acquisition_date = Column(Date, nullable=False, default=date.today, index=True)
    description = Column(String(500), nullable=True)
    condition = Column(enum_column(AssetCondition, "asset_condition"), nullable=False, default=AssetCondition.GOOD)
    location = Column(String(100), nullable=True)
    depreciation_rate = Column(Numeric(5, 2), nullable=False, default=0)  # percent, 0..100
    last_valuation_date = Column(DateTime(timezone=True), server_default=func.now())
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
