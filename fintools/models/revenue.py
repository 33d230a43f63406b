import enum
from datetime import date

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fintools.core.database import Base
from fintools.models.common import enum_column, generate_custom_id


class RevenueCategory(str, enum.Enum):
    SALES = "Sales"
    SERVICES = "Services"
    INVESTMENTS = "Investments"
    GRANTS = "Grants"
    ROYALTIES = "Royalties"
    INTEREST = "Interest"
    OTHER = "Other"


class Revenue(Base):
    __tablename__ = "revenues"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("REV"))
    description = Column(String(200), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    category = Column(enum_column(RevenueCategory, "revenue_category"), nullable=False, index=True)
    date = Column(Date, nullable=False, default=date.today, index=True)
    client = Column(String(100), nullable=True, index=True)
    received_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    invoice = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    verified = Column(Boolean, nullable=False, default=False)
    verified_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    verification_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    received_by = relationship("User", back_populates="revenues", foreign_keys=[received_by_id])
    verified_by = relationship("User", foreign_keys=[verified_by_id])
