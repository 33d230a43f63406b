import enum
from datetime import date

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fintools.core.database import Base
from fintools.models.common import enum_column, generate_custom_id


class TransactionType(str, enum.Enum):
    income = "income"
    expense = "expense"
    transfer = "transfer"
    investment = "investment"


class LedgerAccount(str, enum.Enum):
    main = "main"
    savings = "savings"
    investment = "investment"
    petty_cash = "petty-cash"


class EntityKind(str, enum.Enum):
    User = "User"
    Expense = "Expense"
    Revenue = "Revenue"
    Asset = "Asset"


class Transaction(Base):
    """
    Cash movement on one logical ledger account.

    The optional link to another record is a tagged reference: the pair
    (related_entity_kind, related_entity_id) is either both set or both NULL.
    """
    __tablename__ = "transactions"

    id = Column(String(20), primary_key=True, default=lambda: generate_custom_id("TXN"))
    type = Column(enum_column(TransactionType, "transaction_type"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(String(200), nullable=False)
    date = Column(Date, nullable=False, default=date.today, index=True)
    category = Column(String(100), nullable=False, index=True)
    account = Column(enum_column(LedgerAccount, "ledger_account"), nullable=False,
                     default=LedgerAccount.main, index=True)

    related_entity_kind = Column(enum_column(EntityKind, "entity_kind"), nullable=True)
    related_entity_id = Column(String(20), nullable=True)

    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    notes = Column(Text, nullable=True)
    reconciled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    created_by = relationship("User")

    def link(self, kind: EntityKind, entity_id: str):
        self.related_entity_kind = kind
        self.related_entity_id = entity_id

    @property
    def related_entity(self):
        if self.related_entity_kind is None:
            return None
        return {"kind": self.related_entity_kind, "id": self.related_entity_id}
