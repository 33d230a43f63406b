from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
import secrets
import string
from fintools.core.database import Base
from fintools.models.common import enum_column


class UserRole(str, enum.Enum):
    founder = "founder"
    admin = "admin"
    manager = "manager"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(enum_column(UserRole, "user_role"), nullable=False, default=UserRole.founder)
    # Capital paid in by the user; summed over founders on the dashboard
    fund_contribution = Column(Numeric(15, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    expenses = relationship("Expense", back_populates="paid_by", foreign_keys="Expense.paid_by_id")
    revenues = relationship("Revenue", back_populates="received_by", foreign_keys="Revenue.received_by_id")

    @staticmethod
    def generate_user_id(role: UserRole) -> str:
        """Generate a short unique user ID based on role"""
        prefix = {
            UserRole.founder: "FND",
            UserRole.admin: "ADM",
            UserRole.manager: "MGR"
        }[role]

        random_part = ''.join(secrets.choice(string.ascii_uppercase + string.digits)
                             for _ in range(8))

        return f"{prefix}-{random_part}"

    def __repr__(self):
        return f"<User(user_id='{self.user_id}', email='{self.email}')>"
