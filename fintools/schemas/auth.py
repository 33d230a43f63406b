from decimal import Decimal
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from fintools.models.user import UserRole
from fintools.schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=4)


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)


class TokenResponse(CamelModel):
    success: bool = True
    token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    id: int
    user_id: str
    email: EmailStr
    name: str
    role: UserRole
    fund_contribution: Decimal
    created_at: Optional[datetime] = None


class ContributionUpdate(CamelModel):
    fund_contribution: Decimal = Field(..., ge=0)


class FounderContribution(CamelModel):
    id: int
    name: str
    fund_contribution: Decimal
