from decimal import Decimal
from typing import Dict

from fintools.core.security import create_access_token
from fintools.models.user import User

API = "/api/v1"


def bearer(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


def money(value) -> Decimal:
    """Amounts travel as JSON strings; compare them as Decimals."""
    return Decimal(str(value))
