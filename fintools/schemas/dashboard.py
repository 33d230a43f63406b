from decimal import Decimal
from enum import Enum
from typing import Dict

from fintools.schemas.common import CamelModel


class CashFlowInterval(str, Enum):
    day = "day"
    week = "week"
    month = "month"
    year = "year"


class FinancialSummary(CamelModel):
    total_expenses: Decimal
    total_revenue: Decimal
    pure_profit: Decimal
    total_assets: Decimal
    founder_contributions: Decimal
    cash_balance: Dict[str, Decimal]


class CashFlowPoint(CamelModel):
    date: str
    income: Decimal
    expense: Decimal
    investment: Decimal
    transfer: Decimal
    net_cash_flow: Decimal
