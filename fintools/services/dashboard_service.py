from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from fintools.logger_config import logger
from fintools.models.asset import Asset
from fintools.models.expense import Expense
from fintools.models.revenue import Revenue
from fintools.models.transaction import Transaction, TransactionType
from fintools.models.user import User, UserRole

# Bucket label per cash-flow interval; labels sort chronologically as strings
BUCKET_FORMATS = {
    "day": "%Y-%m-%d",
    "week": "%Y-%U",
    "month": "%Y-%m",
    "year": "%Y",
}

# Types that add to an account balance; every other type subtracts.
# A transfer is therefore a plain debit with no offsetting credit elsewhere.
CREDIT_TYPES = (TransactionType.income, TransactionType.investment)


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class DashboardService:
    """
    Financial summary and cash-flow aggregation
    """
    def __init__(self, db: Session):
        self.db = db

    def _total(self, column, *criteria) -> Decimal:
        query = self.db.query(func.coalesce(func.sum(column), 0))
        if criteria:
            query = query.filter(*criteria)
        return _decimal(query.scalar())

    # ================= SUMMARY ===================

    def get_cash_balance(self) -> Dict[str, Decimal]:
        signed_amount = case(
            (Transaction.type.in_(CREDIT_TYPES), Transaction.amount),
            else_=-Transaction.amount,
        )
        rows = (
            self.db.query(Transaction.account, func.sum(signed_amount))
            .group_by(Transaction.account)
            .all()
        )
        return {account.value: _decimal(balance) for account, balance in rows}

    def get_financial_summary(self) -> Dict[str, object]:
        total_expenses = self._total(Expense.amount)
        total_revenue = self._total(Revenue.amount)
        summary = {
            "total_expenses": total_expenses,
            "total_revenue": total_revenue,
            "pure_profit": total_revenue - total_expenses,
            "total_assets": self._total(Asset.current_value),
            "founder_contributions": self._total(User.fund_contribution, User.role == UserRole.founder),
            "cash_balance": self.get_cash_balance(),
        }
        logger.debug(f"Financial summary: revenue={total_revenue} expenses={total_expenses}")
        return summary

    # ================= CASH FLOW ===================

    def get_cash_flow(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        interval: str = "month",
    ) -> List[Dict[str, object]]:
        """
        Per-bucket income/expense/investment/transfer totals between the two
        dates (inclusive), oldest bucket first. Defaults to the last year.
        """
        end = end_date or date.today()
        start = start_date or (end - timedelta(days=365))
        fmt = BUCKET_FORMATS.get(interval)
        if fmt is None:
            raise ValueError(f"Unsupported interval '{interval}'")

        rows = (
            self.db.query(Transaction.date, Transaction.type, func.sum(Transaction.amount))
            .filter(Transaction.date >= start, Transaction.date <= end)
            .group_by(Transaction.date, Transaction.type)
            .all()
        )

        buckets: Dict[str, Dict[str, Decimal]] = defaultdict(
            lambda: {t.value: Decimal("0") for t in TransactionType}
        )
        for day, txn_type, total in rows:
            buckets[day.strftime(fmt)][txn_type.value] += _decimal(total)

        cash_flow = []
        for label in sorted(buckets):
            totals = buckets[label]
            cash_flow.append({
                "date": label,
                **totals,
                "net_cash_flow": totals["income"] - totals["expense"],
            })
        return cash_flow

    def get_founder_contributions(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == UserRole.founder)
            .order_by(User.name)
            .all()
        )
