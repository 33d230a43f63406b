# fintools/models/__init__.py
from .user import User, UserRole
from .expense import Expense, ExpenseCategory
from .product import Product, ProductCategory
from .revenue import Revenue, RevenueCategory
from .asset import Asset, AssetCategory, AssetCondition
from .transaction import Transaction, TransactionType, LedgerAccount, EntityKind
