"""initial schema

Revision ID: 3f2b9c1d7e40
Revises:
Create Date: 2026-10-18 10:12:41.503127

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2b9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('founder', 'admin', 'manager', name='user_role')
expense_category = sa.Enum(
    'Salary', 'Rental', 'Utilities', 'Office Supplies', 'Equipment', 'Marketing',
    'Transport', 'Insurance', 'Taxes', 'Phone', 'Accessories', 'Courier', 'Bonus',
    'Advertisement', 'Other',
    name='expense_category',
)
product_category = sa.Enum('Phone', 'Accessories', 'Other', name='product_category')
revenue_category = sa.Enum(
    'Sales', 'Services', 'Investments', 'Grants', 'Royalties', 'Interest', 'Other',
    name='revenue_category',
)
asset_category = sa.Enum(
    'Real Estate', 'Vehicle', 'Equipment', 'Technology', 'Furniture',
    'Intellectual Property', 'Investment', 'Other',
    name='asset_category',
)
asset_condition = sa.Enum('Excellent', 'Good', 'Fair', 'Poor', name='asset_condition')
transaction_type = sa.Enum('income', 'expense', 'transfer', 'investment', name='transaction_type')
ledger_account = sa.Enum('main', 'savings', 'investment', 'petty-cash', name='ledger_account')
entity_kind = sa.Enum('User', 'Expense', 'Revenue', 'Asset', name='entity_kind')

ALL_ENUMS = (
    user_role, expense_category, product_category, revenue_category,
    asset_category, asset_condition, transaction_type, ledger_account, entity_kind,
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('fund_contribution', sa.Numeric(15, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_users_user_id'), 'users', ['user_id'], unique=True)

    op.create_table(
        'expenses',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('category', expense_category, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('paid_by_id', sa.Integer(), nullable=False),
        sa.Column('receipt', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('approved', sa.Boolean(), nullable=False),
        sa.Column('approved_by_id', sa.Integer(), nullable=True),
        sa.Column('approval_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_asset', sa.Boolean(), nullable=False),
        sa.Column('is_product_created', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['paid_by_id'], ['users.id']),
        sa.ForeignKeyConstraint(['approved_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('category', 'date', 'paid_by_id', 'is_asset', 'is_product_created'):
        op.create_index(op.f(f'ix_expenses_{column}'), 'expenses', [column], unique=False)

    op.create_table(
        'products',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=True),
        sa.Column('category', product_category, nullable=False),
        sa.Column('purchase_price', sa.Numeric(15, 2), nullable=False),
        sa.Column('selling_price', sa.Numeric(15, 2), nullable=True),
        sa.Column('sold_price', sa.Numeric(15, 2), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('in_stock', sa.Boolean(), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=False),
        sa.Column('sold_date', sa.Date(), nullable=True),
        sa.Column('supplier', sa.String(length=100), nullable=True),
        sa.Column('serial_number', sa.String(length=100), nullable=True),
        sa.Column('related_expense_id', sa.String(length=20), nullable=True),
        sa.Column('is_asset', sa.Boolean(), nullable=False),
        sa.Column('asset_value', sa.Numeric(15, 2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['related_expense_id'], ['expenses.id']),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('category', 'in_stock', 'purchase_date', 'related_expense_id'):
        op.create_index(op.f(f'ix_products_{column}'), 'products', [column], unique=False)

    op.create_table(
        'revenues',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('category', revenue_category, nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('client', sa.String(length=100), nullable=True),
        sa.Column('received_by_id', sa.Integer(), nullable=False),
        sa.Column('invoice', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('verified_by_id', sa.Integer(), nullable=True),
        sa.Column('verification_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['received_by_id'], ['users.id']),
        sa.ForeignKeyConstraint(['verified_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('category', 'date', 'client'):
        op.create_index(op.f(f'ix_revenues_{column}'), 'revenues', [column], unique=False)

    op.create_table(
        'assets',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('category', asset_category, nullable=False),
        sa.Column('purchase_value', sa.Numeric(15, 2), nullable=False),
        sa.Column('current_value', sa.Numeric(15, 2), nullable=False),
        sa.Column('acquisition_date', sa.Date(), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('condition', asset_condition, nullable=False),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('depreciation_rate', sa.Numeric(5, 2), nullable=False),
        sa.Column('last_valuation_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assets_category'), 'assets', ['category'], unique=False)
    op.create_index(op.f('ix_assets_acquisition_date'), 'assets', ['acquisition_date'], unique=False)

    op.create_table(
        'transactions',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('type', transaction_type, nullable=False),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('account', ledger_account, nullable=False),
        sa.Column('related_entity_kind', entity_kind, nullable=True),
        sa.Column('related_entity_id', sa.String(length=20), nullable=True),
        sa.Column('created_by_id', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reconciled', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('type', 'date', 'category', 'account'):
        op.create_index(op.f(f'ix_transactions_{column}'), 'transactions', [column], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('transactions')
    op.drop_table('assets')
    op.drop_table('revenues')
    op.drop_table('products')
    op.drop_table('expenses')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in ALL_ENUMS:
        enum_type.drop(bind, checkfirst=True)
