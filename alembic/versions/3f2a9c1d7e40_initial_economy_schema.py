"""Initial economy schema

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-19 10:12:44.218734

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _updated_at() -> sa.Column:
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('salary', sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint('salary >= 0', name='ck_jobs_salary_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'players',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('attributes', sa.JSON(), nullable=False),
        sa.Column('job_id', sa.Integer(), nullable=True),
        sa.Column('cash', sa.Integer(), nullable=False),
        sa.Column('bank', sa.Integer(), nullable=False),
        sa.Column('is_system', sa.Boolean(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint('cash >= 0', name='ck_players_cash_non_negative'),
        sa.CheckConstraint('bank >= 0', name='ck_players_bank_non_negative'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'bank_accounts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('sub_type', sa.String(length=20), nullable=False),
        sa.Column('balance', sa.Integer(), nullable=False),
        sa.Column('apr', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint('balance >= 0', name='ck_bank_accounts_balance_non_negative'),
        sa.CheckConstraint("type IN ('personal', 'business')", name='ck_bank_accounts_type'),
        sa.CheckConstraint("sub_type IN ('chequing', 'savings', 'investing')", name='ck_bank_accounts_sub_type'),
        sa.ForeignKeyConstraint(['owner_id'], ['players.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_id', 'type', 'sub_type', name='uq_bank_accounts_owner_kind'),
    )
    op.create_index('idx_bank_accounts_sub_type_active', 'bank_accounts', ['sub_type', 'is_active'])
    op.create_table(
        'government_policies',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('savings_apr', sa.Integer(), nullable=False),
        sa.Column('income_tax_rate', sa.Integer(), nullable=False),
        sa.Column('sales_tax_rate', sa.Integer(), nullable=False),
        sa.Column('business_tax_rate', sa.Integer(), nullable=False),
        sa.Column('investing_lockup_months', sa.Integer(), nullable=False),
        sa.Column('is_investing_enabled', sa.Boolean(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'governments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slot', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=False),
        sa.Column('account_id', sa.String(length=36), nullable=True),
        _created_at(),
        sa.CheckConstraint('slot = 1', name='ck_governments_singleton'),
        sa.ForeignKeyConstraint(['player_id'], ['players.id']),
        sa.ForeignKeyConstraint(['account_id'], ['bank_accounts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slot'),
    )
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=False),
        sa.Column('account_id', sa.String(length=36), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('metadata', sa.String(length=255), nullable=True),
        sa.Column('correlation_id', sa.String(length=36), nullable=True),
        sa.Column('counterparty_account_id', sa.String(length=36), nullable=True),
        _created_at(),
        sa.CheckConstraint("type IN ('deposit', 'withdraw', 'transfer')", name='ck_transactions_type'),
        sa.ForeignKeyConstraint(['player_id'], ['players.id']),
        sa.ForeignKeyConstraint(['account_id'], ['bank_accounts.id']),
        sa.ForeignKeyConstraint(['counterparty_account_id'], ['bank_accounts.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_transactions_player_time', 'transactions', ['player_id', 'created_at'])
    op.create_index('idx_transactions_account_time', 'transactions', ['account_id', 'created_at'])
    op.create_index('idx_transactions_correlation', 'transactions', ['correlation_id'])
    op.create_table(
        'interest_accruals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.String(length=36), nullable=False),
        sa.Column('period', sa.String(length=7), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('entry_id', sa.Integer(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['account_id'], ['bank_accounts.id']),
        sa.ForeignKeyConstraint(['entry_id'], ['transactions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('account_id', 'period', name='uq_interest_accruals_account_period'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('interest_accruals')
    op.drop_index('idx_transactions_correlation', table_name='transactions')
    op.drop_index('idx_transactions_account_time', table_name='transactions')
    op.drop_index('idx_transactions_player_time', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('governments')
    op.drop_table('government_policies')
    op.drop_index('idx_bank_accounts_sub_type_active', table_name='bank_accounts')
    op.drop_table('bank_accounts')
    op.drop_table('players')
    op.drop_table('jobs')
