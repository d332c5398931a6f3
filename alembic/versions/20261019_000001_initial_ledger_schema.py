"""Create ledger schema.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create accounts, products, investments, earnings, requests and settings."""

    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('balance', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        sa.Column('referral_tier', sa.String(20), nullable=False, server_default='bronze'),
        sa.Column('referral_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('referred_by_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['referred_by_id'], ['accounts.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('email'),
        sa.CheckConstraint('balance >= 0', name='check_account_balance_non_negative'),
        sa.CheckConstraint('referral_count >= 0', name='check_account_referral_count_non_negative'),
    )
    op.create_index('ix_accounts_username', 'accounts', ['username'])
    op.create_index('ix_accounts_referred_by_id', 'accounts', ['referred_by_id'])

    op.create_table(
        'investment_products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('minimum_amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('return_rate', sa.DECIMAL(18, 8), nullable=False, comment='Percent of principal paid per period'),
        sa.Column('return_period', sa.Integer(), nullable=False),
        sa.Column('return_period_unit', sa.String(10), nullable=False, server_default='day'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('minimum_amount >= 0', name='check_product_minimum_amount_non_negative'),
        sa.CheckConstraint('return_rate >= 0', name='check_product_return_rate_non_negative'),
        sa.CheckConstraint('return_period >= 1', name='check_product_return_period_positive'),
    )
    op.create_index('ix_investment_products_status', 'investment_products', ['status'])

    op.create_table(
        'investments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('amount_invested', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('current_value', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('last_return_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('withdrawn_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['investment_products.id']),
        sa.CheckConstraint('amount_invested > 0', name='check_investment_amount_positive'),
        sa.CheckConstraint('current_value >= 0', name='check_investment_current_value_non_negative'),
    )
    op.create_index('ix_investments_account_id', 'investments', ['account_id'])
    op.create_index('ix_investments_product_id', 'investments', ['product_id'])
    op.create_index('idx_investment_status', 'investments', ['status'])

    op.create_table(
        'earnings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('source', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('description', sa.String(500), nullable=False, server_default=''),
        sa.Column('reference_type', sa.String(50), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('idempotency_key', sa.String(128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('idempotency_key'),
    )
    op.create_index('ix_earnings_account_id', 'earnings', ['account_id'])
    op.create_index('idx_earning_account_source', 'earnings', ['account_id', 'source'])
    op.create_index('idx_earning_reference', 'earnings', ['reference_type', 'reference_id'])

    op.create_table(
        'withdrawals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('payment_method', sa.String(20), nullable=False),
        sa.Column('payment_details', sa.String(500), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
    )
    op.create_index('ix_withdrawals_account_id', 'withdrawals', ['account_id'])
    op.create_index('ix_withdrawals_status', 'withdrawals', ['status'])

    op.create_table(
        'recharge_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('proof', sa.String(500), nullable=False, comment='Reference to proof-of-payment upload'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.CheckConstraint('amount > 0', name='check_recharge_request_amount_positive'),
    )
    op.create_index('ix_recharge_requests_account_id', 'recharge_requests', ['account_id'])
    op.create_index('ix_recharge_requests_status', 'recharge_requests', ['status'])

    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False, server_default='general'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_site_settings_key', 'site_settings', ['key'], unique=True)

    # Seed commission and withdrawal settings
    op.execute(
        "INSERT INTO site_settings (key, value, category) VALUES "
        "('referral_bonus', '10', 'referral'), "
        "('referral_level_bonus_increment', '5', 'referral'), "
        "('minimum_withdrawal', '0', 'withdrawal')"
    )


def downgrade() -> None:
    """Drop ledger schema."""
    op.drop_table('site_settings')
    op.drop_table('recharge_requests')
    op.drop_table('withdrawals')
    op.drop_table('earnings')
    op.drop_table('investments')
    op.drop_table('investment_products')
    op.drop_table('accounts')
