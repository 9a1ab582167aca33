"""Create players table.

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
    """Create players table with referral counters and version column."""
    op.create_table(
        'players',
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('telegram_id', sa.BigInteger(), nullable=False),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('avatar_url', sa.String(1024), nullable=True),
        sa.Column('token_balance', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('click_power', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('energy', sa.Integer(), nullable=False, server_default='500'),
        sa.Column('max_energy', sa.Integer(), nullable=False, server_default='500'),
        sa.Column('last_click_time', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('referred_by', sa.String(32), nullable=True),
        sa.Column('total_referrals', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('referral_rewards', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('friends', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1', comment='Optimistic concurrency counter'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('token_balance >= 0', name='check_player_token_balance_non_negative'),
        sa.CheckConstraint('total_referrals >= 0', name='check_player_total_referrals_non_negative'),
        sa.CheckConstraint('referral_rewards >= 0', name='check_player_referral_rewards_non_negative'),
        sa.CheckConstraint('referred_by IS NULL OR referred_by <> id', name='check_player_no_self_referral'),
    )
    op.create_index('ix_players_telegram_id', 'players', ['telegram_id'], unique=True)
    op.create_index('ix_players_referred_by', 'players', ['referred_by'])


def downgrade() -> None:
    """Drop players table."""
    op.drop_index('ix_players_referred_by', table_name='players')
    op.drop_index('ix_players_telegram_id', table_name='players')
    op.drop_table('players')
