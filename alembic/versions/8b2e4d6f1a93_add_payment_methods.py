"""add saved payment methods

Revision ID: 8b2e4d6f1a93
Revises: 3f1c9a2b7d10
Create Date: 2026-10-19 15:40:07.118254

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8b2e4d6f1a93'
down_revision: Union[str, Sequence[str], None] = '3f1c9a2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'payment_method',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('card_brand', sa.String(), nullable=True),
        sa.Column('card_last_four', sa.String(), nullable=True),
        sa.Column('card_holder_name', sa.String(), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_payment_method_user_id', 'payment_method', ['user_id'])


def downgrade():
    op.drop_index('ix_payment_method_user_id', table_name='payment_method')
    op.drop_table('payment_method')
