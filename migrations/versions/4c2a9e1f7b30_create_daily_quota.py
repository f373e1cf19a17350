"""create daily_quota table

Revision ID: 4c2a9e1f7b30
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e1f7b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'daily_quota' in set(insp.get_table_names()):
        return
    op.create_table(
        'daily_quota',
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('day', sa.String(length=10), nullable=False),
        sa.Column('songs_played', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_play_time', sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint('name'),
    )


def downgrade():
    op.drop_table('daily_quota')
