"""create room table

Revision ID: 5c2a9e71b3d0
Revises:
Create Date: 2025-09-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e71b3d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'room' in set(insp.get_table_names()):
        return

    op.create_table(
        'room',
        sa.Column('code', sa.String(length=5), primary_key=True),
        sa.Column('host', sa.String(length=64), nullable=False),
        sa.Column('players', sa.JSON(), nullable=False),
        sa.Column('state', sa.String(length=16), nullable=False, server_default='lobby'),
        sa.Column('created', sa.BigInteger(), nullable=False),
        sa.Column('updated', sa.BigInteger(), nullable=False),
        sa.Column('started', sa.BigInteger(), nullable=True),
        sa.Column('messages', sa.JSON(), nullable=False),
        sa.Column('current_team', sa.String(length=1), nullable=True),
        sa.Column('team_a_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('team_b_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_round', sa.Integer(), nullable=True),
        sa.Column('ticket', sa.Text(), nullable=True),
        sa.Column('turn_deadline', sa.BigInteger(), nullable=True),
        sa.Column('finished', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_room_updated', 'room', ['updated'])


def downgrade():
    op.drop_index('ix_room_updated', table_name='room')
    op.drop_table('room')
