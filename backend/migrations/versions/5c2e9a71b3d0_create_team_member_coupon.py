"""create team, member and coupon tables

Revision ID: 5c2e9a71b3d0
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e9a71b3d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'team' not in existing_tables:
        op.create_table(
            'team',
            sa.Column('id', sa.String(length=6), primary_key=True),
            sa.Column('name', sa.String(length=25), nullable=False, unique=True),
            sa.Column('story', sa.Integer(), nullable=False),
            sa.Column('stage', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('phase', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('health', sa.Float(), nullable=False, server_default='100'),
            sa.Column('is_restored', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('final_question', sa.Text(), nullable=True),
            sa.Column('start_time', sa.DateTime(), nullable=True),
            sa.Column('end_time', sa.DateTime(), nullable=True),
            sa.Column('last_synced_time', sa.DateTime(), nullable=True),
        )

    if 'member' not in existing_tables:
        op.create_table(
            'member',
            sa.Column('team_id', sa.String(length=6), sa.ForeignKey('team.id'), primary_key=True),
            sa.Column('phone_number', sa.BigInteger(), primary_key=True),
        )
        op.create_index('ix_member_phone_number', 'member', ['phone_number'])

    if 'coupon' not in existing_tables:
        op.create_table(
            'coupon',
            sa.Column('code', sa.String(length=64), primary_key=True),
            sa.Column('is_used', sa.Boolean(), nullable=False, server_default=sa.false()),
        )


def downgrade():
    op.drop_table('coupon')
    op.drop_index('ix_member_phone_number', table_name='member')
    op.drop_table('member')
    op.drop_table('team')
