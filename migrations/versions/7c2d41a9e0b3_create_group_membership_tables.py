"""create_group_membership_tables

Revision ID: 7c2d41a9e0b3
Revises:
Create Date: 2026-10-19 09:12:44.310522

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c2d41a9e0b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create groups and group_members tables."""
    op.create_table('groups',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('is_public', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('member_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('max_members', sa.Integer(), server_default='100', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('member_count >= 0', name='ck_groups_member_count_non_negative'),
        sa.CheckConstraint('member_count <= max_members', name='ck_groups_member_count_capacity'),
        sa.CheckConstraint('max_members > 0', name='ck_groups_max_members_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_groups_owner_id', 'groups', ['owner_id'], unique=False)

    op.create_table('group_members',
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='PENDING', nullable=False),
        sa.Column('role', sa.String(length=20), server_default='MEMBER', nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('PENDING', 'ACTIVE', 'BANNED')", name='ck_group_members_status'),
        sa.CheckConstraint("role IN ('MEMBER', 'MODERATOR', 'ADMIN')", name='ck_group_members_role'),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('group_id', 'user_id'),
    )
    op.create_index('ix_group_members_user_id', 'group_members', ['user_id'], unique=False)
    op.create_index('ix_group_members_group_status', 'group_members', ['group_id', 'status'], unique=False)


def downgrade() -> None:
    """Drop group membership tables."""
    op.drop_index('ix_group_members_group_status', table_name='group_members')
    op.drop_index('ix_group_members_user_id', table_name='group_members')
    op.drop_table('group_members')
    op.drop_index('ix_groups_owner_id', table_name='groups')
    op.drop_table('groups')
