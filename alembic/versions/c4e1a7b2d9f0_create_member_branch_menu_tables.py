"""create_member_branch_menu_tables

Revision ID: c4e1a7b2d9f0
Revises:
Create Date: 2026-10-19 10:12:31.482051

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'c4e1a7b2d9f0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('login_id', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=50), nullable=False),
        sa.Column('username', sa.String(length=20), nullable=False),
        sa.Column('password', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=10), nullable=False, server_default='user'),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('email_validate_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('login_id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_members_role', 'members', ['role'])

    op.create_table('branches',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=20), nullable=False),
        sa.Column('url', sa.String(length=100), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False, server_default='99'),
        sa.Column('is_show', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('menus',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=20), nullable=False),
        sa.Column('link', sa.String(length=20), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False, server_default='99'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('authorities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=False),
        sa.Column('menu_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['branch_id'], ['branches.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['menu_id'], ['menus.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id', 'branch_id', 'menu_id', name='uq_authority_member_branch_menu'),
    )
    op.create_index('ix_authorities_member', 'authorities', ['member_id'])
    op.create_index('ix_authorities_member_branch', 'authorities', ['member_id', 'branch_id'])

    op.create_table('files',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=False),
        sa.Column('originalname', sa.String(length=255), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('mimetype', sa.String(length=100), nullable=False),
        sa.Column('size', sa.BigInteger(), nullable=False),
        sa.Column('storage', sa.String(length=10), nullable=False, server_default='s3'),
        sa.Column('path', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('last_accessed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('filename'),
    )
    op.create_index('ix_files_branch_id', 'files', ['branch_id'])


def downgrade() -> None:
    op.drop_index('ix_files_branch_id', table_name='files')
    op.drop_table('files')
    op.drop_index('ix_authorities_member_branch', table_name='authorities')
    op.drop_index('ix_authorities_member', table_name='authorities')
    op.drop_table('authorities')
    op.drop_table('menus')
    op.drop_table('branches')
    op.drop_index('ix_members_role', table_name='members')
    op.drop_table('members')
