"""Create links table

Revision ID: 001_links
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_links'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the links table and its unique index on code.

    Skipped if the table already exists (created by the app on startup).
    """
    bind = op.get_bind()
    inspector = inspect(bind)

    if 'links' in inspector.get_table_names():
        return

    op.create_table(
        'links',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_links_code',
        'links',
        ['code'],
        unique=True
    )


def downgrade() -> None:
    op.drop_index('ix_links_code', table_name='links')
    op.drop_table('links')
