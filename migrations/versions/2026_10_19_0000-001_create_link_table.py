"""Create link table

Revision ID: 001_create_link
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_create_link'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the link table:
    - id: auto-increment primary key
    - url: original target URL
    - short_url: generated short code, unique
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'link' not in existing_tables:
        op.create_table(
            'link',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('url', sa.Text(), nullable=False),
            sa.Column('short_url', sa.String(length=16), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )

        op.create_index(
            'ix_link_short_url',
            'link',
            ['short_url'],
            unique=True
        )


def downgrade() -> None:
    op.drop_index('ix_link_short_url', table_name='link')
    op.drop_table('link')
