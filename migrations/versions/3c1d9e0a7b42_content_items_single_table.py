"""content items single table

Revision ID: 3c1d9e0a7b42
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1d9e0a7b42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "content_items",
        sa.Column("PK", sa.String(length=255), nullable=False),
        sa.Column("SK", sa.String(length=255), nullable=False),
        sa.Column("entity", sa.String(length=50), nullable=False),
        sa.Column("GSI1PK", sa.String(length=255), nullable=True),
        sa.Column("GSI1SK", sa.String(length=255), nullable=True),
        sa.Column("GSI2PK", sa.String(length=255), nullable=True),
        sa.Column("GSI2SK", sa.String(length=255), nullable=True),
        sa.Column("GSI3PK", sa.String(length=255), nullable=True),
        sa.Column("GSI3SK", sa.String(length=255), nullable=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("PK", "SK"),
    )
    op.create_index("ix_content_items_entity", "content_items", ["entity"])
    op.create_index("ix_content_items_gsi1", "content_items", ["GSI1PK", "GSI1SK"])
    op.create_index("ix_content_items_gsi2", "content_items", ["GSI2PK", "GSI2SK"], unique=True)
    op.create_index("ix_content_items_gsi3", "content_items", ["GSI3PK", "GSI3SK"])


def downgrade() -> None:
    op.drop_index("ix_content_items_gsi3", table_name="content_items")
    op.drop_index("ix_content_items_gsi2", table_name="content_items")
    op.drop_index("ix_content_items_gsi1", table_name="content_items")
    op.drop_index("ix_content_items_entity", table_name="content_items")
    op.drop_table("content_items")
