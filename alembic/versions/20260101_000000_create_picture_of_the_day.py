"""Create the picture_of_the_day table

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the picture_of_the_day table."""
    op.create_table(
        "picture_of_the_day",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(5000), nullable=True),
        sa.Column("short_description", sa.String(1000), nullable=True),
        sa.Column("credit", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("original_image", sa.LargeBinary(), nullable=True),
        sa.Column("dithered_image", sa.LargeBinary(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date"),
    )
    op.create_index("ix_picture_of_the_day_image_url", "picture_of_the_day", ["image_url"])


def downgrade() -> None:
    """Drop the picture_of_the_day table."""
    op.drop_index("ix_picture_of_the_day_image_url", table_name="picture_of_the_day")
    op.drop_table("picture_of_the_day")
