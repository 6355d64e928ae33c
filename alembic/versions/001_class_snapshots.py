"""class_snapshots: one row per class per scrape (append-only)."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "class_snapshots",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("class_id", sa.String(100), nullable=False),
        sa.Column("class_name", sa.String(128), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("class_date", sa.String(64), nullable=False),
        sa.Column("class_time", sa.String(16), nullable=False),
        sa.Column("instructor", sa.String(128), nullable=True),
        sa.Column("scraped_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("batch_index", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_class_snapshots_class_id", "class_snapshots", ["class_id"], unique=False)
    op.create_index("ix_class_snapshots_scraped_at", "class_snapshots", ["scraped_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_class_snapshots_scraped_at", table_name="class_snapshots")
    op.drop_index("ix_class_snapshots_class_id", table_name="class_snapshots")
    op.drop_table("class_snapshots")
