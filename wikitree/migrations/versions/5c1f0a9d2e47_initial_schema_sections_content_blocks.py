"""Initial schema: sections, content_blocks

Revision ID: 5c1f0a9d2e47
Revises: 
Create Date: 2026-10-18 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "5c1f0a9d2e47"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    is_postgresql = bind.dialect.name == "postgresql"
    is_sqlite = bind.dialect.name == "sqlite"

    # Use JSONB for PostgreSQL, JSON elsewhere
    if is_postgresql:
        payload_type = postgresql.JSONB(astext_type=sa.Text())
    else:
        payload_type = sa.JSON()

    if is_sqlite:
        now_default = sa.text("(datetime('now'))")
        timestamp_type = sa.DateTime()
    else:
        now_default = sa.text("now()")
        timestamp_type = sa.DateTime(timezone=True)

    op.create_table(
        "sections",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.String(length=255), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("added_at", timestamp_type, server_default=now_default, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=now_default, nullable=False),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["sections.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("parent_id", "position", name="uq_sections_parent_position"),
    )
    op.create_index(op.f("ix_sections_parent_id"), "sections", ["parent_id"], unique=False)

    op.create_table(
        "content_blocks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("section_id", sa.String(length=255), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("payload", payload_type, nullable=False),
        sa.ForeignKeyConstraint(
            ["section_id"],
            ["sections.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("section_id", "order", name="uq_content_blocks_section_order"),
    )
    op.create_index(op.f("ix_content_blocks_section_id"), "content_blocks", ["section_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_content_blocks_section_id"), table_name="content_blocks")
    op.drop_index(op.f("ix_sections_parent_id"), table_name="sections")

    op.drop_table("content_blocks")
    op.drop_table("sections")
