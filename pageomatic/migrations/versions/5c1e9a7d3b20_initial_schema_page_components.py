"""Initial schema: page_components

Revision ID: 5c1e9a7d3b20
Revises: 
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "5c1e9a7d3b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Detect database type
    bind = op.get_bind()
    is_postgresql = bind.dialect.name == "postgresql"
    is_sqlite = bind.dialect.name == "sqlite"

    # Use JSONB for PostgreSQL, JSON for SQLite
    if is_postgresql:
        content_type = postgresql.JSONB(astext_type=sa.Text())
    else:
        content_type = sa.JSON()

    # Use appropriate timestamp defaults
    if is_sqlite:
        created_at_default = sa.text("(datetime('now'))")
        updated_at_default = sa.text("(datetime('now'))")
        timestamp_type = sa.DateTime()
    else:
        created_at_default = sa.text("now()")
        updated_at_default = sa.text("now()")
        timestamp_type = sa.DateTime(timezone=True)

    op.create_table(
        "page_components",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("page_slug", sa.String(length=255), nullable=False),
        sa.Column("component_type", sa.String(length=100), nullable=False),
        sa.Column("content", content_type, nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("updated_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", timestamp_type, server_default=created_at_default, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=updated_at_default, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("page_slug", "component_type", name="uq_page_components_slug_type"),
    )
    op.create_index(op.f("ix_page_components_page_slug"), "page_components", ["page_slug"], unique=False)
    op.create_index(op.f("ix_page_components_is_active"), "page_components", ["is_active"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_page_components_is_active"), table_name="page_components")
    op.drop_index(op.f("ix_page_components_page_slug"), table_name="page_components")
    op.drop_table("page_components")
