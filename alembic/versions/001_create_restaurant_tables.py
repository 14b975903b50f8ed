"""Create restaurant tables

Revision ID: 001
Revises: None
Create Date: 2025-06-01 00:00:00.000000+00:00

What:  Creates `menu_items`, `reservations` and `site_pages`.
How:   PostgreSQL-specific types: TEXT[] for allergens, JSONB for page
       content, TIMESTAMP WITH TIME ZONE for every timestamp.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── menu_items ────────────────────────────────────────────────────────
    op.create_table(
        "menu_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("name_en", sa.String(200), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("description_en", sa.Text(), nullable=True),
        sa.Column("category", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("category_en", sa.String(100), nullable=True),
        sa.Column(
            "price_cents",
            sa.Integer(),
            nullable=False,
            comment="Price in euro cents",
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "allergens",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
            comment="Allergen tags from the fixed EU vocabulary",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_menu_items_category_position",
        "menu_items",
        ["category", "position"],
    )

    # ── reservations ──────────────────────────────────────────────────────
    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("people", sa.Integer(), nullable=False),
        sa.Column(
            "reserved_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="Requested date and time, cast in the session time zone",
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'new'")),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("people BETWEEN 1 AND 30", name="ck_reservations_people"),
        sa.CheckConstraint(
            "status IN ('new', 'confirmed', 'cancelled')",
            name="ck_reservations_status",
        ),
    )
    op.create_index(
        "idx_reservations_created_at",
        "reservations",
        [sa.text("created_at DESC")],
    )

    # ── site_pages ────────────────────────────────────────────────────────
    op.create_table(
        "site_pages",
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column(
            "data",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("slug"),
    )


def downgrade() -> None:
    op.drop_table("site_pages")
    op.drop_index("idx_reservations_created_at", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("idx_menu_items_category_position", table_name="menu_items")
    op.drop_table("menu_items")
