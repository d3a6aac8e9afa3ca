"""Create resource hub tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

publish_status = sa.Enum("DRAFT", "PUBLISH", name="publishstatus")
taxonomy = sa.Enum("TYPE", "TOPIC", "AUDIENCE", name="taxonomy")


def upgrade() -> None:
    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("thumbnail_url", sa.String(length=500), nullable=True),
        sa.Column("menu_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_resources_id"), "resources", ["id"], unique=False)
    op.create_index(op.f("ix_resources_title"), "resources", ["title"], unique=False)
    op.create_index(op.f("ix_resources_slug"), "resources", ["slug"], unique=True)
    op.create_index("idx_resources_status", "resources", ["status"], unique=False)

    op.create_table(
        "terms",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("taxonomy", taxonomy, nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("icon", sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(["parent_id"], ["terms.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("taxonomy", "slug", name="uq_term_taxonomy_slug"),
    )
    op.create_index(op.f("ix_terms_id"), "terms", ["id"], unique=False)
    op.create_index(op.f("ix_terms_taxonomy"), "terms", ["taxonomy"], unique=False)

    op.create_table(
        "resource_terms",
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("term_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["resource_id"], ["resources.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["term_id"], ["terms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("resource_id", "term_id"),
    )

    op.create_table(
        "resource_meta",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("meta_key", sa.String(length=100), nullable=False),
        sa.Column("meta_value", sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(["resource_id"], ["resources.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("resource_id", "meta_key", name="uq_resource_meta_key"),
    )
    op.create_index(op.f("ix_resource_meta_id"), "resource_meta", ["id"], unique=False)
    op.create_index(op.f("ix_resource_meta_resource_id"), "resource_meta", ["resource_id"], unique=False)

    op.create_table(
        "collections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("display_style", sa.String(length=20), nullable=False),
        sa.Column("show_progress", sa.Boolean(), nullable=False),
        sa.Column("progress", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_collections_id"), "collections", ["id"], unique=False)
    op.create_index(op.f("ix_collections_slug"), "collections", ["slug"], unique=True)

    op.create_table(
        "collection_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("collection_id", sa.Integer(), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["resource_id"], ["resources.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("collection_id", "resource_id", name="uq_collection_resource"),
    )
    op.create_index(op.f("ix_collection_items_id"), "collection_items", ["id"], unique=False)
    op.create_index(op.f("ix_collection_items_collection_id"), "collection_items", ["collection_id"], unique=False)
    op.create_index(op.f("ix_collection_items_resource_id"), "collection_items", ["resource_id"], unique=False)
    op.create_index("ix_collection_items_order", "collection_items", ["collection_id", "order"], unique=False)


def downgrade() -> None:
    op.drop_table("collection_items")
    op.drop_table("collections")
    op.drop_table("resource_meta")
    op.drop_table("resource_terms")
    op.drop_table("terms")
    op.drop_table("resources")
    publish_status.drop(op.get_bind(), checkfirst=True)
    taxonomy.drop(op.get_bind(), checkfirst=True)
