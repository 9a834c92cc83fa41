"""initial_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 10:12:31.402118

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_TOPICS = ("Books", "Coins", "Stamps", "Other")

VALUE_TABLES = (
    ("number_field_values", sa.Float()),
    ("text_field_values", sa.String(length=255)),
    ("multiline_text_field_values", sa.Text()),
    ("checkbox_field_values", sa.Boolean()),
    ("date_field_values", sa.DateTime(timezone=True)),
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), nullable=False, comment="User ID"),
        sa.Column("username", sa.String(length=64), nullable=False, comment="Unique user handle"),
        sa.Column("email", sa.String(length=255), nullable=False, comment="User email address"),
        sa.Column("fullname", sa.String(length=255), nullable=False),
        sa.Column(
            "is_admin",
            sa.Boolean(),
            nullable=False,
            comment="Whether the user may act on any collection",
        ),
        sa.Column(
            "blocked",
            sa.Boolean(),
            nullable=False,
            comment="Whether the user is barred from acting",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "topics",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "collections",
        sa.Column("id", sa.String(length=32), nullable=False, comment="Collection ID"),
        sa.Column(
            "owner_id",
            sa.String(length=32),
            nullable=False,
            comment="Foreign key to users table",
        ),
        sa.Column(
            "name",
            sa.String(length=100),
            nullable=False,
            comment="Collection name (1-100 chars)",
        ),
        sa.Column(
            "topic_id",
            sa.String(length=32),
            nullable=False,
            comment="Foreign key to topics table",
        ),
        sa.Column("image", sa.String(length=2048), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_collections_owner_id"), "collections", ["owner_id"])

    op.create_table(
        "collection_fields",
        sa.Column("id", sa.String(length=32), nullable=False, comment="Field ID"),
        sa.Column(
            "collection_id",
            sa.String(length=32),
            nullable=False,
            comment="Foreign key to collections table",
        ),
        sa.Column(
            "name",
            sa.String(length=25),
            nullable=False,
            comment="Field name (1-25 chars)",
        ),
        sa.Column("type", sa.String(length=16), nullable=False, comment="Declared field type"),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_collection_fields_collection_id"), "collection_fields", ["collection_id"]
    )

    op.create_table(
        "items",
        sa.Column("id", sa.String(length=32), nullable=False, comment="Item ID"),
        sa.Column(
            "collection_id",
            sa.String(length=32),
            nullable=False,
            comment="Foreign key to collections table",
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_items_collection_id"), "items", ["collection_id"])

    op.create_table(
        "item_tags",
        sa.Column("item_id", sa.String(length=32), nullable=False),
        sa.Column("tag", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("item_id", "tag"),
    )
    op.create_index(op.f("ix_item_tags_tag"), "item_tags", ["tag"])

    for table_name, value_type in VALUE_TABLES:
        op.create_table(
            table_name,
            sa.Column("item_id", sa.String(length=32), nullable=False),
            sa.Column("field_id", sa.String(length=32), nullable=False),
            sa.Column("value", value_type, nullable=False),
            sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(
                ["field_id"], ["collection_fields.id"], ondelete="CASCADE"
            ),
            sa.PrimaryKeyConstraint("item_id", "field_id"),
        )
        op.create_index(op.f(f"ix_{table_name}_field_id"), table_name, ["field_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("item_id", sa.String(length=32), nullable=False),
        sa.Column("author_id", sa.String(length=32), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_comments_item_id"), "comments", ["item_id"])

    topics = sa.table("topics", sa.column("id", sa.String), sa.column("name", sa.String))
    op.bulk_insert(
        topics,
        [{"id": f"topic-{name.lower()}", "name": name} for name in DEFAULT_TOPICS],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_comments_item_id"), table_name="comments")
    op.drop_table("comments")
    for table_name, _ in reversed(VALUE_TABLES):
        op.drop_index(op.f(f"ix_{table_name}_field_id"), table_name=table_name)
        op.drop_table(table_name)
    op.drop_index(op.f("ix_item_tags_tag"), table_name="item_tags")
    op.drop_table("item_tags")
    op.drop_index(op.f("ix_items_collection_id"), table_name="items")
    op.drop_table("items")
    op.drop_index(op.f("ix_collection_fields_collection_id"), table_name="collection_fields")
    op.drop_table("collection_fields")
    op.drop_index(op.f("ix_collections_owner_id"), table_name="collections")
    op.drop_table("collections")
    op.drop_table("topics")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
