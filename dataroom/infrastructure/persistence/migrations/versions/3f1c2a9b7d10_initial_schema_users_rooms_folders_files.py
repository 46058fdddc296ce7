"""initial_schema_users_rooms_folders_files

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 10:12:41.508113

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("provider", sa.String(length=32), nullable=False),
        sa.Column("provider_subject", sa.String(length=255), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_user_email"),
        sa.UniqueConstraint(
            "provider", "provider_subject", name="uq_user_provider_subject"
        ),
    )

    op.create_table(
        "data_room",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("owner_id", "name", name="uq_data_room_owner_name"),
    )
    op.create_index("ix_data_room_owner_id", "data_room", ["owner_id"])

    op.create_table(
        "folder",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("data_room_id", sa.String(), nullable=False),
        sa.Column("parent_id", sa.String(), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["data_room_id"], ["data_room.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["folder.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "parent_id IS NULL OR parent_id <> id", name="ck_folder_not_own_parent"
        ),
    )
    op.create_index("ix_folder_owner_id", "folder", ["owner_id"])
    op.create_index("ix_folder_data_room_id", "folder", ["data_room_id"])
    op.create_index("ix_folder_parent_id", "folder", ["parent_id"])
    op.create_index("ix_folder_room_parent", "folder", ["data_room_id", "parent_id"])
    # NULL parent_ids never collide in a composite unique constraint, so root
    # and nested sibling scopes get separate partial indexes.
    op.create_index(
        "ux_folder_sibling_name",
        "folder",
        ["parent_id", "name"],
        unique=True,
        postgresql_where=sa.text("parent_id IS NOT NULL"),
        sqlite_where=sa.text("parent_id IS NOT NULL"),
    )
    op.create_index(
        "ux_folder_root_name",
        "folder",
        ["data_room_id", "name"],
        unique=True,
        postgresql_where=sa.text("parent_id IS NULL"),
        sqlite_where=sa.text("parent_id IS NULL"),
    )

    op.create_table(
        "file",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column("storage_ref", sa.String(), nullable=False),
        sa.Column("folder_id", sa.String(), nullable=False),
        sa.Column("data_room_id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["folder_id"], ["folder.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["data_room_id"], ["data_room.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("folder_id", "name", name="uq_file_folder_name"),
    )
    op.create_index("ix_file_owner_id", "file", ["owner_id"])
    op.create_index("ix_file_folder_id", "file", ["folder_id"])
    op.create_index("ix_file_storage_ref", "file", ["storage_ref"])
    op.create_index("ix_file_room_name", "file", ["data_room_id", "name"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_file_room_name", table_name="file")
    op.drop_index("ix_file_storage_ref", table_name="file")
    op.drop_index("ix_file_folder_id", table_name="file")
    op.drop_index("ix_file_owner_id", table_name="file")
    op.drop_table("file")
    op.drop_index("ux_folder_root_name", table_name="folder")
    op.drop_index("ux_folder_sibling_name", table_name="folder")
    op.drop_index("ix_folder_room_parent", table_name="folder")
    op.drop_index("ix_folder_parent_id", table_name="folder")
    op.drop_index("ix_folder_data_room_id", table_name="folder")
    op.drop_index("ix_folder_owner_id", table_name="folder")
    op.drop_table("folder")
    op.drop_index("ix_data_room_owner_id", table_name="data_room")
    op.drop_table("data_room")
    op.drop_table("app_user")
