"""initial schema: users, joints, votes, complaints

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ROLES = ("user", "moderator", "admin")
_DIRECTIONS = ("up", "down")
_COMPLAINT_STATUSES = ("open", "resolved")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create the four core tables with their constraints and indexes."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column(
            "role",
            sa.Enum(*_ROLES, name="user_role", native_enum=False, create_constraint=True),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "joints",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False),
        sa.Column("downvotes", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("latitude BETWEEN -90 AND 90", name="ck_joints_latitude"),
        sa.CheckConstraint("longitude BETWEEN -180 AND 180", name="ck_joints_longitude"),
        sa.CheckConstraint("upvotes >= 0", name="ck_joints_upvotes"),
        sa.CheckConstraint("downvotes >= 0", name="ck_joints_downvotes"),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_joints_lat_lon", "joints", ["latitude", "longitude"])
    op.create_index("ix_joints_approved_created", "joints", ["is_approved", "created_at"])
    op.create_index("ix_joints_creator_id", "joints", ["creator_id"])

    op.create_table(
        "votes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("joint_id", sa.Uuid(), nullable=False),
        sa.Column(
            "direction",
            sa.Enum(*_DIRECTIONS, name="vote_direction", native_enum=False, create_constraint=True),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["joint_id"], ["joints.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "joint_id", name="uq_votes_user_joint"),
    )
    op.create_index("ix_votes_joint_id", "votes", ["joint_id"])

    op.create_table(
        "complaints",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("joint_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                *_COMPLAINT_STATUSES,
                name="complaint_status",
                native_enum=False,
                create_constraint=True,
            ),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["joint_id"], ["joints.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_complaints_joint_id", "complaints", ["joint_id"])
    op.create_index("ix_complaints_user_id", "complaints", ["user_id"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_complaints_user_id", table_name="complaints")
    op.drop_index("ix_complaints_joint_id", table_name="complaints")
    op.drop_table("complaints")
    op.drop_index("ix_votes_joint_id", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_joints_creator_id", table_name="joints")
    op.drop_index("ix_joints_approved_created", table_name="joints")
    op.drop_index("ix_joints_lat_lon", table_name="joints")
    op.drop_table("joints")
    op.drop_table("users")
