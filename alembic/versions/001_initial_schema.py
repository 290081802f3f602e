"""Initial schema — users, teams, zones and assignment tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SINGLE_TARGET = "(agent_id IS NULL) <> (team_id IS NULL)"


def upgrade() -> None:
    # Users (FKs to teams/zones added once those tables exist)
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="INACTIVE"),
        sa.Column("primary_team_id", sa.Integer, nullable=True),
        sa.Column("primary_zone_id", sa.Integer, nullable=True),
        sa.Column("team_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"),
        sa.Column("zone_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"),
        sa.Column(
            "created_by",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_users_role", "users", ["role"])
    op.create_index("idx_users_created_by", "users", ["created_by"])

    # Teams
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="INACTIVE"),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("leader_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("agent_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"),
    )
    op.create_index("idx_teams_created_by", "teams", ["created_by"])

    # Zones
    op.create_table(
        "zones",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("boundary", sa.JSON, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column(
            "assigned_agent_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "team_id",
            sa.Integer,
            sa.ForeignKey("teams.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
    )
    op.create_index("idx_zones_status", "zones", ["status"])

    op.create_foreign_key(
        "fk_users_primary_team", "users", "teams",
        ["primary_team_id"], ["id"], ondelete="SET NULL",
    )
    op.create_foreign_key(
        "fk_users_primary_zone", "users", "zones",
        ["primary_zone_id"], ["id"], ondelete="SET NULL",
    )

    # Scheduled assignments
    op.create_table(
        "scheduled_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "agent_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "team_id",
            sa.Integer,
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "zone_id",
            sa.Integer,
            sa.ForeignKey("zones.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assigned_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("effective_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("notification_sent", sa.Boolean, nullable=False, server_default="false"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(SINGLE_TARGET, name="ck_scheduled_single_target"),
    )
    op.create_index(
        "idx_scheduled_status_date", "scheduled_assignments", ["status", "scheduled_date"]
    )
    op.create_index("idx_scheduled_zone", "scheduled_assignments", ["zone_id"])

    # Agent-zone assignments
    op.create_table(
        "agent_zone_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "agent_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "team_id",
            sa.Integer,
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "zone_id",
            sa.Integer,
            sa.ForeignKey("zones.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assigned_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("effective_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("effective_to", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column(
            "scheduled_assignment_id",
            sa.Integer,
            sa.ForeignKey("scheduled_assignments.id", ondelete="SET NULL"),
            unique=True,
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(SINGLE_TARGET, name="ck_aza_single_target"),
    )
    op.create_index("idx_aza_zone_open", "agent_zone_assignments", ["zone_id", "effective_to"])
    op.create_index("idx_aza_agent", "agent_zone_assignments", ["agent_id"])
    op.create_index("idx_aza_team", "agent_zone_assignments", ["team_id"])


def downgrade() -> None:
    op.drop_table("agent_zone_assignments")
    op.drop_table("scheduled_assignments")
    op.drop_constraint("fk_users_primary_zone", "users", type_="foreignkey")
    op.drop_constraint("fk_users_primary_team", "users", type_="foreignkey")
    op.drop_table("zones")
    op.drop_table("teams")
    op.drop_table("users")
