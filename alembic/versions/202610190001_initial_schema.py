"""Initial schema for users, goals, commissions, and audit logs

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("RECRUITER", "ADMIN", "SUPERADMIN", name="user_role")
user_status_enum = sa.Enum("ACTIVE", "INACTIVE", name="user_status")
audit_action_enum = sa.Enum(
    "COMMISSION_CREATED",
    "COMMISSION_DELETED",
    "GOAL_CREATED",
    "USER_STATUS_CHANGED",
    name="audit_action",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=128), nullable=False),
        sa.Column("last_name", sa.String(length=128), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="RECRUITER"),
        sa.Column("status", user_status_enum, nullable=False, server_default="ACTIVE"),
        sa.Column("commission_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("reset_token", sa.String(length=64), nullable=True),
        sa.Column("reset_token_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("reset_token", name="uq_users_reset_token"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "goals",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "recruiter_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_goals_amount_positive"),
        sa.CheckConstraint("period_end > period_start", name="ck_goals_period_order"),
    )
    op.create_index("ix_goals_recruiter_id", "goals", ["recruiter_id"])
    op.create_index("ix_goals_recruiter_period_end", "goals", ["recruiter_id", "period_end"])

    op.create_table(
        "commissions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "recruiter_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "logged_by_id",
            sa.String(length=36),
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("logged_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_commissions_amount_positive"),
    )
    op.create_index("ix_commissions_recruiter_id", "commissions", ["recruiter_id"])
    op.create_index(
        "ix_commissions_recruiter_logged_date",
        "commissions",
        ["recruiter_id", "logged_date"],
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "actor_id",
            sa.String(length=36),
            sa.ForeignKey("users.id"),
            nullable=False,
        ),
        sa.Column("action", audit_action_enum, nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_logs_actor_id", "audit_logs", ["actor_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_created_at", table_name="audit_logs")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_actor_id", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_commissions_recruiter_logged_date", table_name="commissions")
    op.drop_index("ix_commissions_recruiter_id", table_name="commissions")
    op.drop_table("commissions")

    op.drop_index("ix_goals_recruiter_period_end", table_name="goals")
    op.drop_index("ix_goals_recruiter_id", table_name="goals")
    op.drop_table("goals")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    audit_action_enum.drop(bind, checkfirst=True)
    user_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
