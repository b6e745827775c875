from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    CheckConstraint,
    ColumnElement,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship
from src.domain.models import Active, Deleted, RecordState

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _uuid() -> str:
    return str(uuid.uuid4())


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    """User role enum matching auth.Role."""

    RECRUITER = "RECRUITER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class UserStatus(str, enum.Enum):
    """User account status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AuditAction(str, enum.Enum):
    COMMISSION_CREATED = "COMMISSION_CREATED"
    COMMISSION_DELETED = "COMMISSION_DELETED"
    GOAL_CREATED = "GOAL_CREATED"
    USER_STATUS_CHANGED = "USER_STATUS_CHANGED"


class SoftDeleteMixin:
    """Soft deletion through a deletion timestamp.

    Queries filter on the `is_live` expression; Python code reads `state`,
    which is either `Active()` or `Deleted(at=...)`.
    """

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    @hybrid_property
    def is_live(self) -> bool:
        return self.deleted_at is None

    @is_live.inplace.expression
    @classmethod
    def _is_live_expression(cls) -> ColumnElement[bool]:
        return cls.deleted_at.is_(None)

    @property
    def state(self) -> RecordState:
        if self.deleted_at is None:
            return Active()
        return Deleted(at=self.deleted_at)

    def mark_deleted(self, at: datetime | None = None) -> None:
        self.deleted_at = at or _utcnow()


class UserModel(SoftDeleteMixin, Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=_enum_values),
        default=UserRole.RECRUITER,
        nullable=False,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status", values_callable=_enum_values),
        default=UserStatus.ACTIVE,
        nullable=False,
    )
    commission_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    reset_token: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
    reset_token_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        nullable=False,
    )

    goals: Mapped[list[GoalModel]] = relationship(back_populates="recruiter")
    commissions: Mapped[list[CommissionModel]] = relationship(
        back_populates="recruiter",
        foreign_keys="CommissionModel.recruiter_id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, role={self.role.value})>"


class GoalModel(SoftDeleteMixin, Base):
    __tablename__ = "goals"
    __table_args__ = (
        Index("ix_goals_recruiter_period_end", "recruiter_id", "period_end"),
        CheckConstraint("amount > 0", name="ck_goals_amount_positive"),
        CheckConstraint("period_end > period_start", name="ck_goals_period_order"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    recruiter_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    period_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    period_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )

    recruiter: Mapped[UserModel] = relationship(back_populates="goals")


class CommissionModel(SoftDeleteMixin, Base):
    __tablename__ = "commissions"
    __table_args__ = (
        Index("ix_commissions_recruiter_logged_date", "recruiter_id", "logged_date"),
        CheckConstraint("amount > 0", name="ck_commissions_amount_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    recruiter_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    logged_by_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    logged_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )

    recruiter: Mapped[UserModel] = relationship(
        back_populates="commissions", foreign_keys=[recruiter_id]
    )
    logged_by: Mapped[UserModel] = relationship(foreign_keys=[logged_by_id])


class AuditLogModel(Base):
    """Append-only audit trail. Rows are never updated or deleted."""

    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    actor_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    action: Mapped[AuditAction] = mapped_column(
        Enum(AuditAction, name="audit_action", values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    actor: Mapped[UserModel] = relationship()
