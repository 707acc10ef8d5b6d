"""
FoodHub Backend - User and Provider Profile Models
===================================================

What:  ORM models for marketplace accounts (`users`) and the provider
       storefront record (`provider_profiles`).
Who:   Read by the principal resolver (role/status checks) and by the order
       builder (a provider must be active for its meals to be orderable).

Accounts are created by the identity provider. Admins may suspend or
reactivate them here; nothing else is edited.
A provider is a user whose role is `provider`; its `status` decides whether
its meals can be ordered.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodhub.database import Base


class UserRole(str, Enum):
    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class User(Base):
    """A marketplace account: customer, provider or admin."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.CUSTOMER.value,
        server_default=text("'customer'"),
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserStatus.ACTIVE.value,
        server_default=text("'active'"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    provider_profile: Mapped[Optional["ProviderProfile"]] = relationship(
        back_populates="user", uselist=False
    )

    __table_args__ = (
        CheckConstraint("role IN ('customer', 'provider', 'admin')", name="ck_users_role"),
        CheckConstraint("status IN ('active', 'suspended')", name="ck_users_status"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role}', status='{self.status}')>"


class ProviderProfile(Base):
    """Storefront details of a provider account (one per provider)."""

    __tablename__ = "provider_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    business_name: Mapped[str] = mapped_column(String(120), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    user: Mapped[User] = relationship(back_populates="provider_profile")
