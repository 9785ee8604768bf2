"""User ORM model with community role."""

from enum import Enum

from sqlalchemy import ForeignKey, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from elevate.models import Base, BaseModel, enum_values


class UserRole(str, Enum):
    """Roles a community member can hold."""

    RESIDENT = "Resident"
    TENANT = "Tenant"
    ADMIN = "Admin"
    SUPER_ADMIN = "SuperAdmin"
    HELPDESK_ADMIN = "HelpdeskAdmin"
    SECURITY = "Security"


class User(Base, BaseModel):
    """Any person in the system: residents, tenants, administrators and staff."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
    )
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=enum_values, native_enum=False, length=30),
        nullable=False,
        default=UserRole.RESIDENT,
    )
    community_id: Mapped[int | None] = mapped_column(
        ForeignKey("communities.id"),
        nullable=True,
        index=True,
        comment="Home community (null for platform super admins)",
    )

    units: Mapped[list["Unit"]] = relationship(  # noqa: F821
        "Unit",
        back_populates="user",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r}, role={self.role}, community_id={self.community_id})>"


__all__ = ["User", "UserRole"]
