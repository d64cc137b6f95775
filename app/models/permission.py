"""
Ability catalog and role grants.

An AbilityDefinition row is a permission key the admin UI can toggle. A
RolePermission row grants one ability to one role; (role, ability_key) is
unique, so granting twice leaves a single row.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.permissions import Role


class AbilityDefinition(Base):
    __tablename__ = "abilities"

    key = Column(String(64), primary_key=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    grants = relationship("RolePermission", back_populates="ability", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<AbilityDefinition(key='{self.key}')>"


class RolePermission(Base):
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role", "ability_key", name="uq_role_permissions_role_ability"),
    )

    id = Column(Integer, primary_key=True)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    ability_key = Column(String(64), ForeignKey("abilities.key", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    ability = relationship("AbilityDefinition", back_populates="grants")

    def __repr__(self):
        return f"<RolePermission(role={self.role.value}, ability='{self.ability_key}')>"
