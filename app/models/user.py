"""
User model for authentication.

Each User is a staff account with a single role label. What a role may do is
decided by the role_permissions table (see app.models.permission).
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from app.core.database import Base
from app.core.permissions import Role


class User(Base):
    """Staff account that can sign in to the tracker."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication credentials (email stored lower-cased)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # Profile
    name = Column(String, nullable=True)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=Role.USER,
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
