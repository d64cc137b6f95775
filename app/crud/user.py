"""
CRUD operations for User model.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.core.errors import ConflictError
from app.core.permissions import Role
from app.core.security import get_password_hash
from app.crud.updates import build_update
from app.models.user import User
from app.schemas.user import UserUpdateRequest

EDITABLE_FIELDS = frozenset({"email", "name", "role", "hashed_password"})


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_multi(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def create(db: Session, email: str, password: str, name: Optional[str] = None, role: Role = Role.USER) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises:
        ConflictError: If the email is already registered
    """
    email = email.strip().lower()
    if get_by_email(db, email):
        raise ConflictError("Email already registered", code="email_taken")

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        name=name.strip() if name else None,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update(db: Session, user_id: int, changes: UserUpdateRequest) -> Optional[User]:
    """
    Apply an admin edit. A provided password is re-hashed; email stays unique.

    Raises:
        ConflictError: If the new email belongs to another user
    """
    values = changes.model_dump(exclude_unset=True)

    password = values.pop("password", None)
    if password:
        values["hashed_password"] = get_password_hash(password)

    if "email" in values:
        other = get_by_email(db, values["email"])
        if other and other.id != user_id:
            raise ConflictError("Email already in use", code="email_taken")

    if "name" in values:
        values["name"] = values["name"].strip() if values["name"] else None

    result = db.execute(build_update(User, user_id, values, EDITABLE_FIELDS))
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()
    return get_by_id(db, user_id)


def delete(db: Session, user_id: int) -> bool:
    user = get_by_id(db, user_id)
    if not user:
        return False
    db.delete(user)
    db.commit()
    return True
