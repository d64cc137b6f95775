"""
Ability catalog and role grant operations.

Grants are read straight from the database on every call; nothing is cached
between requests, so a revoke is visible to the very next request.
"""

import logging
from typing import Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.core.permissions import (
    ABILITY_DESCRIPTIONS,
    Ability,
    DEFAULT_ROLE_ABILITIES,
    Role,
    normalize_key,
)
from app.models.permission import AbilityDefinition, RolePermission

logger = logging.getLogger(__name__)

CANONICAL_KEYS = frozenset(a.value for a in Ability)


def list_abilities(db: Session) -> List[AbilityDefinition]:
    return db.query(AbilityDefinition).order_by(AbilityDefinition.key).all()


def get_ability(db: Session, key: str) -> Optional[AbilityDefinition]:
    return db.query(AbilityDefinition).filter(AbilityDefinition.key == normalize_key(key)).first()


def create_ability(db: Session, key: str, description: str = None) -> AbilityDefinition:
    """
    Add a key to the catalog.

    Raises:
        ConflictError: If the key already exists
    """
    key = normalize_key(key)
    if get_ability(db, key):
        raise ConflictError(f"Ability '{key}' already exists", code="ability_exists")

    ability = AbilityDefinition(key=key, description=description)
    db.add(ability)
    db.commit()
    db.refresh(ability)
    return ability


def delete_ability(db: Session, key: str) -> None:
    """
    Remove a custom key and every grant of it.

    Raises:
        NotFoundError: If the key is not in the catalog
        ConflictError: If the key is one the API itself checks
    """
    key = normalize_key(key)
    ability = get_ability(db, key)
    if not ability:
        raise NotFoundError(f"Ability '{key}' not found", code="ability_not_found")
    if key in CANONICAL_KEYS:
        raise ConflictError(f"Ability '{key}' is built in and cannot be deleted", code="ability_protected")

    db.delete(ability)
    db.commit()


def _require_known_ability(db: Session, key: str) -> str:
    key = normalize_key(key)
    if not get_ability(db, key):
        raise BadRequestError(f"Unknown ability '{key}'", code="unknown_ability")
    return key


def grant(db: Session, role: Role, ability: str) -> bool:
    """
    Grant an ability to a role. Granting twice is not an error.

    Returns:
        True if a new grant row was created, False if it already existed
    """
    key = _require_known_ability(db, ability)

    existing = (
        db.query(RolePermission)
        .filter(RolePermission.role == role, RolePermission.ability_key == key)
        .first()
    )
    if existing:
        return False

    db.add(RolePermission(role=role, ability_key=key))
    try:
        db.commit()
    except IntegrityError:
        # Concurrent grant of the same pair won the unique constraint
        db.rollback()
        return False
    return True


def revoke(db: Session, role: Role, ability: str) -> bool:
    """
    Revoke an ability from a role. Revoking a missing grant is not an error.

    Returns:
        True if a grant row was removed
    """
    key = _require_known_ability(db, ability)
    removed = (
        db.query(RolePermission)
        .filter(RolePermission.role == role, RolePermission.ability_key == key)
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed > 0


def list_grants(db: Session, role: Role) -> List[str]:
    """
    Sorted ability keys held by a role. Admin holds the whole catalog.
    """
    if role == Role.ADMIN:
        return [a.key for a in list_abilities(db)]

    rows = (
        db.query(RolePermission.ability_key)
        .filter(RolePermission.role == role)
        .order_by(RolePermission.ability_key)
        .all()
    )
    return [key for (key,) in rows]


def has_grant(db: Session, role: Role, ability: str) -> bool:
    return db.query(
        db.query(RolePermission)
        .filter(RolePermission.role == role, RolePermission.ability_key == normalize_key(ability))
        .exists()
    ).scalar()


def list_matrix(db: Session) -> Tuple[Dict[Role, List[str]], List[str]]:
    """
    Every role with its stored grants (empty list if none), plus the catalog.

    Admin is reported with the full catalog since it bypasses the table.
    """
    catalog = [a.key for a in list_abilities(db)]
    matrix: Dict[Role, List[str]] = {role: [] for role in Role}
    matrix[Role.ADMIN] = list(catalog)

    rows = (
        db.query(RolePermission.role, RolePermission.ability_key)
        .order_by(RolePermission.role, RolePermission.ability_key)
        .all()
    )
    for role, key in rows:
        if role != Role.ADMIN:
            matrix[role].append(key)

    return matrix, catalog


def seed_defaults(db: Session) -> int:
    """
    Make sure every canonical ability exists, with its default grants.

    Default grants are only added for abilities this call creates, so re-running
    it never brings back a grant an admin has revoked. The initial migration
    seeds the same rows.

    Returns:
        Number of rows inserted
    """
    known = {a.key for a in list_abilities(db)}
    created = set()
    for ability in Ability:
        if ability.value not in known:
            db.add(AbilityDefinition(key=ability.value, description=ABILITY_DESCRIPTIONS[ability]))
            created.add(ability)
    db.flush()

    inserted = len(created)
    for role, abilities in DEFAULT_ROLE_ABILITIES.items():
        for ability in abilities:
            if ability in created:
                db.add(RolePermission(role=role, ability_key=ability.value))
                inserted += 1

    db.commit()
    if inserted:
        logger.info(f"Seeded {inserted} ability catalog/grant rows")
    return inserted
