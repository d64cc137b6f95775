"""
Role permission endpoints.

- GET /permissions/: the full role/ability matrix (admin)
- POST /permissions/, DELETE /permissions/: grant or revoke one pair (admin)
- GET /permissions/mine: the caller's own abilities (any signed-in user)
- /permissions/abilities: the ability catalog (admin)
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import CurrentUser, get_admin_user, get_current_user
from app.core.permissions import Role
from app.crud import permission as permission_crud
from app.schemas.permission import (
    AbilityCreateRequest,
    AbilityResponse,
    GrantRequest,
    GrantResult,
    MyPermissions,
    PermissionMatrix,
    RoleAbilities,
)

router = APIRouter(prefix="/permissions", tags=["Permissions"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=PermissionMatrix)
def get_permission_matrix(
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """Every role with its abilities, plus the catalog, for the permissions editor."""
    matrix, catalog = permission_crud.list_matrix(db)
    return PermissionMatrix(
        roles=[RoleAbilities(role=role, abilities=matrix[role]) for role in Role],
        abilities=catalog,
    )


@router.post("/", response_model=GrantResult)
def grant_ability(
    request: GrantRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Grant an ability to a role. Granting an existing pair succeeds with
    ``changed: false``. Legacy key names are accepted.
    """
    changed = permission_crud.grant(db, request.role, request.ability)
    logger.info(
        f"Admin {admin_user.id} granted {request.ability} to {request.role.value} (changed={changed})"
    )
    return GrantResult(role=request.role, ability=request.ability, changed=changed)


@router.delete("/", response_model=GrantResult)
def revoke_ability(
    request: GrantRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """Revoke an ability from a role. Takes effect on the role's next request."""
    changed = permission_crud.revoke(db, request.role, request.ability)
    logger.info(
        f"Admin {admin_user.id} revoked {request.ability} from {request.role.value} (changed={changed})"
    )
    return GrantResult(role=request.role, ability=request.ability, changed=changed)


@router.get("/mine", response_model=MyPermissions)
def my_permissions(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's own ability set; never anyone else's."""
    return MyPermissions(
        role=current_user.role,
        permissions=permission_crud.list_grants(db, current_user.role),
    )


@router.get("/abilities", response_model=List[AbilityResponse])
def list_abilities(
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    return [
        AbilityResponse(
            key=a.key,
            description=a.description,
            canonical=a.key in permission_crud.CANONICAL_KEYS,
            created_at=a.created_at,
        )
        for a in permission_crud.list_abilities(db)
    ]


@router.post("/abilities", status_code=201, response_model=AbilityResponse)
def create_ability(
    request: AbilityCreateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """Add a custom key to the catalog so it can be granted."""
    ability = permission_crud.create_ability(db, request.key, request.description)
    logger.info(f"Admin {admin_user.id} added ability {ability.key}")
    return AbilityResponse(
        key=ability.key,
        description=ability.description,
        canonical=False,
        created_at=ability.created_at,
    )


@router.delete("/abilities/{key}", status_code=204)
def delete_ability(
    key: str,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """Remove a custom key and all its grants. Built-in keys are protected."""
    permission_crud.delete_ability(db, key)
    logger.info(f"Admin {admin_user.id} deleted ability {key}")
    return Response(status_code=204)
