"""
Role and ability model.

Roles are fixed labels. Abilities are permission keys naming one operation
each; which role holds which ability lives in the role_permissions table,
except for admin, which holds every ability unconditionally.

Everything in this module is pure: callers pass in the grants they loaded,
nothing here touches the database.
"""

import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Union


class Role(str, enum.Enum):
    """User role labels."""
    ADMIN = "admin"
    OPERATIONS = "operations"
    EMPLOYMENT = "employment"
    MANAGER = "manager"
    USER = "user"


class Ability(str, enum.Enum):
    """Canonical ability keys checked by the API."""
    JOB_CREATE = "job_create"
    JOB_EDIT = "job_edit"
    JOB_DELETE = "job_delete"
    JOB_ASSIGN = "job_assign"
    JOB_UNASSIGN = "job_unassign"

    CANDIDATE_VIEW = "candidate_view"
    CANDIDATE_CREATE = "candidate_create"
    CANDIDATE_EDIT = "candidate_edit"
    CANDIDATE_DELETE = "candidate_delete"
    CANDIDATE_ADVANCE = "candidate_advance"
    CANDIDATE_REVERT = "candidate_revert"

    PHOTO_UPLOAD = "photo_upload"


ABILITY_DESCRIPTIONS: Dict[Ability, str] = {
    Ability.JOB_CREATE: "Create positions",
    Ability.JOB_EDIT: "Edit position details",
    Ability.JOB_DELETE: "Delete positions",
    Ability.JOB_ASSIGN: "Assign a hired candidate to a position",
    Ability.JOB_UNASSIGN: "Clear the employee from a position",
    Ability.CANDIDATE_VIEW: "View candidates",
    Ability.CANDIDATE_CREATE: "Add candidates",
    Ability.CANDIDATE_EDIT: "Edit candidates, including setting status directly",
    Ability.CANDIDATE_DELETE: "Delete candidates",
    Ability.CANDIDATE_ADVANCE: "Move a candidate one stage forward",
    Ability.CANDIDATE_REVERT: "Move a candidate one stage back",
    Ability.PHOTO_UPLOAD: "Upload employee photos",
}

# Ability keys used by earlier versions of the admin UI.
# This is the only place old names are translated.
LEGACY_ABILITY_ALIASES: Dict[str, Ability] = {
    "create_job": Ability.JOB_CREATE,
    "edit_job": Ability.JOB_EDIT,
    "update_job": Ability.JOB_EDIT,
    "delete_job": Ability.JOB_DELETE,
    "assign_job": Ability.JOB_ASSIGN,
    "unassign_job": Ability.JOB_UNASSIGN,
    "view_candidates": Ability.CANDIDATE_VIEW,
    "view_candidate": Ability.CANDIDATE_VIEW,
    "create_candidate": Ability.CANDIDATE_CREATE,
    "edit_candidate": Ability.CANDIDATE_EDIT,
    "delete_candidate": Ability.CANDIDATE_DELETE,
    "advance_candidate": Ability.CANDIDATE_ADVANCE,
    "revert_candidate": Ability.CANDIDATE_REVERT,
    "upload_photo": Ability.PHOTO_UPLOAD,
}

# Grants seeded for a fresh database (mirrors the old hard-coded role lists)
DEFAULT_ROLE_ABILITIES: Dict[Role, FrozenSet[Ability]] = {
    Role.OPERATIONS: frozenset({
        Ability.JOB_CREATE,
        Ability.JOB_EDIT,
        Ability.JOB_DELETE,
        Ability.JOB_ASSIGN,
        Ability.JOB_UNASSIGN,
        Ability.PHOTO_UPLOAD,
        Ability.CANDIDATE_VIEW,
    }),
    Role.EMPLOYMENT: frozenset({
        Ability.CANDIDATE_VIEW,
        Ability.CANDIDATE_CREATE,
        Ability.CANDIDATE_EDIT,
        Ability.CANDIDATE_DELETE,
        Ability.CANDIDATE_ADVANCE,
        Ability.CANDIDATE_REVERT,
    }),
    Role.MANAGER: frozenset(),
    Role.USER: frozenset(),
}


def normalize_key(raw: str) -> str:
    """Lower-case and trim a key, mapping legacy names to canonical ones."""
    key = str(raw or "").strip().lower()
    alias = LEGACY_ABILITY_ALIASES.get(key)
    return alias.value if alias else key


def normalize_role(raw: str) -> Optional[Role]:
    """Return the Role for a label, or None if it is not a known role."""
    try:
        return Role(str(raw or "").strip().lower())
    except ValueError:
        return None


def is_allowed(role: Union[Role, str], ability: Union[Ability, str], granted: Iterable[str]) -> bool:
    """
    Decide whether a role may perform an ability.

    Admin is always allowed. Any other role is allowed only if the ability key
    is among the keys granted to it.
    """
    resolved = normalize_role(role.value if isinstance(role, Role) else role)
    if resolved is None:
        return False
    if resolved is Role.ADMIN:
        return True

    key = normalize_key(ability.value if isinstance(ability, Ability) else ability)
    return key in {normalize_key(g) for g in granted}


@dataclass(frozen=True)
class Decision:
    """Result of an authorization check."""
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = Decision(allowed=True)


def authorize(role: Union[Role, str], ability: Union[Ability, str], granted: Iterable[str]) -> Decision:
    """Like is_allowed, but reports why a request was denied."""
    if normalize_role(role.value if isinstance(role, Role) else role) is None:
        return Decision(allowed=False, reason="unknown_role")
    if is_allowed(role, ability, granted):
        return ALLOWED
    return Decision(allowed=False, reason="missing_ability")
