"""Utility modules for draft_desk."""

from draft_desk.utils.champion_ids import normalize_champion_id, normalize_id_set
from draft_desk.utils.role_normalizer import (
    CANONICAL_ROLES,
    ROLE_ALIASES,
    ROLE_ORDER,
    normalize_role,
    unfilled_roles,
)

__all__ = [
    "CANONICAL_ROLES",
    "ROLE_ALIASES",
    "ROLE_ORDER",
    "normalize_champion_id",
    "normalize_id_set",
    "normalize_role",
    "unfilled_roles",
]
