# ORGS/security.py
"""
Route dependencies for organization-scoped endpoints.

Re-exports the JWT dependencies from core/security and adds membership
checks that are re-read from Firestore on every request.
"""

from fastapi import Depends

from reunitems.core.security import get_current_user, get_optional_user
from reunitems.ORGS import membership


async def get_org_member(org_id: str, current_user: dict = Depends(get_current_user)) -> dict:
    """Approved member (any role) of the organization in the path."""
    await membership.require_member(org_id, current_user["user_id"])
    return current_user


async def get_org_admin(org_id: str, current_user: dict = Depends(get_current_user)) -> dict:
    """Approved admin or superadmin of the organization in the path."""
    await membership.require_admin(org_id, current_user["user_id"])
    return current_user


async def get_site_owner(current_user: dict = Depends(get_current_user)) -> dict:
    await membership.require_site_owner(current_user["user_id"])
    return current_user


__all__ = [
    "get_current_user",
    "get_optional_user",
    "get_org_member",
    "get_org_admin",
    "get_site_owner",
]
