# file: reunitems/ORGS/org_routes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from reunitems.core.errors import InputError, NotFoundError, ReunitemsError
from reunitems.ORGS import members, membership, organizations
from reunitems.ORGS.models import (
    ApplicationCreate,
    ApprovalStatus,
    Member,
    MemberView,
    Organization,
    OrganizationCreate,
    OrganizationUpdate,
)
from reunitems.ORGS.security import get_current_user, get_org_admin
from reunitems.USERS import users

logger = logging.getLogger("orgs.routes")
router = APIRouter(prefix="/organizations", tags=["ORGS"])


# ==============================
# PUBLIC: FIND YOUR ORGANIZATION
# ==============================
@router.get("", response_model=List[Organization])
async def list_organizations():
    """Approved organizations only."""
    orgs = await organizations.list_approved_organizations()
    return sorted(orgs, key=lambda o: o.name.lower())


# ==============================
# USER: REGISTER AN ORGANIZATION
# ==============================
@router.post("", status_code=201)
async def register_organization(body: OrganizationCreate, current_user: dict = Depends(get_current_user)):
    user_id = current_user["user_id"]
    org_id = await membership.register_organization(
        user_id, body.name, body.address, body.latitude, body.longitude,
    )
    response = {
        "message": "Organization submitted for review",
        "id": org_id,
        "status": ApprovalStatus.PENDING,
    }
    # Navigation hint only; the organization already exists.
    try:
        await users.set_last_organization(user_id, org_id)
    except ReunitemsError as e:
        logger.warning("register_organization: could not remember Organizations/%s for %s: %s", org_id, user_id, e)
        response["warning"] = "Organization was created but could not be set as your current organization"
    return response


@router.get("/{org_id}", response_model=Organization)
async def get_organization(org_id: str, current_user: dict = Depends(get_current_user)):
    """
    Approved organizations are visible to every signed-in user; pending or
    denied ones only to their own applicants and to site owners.
    """
    org = await organizations.get_organization(org_id)
    if org is None:
        raise NotFoundError("Organization not found")
    if org.approval_status != ApprovalStatus.APPROVED:
        user_id = current_user["user_id"]
        if await members.get_member_for_user(org_id, user_id) is None and not await membership.is_site_owner(user_id):
            raise NotFoundError("Organization not found")
    return org


@router.patch("/{org_id}")
async def update_organization(
    org_id: str,
    body: OrganizationUpdate,
    current_user: dict = Depends(get_org_admin),
):
    updates = organizations.organization_updates(body.name, body.address, body.latitude, body.longitude)
    if "name" in updates and not updates["name"].strip():
        raise InputError("Organization name cannot be empty")
    if not updates:
        raise InputError("Nothing to update")
    await organizations.update_organization(org_id, updates)
    logger.info("Organizations/%s updated by %s: %s", org_id, current_user["user_id"], sorted(updates))
    return {"message": "Organization updated", "id": org_id}


# ==============================
# MEMBERSHIP
# ==============================
@router.post("/{org_id}/applications", response_model=Member, status_code=201)
async def apply_to_organization(
    org_id: str,
    body: ApplicationCreate,
    current_user: dict = Depends(get_current_user),
):
    return await membership.apply_to_organization(current_user["user_id"], org_id, body.role, body.message)


@router.get("/{org_id}/members", response_model=List[MemberView])
async def list_members(
    org_id: str,
    status: Optional[ApprovalStatus] = Query(None),
    current_user: dict = Depends(get_org_admin),
):
    views = []
    for member in await members.list_members(org_id, status=status):
        view = MemberView(**member.model_dump())
        user = await users.get_user(member.user_id) if member.user_id else None
        if user is not None:
            view.user_name = user.display_name
            view.user_email = user.email
        views.append(view)
    return views


@router.post("/{org_id}/members/{member_id}/approve", response_model=Member)
async def approve_member(org_id: str, member_id: str, current_user: dict = Depends(get_current_user)):
    return await membership.approve_member(org_id, member_id, current_user["user_id"])


@router.post("/{org_id}/members/{member_id}/deny", response_model=Member)
async def deny_member(org_id: str, member_id: str, current_user: dict = Depends(get_current_user)):
    return await membership.deny_member(org_id, member_id, current_user["user_id"])
