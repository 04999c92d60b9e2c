# file: reunitems/ORGS/owner_routes.py
from typing import List

from fastapi import APIRouter, Depends

from reunitems.ORGS import membership
from reunitems.ORGS.models import DecisionResult, PendingOrganization
from reunitems.ORGS.security import get_current_user, get_site_owner

router = APIRouter(prefix="/owners", tags=["OWNERS"])


@router.get("/me")
async def owner_status(current_user: dict = Depends(get_current_user)):
    return {"is_site_owner": await membership.is_site_owner(current_user["user_id"])}


@router.get("/organizations/pending", response_model=List[PendingOrganization])
async def pending_organizations(current_user: dict = Depends(get_site_owner)):
    return await membership.list_pending_with_applicants(current_user["user_id"])


@router.post("/organizations/{org_id}/approve", response_model=DecisionResult)
async def approve_organization(org_id: str, current_user: dict = Depends(get_current_user)):
    return await membership.approve_organization(org_id, current_user["user_id"])


@router.post("/organizations/{org_id}/deny", response_model=DecisionResult)
async def deny_organization(org_id: str, current_user: dict = Depends(get_current_user)):
    return await membership.deny_organization(org_id, current_user["user_id"])
