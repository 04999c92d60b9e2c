# USERS/user_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from reunitems.core.errors import NotFoundError
from reunitems.core.security import get_current_user
from reunitems.CLAIMS import claims
from reunitems.CLAIMS.models import Claim
from reunitems.ORGS import membership, organizations
from reunitems.ORGS.models import UserOrganization
from reunitems.USERS import users
from reunitems.USERS.models import Application, CurrentOrganization, ProfileUpdate, User

logger = logging.getLogger("users.routes")
router = APIRouter(prefix="/users/me", tags=["USERS"])


@router.get("", response_model=User)
async def get_profile(current_user: dict = Depends(get_current_user)):
    user = await users.get_user(current_user["user_id"])
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.patch("", response_model=User)
async def update_profile(body: ProfileUpdate, current_user: dict = Depends(get_current_user)):
    user_id = current_user["user_id"]
    await users.create_or_update_user(user_id, {"UserName": body.display_name})
    return await users.get_user(user_id)


@router.put("/current-organization")
async def set_current_organization(body: CurrentOrganization, current_user: dict = Depends(get_current_user)):
    """Remember where the user last worked. Grants nothing."""
    if await organizations.get_organization(body.organization_id) is None:
        raise NotFoundError("Organization not found")
    await users.set_last_organization(current_user["user_id"], body.organization_id)
    return {"message": "Current organization saved", "organization_id": body.organization_id}


@router.get("/organizations", response_model=List[UserOrganization])
async def my_organizations(current_user: dict = Depends(get_current_user)):
    return await membership.resolve_user_organizations(current_user["user_id"])


@router.get("/claims", response_model=List[Claim])
async def my_claims(current_user: dict = Depends(get_current_user)):
    return await claims.list_claims_for_user(current_user["user_id"])


@router.get("/applications", response_model=List[Application])
async def my_applications(current_user: dict = Depends(get_current_user)):
    return await users.list_applications(current_user["user_id"])
