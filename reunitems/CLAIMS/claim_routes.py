# file: reunitems/CLAIMS/claim_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from reunitems.core.errors import NotFoundError, PermissionDeniedError
from reunitems.CLAIMS import claims
from reunitems.CLAIMS.models import Claim, ClaimAnswer, ClaimCreate
from reunitems.ORGS import membership
from reunitems.ORGS.security import get_current_user, get_org_member

logger = logging.getLogger("claims.routes")
router = APIRouter(tags=["CLAIMS"])


@router.post("/organizations/{org_id}/items/{item_id}/claims", status_code=201)
async def claim_item(
    org_id: str,
    item_id: str,
    body: ClaimCreate,
    current_user: dict = Depends(get_org_member),
):
    claim_id = await claims.add_claim(org_id, item_id, current_user["user_id"], body.evidence)
    return {"message": "Item claimed successfully", "id": claim_id}


@router.get("/organizations/{org_id}/items/{item_id}/claims", response_model=List[Claim])
async def list_item_claims(org_id: str, item_id: str, current_user: dict = Depends(get_org_member)):
    """The "claimed by" list shown under an item."""
    return await claims.list_claims_for_item(org_id, item_id)


async def _claim_for_admin(claim_id: str, user_id: str) -> Claim:
    claim = await claims.get_claim(claim_id)
    if claim is None:
        raise NotFoundError("Claim not found")
    if not claim.organization_id or not await membership.can_administer(claim.organization_id, user_id):
        raise PermissionDeniedError("Approved organization admin access required")
    return claim


@router.patch("/claims/{claim_id}")
async def answer_claim(claim_id: str, body: ClaimAnswer, current_user: dict = Depends(get_current_user)):
    await _claim_for_admin(claim_id, current_user["user_id"])
    await claims.answer_claim(claim_id, body.answer)
    return {"message": "Claim updated", "id": claim_id}


@router.delete("/claims/{claim_id}")
async def withdraw_claim(claim_id: str, current_user: dict = Depends(get_current_user)):
    """The claimant may withdraw their own claim; admins may remove any claim on their items."""
    user_id = current_user["user_id"]
    claim = await claims.get_claim(claim_id)
    if claim is None:
        raise NotFoundError("Claim not found")
    if claim.user_id != user_id:
        await _claim_for_admin(claim_id, user_id)
    await claims.delete_claim(claim_id)
    return {"message": "Claim removed", "id": claim_id}
