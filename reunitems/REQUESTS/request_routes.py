# file: reunitems/REQUESTS/request_routes.py
from typing import List

from fastapi import APIRouter, Depends, Query

from reunitems.core.errors import NotFoundError, PermissionDeniedError
from reunitems.ORGS import membership
from reunitems.ORGS.security import get_org_member
from reunitems.REQUESTS import missing_items
from reunitems.REQUESTS.models import MissingItemRequest, RequestCreate

router = APIRouter(prefix="/organizations/{org_id}/requests", tags=["REQUESTS"])


@router.post("", status_code=201)
async def report_missing_item(org_id: str, body: RequestCreate, current_user: dict = Depends(get_org_member)):
    request_id = await missing_items.add_request(org_id, current_user["user_id"], body.item_name, body.description)
    return {"message": "Your request has been submitted", "id": request_id}


@router.get("", response_model=List[MissingItemRequest])
async def list_missing_items(
    org_id: str,
    mine: bool = Query(False),
    current_user: dict = Depends(get_org_member),
):
    """Admins see every report; other members only their own."""
    user_id = current_user["user_id"]
    if mine or not await membership.can_administer(org_id, user_id):
        return await missing_items.list_requests(org_id, user_id=user_id)
    return await missing_items.list_requests(org_id)


async def _visible_request(org_id: str, request_id: str, user_id: str) -> MissingItemRequest:
    found = await missing_items.get_request(org_id, request_id)
    if found is None:
        raise NotFoundError("Request not found")
    if found.user_id != user_id and not await membership.can_administer(org_id, user_id):
        raise PermissionDeniedError("You can only view your own requests")
    return found


@router.get("/{request_id}", response_model=MissingItemRequest)
async def get_missing_item(org_id: str, request_id: str, current_user: dict = Depends(get_org_member)):
    return await _visible_request(org_id, request_id, current_user["user_id"])


@router.delete("/{request_id}")
async def delete_missing_item(org_id: str, request_id: str, current_user: dict = Depends(get_org_member)):
    await _visible_request(org_id, request_id, current_user["user_id"])
    await missing_items.delete_request(org_id, request_id)
    return {"message": "Request removed", "id": request_id}
