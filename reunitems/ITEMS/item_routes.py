# file: reunitems/ITEMS/item_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from reunitems.core.errors import InputError, NotFoundError
from reunitems.ITEMS import items, locations
from reunitems.ITEMS.models import (
    DisplayItem,
    ItemCreate,
    ItemUpdate,
    Location,
    LocationCreate,
    LocationUpdate,
)
from reunitems.ITEMS.search import search_items
from reunitems.ORGS import membership
from reunitems.ORGS.security import get_current_user, get_org_admin, get_org_member

logger = logging.getLogger("items.routes")
router = APIRouter(prefix="/organizations/{org_id}", tags=["ITEMS"])
search_router = APIRouter(prefix="/items", tags=["ITEMS"])


# ==============================
# LOCATIONS
# ==============================
@router.get("/locations", response_model=List[Location])
async def list_locations(org_id: str, current_user: dict = Depends(get_org_member)):
    return await locations.list_locations(org_id)


@router.post("/locations", status_code=201)
async def add_location(org_id: str, body: LocationCreate, current_user: dict = Depends(get_org_admin)):
    if not body.name.strip():
        raise InputError("Please provide a location name")
    location_id = await locations.add_location(org_id, body.name, body.description, body.latitude, body.longitude)
    return {"message": "Location added", "id": location_id}


@router.get("/locations/{location_id}", response_model=Location)
async def get_location(org_id: str, location_id: str, current_user: dict = Depends(get_org_member)):
    location = await locations.get_location(org_id, location_id)
    if location is None:
        raise NotFoundError("Location not found")
    return location


@router.patch("/locations/{location_id}")
async def update_location(
    org_id: str,
    location_id: str,
    body: LocationUpdate,
    current_user: dict = Depends(get_org_admin),
):
    updates = locations.location_fields(body.name, body.description, body.latitude, body.longitude)
    if not updates:
        raise InputError("Nothing to update")
    await locations.update_location(org_id, location_id, updates)
    return {"message": "Location updated", "id": location_id}


@router.delete("/locations/{location_id}")
async def delete_location(org_id: str, location_id: str, current_user: dict = Depends(get_org_admin)):
    await locations.delete_location(org_id, location_id)
    return {"message": "Location deleted", "id": location_id}


# ==============================
# ITEMS
# ==============================
@router.get("/items", response_model=List[DisplayItem])
async def list_items(org_id: str, current_user: dict = Depends(get_org_member)):
    is_admin = await membership.can_administer(org_id, current_user["user_id"])
    return await items.list_display_items(org_id, include_answer=is_admin)


@router.post("/items", status_code=201)
async def add_item(org_id: str, body: ItemCreate, current_user: dict = Depends(get_org_admin)):
    item_id = await items.add_item(
        org_id,
        body.name,
        body.location_id,
        description=body.description,
        image_url=body.image_url,
        found_at=body.found_at,
        hide_question=body.hide_question,
        hide_answer=body.hide_answer,
    )
    return {"message": "Item added", "id": item_id}


@router.get("/items/{item_id}", response_model=DisplayItem)
async def get_item(org_id: str, item_id: str, current_user: dict = Depends(get_org_member)):
    is_admin = await membership.can_administer(org_id, current_user["user_id"])
    item = await items.get_display_item(org_id, item_id, include_answer=is_admin)
    if item is None:
        raise NotFoundError("Item not found")
    return item


@router.patch("/items/{item_id}")
async def update_item(org_id: str, item_id: str, body: ItemUpdate, current_user: dict = Depends(get_org_admin)):
    updates = await items.item_updates(org_id, **body.model_dump(exclude_unset=True))
    if "ItemName" in updates and not updates["ItemName"].strip():
        raise InputError("Item name cannot be empty")
    if not updates:
        raise InputError("Nothing to update")
    await items.update_item(org_id, item_id, updates)
    return {"message": "Item updated", "id": item_id}


@router.delete("/items/{item_id}")
async def delete_item(org_id: str, item_id: str, current_user: dict = Depends(get_org_admin)):
    await items.delete_item(org_id, item_id)
    return {"message": "Item deleted", "id": item_id}


# ==============================
# SEARCH ACROSS MY ORGANIZATIONS
# ==============================
@search_router.get("/search", response_model=List[DisplayItem])
async def search(q: str = Query("", max_length=200), current_user: dict = Depends(get_current_user)):
    """
    Fuzzy search over every item of every organization the caller is an
    approved member of. An empty query lists them all.
    """
    candidates: List[DisplayItem] = []
    for org_id in await membership.approved_organization_ids(current_user["user_id"]):
        candidates.extend(await items.list_display_items(org_id))
    results = search_items(candidates, q)
    logger.debug("search: user=%s q=%r candidates=%d results=%d", current_user["user_id"], q, len(candidates), len(results))
    return results
