# file: reunitems/ITEMS/items.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from reunitems.core import store
from reunitems.core.errors import InputError, StoreError
from reunitems.ITEMS import locations
from reunitems.ITEMS.models import UNKNOWN_LOCATION, DisplayItem, Item

logger = logging.getLogger("items.items")


def _items_path(org_id: str) -> str:
    return store.org_path(org_id, store.ITEMS)


def item_reference(org_id: str, item_id: str):
    return store.document(store.org_path(org_id, store.ITEMS, item_id))


async def _require_location(org_id: str, location_id: str):
    """An item may only point at a location of its own organization."""
    if not location_id:
        raise InputError("Please choose a location")
    if await locations.get_location(org_id, location_id) is None:
        raise InputError("Location does not exist in this organization")
    return locations.location_reference(org_id, location_id)


async def get_item(org_id: str, item_id: str) -> Optional[Item]:
    doc = await store.get_document(store.org_path(org_id, store.ITEMS, item_id))
    if doc is None:
        return None
    return Item.from_doc(org_id, doc)


async def list_items(org_id: str) -> List[Item]:
    """Newest first."""
    docs = await store.list_documents(_items_path(org_id))
    items = [Item.from_doc(org_id, doc) for doc in docs]
    items.sort(key=lambda i: i.created_at.timestamp() if i.created_at else 0, reverse=True)
    return items


async def add_item(
    org_id: str,
    name: str,
    location_id: str,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
    found_at: Optional[datetime] = None,
    hide_question: Optional[str] = None,
    hide_answer: Optional[str] = None,
) -> str:
    if not name or not name.strip():
        raise InputError("Please provide an item name")
    location_ref = await _require_location(org_id, location_id)

    data: Dict[str, Any] = {
        "ItemName": name.strip(),
        "ItemDesc": description or "",
        "ItemLoc": location_ref,
        "ItemTime": found_at or datetime.now(timezone.utc),
    }
    if image_url:
        data["ItemImg"] = image_url
    if hide_question:
        data["HideQuestion"] = hide_question
        data["HideAnswer"] = hide_answer or ""

    item_id = await store.add_document(_items_path(org_id), data)
    logger.info("add_item: wrote Organizations/%s/Items/%s", org_id, item_id)
    return item_id


async def item_updates(
    org_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    location_id: Optional[str] = None,
    image_url: Optional[str] = None,
    found_at: Optional[datetime] = None,
    hide_question: Optional[str] = None,
    hide_answer: Optional[str] = None,
) -> Dict[str, Any]:
    """Translate API fields into stored fields, validating a new location."""
    updates: Dict[str, Any] = {}
    if name is not None:
        updates["ItemName"] = name
    if description is not None:
        updates["ItemDesc"] = description
    if location_id is not None:
        updates["ItemLoc"] = await _require_location(org_id, location_id)
    if image_url is not None:
        updates["ItemImg"] = image_url
    if found_at is not None:
        updates["ItemTime"] = found_at
    if hide_question is not None:
        updates["HideQuestion"] = hide_question
    if hide_answer is not None:
        updates["HideAnswer"] = hide_answer
    return updates


async def update_item(org_id: str, item_id: str, updates: Dict[str, Any]) -> None:
    await store.update_document(store.org_path(org_id, store.ITEMS, item_id), updates)


async def delete_item(org_id: str, item_id: str) -> None:
    """Claims on the item are left in place."""
    await store.delete_document(store.org_path(org_id, store.ITEMS, item_id))
    logger.info("delete_item: removed Organizations/%s/Items/%s", org_id, item_id)


# ---------------------------
# Display records
# ---------------------------
async def location_names(org_id: str) -> Dict[str, str]:
    """Location id -> name for an organization; empty when the read fails."""
    try:
        return {loc.id: loc.name for loc in await locations.list_locations(org_id)}
    except StoreError:
        logger.warning("location_names: could not read locations of Organizations/%s", org_id)
        return {}


def to_display(item: Item, names: Dict[str, str], include_answer: bool = False) -> DisplayItem:
    data = item.model_dump()
    if not include_answer:
        data["hide_answer"] = None
    data["location"] = names.get(item.location_id) or UNKNOWN_LOCATION
    return DisplayItem(**data)


async def list_display_items(org_id: str, include_answer: bool = False) -> List[DisplayItem]:
    names = await location_names(org_id)
    return [to_display(item, names, include_answer) for item in await list_items(org_id)]


async def get_display_item(org_id: str, item_id: str, include_answer: bool = False) -> Optional[DisplayItem]:
    item = await get_item(org_id, item_id)
    if item is None:
        return None
    name = UNKNOWN_LOCATION
    if item.location_id:
        try:
            location = await locations.get_location(org_id, item.location_id)
        except StoreError:
            location = None
        if location is not None:
            name = location.name
    return to_display(item, {item.location_id: name} if item.location_id else {}, include_answer)
