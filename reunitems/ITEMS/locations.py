# file: reunitems/ITEMS/locations.py
import logging
from typing import Any, Dict, List, Optional

from reunitems.core import store
from reunitems.ITEMS.models import Location
from reunitems.utils.geo import to_geopoint

logger = logging.getLogger("items.locations")


def _locations_path(org_id: str) -> str:
    return store.org_path(org_id, store.LOCATIONS)


def location_reference(org_id: str, location_id: str):
    return store.document(store.org_path(org_id, store.LOCATIONS, location_id))


async def get_location(org_id: str, location_id: str) -> Optional[Location]:
    doc = await store.get_document(store.org_path(org_id, store.LOCATIONS, location_id))
    if doc is None:
        return None
    return Location.from_doc(org_id, doc)


async def list_locations(org_id: str) -> List[Location]:
    docs = await store.list_documents(_locations_path(org_id))
    return sorted((Location.from_doc(org_id, doc) for doc in docs), key=lambda loc: loc.name.lower())


def location_fields(
    name: Optional[str] = None,
    description: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if name is not None:
        fields["LocName"] = name
    if description is not None:
        fields["LocDesc"] = description
    point = to_geopoint(latitude, longitude)
    if point is not None:
        fields["LocPoint"] = point
    return fields


async def add_location(
    org_id: str,
    name: str,
    description: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> str:
    location_id = await store.add_document(
        _locations_path(org_id),
        location_fields(name, description, latitude, longitude),
    )
    logger.info("add_location: wrote Organizations/%s/Locations/%s", org_id, location_id)
    return location_id


async def update_location(org_id: str, location_id: str, updates: Dict[str, Any]) -> None:
    await store.update_document(store.org_path(org_id, store.LOCATIONS, location_id), updates)


async def delete_location(org_id: str, location_id: str) -> None:
    """Items pointing at the location keep their reference; it simply stops resolving."""
    await store.delete_document(store.org_path(org_id, store.LOCATIONS, location_id))
    logger.info("delete_location: removed Organizations/%s/Locations/%s", org_id, location_id)
