# file: reunitems/REQUESTS/missing_items.py
import logging
from typing import Any, Dict, List, Optional

from reunitems.core import store
from reunitems.core.errors import InputError
from reunitems.REQUESTS.models import MissingItemRequest

logger = logging.getLogger("requests.missing_items")


def _requests_path(org_id: str) -> str:
    return store.org_path(org_id, store.REQUESTS)


async def get_request(org_id: str, request_id: str) -> Optional[MissingItemRequest]:
    doc = await store.get_document(store.org_path(org_id, store.REQUESTS, request_id))
    if doc is None:
        return None
    return MissingItemRequest.from_doc(org_id, doc)


async def list_requests(org_id: str, user_id: Optional[str] = None) -> List[MissingItemRequest]:
    """Newest first; narrowed to one reporter when user_id is given."""
    filters = []
    if user_id is not None:
        filters.append(("RequestUser", "==", store.document(store.user_path(user_id))))
    docs = await store.list_documents(_requests_path(org_id), filters)
    found = [MissingItemRequest.from_doc(org_id, doc) for doc in docs]
    found.sort(key=lambda r: r.created_at.timestamp() if r.created_at else 0, reverse=True)
    return found


async def add_request(org_id: str, user_id: str, item_name: str, description: Optional[str] = None) -> str:
    if not item_name or not item_name.strip():
        raise InputError("Please describe the item you lost")
    request_id = await store.add_document(_requests_path(org_id), {
        "ItemName": item_name.strip(),
        "ItemDesc": description or "",
        "RequestUser": store.document(store.user_path(user_id)),
    })
    logger.info("add_request: user=%s wrote Organizations/%s/Requests/%s", user_id, org_id, request_id)
    return request_id


async def update_request(org_id: str, request_id: str, updates: Dict[str, Any]) -> None:
    await store.update_document(store.org_path(org_id, store.REQUESTS, request_id), updates)


async def delete_request(org_id: str, request_id: str) -> None:
    await store.delete_document(store.org_path(org_id, store.REQUESTS, request_id))
