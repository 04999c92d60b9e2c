# file: reunitems/core/store.py
"""
Document store adapter.

Thin async layer over the synchronous Firestore client: every call runs in a
worker thread under a timeout, store failures become StoreError, and documents
come back as plain dicts carrying their "id". Paths are slash separated, e.g.
"Organizations/{orgId}/Items/{itemId}".
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from reunitems.core import config
from reunitems.core.errors import InputError, NotFoundError, StoreError, StoreTimeoutError
from reunitems.core.firebase import get_db

logger = logging.getLogger("core.store")

# ------------------------------
# Collection names (shared with the web client and security rules)
# ------------------------------
ORGANIZATIONS = "Organizations"
LOCATIONS = "Locations"
ITEMS = "Items"
MEMBERS = "Members"
REQUESTS = "Requests"
USERS = "Users"
APPLICATIONS = "MyApplications"
CLAIMS = "Claims"
APP_ADMINS = "AppAdmins"
REFRESH_TOKENS = "REFRESH_TOKENS"
AUDIT_LOGS = "audit_logs"
CONFIG = "CONFIG"

Filter = Tuple[str, str, Any]


def build_path(*segments: str) -> str:
    """Join path segments, refusing empty ids or ids that would escape their collection."""
    for segment in segments:
        if not isinstance(segment, str) or not segment or "/" in segment:
            raise InputError(f"Invalid document id: {segment!r}")
    return "/".join(segments)


def org_path(org_id: str, *parts: str) -> str:
    return build_path(ORGANIZATIONS, org_id, *parts)


def user_path(user_id: str, *parts: str) -> str:
    return build_path(USERS, user_id, *parts)


def document(path: str):
    """DocumentReference for a path (no network call)."""
    return get_db().document(path)


def snapshot_to_dict(snapshot) -> Optional[Dict[str, Any]]:
    if not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    return data


async def _call(label: str, fn, write: bool = False):
    task = asyncio.ensure_future(asyncio.to_thread(fn))
    # A cancelled request must not abort a write that is already on its way
    awaitable = asyncio.shield(task) if write else task
    try:
        return await asyncio.wait_for(awaitable, timeout=config.STORE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error("Store call timed out after %.1fs: %s", config.STORE_TIMEOUT_SECONDS, label)
        raise StoreTimeoutError(f"The database did not answer in time ({label})")
    except google_exceptions.NotFound as e:
        logger.info("Store call hit a missing document: %s", label)
        raise NotFoundError(f"Document not found: {label}") from e
    except InputError:
        raise
    except Exception as e:
        logger.exception("Store call failed: %s: %s", label, e)
        raise StoreError(f"Database request failed ({label})") from e


# ------------------------------
# Reads
# ------------------------------
async def get_document(path: str) -> Optional[Dict[str, Any]]:
    """Return the document as a dict, or None when it does not exist."""
    return await _call(f"get {path}", lambda: snapshot_to_dict(get_db().document(path).get()))


async def resolve_reference(ref) -> Optional[Dict[str, Any]]:
    """Follow a DocumentReference stored in another document."""
    return await _call(f"get {ref.path}", lambda: snapshot_to_dict(ref.get()))


async def document_exists(path: str) -> bool:
    return await _call(f"exists {path}", lambda: get_db().document(path).get().exists)


async def list_documents(
    collection_path: str,
    filters: Iterable[Filter] = (),
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """List a collection, optionally narrowed by (field, op, value) filters."""
    filters = list(filters)

    def _run():
        query = get_db().collection(collection_path)
        for field, op, value in filters:
            query = query.where(field, op, value)
        if limit:
            query = query.limit(limit)
        return [snapshot_to_dict(snap) for snap in query.stream()]

    return await _call(f"list {collection_path}", _run)


# ------------------------------
# Writes
# ------------------------------
async def add_document(collection_path: str, data: Dict[str, Any]) -> str:
    """Create a document with a store-assigned id and a server createdAt."""
    payload = {k: v for k, v in data.items() if k != "createdAt"}
    payload["createdAt"] = SERVER_TIMESTAMP

    def _run():
        ref = get_db().collection(collection_path).document()
        ref.set(payload)
        return ref.id

    return await _call(f"add {collection_path}", _run, write=True)


async def set_document(path: str, data: Dict[str, Any], merge: bool = False, stamp_created: bool = False) -> None:
    """Write a document at a known id. stamp_created replaces any caller createdAt."""
    payload = dict(data)
    if stamp_created:
        payload["createdAt"] = SERVER_TIMESTAMP
    await _call(f"set {path}", lambda: get_db().document(path).set(payload, merge=merge), write=True)


async def update_document(path: str, updates: Dict[str, Any]) -> None:
    """
    Partial merge: fields absent from `updates` are left untouched.
    Raises NotFoundError when the document does not exist.
    """
    payload = {k: v for k, v in updates.items() if k != "createdAt"}
    if not payload:
        return
    await _call(f"update {path}", lambda: get_db().document(path).update(payload), write=True)


async def delete_document(path: str) -> None:
    """Unconditional delete; documents referencing this one are not touched."""
    await _call(f"delete {path}", lambda: get_db().document(path).delete(), write=True)
