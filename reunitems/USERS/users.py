# file: reunitems/USERS/users.py
import logging
from typing import Any, Dict, List, Optional

from reunitems.core import store
from reunitems.USERS.models import Application, User

logger = logging.getLogger("users.users")


async def get_user(user_id: str) -> Optional[User]:
    doc = await store.get_document(store.user_path(user_id))
    if doc is None:
        return None
    return User.from_doc(doc)


async def get_user_record_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Raw Users document, including the password hash. Never return it to clients."""
    docs = await store.list_documents(store.USERS, [("UserEmail", "==", email)], limit=1)
    return docs[0] if docs else None


async def create_or_update_user(user_id: str, fields: Dict[str, Any]) -> None:
    """
    Create the Users document with a createdAt stamp, or merge the given fields
    into an existing one.
    """
    path = store.user_path(user_id)
    if await store.document_exists(path):
        await store.update_document(path, fields)
        logger.info("create_or_update_user: updated Users/%s", user_id)
    else:
        await store.set_document(path, fields, stamp_created=True)
        logger.info("create_or_update_user: created Users/%s", user_id)


async def set_last_organization(user_id: str, org_id: str) -> None:
    """Remember the last-used organization. Navigation hint only."""
    await store.update_document(store.user_path(user_id), {"LastOrganizationId": org_id})


# ---------------------------
# MyApplications (join-request history)
# ---------------------------
async def add_application(user_id: str, org_id: str, member_id: str, message: Optional[str] = None) -> str:
    return await store.add_document(store.user_path(user_id, store.APPLICATIONS), {
        "AppOrg": store.document(store.org_path(org_id)),
        "AppMember": store.document(store.org_path(org_id, store.MEMBERS, member_id)),
        "Message": message or "",
    })


async def list_applications(user_id: str) -> List[Application]:
    docs = await store.list_documents(store.user_path(user_id, store.APPLICATIONS))
    applications = [Application.from_doc(doc) for doc in docs]
    applications.sort(key=lambda a: a.created_at.timestamp() if a.created_at else 0, reverse=True)
    return applications
