# file: reunitems/ORGS/members.py
import logging
from typing import Any, Dict, List, Optional

from reunitems.core import store
from reunitems.ORGS.models import ApprovalStatus, Member, MemberRole

logger = logging.getLogger("orgs.members")


def _members_path(org_id: str) -> str:
    return store.org_path(org_id, store.MEMBERS)


async def get_member(org_id: str, member_id: str) -> Optional[Member]:
    """Member documents are keyed by the user id, so member_id is usually the user id."""
    doc = await store.get_document(store.org_path(org_id, store.MEMBERS, member_id))
    if doc is None:
        return None
    return Member.from_doc(org_id, doc)


async def find_member_by_user(org_id: str, user_id: str) -> Optional[Member]:
    """
    Probe an organization's members for one whose UserRef points at the user.

    Covers member documents written under store-assigned ids as well as the
    user-keyed ones.
    """
    user_ref = store.document(store.user_path(user_id))
    docs = await store.list_documents(_members_path(org_id), [("UserRef", "==", user_ref)], limit=1)
    if not docs:
        return None
    return Member.from_doc(org_id, docs[0])


async def get_member_for_user(org_id: str, user_id: str) -> Optional[Member]:
    """The user-keyed member document, else one stored under another id."""
    member = await get_member(org_id, user_id)
    if member is None:
        member = await find_member_by_user(org_id, user_id)
    return member


async def list_members(
    org_id: str,
    status: Optional[ApprovalStatus] = None,
    role: Optional[MemberRole] = None,
) -> List[Member]:
    filters = []
    if status is not None:
        filters.append(("ApplicationStatus", "==", ApprovalStatus(status).value))
    if role is not None:
        filters.append(("UserRole", "==", MemberRole(role).value))
    docs = await store.list_documents(_members_path(org_id), filters)
    return [Member.from_doc(org_id, doc) for doc in docs]


async def set_member(
    org_id: str,
    user_id: str,
    role: MemberRole,
    status: ApprovalStatus,
    message: Optional[str] = None,
) -> Member:
    """
    Create or overwrite the (organization, user) membership.

    The document id is the user id, so there is never more than one member
    document per pair.
    """
    data: Dict[str, Any] = {
        "UserRef": store.document(store.user_path(user_id)),
        "UserRole": MemberRole(role).value,
        "ApplicationStatus": ApprovalStatus(status).value,
    }
    if message:
        data["Message"] = message
    await store.set_document(store.org_path(org_id, store.MEMBERS, user_id), data, stamp_created=True)
    logger.info("set_member: Organizations/%s/Members/%s role=%s status=%s", org_id, user_id, data["UserRole"], data["ApplicationStatus"])
    return Member(
        id=user_id,
        organization_id=org_id,
        user_id=user_id,
        role=role,
        application_status=status,
        message=message or None,
    )


async def update_member(org_id: str, member_id: str, updates: Dict[str, Any]) -> None:
    await store.update_document(store.org_path(org_id, store.MEMBERS, member_id), updates)


async def set_application_status(org_id: str, member_id: str, status: ApprovalStatus) -> None:
    await update_member(org_id, member_id, {"ApplicationStatus": ApprovalStatus(status).value})


async def delete_member(org_id: str, member_id: str) -> None:
    await store.delete_document(store.org_path(org_id, store.MEMBERS, member_id))
