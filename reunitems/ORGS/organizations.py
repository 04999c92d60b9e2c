# file: reunitems/ORGS/organizations.py
import logging
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from reunitems.core import store
from reunitems.ORGS.models import ApprovalStatus, Organization
from reunitems.utils.geo import to_geopoint

logger = logging.getLogger("orgs.organizations")


async def get_organization(org_id: str) -> Optional[Organization]:
    doc = await store.get_document(store.org_path(org_id))
    if doc is None:
        return None
    return Organization.from_doc(doc)


async def list_organizations(status: Optional[ApprovalStatus] = None) -> List[Organization]:
    filters = []
    if status is not None:
        filters.append(("OrgApprovalStatus", "==", ApprovalStatus(status).value))
    docs = await store.list_documents(store.ORGANIZATIONS, filters)
    return [Organization.from_doc(doc) for doc in docs]


async def list_approved_organizations() -> List[Organization]:
    """Public "find your organization" listing."""
    return await list_organizations(ApprovalStatus.APPROVED)


async def list_pending_organizations() -> List[Organization]:
    return await list_organizations(ApprovalStatus.PENDING)


async def add_organization(
    name: str,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> str:
    """Create a pending organization and return its store-assigned id."""
    data: Dict[str, Any] = {
        "name": name,
        "OrgApprovalStatus": ApprovalStatus.PENDING.value,
        "AppliedAt": SERVER_TIMESTAMP,
    }
    if address:
        data["Address"] = address
    point = to_geopoint(latitude, longitude)
    if point is not None:
        data["LocPoint"] = point

    org_id = await store.add_document(store.ORGANIZATIONS, data)
    logger.info("add_organization: wrote Organizations/%s name=%s", org_id, name)
    return org_id


def organization_updates(
    name: Optional[str] = None,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Dict[str, Any]:
    """Translate API fields into stored fields, keeping only what was given."""
    updates: Dict[str, Any] = {}
    if name is not None:
        updates["name"] = name
    if address is not None:
        updates["Address"] = address
    point = to_geopoint(latitude, longitude)
    if point is not None:
        updates["LocPoint"] = point
    return updates


async def update_organization(org_id: str, updates: Dict[str, Any]) -> None:
    """Partial update with stored field names; raises NotFoundError when absent."""
    await store.update_document(store.org_path(org_id), updates)


async def set_approval_status(org_id: str, status: ApprovalStatus) -> None:
    await update_organization(org_id, {
        "OrgApprovalStatus": ApprovalStatus(status).value,
        "DecidedAt": SERVER_TIMESTAMP,
    })


async def delete_organization(org_id: str) -> None:
    """Removes the organization document only; its subcollections stay in place."""
    await store.delete_document(store.org_path(org_id))
