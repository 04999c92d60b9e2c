# file: reunitems/ORGS/membership.py
"""
Organization approval and membership workflow.

Organization:  pending -> approved | denied      (site owner only)
Member:        pending -> approved | denied      (approved admin/superadmin of the org)

Approving an organization also approves its founding superadmin. The two
writes are independent store calls; when the second one fails the first is
kept and PartialUpdateError names the step that still has to run. Running the
approval again on the approved organization completes it.

Authorization is re-read from the store on every call, never cached.
"""

import logging
from typing import List, Optional

from reunitems.core import store
from reunitems.core.audit import log_decision
from reunitems.core.errors import (
    ConflictError,
    InputError,
    InvalidTransitionError,
    NotFoundError,
    PartialUpdateError,
    PermissionDeniedError,
    ReunitemsError,
)
from reunitems.ORGS import members, organizations
from reunitems.ORGS.models import (
    ApprovalStatus,
    DecisionResult,
    Member,
    MemberRole,
    Organization,
    PendingOrganization,
    UserOrganization,
)
from reunitems.USERS import users

logger = logging.getLogger("orgs.membership")

APPLICABLE_ROLES = (MemberRole.ADMIN, MemberRole.REGULAR)


# ---------------------------
# Capability checks
# ---------------------------
async def is_site_owner(user_id: str) -> bool:
    """Presence of AppAdmins/{user_id} grants site-owner privilege; content is ignored."""
    if not user_id:
        return False
    return await store.document_exists(store.build_path(store.APP_ADMINS, user_id))


async def can_administer(org_id: str, user_id: str) -> bool:
    """Approved admin or superadmin of the organization."""
    member = await members.get_member_for_user(org_id, user_id)
    return member is not None and member.is_admin


async def can_view(org_id: str, user_id: str) -> bool:
    """Any approved member of the organization."""
    member = await members.get_member_for_user(org_id, user_id)
    return member is not None and member.is_approved


async def require_site_owner(user_id: str) -> None:
    if not await is_site_owner(user_id):
        raise PermissionDeniedError("Site owner access required")


async def require_admin(org_id: str, user_id: str) -> None:
    if not await can_administer(org_id, user_id):
        raise PermissionDeniedError("Approved organization admin access required")


async def require_member(org_id: str, user_id: str) -> None:
    if not await can_view(org_id, user_id):
        raise PermissionDeniedError("Approved organization membership required")


async def _get_organization_or_404(org_id: str) -> Organization:
    org = await organizations.get_organization(org_id)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


# ---------------------------
# Registration & applications
# ---------------------------
async def register_organization(
    user_id: str,
    name: str,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> str:
    """
    Register a new organization for user_id and make them its pending superadmin.

    Returns the new organization id. Callers may remember it as the user's
    current organization; that hint grants nothing.
    """
    if not name or not name.strip():
        raise InputError("Please provide an organization name")

    org_id = await organizations.add_organization(name.strip(), address, latitude, longitude)
    try:
        await members.set_member(org_id, user_id, MemberRole.SUPERADMIN, ApprovalStatus.PENDING)
    except ReunitemsError as e:
        logger.error("register_organization: founder write failed for Organizations/%s: %s", org_id, e)
        raise PartialUpdateError(
            "Organization was created but its founding admin could not be recorded",
            completed=["organization"],
            failed="founding_member",
            resource_id=org_id,
        ) from e

    logger.info("register_organization: user=%s registered Organizations/%s", user_id, org_id)
    return org_id


async def apply_to_organization(
    user_id: str,
    org_id: str,
    requested_role: MemberRole,
    message: Optional[str] = None,
) -> Member:
    """
    Apply to join an approved organization as admin or regular member.

    A pending or denied application is overwritten by the new one, so the
    (organization, user) pair never has more than one member document.
    """
    try:
        requested_role = MemberRole(requested_role)
    except ValueError:
        raise InputError(f"Unknown role: {requested_role}")
    if requested_role not in APPLICABLE_ROLES:
        raise InputError("Applications may request the admin or regular role only")

    org = await _get_organization_or_404(org_id)
    if org.approval_status != ApprovalStatus.APPROVED:
        raise ConflictError("This organization is not accepting applications")

    existing = await members.get_member_for_user(org_id, user_id)
    if existing is not None and existing.role == MemberRole.SUPERADMIN:
        raise ConflictError("The founding admin cannot apply to their own organization")
    if existing is not None and existing.is_approved:
        raise ConflictError("You are already an approved member of this organization")

    member = await members.set_member(org_id, user_id, requested_role, ApprovalStatus.PENDING, message)
    try:
        await users.add_application(user_id, org_id, member.id, message)
    except ReunitemsError as e:
        raise PartialUpdateError(
            "Application was submitted but could not be added to your history",
            completed=["member"],
            failed="application_history",
            resource_id=member.id,
        ) from e

    logger.info("apply_to_organization: user=%s applied to Organizations/%s as %s", user_id, org_id, requested_role.value)
    return member


# ---------------------------
# Site-owner decisions
# ---------------------------
async def _decide_founders(org_id: str, status: ApprovalStatus, completed: List[str]) -> None:
    founders = await members.list_members(org_id, role=MemberRole.SUPERADMIN)
    for founder in founders:
        if founder.application_status != ApprovalStatus.PENDING:
            continue
        try:
            await members.set_application_status(org_id, founder.id, status)
        except ReunitemsError as e:
            logger.error(
                "Organizations/%s is %s but founder %s is still pending: %s",
                org_id, status.value, founder.id, e,
            )
            raise PartialUpdateError(
                f"Organization is {status.value} but its founding admin could not be updated; run the action again",
                completed=completed,
                failed=f"founding_member:{founder.id}",
                resource_id=org_id,
            ) from e
        completed.append(f"founding_member:{founder.id}")


async def approve_organization(org_id: str, acting_user_id: str) -> DecisionResult:
    await require_site_owner(acting_user_id)
    org = await _get_organization_or_404(org_id)
    if org.approval_status == ApprovalStatus.DENIED:
        raise InvalidTransitionError("A denied organization cannot be approved")

    completed: List[str] = []
    if org.approval_status == ApprovalStatus.PENDING:
        await organizations.set_approval_status(org_id, ApprovalStatus.APPROVED)
        completed.append("organization")

    await _decide_founders(org_id, ApprovalStatus.APPROVED, completed)
    await log_decision(acting_user_id, "organization_approved", org_id, {"completed": completed})
    return DecisionResult(
        organization_id=org_id,
        status=ApprovalStatus.APPROVED,
        completed=completed,
        message="Organization approved",
    )


async def deny_organization(org_id: str, acting_user_id: str) -> DecisionResult:
    await require_site_owner(acting_user_id)
    org = await _get_organization_or_404(org_id)
    if org.approval_status == ApprovalStatus.APPROVED:
        raise InvalidTransitionError("An approved organization cannot be denied")

    completed: List[str] = []
    if org.approval_status == ApprovalStatus.PENDING:
        await organizations.set_approval_status(org_id, ApprovalStatus.DENIED)
        completed.append("organization")

    await _decide_founders(org_id, ApprovalStatus.DENIED, completed)
    await log_decision(acting_user_id, "organization_denied", org_id, {"completed": completed})
    return DecisionResult(
        organization_id=org_id,
        status=ApprovalStatus.DENIED,
        completed=completed,
        message="Organization denied",
    )


# ---------------------------
# Admin decisions on applications
# ---------------------------
async def _decide_member(org_id: str, member_id: str, acting_user_id: str, status: ApprovalStatus) -> Member:
    await require_admin(org_id, acting_user_id)
    member = await members.get_member(org_id, member_id)
    if member is None:
        raise NotFoundError("Member not found")
    if member.role == MemberRole.SUPERADMIN:
        raise InvalidTransitionError("The founding admin is decided through organization approval")
    if member.application_status != ApprovalStatus.PENDING:
        raise InvalidTransitionError(f"Application is already {member.application_status.value}")

    await members.set_application_status(org_id, member_id, status)
    logger.info("Organizations/%s/Members/%s %s by %s", org_id, member_id, status.value, acting_user_id)
    return member.model_copy(update={"application_status": status})


async def approve_member(org_id: str, member_id: str, acting_user_id: str) -> Member:
    return await _decide_member(org_id, member_id, acting_user_id, ApprovalStatus.APPROVED)


async def deny_member(org_id: str, member_id: str, acting_user_id: str) -> Member:
    return await _decide_member(org_id, member_id, acting_user_id, ApprovalStatus.DENIED)


# ---------------------------
# Lookup
# ---------------------------
async def resolve_user_organizations(user_id: str) -> List[UserOrganization]:
    """
    Every organization the user has a member document in, any role or status.

    Scans all organizations and probes each one's members, one query per
    organization.
    """
    results: List[UserOrganization] = []
    for org in await organizations.list_organizations():
        member = await members.find_member_by_user(org.id, user_id)
        if member is None:
            continue
        results.append(UserOrganization(
            organization_id=org.id,
            organization_name=org.name,
            member_id=member.id,
            role=member.role,
            status=member.application_status,
        ))
    return results


async def list_pending_with_applicants(acting_user_id: str) -> List[PendingOrganization]:
    """Owner review queue: pending organizations with their founder's name and email."""
    await require_site_owner(acting_user_id)
    queue: List[PendingOrganization] = []
    for org in await organizations.list_pending_organizations():
        entry = PendingOrganization(**org.model_dump())
        founders = await members.list_members(org.id, role=MemberRole.SUPERADMIN)
        if founders:
            entry.applicant_member_id = founders[0].id
            applicant = await users.get_user(founders[0].user_id)
            if applicant is not None:
                entry.applicant_name = applicant.display_name
                entry.applicant_email = applicant.email
        queue.append(entry)
    queue.sort(key=lambda o: o.applied_at.timestamp() if o.applied_at else 0)
    return queue


async def approved_organization_ids(user_id: str) -> List[str]:
    return [
        entry.organization_id
        for entry in await resolve_user_organizations(user_id)
        if entry.status == ApprovalStatus.APPROVED
    ]
