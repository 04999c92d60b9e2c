# file: reunitems/ORGS/models.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from reunitems.utils.geo import from_geopoint
from reunitems.utils.sanitize import SanitizedModel


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class MemberRole(str, Enum):
    SUPERADMIN = "superadmin"  # founding registrant, decided by the site owner
    ADMIN = "admin"
    REGULAR = "regular"


ADMIN_ROLES = (MemberRole.SUPERADMIN, MemberRole.ADMIN)


def reference_id(ref) -> Optional[str]:
    """Last path segment of a stored DocumentReference (or a plain path string)."""
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref.rstrip("/").split("/")[-1] or None
    return getattr(ref, "id", None)


# ---------------------------
# Organizations
# ---------------------------
class Organization(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    applied_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "Organization":
        latitude, longitude = from_geopoint(doc.get("LocPoint"))
        return cls(
            id=doc["id"],
            name=doc.get("name") or "",
            address=doc.get("Address"),
            latitude=latitude,
            longitude=longitude,
            # documents written before the approval workflow existed carry no status
            approval_status=doc.get("OrgApprovalStatus") or ApprovalStatus.PENDING,
            applied_at=doc.get("AppliedAt"),
            created_at=doc.get("createdAt"),
            decided_at=doc.get("DecidedAt"),
        )


class PointFields(SanitizedModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def both_or_neither(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self


class OrganizationCreate(PointFields):
    name: str = Field(..., max_length=200)
    address: Optional[str] = Field(None, max_length=500)


class OrganizationUpdate(PointFields):
    name: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=500)


class PendingOrganization(Organization):
    """Owner review queue entry: the organization plus its founding applicant."""

    applicant_member_id: Optional[str] = None
    applicant_name: Optional[str] = None
    applicant_email: Optional[str] = None


# ---------------------------
# Members
# ---------------------------
class Member(BaseModel):
    id: str
    organization_id: str
    user_id: Optional[str] = None
    role: MemberRole
    application_status: ApprovalStatus
    message: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, organization_id: str, doc: dict) -> "Member":
        return cls(
            id=doc["id"],
            organization_id=organization_id,
            user_id=reference_id(doc.get("UserRef")) or doc["id"],
            role=doc.get("UserRole") or MemberRole.REGULAR,
            application_status=doc.get("ApplicationStatus") or ApprovalStatus.PENDING,
            message=doc.get("Message"),
            created_at=doc.get("createdAt"),
        )

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES and self.application_status == ApprovalStatus.APPROVED

    @property
    def is_approved(self) -> bool:
        return self.application_status == ApprovalStatus.APPROVED


class MemberView(Member):
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class ApplicationCreate(SanitizedModel):
    role: MemberRole = MemberRole.REGULAR
    message: Optional[str] = Field(None, max_length=500)


class UserOrganization(BaseModel):
    organization_id: str
    organization_name: Optional[str] = None
    member_id: str
    role: MemberRole
    status: ApprovalStatus


class DecisionResult(BaseModel):
    """Outcome of an approval/denial, listing every write that was applied."""

    organization_id: str
    status: ApprovalStatus
    completed: List[str] = []
    message: str
