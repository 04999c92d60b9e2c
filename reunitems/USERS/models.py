from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from reunitems.ORGS.models import reference_id
from reunitems.utils.sanitize import SanitizedModel


class User(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    provider: Optional[str] = None
    last_organization_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "User":
        return cls(
            id=doc["id"],
            email=doc.get("UserEmail"),
            display_name=doc.get("UserName"),
            provider=doc.get("AuthProvider"),
            last_organization_id=doc.get("LastOrganizationId"),
            created_at=doc.get("createdAt"),
        )


class Application(BaseModel):
    """One entry of a user's join-request history."""

    id: str
    organization_id: Optional[str] = None
    member_id: Optional[str] = None
    message: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "Application":
        return cls(
            id=doc["id"],
            organization_id=reference_id(doc.get("AppOrg")),
            member_id=reference_id(doc.get("AppMember")),
            message=doc.get("Message"),
            created_at=doc.get("createdAt"),
        )


# ---------------------------
# Request bodies
# ---------------------------
class SignUp(SanitizedModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    display_name: Optional[str] = Field(None, max_length=100)


class SignIn(SanitizedModel):
    email: EmailStr
    password: str


class FederatedSignIn(SanitizedModel):
    id_token: str


class RefreshRequest(SanitizedModel):
    refresh_token: str


class ProfileUpdate(SanitizedModel):
    display_name: str = Field(..., min_length=1, max_length=100)


class CurrentOrganization(SanitizedModel):
    organization_id: str
