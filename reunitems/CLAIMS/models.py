from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reunitems.ORGS.models import reference_id
from reunitems.utils.sanitize import SanitizedModel


class Claim(BaseModel):
    id: str
    organization_id: Optional[str] = None
    item_id: Optional[str] = None
    user_id: Optional[str] = None
    evidence: Optional[str] = None
    answer: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    item_name: Optional[str] = None
    item_location: Optional[str] = None
    created_at: Optional[datetime] = None
    # False when the claimed item no longer exists
    item_available: Optional[bool] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "Claim":
        return cls(
            id=doc["id"],
            organization_id=doc.get("OrgId"),
            item_id=doc.get("ItemId") or reference_id(doc.get("ClaimRef")),
            user_id=reference_id(doc.get("ClaimUser")),
            evidence=doc.get("ClaimEvidence"),
            answer=doc.get("ClaimAnswer"),
            user_name=doc.get("userName"),
            user_email=doc.get("userEmail"),
            item_name=doc.get("itemName"),
            item_location=doc.get("itemLocation"),
            created_at=doc.get("createdAt"),
        )


class ClaimCreate(SanitizedModel):
    evidence: Optional[str] = Field(None, max_length=2000)


class ClaimAnswer(SanitizedModel):
    answer: str = Field(..., max_length=2000)
