from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reunitems.ORGS.models import reference_id
from reunitems.utils.sanitize import SanitizedModel


class MissingItemRequest(BaseModel):
    """A user's report of something they lost."""

    id: str
    organization_id: str
    item_name: str
    description: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, organization_id: str, doc: dict) -> "MissingItemRequest":
        return cls(
            id=doc["id"],
            organization_id=organization_id,
            item_name=doc.get("ItemName") or "",
            description=doc.get("ItemDesc"),
            user_id=reference_id(doc.get("RequestUser")),
            created_at=doc.get("createdAt"),
        )


class RequestCreate(SanitizedModel):
    item_name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
