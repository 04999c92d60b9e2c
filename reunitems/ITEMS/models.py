# file: reunitems/ITEMS/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from reunitems.ORGS.models import PointFields, reference_id
from reunitems.utils.geo import from_geopoint
from reunitems.utils.sanitize import SanitizedModel

UNKNOWN_LOCATION = "Unknown location"


# ---------------------------
# Locations
# ---------------------------
class Location(BaseModel):
    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, organization_id: str, doc: dict) -> "Location":
        latitude, longitude = from_geopoint(doc.get("LocPoint"))
        return cls(
            id=doc["id"],
            organization_id=organization_id,
            name=doc.get("LocName") or "",
            description=doc.get("LocDesc"),
            latitude=latitude,
            longitude=longitude,
            created_at=doc.get("createdAt"),
        )


class LocationCreate(PointFields):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)


class LocationUpdate(PointFields):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)


# ---------------------------
# Items
# ---------------------------
class Item(BaseModel):
    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    location_id: Optional[str] = None
    image_url: Optional[str] = None
    found_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    hide_question: Optional[str] = None
    hide_answer: Optional[str] = None

    @classmethod
    def from_doc(cls, organization_id: str, doc: dict) -> "Item":
        return cls(
            id=doc["id"],
            organization_id=organization_id,
            name=doc.get("ItemName") or "",
            description=doc.get("ItemDesc"),
            location_id=reference_id(doc.get("ItemLoc")),
            image_url=doc.get("ItemImg"),
            found_at=doc.get("ItemTime"),
            created_at=doc.get("createdAt"),
            hide_question=doc.get("HideQuestion"),
            hide_answer=doc.get("HideAnswer"),
        )


class DisplayItem(BaseModel):
    """An item decorated for lists and search: location name resolved, answer withheld."""

    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    location_id: Optional[str] = None
    location: str = UNKNOWN_LOCATION
    image_url: Optional[str] = None
    found_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    hide_question: Optional[str] = None
    hide_answer: Optional[str] = None


class ItemCreate(SanitizedModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    location_id: str
    image_url: Optional[str] = Field(None, max_length=2000)
    found_at: Optional[datetime] = None
    hide_question: Optional[str] = Field(None, max_length=500)
    hide_answer: Optional[str] = Field(None, max_length=500)


class ItemUpdate(SanitizedModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    location_id: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=2000)
    found_at: Optional[datetime] = None
    hide_question: Optional[str] = Field(None, max_length=500)
    hide_answer: Optional[str] = Field(None, max_length=500)
