from typing import Optional, Tuple

from google.cloud.firestore_v1 import GeoPoint


def to_geopoint(latitude: Optional[float], longitude: Optional[float]) -> Optional[GeoPoint]:
    if latitude is None or longitude is None:
        return None
    return GeoPoint(latitude, longitude)


def from_geopoint(value) -> Tuple[Optional[float], Optional[float]]:
    """Read a stored GeoPoint (or a {latitude, longitude} map) back into a pair."""
    if value is None:
        return None, None
    if isinstance(value, dict):
        return value.get("latitude"), value.get("longitude")
    return getattr(value, "latitude", None), getattr(value, "longitude", None)
