"""Great-circle proximity filtering for the message feed."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from geoboard.services.errors import ValidationError

# Mean earth radius (IUGG) in kilometres.
EARTH_RADIUS_KM = 6371.0088


class Located(Protocol):
    """Anything carrying a latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


LocatedT = TypeVar("LocatedT", bound=Located)


@dataclass(frozen=True)
class GeoPoint:
    """A coordinate in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValidationError("latitude must be between -90 and 90")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValidationError("longitude must be between -180 and 180")

    @classmethod
    def from_optional(cls, latitude: float | None, longitude: float | None) -> GeoPoint | None:
        """Build a point from query values that must be given together.

        Returns None when both are absent.

        Raises:
            ValidationError: If only one coordinate is supplied.
        """
        if latitude is None and longitude is None:
            return None
        if latitude is None or longitude is None:
            raise ValidationError("latitude and longitude must be supplied together")
        return cls(latitude=latitude, longitude=longitude)


def haversine_km(origin: Located, target: Located) -> float:
    """Return the great-circle distance between two points in kilometres."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(target.longitude - origin.longitude)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Rounding can push `a` fractionally past 1 for antipodal points.
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def filter_nearby(
    items: Iterable[LocatedT],
    point: Located | None,
    radius_km: float,
    *,
    order_by_distance: bool = False,
) -> Sequence[LocatedT]:
    """Keep the items within `radius_km` of `point`.

    Args:
        items: Candidates in their natural (creation) order.
        point: Query coordinate. When None, every item is returned unfiltered.
        radius_km: Inclusive distance threshold.
        order_by_distance: Sort the result nearest first instead of keeping
            the input order. Ties keep their input order.

    Returns:
        The matching items.
    """
    if radius_km < 0:
        raise ValidationError("radius must not be negative")
    if point is None:
        return list(items)

    scored = [(haversine_km(point, item), item) for item in items]
    nearby = [(distance, item) for distance, item in scored if distance <= radius_km]
    if order_by_distance:
        nearby.sort(key=lambda pair: pair[0])
    return [item for _, item in nearby]
