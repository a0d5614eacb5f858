"""Geographic position value object shared by consolidations and deliveries."""

from protean.fields import DateTime, Float, String

from logistics.domain import logistics


@logistics.value_object
class GeoLocation:
    """A point on the map, optionally with a street address and fix time."""

    latitude = Float(required=True, min_value=-90.0, max_value=90.0)
    longitude = Float(required=True, min_value=-180.0, max_value=180.0)
    address = String(max_length=500)
    recorded_at = DateTime()

    def describe(self) -> str:
        if self.address:
            return self.address
        return f"{self.latitude:.5f},{self.longitude:.5f}"


def location_from(
    latitude: float | None,
    longitude: float | None,
    address: str | None = None,
    recorded_at=None,
) -> GeoLocation | None:
    """Build a location from flat coordinates, or None when either coordinate is missing."""
    if latitude is None or longitude is None:
        return None
    return GeoLocation(
        latitude=latitude,
        longitude=longitude,
        address=address,
        recorded_at=recorded_at,
    )
