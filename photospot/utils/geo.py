"""Geographic helpers for location blurring."""
import math
import random

EARTH_RADIUS_METERS = 6371000
MIN_BLUR_RADIUS_METERS = 100
MAX_BLUR_RADIUS_METERS = 500


def random_offset_point(
    lat: float, lon: float, radius_meters: float, rng: random.Random | None = None
) -> tuple[float, float]:
    """Return a uniformly random (lat, lon) within radius_meters of the given point.

    The distance is drawn as sqrt(u) * radius so points do not bunch up
    near the centre. Longitude is normalized to [-180, 180). Raises
    ValueError when the radius is outside the blur bounds.
    """
    if not MIN_BLUR_RADIUS_METERS <= radius_meters <= MAX_BLUR_RADIUS_METERS:
        raise ValueError(
            f"radius_meters must be between {MIN_BLUR_RADIUS_METERS} and {MAX_BLUR_RADIUS_METERS}"
        )
    rng = rng or random.Random()
    bearing = rng.random() * 2 * math.pi
    distance = math.sqrt(rng.random()) * radius_meters
    angular = distance / EARTH_RADIUS_METERS

    lat_rad = math.radians(lat)
    lon_rad = math.radians(lon)

    new_lat = math.asin(
        math.sin(lat_rad) * math.cos(angular)
        + math.cos(lat_rad) * math.sin(angular) * math.cos(bearing)
    )
    new_lon = lon_rad + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat_rad),
        math.cos(angular) - math.sin(lat_rad) * math.sin(new_lat),
    )

    normalized_lon = (math.degrees(new_lon) + 180) % 360 - 180
    return math.degrees(new_lat), normalized_lon
