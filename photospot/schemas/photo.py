import math
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from photospot.models.enums import PhotoCategory, PhotoStatus, Season, TimeOfDay, UserRole

MAX_PHOTOS_LIMIT = 200
DEFAULT_PHOTOS_LIMIT = 200


class GeoPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]  # (longitude, latitude)

    @classmethod
    def from_lng_lat(cls, lng: float, lat: float) -> "GeoPoint":
        return cls(coordinates=(lng, lat))


class BoundingBox(BaseModel):
    min_lng: float = Field(ge=-180, le=180)
    min_lat: float = Field(ge=-90, le=90)
    max_lng: float = Field(ge=-180, le=180)
    max_lat: float = Field(ge=-90, le=90)


class PhotoQueryParams(BaseModel):
    """Query string of GET /api/photos."""

    bbox: BoundingBox | None = None
    category: PhotoCategory | None = None
    season: Season | None = None
    time_of_day: TimeOfDay | None = None
    photographer_only: bool = False
    limit: int = Field(default=DEFAULT_PHOTOS_LIMIT, ge=1, le=MAX_PHOTOS_LIMIT)
    offset: int = Field(default=0, ge=0)
    cluster_precision: int | None = Field(default=None, ge=0, le=5)

    @field_validator("bbox", mode="before")
    @classmethod
    def parse_bbox(cls, value: Any) -> Any:
        if value is None or isinstance(value, (BoundingBox, dict)):
            return value
        parts = [p.strip() for p in str(value).split(",")]
        if len(parts) != 4:
            raise ValueError('Expected "minLng,minLat,maxLng,maxLat"')
        try:
            min_lng, min_lat, max_lng, max_lat = (float(p) for p in parts)
        except ValueError:
            raise ValueError("Bounding box coordinates must be numbers") from None
        if not all(math.isfinite(v) for v in (min_lng, min_lat, max_lng, max_lat)):
            raise ValueError("Bounding box coordinates must be finite")
        if min_lng >= max_lng or min_lat >= max_lat:
            raise ValueError("Bounding box minimum must be smaller than maximum")
        return {"min_lng": min_lng, "min_lat": min_lat, "max_lng": max_lng, "max_lat": max_lat}


class UserBasicInfo(BaseModel):
    id: str
    display_name: str
    avatar_url: str | None = None


class AuthorInfo(UserBasicInfo):
    role: UserRole | None = None


class PhotoListItemDto(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: PhotoCategory
    season: Season | None = None
    time_of_day: TimeOfDay | None = None
    file_url: str
    thumbnail_url: str
    location_public: GeoPoint
    user: UserBasicInfo
    tags: list[str]
    created_at: datetime
    favorite_count: int
    cluster_id: int | None = None


class PhotoDetailDto(BaseModel):
    id: str
    title: str
    description: str | None = None
    category: PhotoCategory
    season: Season | None = None
    time_of_day: TimeOfDay | None = None
    file_url: str
    thumbnail_url: str
    location_public: GeoPoint
    is_location_blurred: bool
    gear: dict[str, Any] | None = None
    user: AuthorInfo
    tags: list[str]
    created_at: datetime
    favorite_count: int
    is_favorited: bool
    # Owner-only
    exif: dict[str, Any] | None = None
    location_exact: GeoPoint | None = None
    status: PhotoStatus | None = None
