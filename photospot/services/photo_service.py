"""Public photo listing and single-photo resolution.

Every listing is scoped to approved, non-deleted photos before any caller
supplied filter is applied. The detail resolver picks one of two fixed
projections (owner or public) per request and applies it in one place,
``project_detail``.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import ValidationError
from sqlalchemy import and_, case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from photospot.config import settings
from photospot.models.enums import PhotoCategory, PhotoStatus, Season, TimeOfDay, UserRole
from photospot.models.favorite import Favorite
from photospot.models.photo import Photo, PhotoTag, Tag
from photospot.models.user import UserProfile
from photospot.schemas.photo import (
    AuthorInfo,
    BoundingBox,
    DEFAULT_PHOTOS_LIMIT,
    GeoPoint,
    PhotoDetailDto,
    PhotoListItemDto,
    PhotoQueryParams,
    UserBasicInfo,
)
from photospot.services.auth_service import Identified, Viewer
from photospot.utils.exceptions import ForbiddenError, InfrastructureError, InternalError, NotFoundError

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"
OWNER_ONLY_FIELDS = frozenset({"exif", "location_exact", "status"})


class CountStrategy(str, Enum):
    """How the listing total is obtained.

    EXACT runs a COUNT over the filtered set. APPROXIMATE skips it and reads
    one row past the page instead: when that row exists the reported total
    is a lower bound (offset + limit + 1), otherwise the page ended and the
    total is known exactly.
    """

    EXACT = "exact"
    APPROXIMATE = "approximate"

    @classmethod
    def for_offset(cls, offset: int) -> "CountStrategy":
        return cls.EXACT if offset == 0 else cls.APPROXIMATE


class Visibility(str, Enum):
    OWNER = "owner"
    PUBLIC = "public"


@dataclass(frozen=True)
class QueryFilter:
    bbox: BoundingBox | None = None
    category: PhotoCategory | None = None
    season: Season | None = None
    time_of_day: TimeOfDay | None = None
    photographer_only: bool = False
    limit: int = DEFAULT_PHOTOS_LIMIT
    offset: int = 0

    @classmethod
    def from_params(cls, params: PhotoQueryParams) -> "QueryFilter":
        return cls(
            bbox=params.bbox,
            category=params.category,
            season=params.season,
            time_of_day=params.time_of_day,
            photographer_only=params.photographer_only,
            limit=params.limit,
            offset=params.offset,
        )


@dataclass
class ListResult:
    items: list[PhotoListItemDto]
    total: int
    has_more: bool
    total_is_exact: bool


@dataclass
class DetailResult:
    dto: PhotoDetailDto
    visibility: Visibility

    @property
    def body(self) -> dict:
        return project_detail(self.dto, self.visibility)


# --- Backend access ---

async def _execute(db: AsyncSession, stmt):
    try:
        return await asyncio.wait_for(db.execute(stmt), timeout=settings.db_timeout_seconds)
    except asyncio.TimeoutError as e:
        logger.warning("Photo store call timed out after %ss", settings.db_timeout_seconds)
        raise InfrastructureError("The photo store did not respond in time") from e
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Photo store call failed: %s", e)
        raise InfrastructureError("The photo store is temporarily unavailable") from e


def _is_public():
    return and_(Photo.status == PhotoStatus.APPROVED.value, Photo.deleted_at.is_(None))


def _favorite_counts():
    return (
        select(Favorite.photo_id, func.count().label("favorite_count"))
        .group_by(Favorite.photo_id)
        .subquery()
    )


def public_photos_view():
    """Approved, non-deleted photos with author info and favorite count."""
    favorites = _favorite_counts()
    return (
        select(
            Photo,
            UserProfile.display_name.label("author_name"),
            UserProfile.avatar_url.label("author_avatar"),
            func.coalesce(favorites.c.favorite_count, 0).label("favorite_count"),
        )
        .outerjoin(
            UserProfile,
            and_(UserProfile.user_id == Photo.user_id, UserProfile.deleted_at.is_(None)),
        )
        .outerjoin(favorites, favorites.c.photo_id == Photo.id)
        .where(_is_public())
    )


def apply_filters(stmt, query_filter: QueryFilter):
    if query_filter.bbox is not None:
        box = query_filter.bbox
        stmt = stmt.where(
            Photo.location_public_lng.between(box.min_lng, box.max_lng),
            Photo.location_public_lat.between(box.min_lat, box.max_lat),
        )
    if query_filter.category is not None:
        stmt = stmt.where(Photo.category == query_filter.category.value)
    if query_filter.season is not None:
        stmt = stmt.where(Photo.season == query_filter.season.value)
    if query_filter.time_of_day is not None:
        stmt = stmt.where(Photo.time_of_day == query_filter.time_of_day.value)
    if query_filter.photographer_only:
        # Role comes from the profile table, never from the request
        photographers = select(UserProfile.user_id).where(
            UserProfile.role == UserRole.PHOTOGRAPHER.value,
            UserProfile.deleted_at.is_(None),
        )
        stmt = stmt.where(Photo.user_id.in_(photographers))
    return stmt


def build_list_query(query_filter: QueryFilter, extra_rows: int = 0):
    return (
        apply_filters(public_photos_view(), query_filter)
        .order_by(Photo.created_at.desc(), Photo.id.asc())
        .limit(query_filter.limit + extra_rows)
        .offset(query_filter.offset)
    )


def build_count_query(query_filter: QueryFilter):
    return apply_filters(select(func.count(Photo.id)).where(_is_public()), query_filter)


async def _load_tags(db: AsyncSession, photo_ids: list[str]) -> dict[str, list[str]]:
    if not photo_ids:
        return {}
    result = await _execute(
        db,
        select(PhotoTag.photo_id, Tag.name)
        .join(Tag, Tag.id == PhotoTag.tag_id)
        .where(PhotoTag.photo_id.in_(photo_ids))
        .order_by(Tag.name),
    )
    tags: dict[str, list[str]] = {}
    for photo_id, name in result.all():
        tags.setdefault(photo_id, []).append(name)
    return tags


async def _favorite_stats(db: AsyncSession, photo_id: str, viewer_id: str | None) -> tuple[int, bool]:
    """Favorite count for a photo and whether the viewer is among them, in one round trip."""
    if viewer_id is None:
        stmt = select(func.count(Favorite.user_id)).where(Favorite.photo_id == photo_id)
        count = (await _execute(db, stmt)).scalar_one()
        return count or 0, False

    stmt = select(
        func.count(Favorite.user_id),
        func.coalesce(func.max(case((Favorite.user_id == viewer_id, 1), else_=0)), 0),
    ).where(Favorite.photo_id == photo_id)
    count, favorited = (await _execute(db, stmt)).one()
    return count or 0, bool(favorited)


# --- Mapping ---

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_list_item(photo: Photo, author_name, author_avatar, favorite_count, tags: list[str]) -> PhotoListItemDto:
    if photo.status != PhotoStatus.APPROVED.value or photo.deleted_at is not None:
        logger.error("Public listing returned non-public photo %s (status=%s)", photo.id, photo.status)
        raise InternalError("An unexpected error occurred")
    try:
        return PhotoListItemDto(
            id=photo.id,
            title=photo.title,
            description=photo.description,
            category=photo.category,
            season=photo.season,
            time_of_day=photo.time_of_day,
            file_url=photo.file_url,
            thumbnail_url=photo.file_url,
            location_public=GeoPoint.from_lng_lat(photo.location_public_lng, photo.location_public_lat),
            user=UserBasicInfo(
                id=photo.user_id,
                display_name=author_name or UNKNOWN_AUTHOR,
                avatar_url=author_avatar or None,
            ),
            tags=tags,
            created_at=_as_utc(photo.created_at),
            favorite_count=favorite_count or 0,
            cluster_id=photo.cluster_id,
        )
    except ValidationError as e:
        logger.error("Photo %s violates the list item contract: %s", photo.id, e)
        raise InternalError("An unexpected error occurred") from e


def project_detail(dto: PhotoDetailDto, visibility: Visibility) -> dict:
    """Serialize a detail DTO with the field set the visibility allows.

    Owner-only fields are left out of the public projection entirely,
    not set to null.
    """
    exclude = OWNER_ONLY_FIELDS if visibility is Visibility.PUBLIC else None
    return dto.model_dump(mode="json", exclude=exclude)


# --- Operations ---

async def list_public_photos(
    query_filter: QueryFilter,
    db: AsyncSession,
    count_strategy: CountStrategy | None = None,
) -> ListResult:
    if count_strategy is None:
        count_strategy = CountStrategy.for_offset(query_filter.offset)

    extra_rows = 1 if count_strategy is CountStrategy.APPROXIMATE else 0
    result = await _execute(db, build_list_query(query_filter, extra_rows))
    rows = result.all()

    total_is_exact = True
    if count_strategy is CountStrategy.EXACT:
        total = (await _execute(db, build_count_query(query_filter))).scalar_one()
    elif len(rows) > query_filter.limit:
        rows = rows[: query_filter.limit]
        total = query_filter.offset + query_filter.limit + 1
        total_is_exact = False
    elif rows or query_filter.offset == 0:
        total = query_filter.offset + len(rows)
    else:
        # Paged past the end, nothing to extrapolate from
        total = (await _execute(db, build_count_query(query_filter))).scalar_one()

    tags = await _load_tags(db, [row.Photo.id for row in rows])
    items = [
        _to_list_item(row.Photo, row.author_name, row.author_avatar, row.favorite_count, tags.get(row.Photo.id, []))
        for row in rows
    ]

    return ListResult(
        items=items,
        total=total,
        has_more=query_filter.offset + query_filter.limit < total,
        total_is_exact=total_is_exact,
    )


async def get_photo_detail(photo_id: str, viewer: Viewer, db: AsyncSession) -> DetailResult:
    result = await _execute(
        db,
        select(
            Photo,
            UserProfile.display_name.label("author_name"),
            UserProfile.avatar_url.label("author_avatar"),
            UserProfile.role.label("author_role"),
        )
        .outerjoin(
            UserProfile,
            and_(UserProfile.user_id == Photo.user_id, UserProfile.deleted_at.is_(None)),
        )
        .where(Photo.id == photo_id, Photo.deleted_at.is_(None)),
    )
    row = result.first()
    # Missing and soft-deleted look the same from outside
    if row is None:
        raise NotFoundError("Photo not found")

    photo: Photo = row.Photo
    viewer_id = viewer.viewer_id if isinstance(viewer, Identified) else None
    is_owner = viewer_id is not None and viewer_id == photo.user_id

    if is_owner:
        visibility = Visibility.OWNER
    elif photo.status == PhotoStatus.APPROVED.value:
        visibility = Visibility.PUBLIC
    else:
        raise ForbiddenError()

    favorite_count, favorited = await _favorite_stats(db, photo.id, viewer_id)
    tags = await _load_tags(db, [photo.id])

    try:
        role = UserRole(row.author_role) if row.author_role else None
    except ValueError:
        role = None

    try:
        dto = PhotoDetailDto(
            id=photo.id,
            title=photo.title,
            description=photo.description,
            category=photo.category,
            season=photo.season,
            time_of_day=photo.time_of_day,
            file_url=photo.file_url,
            thumbnail_url=photo.file_url,
            location_public=GeoPoint.from_lng_lat(photo.location_public_lng, photo.location_public_lat),
            is_location_blurred=photo.has_exact_location,
            gear=photo.gear,
            user=AuthorInfo(
                id=photo.user_id,
                display_name=row.author_name or UNKNOWN_AUTHOR,
                avatar_url=row.author_avatar or None,
                role=role,
            ),
            tags=tags.get(photo.id, []),
            created_at=_as_utc(photo.created_at),
            favorite_count=favorite_count,
            is_favorited=favorited,
            exif=photo.exif,
            location_exact=(
                GeoPoint.from_lng_lat(photo.location_exact_lng, photo.location_exact_lat)
                if photo.has_exact_location
                else None
            ),
            status=photo.status,
        )
    except ValidationError as e:
        logger.error("Photo %s violates the detail contract: %s", photo.id, e)
        raise InternalError("An unexpected error occurred") from e

    return DetailResult(dto=dto, visibility=visibility)
