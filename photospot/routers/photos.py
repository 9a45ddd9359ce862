import uuid

from fastapi import APIRouter, Depends, Query, Response
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from photospot.config import settings
from photospot.database import get_db
from photospot.dependencies import get_viewer
from photospot.schemas.photo import PhotoQueryParams
from photospot.services.auth_service import Anonymous, Viewer
from photospot.services.clustering import annotate_clusters
from photospot.services.photo_service import (
    CountStrategy,
    QueryFilter,
    Visibility,
    get_photo_detail,
    list_public_photos,
)
from photospot.utils.exceptions import InvalidInputError
from photospot.utils.response import list_response

router = APIRouter(prefix="/photos", tags=["photos"])


def _issues(exc: ValidationError) -> list[dict]:
    return [
        {"path": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def parse_photo_id(photo_id: str) -> str:
    try:
        canonical = str(uuid.UUID(photo_id))
    except ValueError:
        raise InvalidInputError("Invalid photo ID format") from None
    if canonical != photo_id.lower():
        raise InvalidInputError("Invalid photo ID format")
    return canonical


@router.get("")
async def list_photos(
    bbox: str | None = Query(default=None, description='"minLng,minLat,maxLng,maxLat"'),
    category: str | None = Query(default=None),
    season: str | None = Query(default=None),
    time_of_day: str | None = Query(default=None),
    photographer_only: str | None = Query(default=None),
    limit: str | None = Query(default=None, description="1..200, default 200"),
    offset: str | None = Query(default=None),
    cluster_precision: str | None = Query(default=None, description="0..5, annotate grid cluster ids"),
    db: AsyncSession = Depends(get_db),
):
    """Approved photos for the map, newest first.

    ``meta.total`` is exact on the first page. On later pages it is exact
    once the last page is reached and a lower bound before that;
    ``meta.total_is_exact`` says which.
    """
    raw = {
        "bbox": bbox,
        "category": category,
        "season": season,
        "time_of_day": time_of_day,
        "photographer_only": photographer_only,
        "limit": limit,
        "offset": offset,
        "cluster_precision": cluster_precision,
    }
    try:
        params = PhotoQueryParams.model_validate({k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        raise InvalidInputError("Invalid query parameters", details={"issues": _issues(e)}) from None

    query_filter = QueryFilter.from_params(params)
    result = await list_public_photos(
        query_filter, db, count_strategy=CountStrategy.for_offset(query_filter.offset)
    )

    items = result.items
    if params.cluster_precision is not None:
        items = annotate_clusters(items, params.cluster_precision)

    return list_response(
        data=[item.model_dump(mode="json") for item in items],
        total=result.total,
        limit=query_filter.limit,
        offset=query_filter.offset,
        has_more=result.has_more,
        total_is_exact=result.total_is_exact,
    )


@router.get("/{photo_id}")
async def get_photo(
    photo_id: str,
    response: Response,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    photo_id = parse_photo_id(photo_id)
    result = await get_photo_detail(photo_id, viewer, db)

    if result.visibility is Visibility.PUBLIC and isinstance(viewer, Anonymous):
        response.headers["Cache-Control"] = f"public, max-age={settings.public_cache_max_age}"
    else:
        response.headers["Cache-Control"] = "private, no-store"
    response.headers["Vary"] = "Authorization"
    return result.body
