"""Grid clustering hints for dense map viewports.

Runs after the listing query and only annotates items; it never filters
or reorders them.
"""
from photospot.schemas.photo import PhotoListItemDto

MAX_PRECISION = 5


def grid_cluster_id(lng: float, lat: float, precision: int) -> int:
    """Stable id of the grid cell a point rounds into.

    precision: decimal places for rounding (2 = ~1.1km grid, 1 = ~11km grid)
    """
    scale = 10 ** precision
    col = round(lng * scale) + 180 * scale
    row = round(lat * scale) + 90 * scale
    return row * (360 * scale + 1) + col


def annotate_clusters(items: list[PhotoListItemDto], precision: int) -> list[PhotoListItemDto]:
    if not 0 <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be between 0 and {MAX_PRECISION}")
    return [
        item.model_copy(
            update={"cluster_id": grid_cluster_id(*item.location_public.coordinates, precision)}
        )
        for item in items
    ]
