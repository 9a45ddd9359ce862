import logging
import random
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photospot.models.favorite import Favorite
from photospot.models.photo import Photo, PhotoTag, Tag
from photospot.models.user import User, UserProfile
from photospot.services.auth_service import hash_password
from photospot.utils.geo import random_offset_point

logger = logging.getLogger(__name__)

SEED_PHOTOGRAPHER_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-photographer"))
SEED_PHOTOGRAPHER_EMAIL = "photographer@photospot.local"
SEED_ENTHUSIAST_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-enthusiast"))
SEED_ENTHUSIAST_EMAIL = "enthusiast@photospot.local"
SEED_PASSWORD = "photospot123"

# (key, title, category, season, time_of_day, lat, lon, status, blur_radius_m, tags)
SEED_PHOTOS = [
    ("tatra-sunrise", "Sunrise over Morskie Oko", "landscape", "summer", "golden_hour_morning",
     49.2013, 20.0710, "approved", 300, ["mountains", "lake"]),
    ("krakow-square", "Main Square at blue hour", "architecture", "winter", "blue_hour",
     50.0617, 19.9373, "approved", None, ["city", "night"]),
    ("baltic-pier", "Sopot pier", "seascape", "autumn", "golden_hour_evening",
     54.4473, 18.5700, "approved", 150, ["sea"]),
    ("bialowieza-bison", "Bison in the mist", "wildlife", "spring", "morning",
     52.7010, 23.8700, "pending", 500, ["forest", "animals"]),
    ("warsaw-street", "Nowy Swiat crossing", "street", None, "afternoon",
     52.2330, 21.0190, "rejected", None, []),
]


def seed_photo_id(key: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, f"photo-{key}"))


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(User).limit(1))
    if result.scalars().first() is not None:
        return

    password_hash = hash_password(SEED_PASSWORD)
    session.add_all([
        User(id=SEED_PHOTOGRAPHER_ID, email=SEED_PHOTOGRAPHER_EMAIL, password_hash=password_hash),
        User(id=SEED_ENTHUSIAST_ID, email=SEED_ENTHUSIAST_EMAIL, password_hash=password_hash),
        UserProfile(user_id=SEED_PHOTOGRAPHER_ID, display_name="Ada Lens", role="photographer"),
        UserProfile(
            user_id=SEED_ENTHUSIAST_ID,
            display_name="Sam Wanderer",
            avatar_url="https://avatars.photospot.local/sam.png",
            role="enthusiast",
        ),
    ])

    rng = random.Random(42)
    tag_ids: dict[str, Tag] = {}
    now = datetime.now(timezone.utc)
    for i, (key, title, category, season, time_of_day, lat, lon, status, blur_radius, tags) in enumerate(SEED_PHOTOS):
        photo_id = seed_photo_id(key)
        if blur_radius:
            public_lat, public_lon = random_offset_point(lat, lon, blur_radius, rng)
        else:
            public_lat, public_lon = lat, lon
        session.add(Photo(
            id=photo_id,
            user_id=SEED_PHOTOGRAPHER_ID,
            title=title,
            category=category,
            season=season,
            time_of_day=time_of_day,
            file_url=f"https://storage.photospot.local/photos/{photo_id}.jpg",
            location_public_lng=public_lon,
            location_public_lat=public_lat,
            location_exact_lng=lon if blur_radius else None,
            location_exact_lat=lat if blur_radius else None,
            exif={"aperture": "f/8", "shutter_speed": "1/250", "iso": 100},
            gear={"camera": "Fujifilm X-T5", "lens": "XF 16-55mm f/2.8"},
            status=status,
            created_at=now - timedelta(days=i),
        ))
        for name in tags:
            if name not in tag_ids:
                tag_ids[name] = Tag(name=name)
                session.add(tag_ids[name])
        await session.flush()
        for name in tags:
            session.add(PhotoTag(photo_id=photo_id, tag_id=tag_ids[name].id))

    session.add(Favorite(user_id=SEED_ENTHUSIAST_ID, photo_id=seed_photo_id("tatra-sunrise")))
    await session.commit()
    logger.info("Seeded %d demo photos", len(SEED_PHOTOS))
