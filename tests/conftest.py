import math
import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

# Must be set before photospot.config is imported
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{tempfile.mkdtemp()}/test.db")
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import photospot.models  # noqa: F401
from photospot.database import Base, get_db
from photospot.main import app
from photospot.models.favorite import Favorite
from photospot.models.photo import Photo, PhotoTag, Tag
from photospot.models.user import User, UserProfile
from photospot.services.auth_service import create_access_token, hash_password
from photospot.utils.geo import EARTH_RADIUS_METERS

BASE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    async def _make_user(
        role: str = "photographer",
        display_name: str | None = "Ada Lens",
        avatar_url: str | None = None,
        email: str | None = None,
        password: str = "secret123",
    ) -> str:
        user_id = str(uuid.uuid4())
        db_session.add(User(
            id=user_id,
            email=email or f"{user_id[:8]}@example.com",
            password_hash=hash_password(password),
        ))
        if display_name is not None:
            db_session.add(UserProfile(
                user_id=user_id, display_name=display_name, avatar_url=avatar_url, role=role,
            ))
        await db_session.commit()
        return user_id

    return _make_user


@pytest.fixture
def make_photo(db_session):
    tag_cache: dict[str, int] = {}

    async def _make_photo(
        owner_id: str,
        status: str = "approved",
        lng: float = 19.94,
        lat: float = 50.06,
        exact: tuple[float, float] | None = None,
        created_at: datetime | None = None,
        photo_id: str | None = None,
        deleted: bool = False,
        category: str = "landscape",
        season: str | None = None,
        time_of_day: str | None = None,
        tags: tuple[str, ...] = (),
        exif: dict | None = None,
        gear: dict | None = None,
    ) -> str:
        photo_id = photo_id or str(uuid.uuid4())
        db_session.add(Photo(
            id=photo_id,
            user_id=owner_id,
            title=f"Photo {photo_id[:8]}",
            category=category,
            season=season,
            time_of_day=time_of_day,
            file_url=f"https://storage.example.com/{photo_id}.jpg",
            location_public_lng=lng,
            location_public_lat=lat,
            location_exact_lng=exact[0] if exact else None,
            location_exact_lat=exact[1] if exact else None,
            exif=exif,
            gear=gear,
            status=status,
            created_at=created_at or BASE_TIME,
            deleted_at=BASE_TIME + timedelta(days=1) if deleted else None,
        ))
        for name in tags:
            if name not in tag_cache:
                tag = Tag(name=name)
                db_session.add(tag)
                await db_session.flush()
                tag_cache[name] = tag.id
            db_session.add(PhotoTag(photo_id=photo_id, tag_id=tag_cache[name]))
        await db_session.commit()
        return photo_id

    return _make_photo


@pytest.fixture
def make_favorite(db_session):
    async def _make_favorite(user_id: str, photo_id: str) -> None:
        db_session.add(Favorite(user_id=user_id, photo_id=photo_id))
        await db_session.commit()

    return _make_favorite


@pytest.fixture
def auth_header():
    def _auth_header(user_id: str, role: str = "enthusiast") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}

    return _auth_header


@pytest.fixture
def distance_meters():
    """Great-circle distance between two (lat, lon) points."""
    def _distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        phi1, phi2 = math.radians(lat1), math.radians(lat2)
        d_phi = math.radians(lat2 - lat1)
        d_lambda = math.radians(lon2 - lon1)
        a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
        return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))

    return _distance_meters
