import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from photospot.models.favorite import Favorite
from photospot.models.photo import Photo, PhotoTag, Tag
from photospot.models.user import User, UserProfile


@pytest.mark.asyncio
async def test_create_user_with_profile(db_session):
    db_session.add(User(id="u-001", email="ada@example.com", password_hash="hashed"))
    db_session.add(UserProfile(user_id="u-001", display_name="Ada Lens"))
    await db_session.commit()

    profile = await db_session.get(UserProfile, "u-001")
    assert profile is not None
    assert profile.role == "enthusiast"
    assert profile.avatar_url is None


@pytest.mark.asyncio
async def test_user_email_is_unique(db_session):
    db_session.add(User(id="u-001", email="ada@example.com", password_hash="hashed"))
    await db_session.commit()
    db_session.add(User(id="u-002", email="ada@example.com", password_hash="hashed"))

    with pytest.raises(IntegrityError):
        await db_session.commit()


@pytest.mark.asyncio
async def test_create_photo_defaults(db_session):
    db_session.add(User(id="u-001", email="ada@example.com", password_hash="hashed"))
    db_session.add(Photo(
        id="p-001", user_id="u-001", title="Lake", category="landscape",
        file_url="https://storage.example.com/p-001.jpg",
        location_public_lng=19.94, location_public_lat=50.06,
        exif={"iso": 100},
    ))
    await db_session.commit()

    photo = await db_session.get(Photo, "p-001")
    assert photo.status == "pending"
    assert photo.created_at is not None
    assert photo.deleted_at is None
    assert photo.exif == {"iso": 100}
    assert photo.has_exact_location is False


@pytest.mark.asyncio
async def test_photo_tags_and_favorites(db_session):
    db_session.add(User(id="u-001", email="ada@example.com", password_hash="hashed"))
    db_session.add(Photo(
        id="p-001", user_id="u-001", title="Lake", category="landscape",
        file_url="https://storage.example.com/p-001.jpg",
        location_public_lng=19.94, location_public_lat=50.06,
        location_exact_lng=19.95, location_exact_lat=50.07,
    ))
    tag = Tag(name="lake")
    db_session.add(tag)
    await db_session.flush()
    db_session.add(PhotoTag(photo_id="p-001", tag_id=tag.id))
    db_session.add(Favorite(user_id="u-001", photo_id="p-001"))
    await db_session.commit()

    names = (await db_session.execute(
        select(Tag.name).join(PhotoTag, PhotoTag.tag_id == Tag.id).where(PhotoTag.photo_id == "p-001")
    )).scalars().all()
    favorite = await db_session.get(Favorite, ("u-001", "p-001"))
    photo = await db_session.get(Photo, "p-001")

    assert names == ["lake"]
    assert favorite.created_at is not None
    assert photo.has_exact_location is True
