from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Index, Integer, String

from photospot.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Photo(Base):
    __tablename__ = "photos"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=False)
    season = Column(String, nullable=True)
    time_of_day = Column(String, nullable=True)
    file_url = Column(String, nullable=False)
    # Points are stored as (longitude, latitude) pairs
    location_public_lng = Column(Float, nullable=False)
    location_public_lat = Column(Float, nullable=False)
    location_exact_lng = Column(Float, nullable=True)
    location_exact_lat = Column(Float, nullable=True)
    cluster_id = Column(Integer, nullable=True)
    exif = Column(JSON, nullable=True)
    gear = Column(JSON, nullable=True)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_photos_status_created", "status", "created_at"),
        Index("idx_photos_location_public", "location_public_lng", "location_public_lat"),
        Index("idx_photos_filters", "category", "season", "time_of_day"),
    )

    @property
    def has_exact_location(self) -> bool:
        return self.location_exact_lng is not None and self.location_exact_lat is not None


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)


class PhotoTag(Base):
    __tablename__ = "photo_tags"

    photo_id = Column(String, ForeignKey("photos.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)
