from sqlalchemy import Column, DateTime, ForeignKey, String

from photospot.database import Base
from photospot.models.photo import _utcnow


class Favorite(Base):
    __tablename__ = "favorites"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    photo_id = Column(String, ForeignKey("photos.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
