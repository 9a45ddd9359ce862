from photospot.models.user import User, UserProfile
from photospot.models.photo import Photo, Tag, PhotoTag
from photospot.models.favorite import Favorite

__all__ = ["User", "UserProfile", "Photo", "Tag", "PhotoTag", "Favorite"]
