from enum import Enum


class PhotoStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    PHOTOGRAPHER = "photographer"
    ENTHUSIAST = "enthusiast"


class PhotoCategory(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    STREET = "street"
    ARCHITECTURE = "architecture"
    NATURE = "nature"
    WILDLIFE = "wildlife"
    MACRO = "macro"
    AERIAL = "aerial"
    ASTROPHOTOGRAPHY = "astrophotography"
    URBAN = "urban"
    SEASCAPE = "seascape"
    OTHER = "other"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class TimeOfDay(str, Enum):
    GOLDEN_HOUR_MORNING = "golden_hour_morning"
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    GOLDEN_HOUR_EVENING = "golden_hour_evening"
    BLUE_HOUR = "blue_hour"
    NIGHT = "night"
