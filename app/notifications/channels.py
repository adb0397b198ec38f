from enum import Enum


class Channel(str, Enum):
    INAPP_ADMIN = "inapp_admin"
    SUBSCRIBERS = "subscribers"
