from enum import Enum


class PrivacyStatus(str, Enum):
    """
    YouTube videos.insert status.privacyStatus values.
    """
    PRIVATE = "private"
    UNLISTED = "unlisted"
    PUBLIC = "public"
