from enum import Enum

class MimeType(str, Enum):
    """
    MIME types used while probing and uploading videos.
    """
    VIDEO_PREFIX = "video/"
    VIDEO_MP4 = "video/mp4"
    VIDEO_ANY = "video/*"

    @classmethod
    def is_video(cls, content_type) -> bool:
        """Content-Type 헤더가 video 계열인지 확인한다."""
        return bool(content_type) and cls.VIDEO_PREFIX.value in content_type.lower()
