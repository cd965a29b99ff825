from enum import Enum


class SourceKind(str, Enum):
    """Where the video bytes come from."""
    LOCAL_FILE = "LOCAL_FILE"
    REMOTE_URL = "REMOTE_URL"
