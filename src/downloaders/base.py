from abc import ABC, abstractmethod
from pathlib import Path


class BaseDownloadStrategy(ABC):
    """Abstract base class for a single way of pulling video bytes to local disk."""

    name: str = "base"

    @abstractmethod
    def supports(self, url: str) -> bool:
        """Returns True if this strategy can handle the given URL."""
        pass

    @abstractmethod
    def download(self, url: str, destination: Path) -> None:
        """Downloads the URL into destination. Raises on failure."""
        pass
