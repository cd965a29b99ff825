import logging
from pathlib import Path
from typing import List

from src.core.exceptions import FetchFailedError
from src.downloaders.base import BaseDownloadStrategy
from src.schemas.enums.source_kind import SourceKind
from src.schemas.models.common.source_locator import SourceLocator
from src.schemas.models.common.transient_artifact import TransientArtifact
from src.utils.artifact_paths import build_artifact_path

logger = logging.getLogger(__name__)


class Fetcher:
    """
    Downloads a validated remote source into a transient artifact.
    Strategies are tried in order; the first success wins and the last failure is reported.
    Never deletes anything itself: a failed fetch hands the partial path back via FetchFailedError.
    """

    def __init__(self, strategies: List[BaseDownloadStrategy], work_dir):
        self.strategies = strategies
        self.work_dir = Path(work_dir)

    def fetch(self, locator: SourceLocator) -> TransientArtifact:
        if locator.kind != SourceKind.REMOTE_URL:
            raise ValueError(f"Fetcher only handles remote URLs, got {locator.kind}")

        url = locator.url
        try:
            destination = build_artifact_path(self.work_dir)
        except OSError as e:
            raise FetchFailedError(f"Could not prepare work directory: {e}", original_error=e) from e

        errors: List[Exception] = []
        for strategy in self.strategies:
            if not strategy.supports(url):
                continue

            logger.info(f"Fetching {url} with '{strategy.name}' strategy -> {destination}")
            try:
                strategy.download(url, destination)
            except Exception as e:
                logger.warning(f"'{strategy.name}' download failed for {url}: {e}")
                errors.append(e)
                continue

            size = destination.stat().st_size if destination.exists() else 0
            return TransientArtifact(path=destination, size_bytes=size, owned=True)

        if not errors:
            raise FetchFailedError(f"No download strategy supports URL: {url}", partial_path=destination)

        last_error = errors[-1]
        raise FetchFailedError(
            f"Video download failed: {last_error}",
            partial_path=destination,
            original_error=last_error,
        ) from last_error
