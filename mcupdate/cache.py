from __future__ import annotations

import logging
import os
from pathlib import Path
import tempfile
from typing import Iterable

from .exceptions import RepositoryError
from .sources import ArtifactSource

LOGGER = logging.getLogger(__name__)


def find_cached_artifact(search_set: Iterable[Path], version: str) -> Path | None:
    for repo in search_set:
        try:
            with os.scandir(repo) as entries:
                for entry in entries:
                    if entry.name == version and entry.is_file():
                        LOGGER.debug("Found cached jar '%s'.", entry.path)
                        return Path(entry.path)
        except OSError as exc:
            raise RepositoryError(f"Failed to read directory '{repo}': {exc}") from exc
    return None


def store_artifact(repository: Path, version: str, source: ArtifactSource) -> Path:
    """Write ``source`` to ``<repository>/<version>``.

    The bytes go to a temporary file next to the target first and are moved
    into place once complete, so a failed write leaves no partial cache entry.
    """
    destination = repository / version
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", delete=False, dir=str(repository), prefix=f".{version}.", suffix=".part"
        ) as tmp:
            tmp_path = Path(tmp.name)
        source.copy_to(tmp_path)
        tmp_path.replace(destination)
    finally:
        if tmp_path and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass
    return destination
