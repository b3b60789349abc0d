from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path

from .exceptions import InvalidVersionError, RepositoryError
from .models import TOOL_NAME, DownloadAttemptBudget

LOGGER = logging.getLogger(__name__)

CACHE_DIR_ENV = "MC_UPDATE_CACHE_DIR"

_UNSAFE_VERSION = re.compile(r"(\.\.)|/|\\")


def validate_version(version: str) -> str:
    if not version or not version.strip():
        raise InvalidVersionError("Jar version cannot be empty.")
    if _UNSAFE_VERSION.search(version):
        raise InvalidVersionError(
            f"Jar version '{version}' contains invalid characters."
        )
    return version


def user_caches_root() -> Path:
    """
    Obtain the directory for user-local caches.
    """
    try:
        if sys.platform == "win32":
            return Path(os.environ["LocalAppData"])
        if sys.platform == "darwin":
            return Path(os.environ["HOME"]) / "Library" / "Caches"
        xdg_cache = os.getenv("XDG_CACHE_HOME")
        if xdg_cache:
            return Path(xdg_cache)
        return Path(os.environ["HOME"]) / ".cache"
    except KeyError as exc:
        raise RepositoryError(
            f"Could not determine the user cache directory: {exc} is not set."
        ) from exc


def default_cache_dir(tool_name: str = TOOL_NAME) -> Path:
    override = os.getenv(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser().absolute()
    return user_caches_root().joinpath(tool_name).absolute()


def ensure_cache_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RepositoryError(
            f"Failed to create global cache dir '{path}': {exc}"
        ) from exc
    if not path.is_dir():
        raise RepositoryError(f"Global cache dir '{path}' is not a directory.")
    return path


def parse_download_budget(raw: str | None) -> DownloadAttemptBudget:
    if raw is None:
        return DownloadAttemptBudget.unlimited()
    try:
        return DownloadAttemptBudget(limit=int(raw.strip()))
    except ValueError as exc:
        LOGGER.warning(
            "Could not interpret max download attempts '%s' as a positive number, "
            "setting infinite limit: %s",
            raw,
            exc,
        )
        return DownloadAttemptBudget.unlimited()


def normalize_path(path: str | Path) -> Path:
    return Path(os.path.normpath(Path(path).expanduser().absolute()))
