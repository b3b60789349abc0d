from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

TOOL_NAME = "mc_update"
LANDING_PAGE_TEMPLATE = "https://mcversions.net/download/{version}"
ARTIFACT_LINK_MARKER = "server.jar"
INSTALLED_FILENAME = "server.jar"
DOWNLOAD_BATCH_SIZE = 5

ORIGIN_INSTALL_REPOSITORY = "install-repository"
ORIGIN_REPOSITORY = "repository"
ORIGIN_DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class DownloadAttemptBudget:
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ValueError("Download attempt limit must be a positive integer.")

    @classmethod
    def unlimited(cls) -> DownloadAttemptBudget:
        return cls(limit=None)

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    def is_exhausted(self, attempts: int) -> bool:
        return self.limit is not None and attempts >= self.limit

    def describe(self) -> str:
        return "∞" if self.limit is None else str(self.limit)


@dataclass(frozen=True, slots=True)
class Repository:
    path: Path
    searchable: bool = True
    installable: bool = True
    origin: str = ORIGIN_REPOSITORY

    @property
    def is_default(self) -> bool:
        return self.origin == ORIGIN_DEFAULT


@dataclass(frozen=True, slots=True)
class UpdaterConfig:
    landing_page_template: str = LANDING_PAGE_TEMPLATE
    link_marker: str = ARTIFACT_LINK_MARKER
    installed_filename: str = INSTALLED_FILENAME
    tool_name: str = TOOL_NAME
    batch_size: int = DOWNLOAD_BATCH_SIZE

    def landing_page_url(self, version: str) -> str:
        return self.landing_page_template.format(version=version)


@dataclass(slots=True)
class UpdateRequest:
    version: str
    install_dir: Path = field(default_factory=lambda: Path("."))
    repositories: list[Path] = field(default_factory=list)
    install_repositories: list[Path] = field(default_factory=list)
    budget: DownloadAttemptBudget = field(default_factory=DownloadAttemptBudget.unlimited)


@dataclass(slots=True)
class UpdateResult:
    version: str
    server_jar: Path
    cache_hit: bool
    source: str
    cache_path: Path | None = None
    download_url: str | None = None


class PipelineState(str, Enum):
    SELECTING_REPO = "selecting-repo"
    RESOLVING_URL = "resolving-url"
    DOWNLOADING = "downloading"
    CACHING = "caching"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"
