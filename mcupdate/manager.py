from __future__ import annotations

import logging
from pathlib import Path

from .cache import find_cached_artifact, store_artifact
from .confirm import Confirm, TerminalConfirm, continue_or_stop
from .exceptions import InstallError, McUpdateError, OperatorDeclined
from .http import HttpClient
from .models import PipelineState, UpdateRequest, UpdateResult, UpdaterConfig
from .repositories import RepositorySet, build_repository_set, select_install_repository
from .retry import RetryingFetcher, Transport
from .scrape import resolve_download_url
from .sources import ArtifactSource, CachedFileSource, DownloadedSource, FreshCacheSource
from .utils import default_cache_dir, ensure_cache_dir, normalize_path, validate_version

LOGGER = logging.getLogger(__name__)


class ServerJarUpdater:
    def __init__(
        self,
        http_client: Transport | None = None,
        confirm: Confirm | None = None,
        config: UpdaterConfig | None = None,
        cache_dir: Path | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.http_client = http_client or HttpClient()
        self.confirm = confirm or TerminalConfirm()
        self.config = config or UpdaterConfig()
        self._cache_dir = cache_dir
        self._cwd = cwd
        self.state = PipelineState.SELECTING_REPO

    def update(self, request: UpdateRequest) -> UpdateResult:
        version = validate_version(request.version)
        install_dir = normalize_path(request.install_dir)
        cache_dir = ensure_cache_dir(
            self._cache_dir or default_cache_dir(self.config.tool_name)
        )
        repositories = build_repository_set(
            install_dir=install_dir,
            cache_dir=cache_dir,
            repositories=request.repositories,
            install_repositories=request.install_repositories,
            cwd=self._cwd,
            tool_name=self.config.tool_name,
        )

        cached = find_cached_artifact(repositories.search_set(), version)
        self._ensure_install_dir(install_dir)
        target = install_dir / self.config.installed_filename

        if cached is not None:
            LOGGER.info("Using cached jar '%s'.", cached)
            source = CachedFileSource(cached)
            self._install(source, target, version)
            return UpdateResult(
                version=version,
                server_jar=target,
                cache_hit=True,
                source=source.describe(),
                cache_path=cached,
            )
        return self._fetch_and_cache(request, version, repositories, target)

    def _fetch_and_cache(
        self,
        request: UpdateRequest,
        version: str,
        repositories: RepositorySet,
        target: Path,
    ) -> UpdateResult:
        self.state = PipelineState.SELECTING_REPO
        try:
            install_repo = select_install_repository(
                repositories.install_candidates(), self.confirm
            )

            self._transition(PipelineState.RESOLVING_URL)
            fetcher = RetryingFetcher(
                http_client=self.http_client,
                budget=request.budget,
                confirm=self.confirm,
                batch_size=self.config.batch_size,
            )
            jar_url = resolve_download_url(fetcher, version, self.config)

            self._transition(PipelineState.DOWNLOADING)
            downloaded = DownloadedSource(payload=fetcher.fetch_bytes(jar_url), url=jar_url)

            self._transition(PipelineState.CACHING)
            cache_path: Path | None = None
            source: ArtifactSource = downloaded
            try:
                cache_path = store_artifact(install_repo, version, downloaded)
            except OSError as exc:
                LOGGER.warning("Failed to cache jar in '%s': %s", install_repo, exc)
            else:
                LOGGER.info("Successfully cached jar in '%s'.", install_repo)
                source = FreshCacheSource(cache_path)

            self._transition(PipelineState.INSTALLING)
            self._install(source, target, version)
        except (McUpdateError, OperatorDeclined):
            failed_in = self.state
            self._transition(PipelineState.FAILED)
            LOGGER.debug("Update failed while %s.", failed_in.value)
            raise

        self._transition(PipelineState.DONE)
        return UpdateResult(
            version=version,
            server_jar=target,
            cache_hit=False,
            source=source.describe(),
            cache_path=cache_path,
            download_url=jar_url,
        )

    def _install(self, source: ArtifactSource, target: Path, version: str) -> None:
        try:
            source.copy_to(target)
        except OSError as exc:
            raise InstallError(
                f"Failed to install server jar from {source.describe()} into '{target}': {exc}"
            ) from exc
        LOGGER.info(
            "Successfully installed server jar with version '%s' into '%s'.",
            version,
            target.parent,
        )

    def _ensure_install_dir(self, install_dir: Path) -> None:
        try:
            install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            continue_or_stop(self.confirm, f"failed to create install directory: {exc}")

    def _transition(self, state: PipelineState) -> None:
        LOGGER.debug("Pipeline state: %s -> %s", self.state.value, state.value)
        self.state = state
