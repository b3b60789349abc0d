from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from pathlib import Path
from typing import Iterable

from .confirm import Confirm, continue_or_stop
from .exceptions import RepositoryError
from .models import (
    ORIGIN_DEFAULT,
    ORIGIN_INSTALL_REPOSITORY,
    ORIGIN_REPOSITORY,
    TOOL_NAME,
    Repository,
)
from .utils import normalize_path

LOGGER = logging.getLogger(__name__)

_INSTALL_PRIORITY = {
    ORIGIN_INSTALL_REPOSITORY: 0,
    ORIGIN_REPOSITORY: 1,
    ORIGIN_DEFAULT: 2,
}


@dataclass(frozen=True, slots=True)
class RepositorySet:
    repositories: tuple[Repository, ...]

    def __iter__(self):
        return iter(self.repositories)

    def search_set(self) -> list[Path]:
        found: list[Path] = []
        for repo in self.repositories:
            if not repo.searchable:
                continue
            if not repo.path.exists():
                LOGGER.warning("The repo '%s' does not exist, skipping it.", repo.path)
                continue
            if not repo.path.is_dir():
                LOGGER.warning("'%s' is not a directory, ignoring it.", repo.path)
                continue
            found.append(repo.path)
        return found

    def install_candidates(self) -> list[Path]:
        installable = [repo for repo in self.repositories if repo.installable]
        # sorted() is stable, so declaration order holds within each origin
        ordered = sorted(installable, key=lambda repo: _INSTALL_PRIORITY[repo.origin])
        return [repo.path for repo in ordered]


def default_repository_paths(
    install_dir: Path, cache_dir: Path, cwd: Path, tool_name: str = TOOL_NAME
) -> list[Path]:
    return [cache_dir, install_dir / tool_name, cwd / tool_name]


def build_repository_set(
    install_dir: str | Path,
    cache_dir: str | Path,
    repositories: Iterable[str | Path] = (),
    install_repositories: Iterable[str | Path] = (),
    cwd: str | Path | None = None,
    tool_name: str = TOOL_NAME,
) -> RepositorySet:
    working_dir = Path(cwd) if cwd is not None else Path.cwd()
    declared: list[Repository] = [
        Repository(path=normalize_path(path), origin=ORIGIN_INSTALL_REPOSITORY)
        for path in install_repositories
    ]
    declared.extend(
        Repository(path=normalize_path(path), origin=ORIGIN_REPOSITORY)
        for path in repositories
    )
    declared.extend(
        Repository(path=normalize_path(path), origin=ORIGIN_DEFAULT)
        for path in default_repository_paths(
            install_dir=normalize_path(install_dir),
            cache_dir=Path(cache_dir),
            cwd=working_dir,
            tool_name=tool_name,
        )
    )

    merged: dict[Path, Repository] = {}
    for repo in declared:
        existing = merged.get(repo.path)
        if existing is None:
            merged[repo.path] = repo
            continue
        merged[repo.path] = replace(
            existing,
            searchable=existing.searchable or repo.searchable,
            installable=existing.installable or repo.installable,
        )
    return RepositorySet(repositories=tuple(merged.values()))


def select_install_repository(candidates: Iterable[Path], confirm: Confirm) -> Path:
    for repo in candidates:
        if repo.exists():
            if repo.is_dir():
                LOGGER.debug("Selected install repo '%s'.", repo)
                return repo
            continue_or_stop(
                confirm, f"potential install repo '{repo}' is not a directory"
            )
            continue
        try:
            repo.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            continue_or_stop(
                confirm, f"failed to create installation repo at '{repo}': {exc}"
            )
            continue
        LOGGER.info("Created repo at '%s'.", repo)
        return repo
    raise RepositoryError("Failed to select or create an install repo.")
