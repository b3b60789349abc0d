from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
import shutil


class ArtifactSource(ABC):
    """Something that can produce the server jar bytes at a destination path."""

    @abstractmethod
    def copy_to(self, destination: Path) -> Path:
        raise NotImplementedError

    @abstractmethod
    def describe(self) -> str:
        raise NotImplementedError


@dataclass(slots=True)
class CachedFileSource(ArtifactSource):
    path: Path

    def copy_to(self, destination: Path) -> Path:
        shutil.copyfile(self.path, destination)
        return destination

    def describe(self) -> str:
        return f"cached jar '{self.path}'"


@dataclass(slots=True)
class FreshCacheSource(CachedFileSource):
    def describe(self) -> str:
        return f"newly cached jar '{self.path}'"


@dataclass(slots=True)
class DownloadedSource(ArtifactSource):
    payload: bytes
    url: str

    def copy_to(self, destination: Path) -> Path:
        with destination.open("wb") as handle:
            handle.write(self.payload)
        return destination

    def describe(self) -> str:
        return f"download from '{self.url}'"
