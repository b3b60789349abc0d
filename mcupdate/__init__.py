__version__ = "0.3.0"

from .manager import ServerJarUpdater
from .models import DownloadAttemptBudget, Repository, UpdateRequest, UpdateResult, UpdaterConfig
from .repositories import RepositorySet

__all__ = [
    "DownloadAttemptBudget",
    "Repository",
    "RepositorySet",
    "ServerJarUpdater",
    "UpdateRequest",
    "UpdateResult",
    "UpdaterConfig",
    "__version__",
]
