from __future__ import annotations


class McUpdateError(Exception):
    """Base exception for mcupdate."""


class InvalidVersionError(McUpdateError):
    """Raised when a requested version cannot be used as a file name."""


class RepositoryError(McUpdateError):
    """Raised when no usable repository can be found or read."""


class DownloadError(McUpdateError):
    """Raised when a single download attempt fails."""

    def __init__(self, message: str, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class DownloadExhaustedError(McUpdateError):
    """Raised when every allowed download attempt has failed."""


class ArtifactNotFoundError(McUpdateError):
    """Raised when the landing page does not link a server jar."""


class InstallError(McUpdateError):
    """Raised when the server jar cannot be written into the install directory."""


class ConfirmationRequiredError(McUpdateError):
    """Raised when a prompt is needed but prompting is disabled."""


class OperatorDeclined(Exception):
    """Raised when the operator chooses not to continue."""
