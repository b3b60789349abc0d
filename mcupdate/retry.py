from __future__ import annotations

from enum import Enum
import logging
from typing import Callable, Protocol, TypeVar

from .confirm import Confirm, continue_or_stop
from .exceptions import DownloadError, DownloadExhaustedError
from .models import DOWNLOAD_BATCH_SIZE, DownloadAttemptBudget

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class RetryStep(str, Enum):
    RETRY = "retry"
    PROMPT = "prompt"
    EXHAUSTED = "exhausted"


def next_step(
    failed_attempts: int,
    budget: DownloadAttemptBudget,
    batch_size: int = DOWNLOAD_BATCH_SIZE,
) -> RetryStep:
    """Decide what happens after ``failed_attempts`` consecutive failures.

    A used-up budget wins over a batch boundary, so the operator is never asked
    to continue when no attempts are left.
    """
    if batch_size < 1:
        raise ValueError("Batch size must be a positive integer.")
    if budget.is_exhausted(failed_attempts):
        return RetryStep.EXHAUSTED
    if failed_attempts > 0 and failed_attempts % batch_size == 0:
        return RetryStep.PROMPT
    return RetryStep.RETRY


class Transport(Protocol):
    def get_text(self, url: str) -> str: ...

    def get_bytes(self, url: str) -> bytes: ...


class RetryingFetcher:
    def __init__(
        self,
        http_client: Transport,
        budget: DownloadAttemptBudget,
        confirm: Confirm,
        batch_size: int = DOWNLOAD_BATCH_SIZE,
    ) -> None:
        self.http_client = http_client
        self.budget = budget
        self.confirm = confirm
        self.batch_size = batch_size

    def fetch_text(self, url: str) -> str:
        return self._with_retry(url, self.http_client.get_text)

    def fetch_bytes(self, url: str) -> bytes:
        return self._with_retry(url, self.http_client.get_bytes)

    def _with_retry(self, url: str, operation: Callable[[str], T]) -> T:
        LOGGER.info("Beginning download for url: %s", url)
        upper_bound = self.budget.describe()
        failed = 0
        while True:
            attempt = failed + 1
            try:
                result = operation(url)
            except DownloadError as exc:
                failed = attempt
                if exc.status is not None:
                    LOGGER.warning(
                        "(%d/%s) get request failed with code %d: %s",
                        attempt,
                        upper_bound,
                        exc.status,
                        exc,
                    )
                else:
                    LOGGER.warning("(%d/%s) get request failed: %s", attempt, upper_bound, exc)
            else:
                LOGGER.info("(%d/%s) get request succeeded", attempt, upper_bound)
                return result

            step = next_step(failed, self.budget, self.batch_size)
            if step is RetryStep.EXHAUSTED:
                raise DownloadExhaustedError(
                    f"Ran out of attempts to download {url} after {failed} tries."
                )
            if step is RetryStep.PROMPT:
                continue_or_stop(self.confirm, "batch failed, continue to retry")
