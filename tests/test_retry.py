import http.client

import pytest

from mcupdate.exceptions import DownloadError, DownloadExhaustedError, OperatorDeclined
from mcupdate.http import HttpClient
from mcupdate.models import DownloadAttemptBudget
from mcupdate.retry import RetryingFetcher, RetryStep, next_step


class _FlakyHttp:
    def __init__(self, failures: int | None, payload: bytes = b"ok") -> None:
        self.failures = failures
        self.payload = payload
        self.calls = 0

    def get_bytes(self, url):
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise DownloadError(f"Request failed for {url}", url=url, status=503)
        return self.payload

    def get_text(self, url):
        return self.get_bytes(url).decode("utf-8")


class _CountingConfirm:
    def __init__(self, answers: list[bool]) -> None:
        self.answers = list(answers)
        self.messages: list[str] = []

    def __call__(self, message: str) -> bool:
        self.messages.append(message)
        return self.answers.pop(0)


@pytest.mark.parametrize(
    ("failed", "limit", "expected"),
    [
        (1, None, RetryStep.RETRY),
        (4, None, RetryStep.RETRY),
        (5, None, RetryStep.PROMPT),
        (10, None, RetryStep.PROMPT),
        (11, None, RetryStep.RETRY),
        (3, 7, RetryStep.RETRY),
        (5, 7, RetryStep.PROMPT),
        (7, 7, RetryStep.EXHAUSTED),
        (5, 5, RetryStep.EXHAUSTED),
        (1, 1, RetryStep.EXHAUSTED),
    ],
)
def test_next_step_table(failed, limit, expected):
    assert next_step(failed, DownloadAttemptBudget(limit=limit), batch_size=5) is expected


def test_next_step_rejects_empty_batches():
    with pytest.raises(ValueError):
        next_step(1, DownloadAttemptBudget.unlimited(), batch_size=0)


def test_fetcher_returns_after_transient_failures():
    http = _FlakyHttp(failures=2)
    confirm = _CountingConfirm([])
    fetcher = RetryingFetcher(http, DownloadAttemptBudget(limit=5), confirm)

    assert fetcher.fetch_bytes("https://example.com/server.jar") == b"ok"
    assert http.calls == 3
    assert confirm.messages == []


def test_fetcher_stops_at_budget_without_prompting_on_last_batch():
    http = _FlakyHttp(failures=None)
    confirm = _CountingConfirm([True])
    fetcher = RetryingFetcher(http, DownloadAttemptBudget(limit=7), confirm)

    with pytest.raises(DownloadExhaustedError):
        fetcher.fetch_bytes("https://example.com/server.jar")
    assert http.calls == 7
    assert len(confirm.messages) == 1


def test_fetcher_budget_of_one_batch_never_prompts():
    http = _FlakyHttp(failures=None)
    confirm = _CountingConfirm([])
    fetcher = RetryingFetcher(http, DownloadAttemptBudget(limit=5), confirm)

    with pytest.raises(DownloadExhaustedError):
        fetcher.fetch_text("https://example.com/page")
    assert http.calls == 5


def test_fetcher_unlimited_prompts_every_batch_until_declined():
    http = _FlakyHttp(failures=None)
    confirm = _CountingConfirm([True, True, False])
    fetcher = RetryingFetcher(http, DownloadAttemptBudget.unlimited(), confirm)

    with pytest.raises(OperatorDeclined):
        fetcher.fetch_bytes("https://example.com/server.jar")
    assert http.calls == 15
    assert confirm.messages == ["batch failed, continue to retry"] * 3


def test_fetcher_counts_protocol_errors_as_failed_attempts(monkeypatch):
    opened: list[str] = []

    def _fake_open(request, timeout=0):
        opened.append(request.full_url)
        raise http.client.IncompleteRead(b"abc", 253)

    monkeypatch.setattr("urllib.request.urlopen", _fake_open)
    fetcher = RetryingFetcher(
        HttpClient(), DownloadAttemptBudget(limit=2), confirm=lambda message: True
    )

    with pytest.raises(DownloadExhaustedError):
        fetcher.fetch_bytes("https://example.com/server.jar")
    assert len(opened) == 2
