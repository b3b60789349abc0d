import pytest

from mcupdate.exceptions import ArtifactNotFoundError
from mcupdate.models import DownloadAttemptBudget, UpdaterConfig
from mcupdate.retry import RetryingFetcher
from mcupdate.scrape import find_link, resolve_download_url

PAGE = """\
<html>
  <body>
    <a href="/versions">All versions</a>
    <a class="button" href="https://cdn.example/client.jar">Client</a>
    <a class="button" href="https://cdn.example/server.jar">Download Server Jar</a>
    <a href="https://mirror.example/server.jar">Mirror</a>
  </body>
</html>
"""


class _FakeHttp:
    def __init__(self, text_map):
        self.text_map = text_map
        self.requested: list[str] = []

    def get_text(self, url):
        self.requested.append(url)
        return self.text_map[url]

    def get_bytes(self, url):
        raise AssertionError("no jar download expected")


def _fetcher(http):
    return RetryingFetcher(http, DownloadAttemptBudget(limit=1), confirm=lambda message: True)


def test_find_link_returns_first_matching_href():
    assert find_link(PAGE, "server.jar") == "https://cdn.example/server.jar"


def test_find_link_ignores_anchors_without_href():
    assert find_link('<a name="server.jar">x</a>', "server.jar") is None


def test_find_link_returns_none_without_match():
    assert find_link(PAGE, "bedrock-server.zip") is None


def test_resolve_download_url_uses_versioned_landing_page():
    http = _FakeHttp({"https://mcversions.net/download/1.20.1": PAGE})
    url = resolve_download_url(_fetcher(http), "1.20.1", UpdaterConfig())
    assert url == "https://cdn.example/server.jar"
    assert http.requested == ["https://mcversions.net/download/1.20.1"]


def test_resolve_download_url_joins_relative_links():
    config = UpdaterConfig(landing_page_template="https://jars.example/v/{version}/")
    http = _FakeHttp({"https://jars.example/v/1.8/": '<a href="files/server.jar">get</a>'})
    url = resolve_download_url(_fetcher(http), "1.8", config)
    assert url == "https://jars.example/v/1.8/files/server.jar"


def test_resolve_download_url_fails_without_link():
    http = _FakeHttp({"https://mcversions.net/download/0.0.1": "<p>No jar here</p>"})
    with pytest.raises(ArtifactNotFoundError):
        resolve_download_url(_fetcher(http), "0.0.1", UpdaterConfig())
