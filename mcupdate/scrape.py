from __future__ import annotations

import logging
import urllib.parse

from bs4 import BeautifulSoup

from .exceptions import ArtifactNotFoundError
from .models import UpdaterConfig
from .retry import RetryingFetcher

LOGGER = logging.getLogger(__name__)


def find_link(html: str, marker: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"])
        if marker in href:
            return href
    return None


def resolve_download_url(fetcher: RetryingFetcher, version: str, config: UpdaterConfig) -> str:
    page_url = config.landing_page_url(version)
    page = fetcher.fetch_text(page_url)
    href = find_link(page, config.link_marker)
    if href is None:
        raise ArtifactNotFoundError(
            f"Failed to locate server jar for version '{version}' on {page_url}."
        )
    jar_url = urllib.parse.urljoin(page_url, href)
    LOGGER.info("Server jar at '%s'.", jar_url)
    return jar_url
