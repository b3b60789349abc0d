from __future__ import annotations

import http.client
import urllib.error
import urllib.request

from . import __version__
from .exceptions import DownloadError


MAX_TEXT_RESPONSE_BYTES = 16 * 1024 * 1024
MAX_DOWNLOAD_BYTES = 512 * 1024 * 1024


class HttpClient:
    """Single-attempt transport. Retrying is left to the caller."""

    def __init__(
        self,
        timeout_seconds: float = 30,
        max_text_response_bytes: int = MAX_TEXT_RESPONSE_BYTES,
        max_download_bytes: int = MAX_DOWNLOAD_BYTES,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_text_response_bytes = max_text_response_bytes
        self.max_download_bytes = max_download_bytes
        self.user_agent = f"mcupdate/{__version__}"

    def _request(self, url: str) -> urllib.request.Request:
        return urllib.request.Request(url, headers={"User-Agent": self.user_agent})

    def get_text(self, url: str) -> str:
        payload = self._fetch(url, max_bytes=self.max_text_response_bytes)
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError:
            return payload.decode("latin-1")

    def get_bytes(self, url: str) -> bytes:
        return self._fetch(url, max_bytes=self.max_download_bytes)

    def _fetch(self, url: str, max_bytes: int) -> bytes:
        try:
            with urllib.request.urlopen(
                self._request(url), timeout=self.timeout_seconds
            ) as response:
                declared_size: int | None = None
                content_length = response.headers.get("Content-Length")
                if content_length:
                    try:
                        declared_size = int(content_length)
                    except ValueError:
                        declared_size = None
                    if declared_size is not None and declared_size > max_bytes:
                        raise DownloadError(
                            f"Response from {url} exceeds the size limit.", url=url
                        )
                return self._read_limited(
                    response, max_bytes=max_bytes, url=url, expected_size=declared_size
                )
        except urllib.error.HTTPError as exc:
            raise DownloadError(
                f"Request failed for {url} with code {exc.code}: {exc.reason}",
                url=url,
                status=exc.code,
            ) from exc
        except urllib.error.URLError as exc:
            raise DownloadError(f"Request failed for {url}: {exc.reason}", url=url) from exc
        except (OSError, ValueError, http.client.HTTPException) as exc:
            raise DownloadError(f"Request failed for {url}: {exc!r}", url=url) from exc

    @staticmethod
    def _read_limited(
        response, max_bytes: int, url: str, expected_size: int | None = None
    ) -> bytes:
        chunks: list[bytes] = []
        received = 0
        while True:
            chunk = response.read(1024 * 1024)
            if not chunk:
                break
            received += len(chunk)
            if received > max_bytes:
                raise DownloadError(
                    f"Response from {url} exceeded the allowed size limit.", url=url
                )
            chunks.append(chunk)
        if expected_size is not None and received != expected_size:
            raise DownloadError(
                f"Response from {url} ended after {received} of {expected_size} bytes.",
                url=url,
            )
        return b"".join(chunks)
