"""
Time-bounded resource fetcher

Every call resolves to a FetchResult. Timeouts, DNS failures, refused
connections, malformed URLs and error statuses are reported in
FetchResult.error so that callers can degrade instead of aborting.
Single attempt per call, no retries.
"""

import asyncio
import time
from typing import Dict, Mapping, Optional

import aiohttp
import structlog
from bs4 import UnicodeDammit

from compliance_probe.core.config import FetcherConfig
from compliance_probe.models.probe import FetchResult

logger = structlog.get_logger()

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"


class ResourceFetcher:
    """
    Wraps an aiohttp session with per-call timeout, body size cap and
    custom Accept header

    Can own its session (``async with ResourceFetcher(config) as fetcher``)
    or borrow one supplied by the caller.
    """

    def __init__(
        self,
        config: Optional[FetcherConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.config = config or FetcherConfig()
        self._session = session
        self._owns_session = session is None
        self.logger = logger.bind(component="fetcher")

    async def __aenter__(self) -> "ResourceFetcher":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept-Language": self.config.accept_language,
                    "DNT": "1",
                    "Upgrade-Insecure-Requests": "1",
                }
            )
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def fetch(
        self,
        url: str,
        timeout_ms: Optional[int] = None,
        max_bytes: Optional[int] = None,
        accept: Optional[str] = None,
        treat_error_status_as_data: bool = False
    ) -> FetchResult:
        """
        Fetch a URL

        Args:
            url: Absolute URL to fetch
            timeout_ms: Total timeout for the call, defaults to the configured one
            max_bytes: Body size cap, content beyond it is dropped
            accept: Accept header for this call
            treat_error_status_as_data: Keep 4xx/5xx responses as plain data
                instead of flagging them as errors

        Returns:
            FetchResult, never raises
        """
        timeout_ms = timeout_ms or self.config.default_timeout_ms
        max_bytes = max_bytes or self.config.max_body_bytes
        started = time.monotonic()

        result = FetchResult(url=url)

        request_kwargs = {
            "headers": {"Accept": accept or DEFAULT_ACCEPT},
            "timeout": aiohttp.ClientTimeout(total=timeout_ms / 1000),
            "allow_redirects": True,
            "max_redirects": self.config.max_redirects,
        }
        if not self.config.verify_ssl:
            request_kwargs["ssl"] = False

        try:
            session = self._ensure_session()
            async with session.get(url, **request_kwargs) as response:
                body, truncated = await self._read_capped(response, max_bytes)

                result.status_code = response.status
                result.headers = self._flatten_headers(response.headers)
                result.content = self._decode(body, response.charset)
                result.truncated = truncated

                if response.status >= 400 and not treat_error_status_as_data:
                    result.error = f"Request failed with status {response.status}"

        except asyncio.TimeoutError:
            result.error = f"Timeout after {timeout_ms}ms"
        except aiohttp.ClientError as e:
            result.error = str(e) or e.__class__.__name__
        except (ValueError, UnicodeError) as e:
            # yarl rejects some malformed URLs before aiohttp sees them
            result.error = f"Invalid URL: {e}"

        result.elapsed_ms = int(round((time.monotonic() - started) * 1000))

        if result.error:
            self.logger.debug("Fetch failed", url=url, error=result.error, elapsed_ms=result.elapsed_ms)
        else:
            self.logger.debug(
                "Fetch complete",
                url=url,
                status=result.status_code,
                bytes=len(result.content),
                truncated=result.truncated,
                elapsed_ms=result.elapsed_ms
            )

        return result

    async def _read_capped(self, response: aiohttp.ClientResponse, max_bytes: int):
        """Read at most max_bytes, reporting whether more was available"""
        chunks = []
        total = 0
        limit = max_bytes + 1

        while total < limit:
            chunk = await response.content.read(limit - total)
            if not chunk:
                break
            chunks.append(chunk)
            total += len(chunk)

        body = b"".join(chunks)
        if len(body) > max_bytes:
            return body[:max_bytes], True
        return body, False

    def _decode(self, body: bytes, charset: Optional[str]) -> str:
        """Header charset first, otherwise sniff <meta charset>, BOM or byte patterns"""
        if charset:
            try:
                return body.decode(charset, errors="replace")
            except LookupError:
                pass

        markup = UnicodeDammit(body, is_html=True).unicode_markup
        if markup is None:
            return body.decode("utf-8", errors="replace")
        return markup

    def _flatten_headers(self, headers: Mapping[str, str]) -> Dict[str, str]:
        """Lower-case header names, joining repeated headers with a comma"""
        flat: Dict[str, str] = {}
        for name, value in headers.items():
            key = name.lower()
            if key in flat:
                flat[key] = f"{flat[key]}, {value}"
            else:
                flat[key] = value
        return flat
