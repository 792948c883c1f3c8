"""
Base classes and utilities for web scraping.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup

from ...common.http import DEFAULT_UA, build_headers
from ...common.rate_limit import MinIntervalRateLimiter

# =============================================================================
# 1. SCRAPING CONFIGURATION
# =============================================================================


@dataclass
class ScrapingConfig:
    """Konfiguration für Web Scraping"""

    base_url: str
    timeout: float = 10.0
    user_agent: str = DEFAULT_UA


# =============================================================================
# 2. ERRORS
# =============================================================================


class FetchError(Exception):
    """A single page request failed (timeout, non-2xx status or network error)."""

    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    NETWORK = "network"

    def __init__(self, kind: str, url: str, message: str = "", status: Optional[int] = None):
        self.kind = kind
        self.url = url
        self.status = status
        detail = message or (f"HTTP {status}" if status else kind)
        super().__init__(f"{kind} fetching {url}: {detail}")


# =============================================================================
# 3. BASE SCRAPER
# =============================================================================


class BaseScraper:
    """Basisklasse für Scraper: HTTP-Session, Seitenabruf und HTML-Parsing.

    `fetch_page` never retries; each crawl stage decides what a failed page means.
    """

    def __init__(
        self,
        config: ScrapingConfig,
        name: str,
        *,
        rate_limiter: Optional[MinIntervalRateLimiter] = None,
        metrics=None,
    ):
        self.config = config
        self.name = name
        self.logger = logging.getLogger(f"scraper.{name}")
        self.rate_limiter = rate_limiter or MinIntervalRateLimiter()
        self.metrics = metrics
        self.session = None  # type: Optional[aiohttp.ClientSession]

    async def initialize(self):
        """Initialisiert die HTTP-Session"""
        if self.session and not self.session.closed:
            return
        # One connection: the crawl never fans out
        connector = aiohttp.TCPConnector(limit=1)
        self.session = aiohttp.ClientSession(
            headers=build_headers(self.config.user_agent),
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
        )

    async def cleanup(self):
        """Räumt Ressourcen auf"""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def fetch_page(self, url: str, *, stage: str = "page") -> str:
        """Lädt eine Webseite herunter.

        Raises FetchError; the completion time is recorded on the rate limiter
        whether or not the request succeeded.
        """
        if not self.session or self.session.closed:
            await self.initialize()
        outcome = "error"
        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status < 300:
                    outcome = FetchError.HTTP_STATUS
                    raise FetchError(FetchError.HTTP_STATUS, url, status=response.status)
                html = await response.text()
                outcome = "success"
                return html
        except FetchError:
            raise
        except asyncio.TimeoutError as e:
            outcome = FetchError.TIMEOUT
            raise FetchError(FetchError.TIMEOUT, url, f"no response within {self.config.timeout}s") from e
        except aiohttp.ClientError as e:
            outcome = FetchError.NETWORK
            raise FetchError(FetchError.NETWORK, url, str(e)) from e
        finally:
            self.rate_limiter.mark()
            if self.metrics:
                self.metrics.record_page_fetch(self.name, stage, outcome)
            self.logger.debug(f"GET {url} [{stage}] -> {outcome}")

    def parse_html(self, html: str) -> BeautifulSoup:
        """Parst HTML mit BeautifulSoup"""
        return BeautifulSoup(html, "html.parser")
