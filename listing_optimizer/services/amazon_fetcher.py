"""
Amazon Fetcher Service
Validates the ASIN and downloads the product page with browser-like headers
"""
import logging
import re
from typing import Optional

import httpx

from ..config import (
    AMAZON_PRODUCT_URL,
    BLOCK_INDICATORS,
    BROWSER_HEADERS,
    FETCH_MAX_REDIRECTS,
    FETCH_TIMEOUT_SECONDS,
    TITLE_SELECTORS,
)
from ..errors import FetchFailed, ProductInaccessible, ProductNotFound
from ..utils.validators import is_valid_asin, validate_asin

logger = logging.getLogger(__name__)


# id="productTitle" or id='ebooksProductTitle' anywhere in the markup
TITLE_ELEMENT_PATTERN = re.compile(
    r"\bid\s*=\s*[\"']?(?:"
    + "|".join(re.escape(selector.lstrip("#")) for selector in TITLE_SELECTORS)
    + r")[\"'\s>]"
)


def looks_blocked(html: str) -> bool:
    """
    Detect Amazon's robot-check / CAPTCHA interstitial
    A page carrying a product title element is a listing, whatever its text says.
    """
    html = html or ""
    if TITLE_ELEMENT_PATTERN.search(html):
        return False
    lowered = html.lower()
    return any(marker in lowered for marker in BLOCK_INDICATORS)


class AmazonFetcher:
    """Single GET per ASIN: 15s timeout, at most 5 redirects, no retries"""

    def __init__(self, domain: str = "amazon.in", client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            domain: Amazon storefront, e.g. "amazon.in"
            client: Shared httpx client; its redirect limit is lowered to
                FETCH_MAX_REDIRECTS
        """
        self.domain = domain
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers=BROWSER_HEADERS,
            timeout=FETCH_TIMEOUT_SECONDS,
            follow_redirects=True,
            max_redirects=FETCH_MAX_REDIRECTS,
        )
        self._client.max_redirects = min(self._client.max_redirects, FETCH_MAX_REDIRECTS)

    def is_valid_asin(self, asin) -> bool:
        return is_valid_asin(asin)

    def product_url(self, asin: str) -> str:
        return AMAZON_PRODUCT_URL.format(domain=self.domain, asin=asin)

    async def fetch(self, asin: str, request_id: str = "unknown") -> str:
        """
        Download the raw product page markup
        Args:
            asin: Amazon Standard Identification Number
            request_id: Correlation id for log lines
        Returns:
            Page HTML
        Raises:
            InvalidAsin: Malformed ASIN (no request is made)
            ProductNotFound: Amazon answered 404
            ProductInaccessible: 403 or a robot-check page
            FetchFailed: Timeout, transport error or other non-2xx status
        """
        validate_asin(asin)
        url = self.product_url(asin)
        logger.info(f"[{request_id}] Scraping Amazon URL: {url}")

        try:
            response = await self._client.get(
                url,
                headers=BROWSER_HEADERS,
                timeout=FETCH_TIMEOUT_SECONDS,
                follow_redirects=True,
            )
        except httpx.TooManyRedirects as e:
            logger.error(f"[{request_id}] Too many redirects for {url}: {e}")
            raise FetchFailed(f"Too many redirects fetching {url}") from e
        except httpx.TimeoutException as e:
            logger.error(f"[{request_id}] Amazon request timed out after {FETCH_TIMEOUT_SECONDS}s")
            raise FetchFailed(f"Timed out fetching {url}") from e
        except httpx.HTTPError as e:
            logger.error(f"[{request_id}] Amazon request failed: {e}")
            raise FetchFailed(f"Failed to fetch {url}: {e}") from e

        status = response.status_code
        logger.info(f"[{request_id}] Amazon responded {status} ({len(response.content)} bytes)")

        if status == 404:
            raise ProductNotFound(f"Product not found for ASIN {asin}")
        if status == 403:
            raise ProductInaccessible(f"Amazon denied access to ASIN {asin}")

        html = response.text
        if status == 503 and looks_blocked(html):
            raise ProductInaccessible(f"Amazon served a robot check for ASIN {asin}")
        if not response.is_success:
            raise FetchFailed(f"Amazon returned HTTP {status} for ASIN {asin}")
        if looks_blocked(html):
            logger.warning(f"[{request_id}] Robot check page returned for ASIN {asin}")
            raise ProductInaccessible(f"Amazon served a robot check for ASIN {asin}")

        return html

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()
