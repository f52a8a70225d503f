"""
Fetch a product page through the server-side page proxy.

The proxy takes {"url": ...} and answers {"text": ..., "html": ...}.
No retries: a failed fetch is reported to the caller as PageFetchError.
"""

from dataclasses import dataclass
from typing import Optional
import requests
import structlog

from config import settings
from exceptions import PageFetchError

logger = structlog.get_logger(__name__)


@dataclass
class FetchedPage:
    """Renderings of a fetched page."""
    text: str
    html: str
    source_url: str


def fetch_product_page(url: str, proxy_url: Optional[str] = None) -> FetchedPage:
    """
    Fetch a product page.

    Args:
        url: Product page URL
        proxy_url: Proxy endpoint (defaults to settings.page_fetch_proxy_url)

    Returns:
        FetchedPage

    Raises:
        PageFetchError: Proxy not configured, HTTP error, network error or
            a response that is not JSON
    """
    proxy_url = proxy_url or settings.page_fetch_proxy_url
    if not proxy_url:
        raise PageFetchError(
            url,
            "URL import requires a page fetch proxy. Set PAGE_FETCH_PROXY_URL."
        )

    try:
        response = requests.post(
            proxy_url,
            json={"url": url},
            timeout=settings.page_fetch_timeout_seconds
        )
    except requests.RequestException as e:
        logger.error("page_fetch_failed", url=url, error=str(e))
        raise PageFetchError(url, f"Proxy fetch failed: {e}")

    if not response.ok:
        logger.warning("page_fetch_http_error", url=url, status=response.status_code)
        raise PageFetchError(
            url,
            f"Proxy fetch failed: {response.status_code} {response.reason}",
            {"status_code": response.status_code}
        )

    try:
        data = response.json()
    except ValueError as e:
        logger.error("page_fetch_bad_response", url=url, error=str(e))
        raise PageFetchError(url, "Proxy returned a response that is not JSON")

    page = FetchedPage(
        text=data.get("text") or "",
        html=data.get("html") or "",
        source_url=url
    )
    logger.info("page_fetched", url=url, text_chars=len(page.text), html_chars=len(page.html))
    return page
