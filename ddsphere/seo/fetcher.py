"""HTTP fetcher for pages under analysis."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ddsphere.config import settings
from ddsphere.seo.errors import FetchError

logger = logging.getLogger(__name__)


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def fetch_html(url: str, timeout: Optional[float] = None) -> str:
    """Fetch *url* with a single GET and return the response body.

    No retries: one failed request fails the analysis
    for this URL and the caller decides whether to try again.

    Raises:
        FetchError: On transport errors, timeouts, invalid URLs or any
            non-2xx status.
    """
    try:
        with httpx.Client(
            headers=_default_headers(),
            timeout=timeout if timeout is not None else settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return response.text
    except httpx.HTTPStatusError as exc:
        logger.info("fetch %s returned HTTP %s", url, exc.response.status_code)
        raise FetchError(url, f"HTTP {exc.response.status_code}") from exc
    except httpx.TimeoutException as exc:
        logger.info("fetch %s timed out", url)
        raise FetchError(url, "timed out") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.info("fetch %s failed: %s", url, exc)
        raise FetchError(url, str(exc) or exc.__class__.__name__) from exc
