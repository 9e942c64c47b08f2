"""Technical page facts: viewport, structured data, hreflang, page size."""

from __future__ import annotations

import json
import logging
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

from ddsphere.seo.errors import ParseWarning
from ddsphere.seo.models import HreflangLink, TechnicalFacts

logger = logging.getLogger(__name__)


def _parse_json_ld(script: Tag, index: int) -> Any:
    raw = script.string if script.string is not None else script.get_text()
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseWarning(f"JSON-LD block {index} is not valid JSON: {exc}") from exc


def analyze_technical(soup: BeautifulSoup, url: str) -> TechnicalFacts:
    """Collect mobile, structured-data, hreflang and size facts for *url*.

    A JSON-LD block that fails to parse is logged and skipped; the other
    blocks are still collected.
    """
    facts = TechnicalFacts()

    viewport = soup.find("meta", attrs={"name": "viewport"})
    content = viewport.get("content", "") if viewport else ""
    facts.is_mobile_friendly = "width=device-width" in (content or "")

    scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
    for index, script in enumerate(scripts):
        try:
            facts.structured_data_blocks.append(_parse_json_ld(script, index))
        except ParseWarning as warning:
            logger.warning("%s: %s", url, warning)
            facts.structured_data_errors.append(str(warning))
    facts.has_structured_data = bool(facts.structured_data_blocks)

    for link in soup.find_all("link", rel="alternate", hreflang=True):
        facts.hreflang.append(
            HreflangLink(lang=link.get("hreflang", ""), url=link.get("href", ""))
        )

    facts.page_size_bytes = len(str(soup).encode("utf-8"))
    return facts
