"""Fetch-based analysis pipeline.

    fetch_html -> parse -> {content, technical, keywords} -> run_checks -> score

A module of plain functions: every call works on its own local facts, so
any number of analyses can run concurrently.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from ddsphere.seo.checks import DEFAULT_RULES, SEORules, run_checks
from ddsphere.seo.content import analyze_content, analyze_keywords
from ddsphere.seo.extractor import (
    count_paragraphs,
    extract_body_text,
    extract_page_facts,
    parse_document,
)
from ddsphere.seo.fetcher import fetch_html
from ddsphere.seo.models import AnalysisResult
from ddsphere.seo.providers import (
    BacklinkProvider,
    PerformanceProvider,
    build_default_providers,
)
from ddsphere.seo.scoring import calculate_score
from ddsphere.seo.technical import analyze_technical

logger = logging.getLogger(__name__)


def analyze_html(url: str, html: str, rules: SEORules = DEFAULT_RULES) -> AnalysisResult:
    """Analyse already-fetched *html* for *url*.

    Deterministic: the same input always yields the same checks and score
    (only ``analyzed_at`` differs between calls).
    """
    soup = parse_document(html)

    page = extract_page_facts(soup, url)
    content = analyze_content(extract_body_text(soup), count_paragraphs(soup))
    technical = analyze_technical(soup, url)
    keywords = analyze_keywords(f"{page.title} {content.text}")

    checks = run_checks(page, content, technical, rules)
    return AnalysisResult(
        url=url,
        score=calculate_score(checks),
        checks=checks,
        page=page,
        content=content,
        technical=technical,
        keywords=keywords,
        analyzed_at=datetime.now(timezone.utc),
    )


def analyze_page(
    url: str,
    *,
    full_analysis: bool = True,
    rules: SEORules = DEFAULT_RULES,
    performance_provider: Optional[PerformanceProvider] = None,
    backlink_provider: Optional[BacklinkProvider] = None,
) -> AnalysisResult:
    """Fetch *url* and analyse it.

    With ``full_analysis`` the performance and backlink providers are also
    consulted; missing providers fall back to :func:`build_default_providers`.

    Raises:
        FetchError: The page could not be retrieved.
    """
    logger.info("analysing %s", url)
    html = fetch_html(url)
    result = analyze_html(url, html, rules)

    if full_analysis:
        if performance_provider is None or backlink_provider is None:
            default_perf, default_links = build_default_providers()
            performance_provider = performance_provider or default_perf
            backlink_provider = backlink_provider or default_links
        result.performance = performance_provider.measure(url)
        result.backlinks = backlink_provider.backlinks(url)

    logger.info("analysed %s: score=%d checks=%d", url, result.score, len(result.checks))
    return result
