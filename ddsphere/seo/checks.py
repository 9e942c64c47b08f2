"""Check engine: evaluates the fixed rule set against extracted facts.

Every rule reads only the facts passed in, never another rule's outcome,
and checks come back in evaluation order.  Thresholds live in
:class:`SEORules` so callers (and tests) can override them explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ddsphere.seo.models import Check, ContentFacts, PageFacts, TechnicalFacts


@dataclass(frozen=True)
class SEORules:
    title_min: int = 30
    title_max: int = 60
    description_min: int = 50
    description_max: int = 160
    max_h1: int = 1
    min_words: int = 300
    min_internal_links: int = 3


DEFAULT_RULES = SEORules()


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

def _title_check(page: PageFacts, rules: SEORules) -> Check:
    title = page.title
    bounds = f"{rules.title_min}-{rules.title_max} chars"
    if not title:
        return Check("basic", "Page Title", "error", "No title tag found", "Add a title tag", 15)
    if len(title) < rules.title_min:
        return Check(
            "basic", "Page Title", "warning",
            f"Title is too short ({len(title)} chars)", f"Increase to {bounds}", 5,
        )
    if len(title) > rules.title_max:
        return Check(
            "basic", "Page Title", "warning",
            f"Title is too long ({len(title)} chars)", f"Reduce to {bounds}", 5,
        )
    return Check("basic", "Page Title", "success", f"Title length is good ({len(title)} chars)")


def _description_check(page: PageFacts, rules: SEORules) -> Check:
    desc = page.meta_description
    bounds = f"{rules.description_min}-{rules.description_max} chars"
    if not desc:
        return Check(
            "basic", "Meta Description", "error",
            "No meta description found", "Add a meta description", 10,
        )
    if len(desc) < rules.description_min:
        return Check(
            "basic", "Meta Description", "warning",
            f"Meta description is too short ({len(desc)} chars)", f"Increase to {bounds}", 3,
        )
    if len(desc) > rules.description_max:
        return Check(
            "basic", "Meta Description", "warning",
            f"Meta description is too long ({len(desc)} chars)", f"Reduce to {bounds}", 3,
        )
    return Check(
        "basic", "Meta Description", "success",
        f"Meta description length is good ({len(desc)} chars)",
    )


def _h1_check(page: PageFacts, rules: SEORules) -> Check:
    count = len(page.headings.h1)
    if count == 0:
        return Check(
            "content", "H1 Heading", "error",
            "No H1 heading found", "Add one H1 heading with primary keyword", 10,
        )
    if count > rules.max_h1:
        return Check(
            "content", "H1 Heading", "warning",
            f"Multiple H1 headings found ({count})", "Use only one H1 heading per page", 5,
        )
    return Check("content", "H1 Heading", "success", "One H1 heading found")


def _image_alt_check(page: PageFacts, rules: SEORules) -> Check | None:
    missing = [img for img in page.images if not img.alt.strip()]
    if missing:
        return Check(
            "technical", "Image Alt Text", "warning",
            f"{len(missing)} images without alt text",
            "Add descriptive alt text to all images", 2 * len(missing),
        )
    if page.images:
        return Check("technical", "Image Alt Text", "success", "All images have alt text")
    # No images: nothing to judge.
    return None


def _content_length_check(content: ContentFacts, rules: SEORules) -> Check:
    words = content.word_count
    if words < rules.min_words:
        return Check(
            "content", "Content Length", "warning",
            f"Content is too short ({words} words)",
            f"Aim for at least {rules.min_words} words", 8,
        )
    return Check(
        "content", "Content Length", "success", f"Content length is adequate ({words} words)"
    )


def _mobile_check(technical: TechnicalFacts) -> Check:
    if not technical.is_mobile_friendly:
        return Check(
            "technical", "Mobile Friendly", "warning",
            "Page may not be mobile-friendly", "Add viewport meta tag", 10,
        )
    return Check("technical", "Mobile Friendly", "success", "Page is mobile-friendly")


def _ssl_check(page: PageFacts) -> Check:
    if not page.has_ssl:
        return Check(
            "technical", "SSL Certificate", "error",
            "No SSL certificate (HTTPS)", "Install SSL certificate", 15,
        )
    return Check("technical", "SSL Certificate", "success", "SSL certificate installed")


def _internal_links_check(page: PageFacts, rules: SEORules) -> Check:
    count = len(page.links.internal)
    if count < rules.min_internal_links:
        return Check(
            "content", "Internal Links", "warning",
            f"Few internal links ({count})", "Add more internal links for better navigation", 5,
        )
    return Check(
        "content", "Internal Links", "success", f"Good number of internal links ({count})"
    )


def _structured_data_check(technical: TechnicalFacts) -> Check:
    if not technical.has_structured_data:
        return Check(
            "technical", "Structured Data", "info",
            "No structured data found", "Add structured data for rich snippets", 0,
        )
    return Check("technical", "Structured Data", "success", "Structured data found")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run_checks(
    page: PageFacts,
    content: ContentFacts,
    technical: TechnicalFacts,
    rules: SEORules = DEFAULT_RULES,
) -> List[Check]:
    """Evaluate every rule and return the resulting checks in rule order."""
    candidates = [
        _title_check(page, rules),
        _description_check(page, rules),
        _h1_check(page, rules),
        _image_alt_check(page, rules),
        _content_length_check(content, rules),
        _mobile_check(technical),
        _ssl_check(page),
        _internal_links_check(page, rules),
        _structured_data_check(technical),
    ]
    return [check for check in candidates if check is not None]
