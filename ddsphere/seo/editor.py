"""Editor-time content scorer.

Scores a draft from the text the author typed (markdown body, title, meta
description, focus keyword) without fetching or parsing anything.  Shares
no state with the fetch-based pipeline.

The overall weights (0.3 / 0.4 / 0.2 plus a 10 point bonus past 300 words)
do not sum to 1.0.  Scores stored for existing posts were computed this way,
so they are kept as they are.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional

from ddsphere.seo.errors import InputError

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_HEADING = re.compile(r"^#{1,6}\s+.+", re.MULTILINE)
_IMAGE = re.compile(r"!\[.*?\]\(.*?\)")
_LINK = re.compile(r"\[.*?\]\(.*?\)")

SUGGEST_READABILITY = "Improve readability by using shorter sentences"
SUGGEST_MORE_CONTENT = "Add more content (aim for 300+ words)"
SUGGEST_KEYWORD_DENSITY = "Consider increasing keyword density"
SUGGEST_KEYWORD_IN_TITLE = "Include focus keyword in the title"
SUGGEST_SUBHEADINGS = "Add more subheadings to structure content"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class ReadabilityScore:
    score: int
    word_count: int
    reading_time: int
    sentence_count: int
    paragraph_count: int


@dataclass
class KeywordUsage:
    in_title: bool = False
    in_meta_description: bool = False
    density: float = 0.0
    count: int = 0


@dataclass
class KeywordScore:
    score: int = 0
    density: float = 0.0
    usage: KeywordUsage = field(default_factory=KeywordUsage)


@dataclass
class MetaTagScore:
    length: int
    optimal: bool
    score: int


@dataclass
class MetaScore:
    title: MetaTagScore
    meta_description: MetaTagScore
    overall_score: int


@dataclass
class ContentQuality:
    word_count: int
    heading_count: int
    image_count: int
    link_count: int


@dataclass
class DraftAnalysis:
    overall_score: int
    readability: ReadabilityScore
    keyword: KeywordScore
    meta: MetaScore
    content: ContentQuality
    suggestions: List[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------

def analyze_readability(content: str) -> ReadabilityScore:
    words = len(content.split())
    # Unfiltered split: a trailing empty piece still counts, so this is >= 1.
    sentences = len(_SENTENCE_SPLIT.split(content))
    paragraphs = len(content.split("\n\n"))

    score = 100
    if words / sentences > 20:
        score -= 20
    if words < 300:
        score -= 30
    if paragraphs < 3:
        score -= 10

    return ReadabilityScore(
        score=max(score, 0),
        word_count=words,
        reading_time=math.ceil(words / 200),
        sentence_count=sentences,
        paragraph_count=paragraphs,
    )


def analyze_keyword_usage(
    content: str, title: str, meta_description: str, focus_keyword: str
) -> KeywordScore:
    if not focus_keyword:
        return KeywordScore()

    keyword = focus_keyword.lower()
    count = content.lower().count(keyword)
    words = len(content.split())
    density = count / words * 100 if words else 0.0

    usage = KeywordUsage(
        in_title=keyword in title.lower(),
        in_meta_description=keyword in meta_description.lower(),
        density=round(density, 2),
        count=count,
    )

    score = 0
    if usage.in_title:
        score += 40
    if usage.in_meta_description:
        score += 30
    if 0.5 <= density <= 2.5:
        score += 30
    return KeywordScore(score=score, density=density, usage=usage)


def _meta_tag(text: str, low: int, high: int) -> MetaTagScore:
    optimal = low <= len(text) <= high
    return MetaTagScore(length=len(text), optimal=optimal, score=100 if optimal else 50)


def analyze_meta_tags(title: str, meta_description: str) -> MetaScore:
    title_score = _meta_tag(title, 50, 60)
    desc_score = _meta_tag(meta_description, 120, 160)
    return MetaScore(
        title=title_score,
        meta_description=desc_score,
        overall_score=_round_half_up((title_score.score + desc_score.score) / 2),
    )


def analyze_content_quality(content: str) -> ContentQuality:
    images = len(_IMAGE.findall(content))
    # Image syntax also matches the link pattern; subtract it back out.
    links = len(_LINK.findall(content)) - images
    return ContentQuality(
        word_count=len(content.split()),
        heading_count=len(_HEADING.findall(content)),
        image_count=images,
        link_count=links,
    )


def _overall_score(
    readability: ReadabilityScore, keyword: KeywordScore, meta: MetaScore, content: ContentQuality
) -> int:
    bonus = 10 if content.word_count > 300 else 0
    return _round_half_up(
        readability.score * 0.3 + keyword.score * 0.4 + meta.overall_score * 0.2 + bonus
    )


def _suggestions(
    readability: ReadabilityScore, keyword: KeywordScore, content: ContentQuality
) -> List[str]:
    suggestions: List[str] = []
    if readability.score < 60:
        suggestions.append(SUGGEST_READABILITY)
    if content.word_count < 300:
        suggestions.append(SUGGEST_MORE_CONTENT)
    if keyword.density < 0.5:
        suggestions.append(SUGGEST_KEYWORD_DENSITY)
    if not keyword.usage.in_title:
        suggestions.append(SUGGEST_KEYWORD_IN_TITLE)
    if content.heading_count < 2:
        suggestions.append(SUGGEST_SUBHEADINGS)
    return suggestions


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_draft(
    content: Optional[str],
    title: Optional[str],
    meta_description: Optional[str] = "",
    focus_keyword: Optional[str] = "",
) -> DraftAnalysis:
    """Score a draft post.

    Empty strings are valid input and simply score low.  ``None`` for
    *content* or *title* means the caller never supplied them.

    Raises:
        InputError: *content* or *title* is ``None``.
    """
    if content is None or title is None:
        raise InputError("content and title are required")
    meta_description = meta_description or ""
    focus_keyword = focus_keyword or ""

    readability = analyze_readability(content)
    keyword = analyze_keyword_usage(content, title, meta_description, focus_keyword)
    meta = analyze_meta_tags(title, meta_description)
    quality = analyze_content_quality(content)

    return DraftAnalysis(
        overall_score=_overall_score(readability, keyword, meta, quality),
        readability=readability,
        keyword=keyword,
        meta=meta,
        content=quality,
        suggestions=_suggestions(readability, keyword, quality),
    )
