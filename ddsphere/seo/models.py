"""Data models for the SEO analysis pipeline.

Plain dataclasses, one instance set per analysis call.  Nothing here holds
state between calls.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, List, Literal, Optional

Category = Literal["basic", "content", "technical", "performance", "accessibility"]
Severity = Literal["success", "warning", "error", "info"]

_STATUS_LABELS = {
    "success": "Good",
    "warning": "Warning",
    "error": "Error",
    "info": "Info",
}


# ---------------------------------------------------------------------------
# Page facts
# ---------------------------------------------------------------------------

@dataclass
class ImageInfo:
    src: str = ""
    alt: str = ""
    title_attr: str = ""
    loading: str = "eager"


@dataclass
class LinkInfo:
    href: str
    text: str = ""
    title_attr: str = ""
    follow: bool = True


@dataclass
class Headings:
    h1: List[str] = field(default_factory=list)
    h2: List[str] = field(default_factory=list)
    h3: List[str] = field(default_factory=list)


@dataclass
class Links:
    internal: List[LinkInfo] = field(default_factory=list)
    external: List[LinkInfo] = field(default_factory=list)


@dataclass
class SocialTags:
    og: dict[str, str] = field(default_factory=dict)
    twitter: dict[str, str] = field(default_factory=dict)


@dataclass
class PageFacts:
    """Structural facts pulled out of a page's HTML."""

    url: str
    title: str = ""
    meta_description: str = ""
    canonical_url: str = ""
    robots_directive: str = ""
    headings: Headings = field(default_factory=Headings)
    images: List[ImageInfo] = field(default_factory=list)
    links: Links = field(default_factory=Links)
    social_tags: SocialTags = field(default_factory=SocialTags)
    has_ssl: bool = False


@dataclass
class ContentFacts:
    """Text-level facts derived from the page body."""

    word_count: int = 0
    sentence_count: int = 0
    paragraph_count: int = 0
    avg_words_per_sentence: float = 0.0
    readability_score: float = 100.0
    text: str = ""


@dataclass
class HreflangLink:
    lang: str
    url: str


@dataclass
class TechnicalFacts:
    is_mobile_friendly: bool = False
    has_structured_data: bool = False
    structured_data_blocks: List[Any] = field(default_factory=list)
    hreflang: List[HreflangLink] = field(default_factory=list)
    page_size_bytes: int = 0
    structured_data_errors: List[str] = field(default_factory=list)


@dataclass
class KeywordStat:
    keyword: str
    count: int
    density: float


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Check:
    """One rule evaluation.  Immutable once created."""

    category: Category
    title: str
    severity: Severity
    message: str
    details: Optional[str] = None
    points: int = 0

    @property
    def status(self) -> str:
        """Human label for the severity (``Good``, ``Warning``, ...)."""
        return _STATUS_LABELS[self.severity]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status
        return data


# ---------------------------------------------------------------------------
# External capability results
# ---------------------------------------------------------------------------

@dataclass
class PerformanceMetrics:
    """Lab metrics for one URL.  Timings are in milliseconds."""

    performance_score: float
    fcp: float
    lcp: float
    fid: float
    cls: float
    tti: float
    speed_index: float


@dataclass
class Backlink:
    url: str
    domain: str
    anchor_text: str = ""
    follow: bool = True
    authority: int = 0
    date_found: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date_found"] = self.date_found.isoformat() if self.date_found else None
        return data


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class AnalysisResult:
    url: str
    score: int
    checks: List[Check]
    page: PageFacts
    content: ContentFacts
    technical: TechnicalFacts
    keywords: List[KeywordStat]
    analyzed_at: datetime
    performance: Optional[PerformanceMetrics] = None
    backlinks: List[Backlink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a JSON-ready dict.

        Page, content and technical facts are merged into the top level so
        the shape matches what the dashboard and stored history expect.
        """
        data: dict[str, Any] = {}
        data.update(asdict(self.page))
        data.update(asdict(self.content))
        data.update(asdict(self.technical))
        data.update(
            {
                "url": self.url,
                "score": self.score,
                "checks": [c.to_dict() for c in self.checks],
                "keywords": [asdict(k) for k in self.keywords],
                "performance": asdict(self.performance) if self.performance else {},
                "backlinks": [b.to_dict() for b in self.backlinks],
                "analyzed_at": self.analyzed_at.isoformat(),
            }
        )
        return data
