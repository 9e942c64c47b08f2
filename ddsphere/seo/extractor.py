"""Page parsing: turns raw HTML into :class:`PageFacts`.

Parsing is best-effort.  Missing elements produce empty defaults and
malformed markup never raises.
"""

from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Comment
from bs4.element import Tag

from ddsphere.seo.models import (
    Headings,
    ImageInfo,
    LinkInfo,
    Links,
    PageFacts,
    SocialTags,
)

_NON_CONTENT_TAGS = {"script", "style", "noscript", "template"}
# A leading "xxx:" must be a valid scheme, otherwise the href is not a URL.
_SCHEME_PREFIX = re.compile(r"^([^/?#:]*):")
_VALID_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _attr(tag: Optional[Tag], name: str, default: str = "") -> str:
    """Return a string attribute of *tag*, joining multi-valued ones."""
    if tag is None:
        return default
    value = tag.get(name)
    if value is None:
        return default
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _text(tag: Tag) -> str:
    return tag.get_text().strip()


def _extract_headings(soup: BeautifulSoup) -> Headings:
    return Headings(
        h1=[_text(h) for h in soup.find_all("h1")],
        h2=[_text(h) for h in soup.find_all("h2")],
        h3=[_text(h) for h in soup.find_all("h3")],
    )


def _extract_images(soup: BeautifulSoup) -> List[ImageInfo]:
    return [
        ImageInfo(
            src=_attr(img, "src"),
            alt=_attr(img, "alt"),
            title_attr=_attr(img, "title"),
            loading=_attr(img, "loading", "eager"),
        )
        for img in soup.find_all("img")
    ]


def _resolve_hostname(href: str, base_url: str) -> Optional[str]:
    """Resolve *href* against *base_url* and return its hostname.

    Returns ``None`` when the href cannot be parsed as a URL.  An href that
    parses but has no host (``mailto:``, ``tel:``) resolves to ``""``.
    Spaces in a path are fine: they are percent-encoded on resolution.
    """
    prefix = _SCHEME_PREFIX.match(href)
    if prefix and not _VALID_SCHEME.match(prefix.group(1)):
        return None
    try:
        resolved = urlsplit(urljoin(base_url, href))
        return resolved.hostname or ""
    except ValueError:
        return None


def _is_https(url: str) -> bool:
    try:
        return urlsplit(url).scheme.lower() == "https"
    except ValueError:
        return False


def _is_follow(anchor: Tag) -> bool:
    rel = anchor.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return "nofollow" not in [r.lower() for r in rel]


def _extract_links(soup: BeautifulSoup, url: str) -> Links:
    links = Links()
    page_host = _resolve_hostname(url, url) or ""

    for anchor in soup.find_all("a", href=True):
        href = _attr(anchor, "href").strip()
        if not href:
            continue
        host = _resolve_hostname(href, url)
        if host is None:
            continue

        info = LinkInfo(
            href=href,
            text=_text(anchor),
            title_attr=_attr(anchor, "title"),
            follow=_is_follow(anchor),
        )
        if host and host == page_host:
            links.internal.append(info)
        else:
            links.external.append(info)
    return links


def _extract_social_tags(soup: BeautifulSoup) -> SocialTags:
    tags = SocialTags()
    for meta in soup.find_all("meta", attrs={"property": re.compile(r"^og:")}):
        key = _attr(meta, "property")[len("og:"):]
        tags.og[key] = _attr(meta, "content")
    for meta in soup.find_all("meta", attrs={"name": re.compile(r"^twitter:")}):
        key = _attr(meta, "name")[len("twitter:"):]
        tags.twitter[key] = _attr(meta, "content")
    return tags


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_document(html: str) -> BeautifulSoup:
    """Parse *html* into a navigable tree.  Never raises on bad markup."""
    return BeautifulSoup(html or "", "html.parser")


def extract_body_text(soup: BeautifulSoup) -> str:
    """Return the visible text of the page body.

    Script, style and template contents and HTML comments are left out.
    Falls back to the whole document when there is no ``<body>``.
    """
    root = soup.body or soup
    pieces: List[str] = []
    for string in root.find_all(string=True):
        if isinstance(string, Comment):
            continue
        if string.parent is not None and string.parent.name in _NON_CONTENT_TAGS:
            continue
        pieces.append(str(string))
    return " ".join(pieces)


def count_paragraphs(soup: BeautifulSoup) -> int:
    """Number of ``<p>`` elements that contain visible text."""
    return sum(1 for p in soup.find_all("p") if _text(p))


def extract_page_facts(soup: BeautifulSoup, url: str) -> PageFacts:
    """Extract title, meta tags, headings, images, links and social tags.

    Args:
        soup: Document returned by :func:`parse_document`.
        url: The page URL; used to resolve relative links and to classify
            them as internal (same hostname) or external.
    """
    title_tag = soup.find("title")
    description = soup.find("meta", attrs={"name": "description"})
    canonical = soup.find("link", rel="canonical")
    robots = soup.find("meta", attrs={"name": "robots"})

    return PageFacts(
        url=url,
        title=_text(title_tag) if title_tag else "",
        meta_description=_attr(description, "content"),
        canonical_url=_attr(canonical, "href") or url,
        robots_directive=_attr(robots, "content"),
        headings=_extract_headings(soup),
        images=_extract_images(soup),
        links=_extract_links(soup, url),
        social_tags=_extract_social_tags(soup),
        has_ssl=_is_https(url),
    )


def extract(html: str, url: str) -> PageFacts:
    """Parse *html* and return its :class:`PageFacts` in one step."""
    return extract_page_facts(parse_document(html), url)
