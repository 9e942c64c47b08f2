"""Tests for the end-to-end analysis pipeline.

``analyze_html`` is exercised directly with fixed HTML; ``analyze_page`` goes
through ``respx`` so no real network calls are made.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from ddsphere.seo.analyzer import analyze_html, analyze_page
from ddsphere.seo.errors import FetchError

_TITLE = "A Practical Guide To Writing Clear Blog Posts"
_DESCRIPTION = (
    "Learn how to plan, draft and polish blog posts that readers finish "
    "and search engines understand."
)
_BODY = "Clear writing keeps readers on the page. " * 50


def _page(
    title: str = _TITLE,
    h1s: tuple[str, ...] = ("Writing Clear Blog Posts",),
    body: str = _BODY,
) -> str:
    headings = "".join(f"<h1>{h}</h1>" for h in h1s)
    return f"""\
<!DOCTYPE html>
<html>
<head>
  <title>{title}</title>
  <meta name="description" content="{_DESCRIPTION}">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <script type="application/ld+json">{{"@type": "BlogPosting", "headline": "{title}"}}</script>
</head>
<body>
  {headings}
  <p>{body}</p>
  <img src="/cover.png" alt="Cover image">
  <a href="/blog">Blog</a> <a href="/about">About</a> <a href="/contact">Contact</a>
  <a href="https://example.org/style-guide">Style guide</a>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# analyze_html
# ---------------------------------------------------------------------------

class TestAnalyzeHtml:
    def test_well_formed_page_scores_100(self) -> None:
        assert len(_TITLE) == 45
        assert 50 <= len(_DESCRIPTION) <= 160
        result = analyze_html("https://blog.example.com/clear-posts", _page())

        assert result.score == 100
        assert all(c.severity == "success" for c in result.checks)
        assert result.content.word_count >= 300
        assert len(result.page.links.internal) == 3
        assert result.technical.is_mobile_friendly is True
        assert result.technical.has_structured_data is True

    def test_http_page_loses_ssl_points(self) -> None:
        result = analyze_html("http://blog.example.com/clear-posts", _page())
        ssl = [c for c in result.checks if c.title == "SSL Certificate"][0]
        assert (ssl.severity, ssl.points) == ("error", 15)
        assert result.score == 85

    def test_fifty_char_title_has_no_title_deduction(self) -> None:
        title = "x" * 50
        result = analyze_html("https://a.com/", _page(title=title))
        title_check = [c for c in result.checks if c.title == "Page Title"][0]
        assert title_check.points == 0

    def test_missing_h1(self) -> None:
        result = analyze_html("https://a.com/", _page(h1s=()))
        h1 = [c for c in result.checks if c.title == "H1 Heading"][0]
        assert (h1.severity, h1.points) == ("error", 10)

    def test_two_h1s(self) -> None:
        result = analyze_html("https://a.com/", _page(h1s=("One", "Two")))
        h1 = [c for c in result.checks if c.title == "H1 Heading"][0]
        assert (h1.severity, h1.points) == ("warning", 5)

    def test_links_with_spaces_count_as_internal(self) -> None:
        html = '<a href="/p one">1</a><a href="/p two">2</a><a href="/p three">3</a>'
        result = analyze_html("https://a.com/", html)
        links = [c for c in result.checks if c.title == "Internal Links"][0]
        assert (links.severity, links.points) == ("success", 0)

    @pytest.mark.parametrize("html", ["", "<html></html>", _page(body="Too short."), _page()])
    def test_score_matches_deductions(self, html: str) -> None:
        result = analyze_html("http://a.com/", html)
        assert 0 <= result.score <= 100
        assert result.score == max(0, 100 - sum(c.points for c in result.checks))

    def test_empty_page_still_has_core_checks(self) -> None:
        titles = [c.title for c in analyze_html("https://a.com/", "").checks]
        assert {"SSL Certificate", "Page Title", "H1 Heading"} <= set(titles)

    def test_repeatable(self) -> None:
        html = _page(h1s=("A", "B"), body="Short body.")
        first = analyze_html("https://a.com/", html)
        second = analyze_html("https://a.com/", html)
        assert first.checks == second.checks
        assert first.score == second.score

    def test_keywords_come_from_title_and_body(self) -> None:
        result = analyze_html("https://a.com/", _page())
        keywords = [k.keyword for k in result.keywords]
        assert keywords[0] in {"clear", "writing", "readers", "keeps", "page", "the"}
        assert len(keywords) == 10

    def test_result_is_json_serialisable(self) -> None:
        data = analyze_html("https://a.com/", _page()).to_dict()
        encoded = json.loads(json.dumps(data))

        assert encoded["url"] == "https://a.com/"
        assert encoded["score"] == data["score"]
        # Page, content and technical facts are flattened into the top level.
        assert encoded["title"] == _TITLE
        assert "word_count" in encoded
        assert "is_mobile_friendly" in encoded
        assert encoded["checks"][0]["status"] == "Good"
        assert encoded["performance"] == {}
        assert encoded["backlinks"] == []


# ---------------------------------------------------------------------------
# analyze_page
# ---------------------------------------------------------------------------

class TestAnalyzePage:
    def test_full_analysis_uses_providers(self, simulated_performance, simulated_backlinks) -> None:
        with respx.mock:
            respx.get("https://a.com/post").mock(return_value=httpx.Response(200, text=_page()))
            result = analyze_page(
                "https://a.com/post",
                performance_provider=simulated_performance,
                backlink_provider=simulated_backlinks,
            )

        assert result.score == 100
        assert result.performance is not None
        assert result.performance.performance_score == 85.0
        assert len(result.backlinks) == 3
        assert simulated_performance.calls == ["https://a.com/post"]

    def test_quick_analysis_skips_providers(self, simulated_performance, simulated_backlinks) -> None:
        with respx.mock:
            respx.get("https://a.com/post").mock(return_value=httpx.Response(200, text=_page()))
            result = analyze_page(
                "https://a.com/post",
                full_analysis=False,
                performance_provider=simulated_performance,
                backlink_provider=simulated_backlinks,
            )

        assert result.performance is None
        assert result.backlinks == []
        assert simulated_performance.calls == []

    def test_default_providers_without_api_key(self, monkeypatch) -> None:
        monkeypatch.setattr("ddsphere.seo.providers.settings.google_api_key", "")
        with respx.mock:
            respx.get("https://a.com/post").mock(return_value=httpx.Response(200, text=_page()))
            result = analyze_page("https://a.com/post")

        assert result.performance is None
        assert result.backlinks == []

    def test_fetch_failure_propagates(self) -> None:
        with respx.mock:
            respx.get("https://a.com/down").mock(return_value=httpx.Response(500))
            with pytest.raises(FetchError):
                analyze_page("https://a.com/down", full_analysis=False)
