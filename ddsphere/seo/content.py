"""Text-level analysis of a page body: counts, readability, keywords."""

from __future__ import annotations

import re
from typing import List, Optional

from ddsphere.seo.models import ContentFacts, KeywordStat

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_DISALLOWED_CHARS = re.compile(r"[^\w\s.,!?\-]")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
# ASCII boundaries so that accented letters act as separators.
_KEYWORD_TOKEN = re.compile(r"\b[a-z]{3,}\b", re.ASCII)


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens in *text*."""
    return len(text.split())


def clean_text(text: str) -> str:
    """Collapse whitespace and drop everything but word chars and ``.,!?-``."""
    collapsed = re.sub(r"\s+", " ", text)
    return _DISALLOWED_CHARS.sub("", collapsed).strip()


def split_sentences(text: str) -> List[str]:
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def readability(avg_words_per_sentence: float) -> float:
    """Simplified ease score: ``100 - 1.5 * avg``, clamped to [0, 100].

    This is not Flesch; it is the score the rest of the product was tuned
    against and must stay as is.
    """
    return max(0.0, min(100.0, 100 - avg_words_per_sentence * 1.5))


def analyze_content(body_text: str, paragraph_count: Optional[int] = None) -> ContentFacts:
    """Derive word/sentence counts and a readability score from *body_text*.

    Args:
        body_text: Visible text of the page body.
        paragraph_count: Paragraph count known from the markup.  When
            omitted, blank-line separated blocks of *body_text* are counted.
    """
    body_text = body_text or ""
    text = clean_text(body_text)
    sentences = split_sentences(text)

    if sentences:
        total = sum(count_words(s) for s in sentences)
        avg = total / len(sentences)
    else:
        avg = 0.0

    if paragraph_count is None:
        paragraph_count = sum(1 for block in _PARAGRAPH_SPLIT.split(body_text) if block.strip())

    return ContentFacts(
        word_count=count_words(body_text),
        sentence_count=len(sentences),
        paragraph_count=paragraph_count,
        avg_words_per_sentence=avg,
        readability_score=readability(avg),
        text=text,
    )


def analyze_keywords(text: str, limit: int = 10) -> List[KeywordStat]:
    """Naive keyword frequency table.

    Words are lower-cased alphabetic runs of three or more letters.  The
    *limit* most frequent are returned; ties keep the order in which the
    words first appeared.
    """
    words = _KEYWORD_TOKEN.findall((text or "").lower())
    if not words:
        return []

    frequencies: dict[str, int] = {}
    for word in words:
        frequencies[word] = frequencies.get(word, 0) + 1

    # sorted() is stable and dicts keep first-insertion order.
    ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
    total = len(words)
    return [
        KeywordStat(keyword=word, count=count, density=round(count / total * 100, 2))
        for word, count in ranked[:limit]
    ]
