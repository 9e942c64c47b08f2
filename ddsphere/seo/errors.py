"""Exceptions raised by the SEO analysis pipeline."""

from __future__ import annotations


class SeoError(Exception):
    """Base class for every error raised by :mod:`ddsphere.seo`."""


class FetchError(SeoError):
    """The target page could not be retrieved (network, timeout or non-2xx)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class InputError(SeoError, ValueError):
    """A required input field is missing or unusable."""


class ParseWarning(SeoError, UserWarning):
    """A single page fragment (e.g. one JSON-LD block) could not be parsed.

    Never fatal: the fragment is logged and skipped.
    """
