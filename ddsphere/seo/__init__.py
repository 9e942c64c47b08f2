"""SEO package: page analysis pipeline and editor-time content scoring."""

from ddsphere.seo.analyzer import analyze_html, analyze_page
from ddsphere.seo.batch import analyze_batch
from ddsphere.seo.checks import DEFAULT_RULES, SEORules, run_checks
from ddsphere.seo.editor import analyze_draft
from ddsphere.seo.errors import FetchError, InputError, ParseWarning, SeoError
from ddsphere.seo.models import AnalysisResult, Check

__all__ = [
    "analyze_html",
    "analyze_page",
    "analyze_batch",
    "analyze_draft",
    "run_checks",
    "SEORules",
    "DEFAULT_RULES",
    "AnalysisResult",
    "Check",
    "SeoError",
    "FetchError",
    "InputError",
    "ParseWarning",
]
