"""Editor-time content scoring endpoint.

Routes
------
POST /content/analyze    Body: {"content", "title", "meta_description", "focus_keyword"}
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ddsphere.seo.editor import analyze_draft
from ddsphere.seo.errors import InputError

router = APIRouter()


class DraftRequest(BaseModel):
    content: Optional[str] = None
    title: Optional[str] = None
    meta_description: Optional[str] = ""
    focus_keyword: Optional[str] = ""


@router.post("/analyze")
def analyze_draft_endpoint(body: DraftRequest) -> dict[str, Any]:
    """Score a draft before it is published.  Content and title are required."""
    try:
        if not body.content or not body.title:
            raise InputError("Content and title are required")
        analysis = analyze_draft(
            body.content, body.title, body.meta_description, body.focus_keyword
        )
    except InputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return analysis.to_dict()
