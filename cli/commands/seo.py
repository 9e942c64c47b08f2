"""SEO analysis commands."""

import json
from pathlib import Path
from typing import List, Optional

import typer

from ddsphere.db import get_connection, init_db
from ddsphere.db.analyses import (
    find_recent_analysis,
    list_analyses,
    list_scheduled,
    save_analysis,
)
from ddsphere.config import settings
from ddsphere.seo.analyzer import analyze_page
from ddsphere.seo.batch import analyze_batch
from ddsphere.seo.editor import analyze_draft
from ddsphere.seo.errors import FetchError, InputError
from ddsphere.seo.models import AnalysisResult

seo_app = typer.Typer(help="Analyse pages and drafts for on-page SEO.", no_args_is_help=True)

CLI_USER = "cli"

_SEVERITY_ICONS = {"success": "✅", "warning": "⚠️ ", "error": "❌", "info": "ℹ️ "}


def _print_result(result: AnalysisResult) -> None:
    typer.echo(f"🔎 {result.url}")
    typer.echo(f"   Score : {result.score}/100")
    typer.echo(f"   Title : {result.page.title or '(none)'}")
    typer.echo(f"   Words : {result.content.word_count}")
    typer.echo("")
    for check in result.checks:
        icon = _SEVERITY_ICONS.get(check.severity, " ")
        points = f" (-{check.points})" if check.points else ""
        typer.echo(f"{icon} [{check.category}] {check.title}: {check.message}{points}")
        if check.details:
            typer.echo(f"      → {check.details}")


@seo_app.command("analyze")
def seo_analyze(
    url: str = typer.Argument(..., help="Page URL to analyse."),
    save: bool = typer.Option(True, "--save/--no-save", help="Store the result in history."),
    force: bool = typer.Option(False, "--force", help="Ignore a cached analysis."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Fetch a page and print its SEO checks and score."""
    conn = get_connection()
    init_db(conn)

    try:
        recent = find_recent_analysis(conn, url, CLI_USER, settings.cache_ttl_seconds)
        if recent and not force:
            cached = recent.to_dict()
            if as_json:
                cached["cached"] = True
                typer.echo(json.dumps(cached, indent=2))
            else:
                typer.echo(f"♻️  Cached analysis from {cached['analyzed_at']} "
                           f"(score {recent.score}). Use --force to re-run.")
            return

        try:
            result = analyze_page(url)
        except FetchError as exc:
            typer.echo(f"❌ {exc}")
            raise typer.Exit(code=1)

        if save:
            save_analysis(conn, result, user_id=CLI_USER, previous=recent)

        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2))
        else:
            _print_result(result)
    finally:
        conn.close()


@seo_app.command("batch")
def seo_batch(
    urls: List[str] = typer.Argument(..., help="URLs to analyse."),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Tag to attach (repeatable)."),
) -> None:
    """Analyse several URLs, a few at a time, and store the results."""
    if len(urls) > settings.batch_max_urls:
        typer.echo(f"❌ Maximum {settings.batch_max_urls} URLs per batch.")
        raise typer.Exit(code=1)

    conn = get_connection()
    init_db(conn)
    try:
        outcome = analyze_batch(urls, analyze=analyze_page)
        tags = [*(tag or []), "batch"]
        for result in outcome.results:
            save_analysis(conn, result, user_id=CLI_USER, tags=tags)
            typer.echo(f"✅ {result.score:>3}  {result.url}")
        for error in outcome.errors:
            typer.echo(f"❌  --  {error.url}  ({error.error})")
        typer.echo(f"\n{len(outcome.results)} analysed, {len(outcome.errors)} failed.")
    finally:
        conn.close()


@seo_app.command("history")
def seo_history(
    limit: int = typer.Option(20, help="Number of analyses to show."),
) -> None:
    """List stored analyses, newest first."""
    conn = get_connection()
    init_db(conn)
    try:
        records, total = list_analyses(conn, CLI_USER, limit=limit)
        if not records:
            typer.echo("No analyses found.")
            return
        for r in records:
            typer.echo(f"  {r.id}  {r.score:>3}  {r.url}")
        typer.echo(f"\nShowing {len(records)} of {total}.")
    finally:
        conn.close()


@seo_app.command("rescan")
def seo_rescan() -> None:
    """Re-analyse every URL flagged for scheduled analysis.

    Meant to be run from cron (e.g. daily at 02:00).
    """
    conn = get_connection()
    init_db(conn)
    try:
        scheduled = list_scheduled(conn)
        if not scheduled:
            typer.echo("No scheduled analyses.")
            return
        failed = 0
        for record in scheduled:
            try:
                result = analyze_page(record.url)
            except FetchError as exc:
                failed += 1
                typer.echo(f"❌ {record.url}: {exc}")
                continue
            save_analysis(
                conn,
                result,
                user_id=record.user_id,
                project_id=record.project_id,
                tags=record.tags,
                scheduled=True,
                previous=record,
            )
            typer.echo(f"✅ {record.url}: {record.score} → {result.score}")
        if failed:
            raise typer.Exit(code=1)
    finally:
        conn.close()


@seo_app.command("draft")
def seo_draft(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown file."),
    title: str = typer.Option(..., help="Post title."),
    meta: str = typer.Option("", help="Meta description."),
    keyword: str = typer.Option("", help="Focus keyword."),
) -> None:
    """Score a markdown draft the way the editor does."""
    try:
        analysis = analyze_draft(path.read_text(encoding="utf-8"), title, meta, keyword)
    except InputError as exc:
        typer.echo(f"❌ {exc}")
        raise typer.Exit(code=1)

    typer.echo(f"Overall score : {analysis.overall_score}")
    typer.echo(f"Readability   : {analysis.readability.score}")
    typer.echo(f"Keyword       : {analysis.keyword.score}")
    typer.echo(f"Meta          : {analysis.meta.overall_score}")
    for suggestion in analysis.suggestions:
        typer.echo(f"  • {suggestion}")
