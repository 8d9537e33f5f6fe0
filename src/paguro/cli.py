"""CLI interface for paguro."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from paguro.config import PaguroConfig, load_config, merge_cli_overrides
from paguro.content.client import ContentQueryClient
from paguro.content.models import MediaSubject
from paguro.content.queries import get_blog_posts_for_index
from paguro.errors import PaguroError
from paguro.i18n.locale import Locale, normalize_locale
from paguro.i18n.paths import ensure_locale_prefix, strip_locale_prefix, toggle_locale_path
from paguro.i18n.values import pick_by_pair
from paguro.integrations.sanity import SanityAPIClient
from paguro.integrations.youtube import YouTubeSearchClient
from paguro.media.resolver import resolve_cover, resolve_gallery
from paguro.preview import preview_enabled, preview_url
from paguro.search.api import build_search_payload
from paguro.search.engine import SearchEngine, SearchMode

app = typer.Typer(
    name="paguro",
    help="Query localized travel content and search from the command line.",
)
path_app = typer.Typer(help="Add, remove or swap the locale segment of a path.")
app.add_typer(path_app, name="path")

console = Console()


class _State:
    config_path: Path | None = None
    overrides: dict[str, object] = {}


_state = _State()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from paguro import __version__

        console.print(f"paguro {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
    config: Annotated[
        Optional[Path], typer.Option("--config", help="Path to a .paguro.toml file.")
    ] = None,
    project_id: Annotated[
        Optional[str], typer.Option("--project-id", help="Sanity project id.")
    ] = None,
    dataset: Annotated[Optional[str], typer.Option("--dataset", help="Sanity dataset.")] = None,
    token: Annotated[
        Optional[str], typer.Option("--token", help="Sanity read token for preview queries.")
    ] = None,
) -> None:
    """Paguro - localized content and search."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state.config_path = config
    _state.overrides = {"project_id": project_id, "dataset": dataset, "token": token}


def _load() -> PaguroConfig:
    return merge_cli_overrides(load_config(_state.config_path), **_state.overrides)


def _content_client(config: PaguroConfig) -> ContentQueryClient:
    try:
        repository = SanityAPIClient(config.to_sanity_config())
    except PaguroError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc
    return ContentQueryClient(repository)


def _locale(lang: str | None) -> Locale:
    return normalize_locale(lang)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Free-text query.")],
    page: Annotated[int, typer.Option("--page", "-p", help="1-based page number.")] = 1,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Results per page (6-24).")] = None,
    lang: Annotated[str, typer.Option("--lang", "-l", help="Locale: it or en.")] = "it",
    full: Annotated[bool, typer.Option("--full", help="Also search post bodies.")] = False,
    preview_secret: Annotated[
        Optional[str], typer.Option("--preview-secret", help="Preview secret to include drafts.")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON.")] = False,
) -> None:
    """Search posts and destinations."""
    config = _load()
    engine = SearchEngine(_content_client(config))
    preview = preview_enabled(config.preview_authorizer(), preview_secret)
    if preview_secret and not preview:
        console.print("[yellow]Invalid preview secret; searching published content only.[/yellow]")

    try:
        result = engine.search(
            query,
            page,
            limit if limit is not None else config.search.default_limit,
            locale=_locale(lang),
            preview=preview,
            mode=SearchMode.FULL if full else SearchMode.QUICK,
        )
    except PaguroError as exc:
        console.print(f"[red]Search failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    if not result.items:
        console.print("No results.")
        return

    table = Table(title=f"Page {result.page}/{result.pages} · {result.total} results")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Slug")
    for item in result.items:
        table.add_row(item.type, item.title or "", item.slug or "")
    console.print(table)


@app.command()
def posts(
    lang: Annotated[str, typer.Option("--lang", "-l", help="Locale: it or en.")] = "it",
    as_json: Annotated[bool, typer.Option("--json", help="Print raw JSON.")] = False,
) -> None:
    """List blog posts, newest first."""
    config = _load()
    locale = _locale(lang)
    try:
        items = get_blog_posts_for_index(_content_client(config), locale)
    except PaguroError as exc:
        console.print(f"[red]Could not load posts:[/red] {exc}")
        raise typer.Exit(1) from exc

    if as_json:
        typer.echo(json.dumps([p.model_dump(mode="json") for p in items], indent=2))
        return

    table = Table(title=f"Blog ({locale.label()})")
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Path")
    for post in items:
        title = post.title or pick_by_pair(locale, post.title_it, post.title_en) or ""
        when = post.published_at.date().isoformat() if post.published_at else ""
        table.add_row(when, title, ensure_locale_prefix(locale, f"/blog/{post.slug}"))
    console.print(table)


@app.command("api-search")
def api_search(
    query: Annotated[str, typer.Argument(help="Free-text query.")],
    page: Annotated[int, typer.Option("--page", "-p", help="1-based page number.")] = 1,
    lang: Annotated[str, typer.Option("--lang", "-l", help="Locale: it or en.")] = "it",
    scope: Annotated[
        str, typer.Option("--scope", help="'preview' (modal sized) or 'all' (full page).")
    ] = "preview",
    no_videos: Annotated[bool, typer.Option("--no-videos", help="Skip YouTube search.")] = False,
    headers: Annotated[
        bool, typer.Option("--headers", help="Print the Cache-Control header first.")
    ] = False,
) -> None:
    """Print the combined site + video search payload as JSON."""
    if scope not in ("preview", "all"):
        raise typer.BadParameter("scope must be 'preview' or 'all'", param_hint="--scope")

    config = _load()
    engine = SearchEngine(_content_client(config))
    youtube = None if no_videos else YouTubeSearchClient(config.to_youtube_config())

    try:
        payload = build_search_payload(
            engine,
            youtube,
            query,
            page=page,
            lang=lang,
            sanity_scope=scope,  # type: ignore[arg-type]
            youtube_scope=scope,  # type: ignore[arg-type]
            min_query_length=config.search.min_query_length,
        )
    except PaguroError as exc:
        console.print("[red]Search failed[/red]")
        raise typer.Exit(1) from exc

    if headers:
        typer.echo(f"Cache-Control: {payload.cache_control}")
    typer.echo(payload.model_dump_json(indent=2))


@app.command("preview-link")
def preview_link(
    slug: Annotated[str, typer.Argument(help="Document slug.")],
) -> None:
    """Print the draft-mode link the CMS opens for SLUG."""
    config = _load()
    if not config.preview.secret:
        console.print("[red]Error:[/red] No preview secret configured (SANITY_PREVIEW_SECRET)")
        raise typer.Exit(1)
    typer.echo(preview_url(slug, config.preview.site_url, config.preview.secret))


@app.command()
def cover(
    country: Annotated[Optional[str], typer.Argument(help="Country slug.")] = None,
    cover_path: Annotated[
        Optional[str], typer.Option("--cover", help="Explicit cover image path.")
    ] = None,
    gallery: Annotated[int, typer.Option("--gallery", "-g", help="Also list N gallery images.")] = 0,
) -> None:
    """Show which cover (and gallery) an entity would use."""
    subject = MediaSubject(cover_image=cover_path, country_slug=country)
    typer.echo(resolve_cover(subject).src)
    if gallery > 0:
        for image in resolve_gallery(subject, gallery):
            typer.echo(f"  {image.src}")


@path_app.command("ensure")
def path_ensure(
    path: str,
    lang: Annotated[str, typer.Option("--lang", "-l", help="Locale: it or en.")] = "it",
) -> None:
    """Prefix PATH with the locale segment."""
    typer.echo(ensure_locale_prefix(_locale(lang), path))


@path_app.command("strip")
def path_strip(path: str) -> None:
    """Remove the locale segment from PATH."""
    typer.echo(strip_locale_prefix(path))


@path_app.command("toggle")
def path_toggle(
    path: str,
    lang: Annotated[str, typer.Option("--lang", "-l", help="Current locale: it or en.")] = "it",
) -> None:
    """Print PATH in the other locale."""
    typer.echo(toggle_locale_path(path, _locale(lang)))


if __name__ == "__main__":
    app()
