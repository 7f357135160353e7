"""Contact discovery CLI, the entry-point for the engine.

Usage:
    python cli/main.py --help

Commands:
    discover  → full discovery for one business website
    emails    → Email Extractor over a saved HTML file (no network)
    persons   → Person Extractor over a saved HTML file (no network)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from contact_engine.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from contact_engine.aggregator import DiscoveryOptions, discover_contacts
from contact_engine.extract import extract_emails, extract_persons
from contact_engine.models import ScrapeResult
from contact_engine.scraper.extractor import build_page
from contact_engine.scraper.renderer import renderer

app = typer.Typer(
    name="contacts",
    help="Find the people, emails and ownership claims on a business website.",
    no_args_is_help=True,
)


def _read_html(path: Path) -> str:
    if not path.is_file():
        typer.echo(f"❌ No such file: {path}", err=True)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8", errors="replace")


def _print_result(result: ScrapeResult) -> None:
    typer.echo(f"[discover] {result.url}")
    typer.echo(f"[discover] Pages    : {len(result.pages_fetched)}  (rendered={result.rendered})")
    if result.registration_identifier:
        typer.echo(f"[discover] Company  : {result.registration_identifier}")
    if result.registered_address:
        typer.echo(f"[discover] Address  : {result.registered_address}")

    typer.echo("")
    if not result.persons:
        typer.echo("  (no people found)")
    for person in result.persons:
        mark = "✓" if person.claimed_email else " "
        title = f"  [{person.title}]" if person.title else ""
        owned = f"  → {person.claimed_email}" if person.claimed_email else ""
        typer.echo(f"  {mark} {person.name}{title}{owned}")

    typer.echo("")
    if not result.emails:
        typer.echo("  (no emails found)")
    for address in result.emails:
        typer.echo(f"  ✉ {address}")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------
@app.command("discover")
def discover(
    url: str = typer.Argument(..., help="Business website, e.g. example.co.uk."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    no_render: bool = typer.Option(False, "--no-render", help="Never use the headless browser."),
    no_sitemap: bool = typer.Option(False, "--no-sitemap", help="Skip /sitemap.xml discovery."),
    max_pages: Optional[int] = typer.Option(
        None, "--max-pages", min=0, help="Maximum number of secondary pages to visit."
    ),
) -> None:
    """Scrape a website and list its people (✓ = owns an email) and emails."""
    options = DiscoveryOptions()
    if no_render:
        options.render_fallback = False
    if no_sitemap:
        options.use_sitemap = False
    if max_pages is not None:
        options.max_secondary_pages = max_pages

    try:
        result = discover_contacts(url, options=options)
    finally:
        renderer.shutdown()

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        _print_result(result)
    else:
        typer.echo(f"❌ {result.error}: {result.error_detail}", err=True)

    if not result.ok:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Offline extractors
# ---------------------------------------------------------------------------
@app.command("emails")
def emails(
    file: Path = typer.Argument(..., help="Saved HTML page."),
    domain: str = typer.Option("", "--domain", help="Business domain used for ranking."),
) -> None:
    """Print the usable addresses in an HTML file, best first."""
    candidates = extract_emails(_read_html(file), domain.lower())
    if not candidates:
        typer.echo("[emails] No addresses found.")
        return
    for candidate in candidates:
        typer.echo(f"  {candidate.rank:>2}  {candidate.address}")


@app.command("persons")
def persons(
    file: Path = typer.Argument(..., help="Saved HTML page."),
) -> None:
    """Print the people named in an HTML file."""
    page = build_page(file.resolve().as_uri(), _read_html(file))
    found = extract_persons(page)
    if not found:
        typer.echo("[persons] No people found.")
        return
    for person in found:
        title = person.title or "-"
        typer.echo(f"  {person.name}  [{title}]  ({person.strategy})")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
