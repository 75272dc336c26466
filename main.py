# main.py - 2026-10-16
from __future__ import annotations

import sys
from pathlib import Path

import click

import markup
from keypad import TABLE, Keypad
from orchestrator import SearchOrchestrator, SearchState
from resolver import Outcome, PageResolver
from settings import MIRROR_ORIGIN, LIVE_SITE, TIMEOUT, SiteConfig
from surface import BrowserSurface
from transport import make_transport, resolve_mode


def _build(config: SiteConfig):
    transport = make_transport(config)
    surface = BrowserSurface(config)
    resolver = PageResolver(transport, surface)
    return SearchOrchestrator(transport, surface, resolver)


def _print_area(search: SearchOrchestrator) -> None:
    area = search.surface.result_area()
    if search.state is SearchState.ERROR:
        click.echo(click.style(search.error or "", fg="red"), err=True)
        return
    colour = "green" if search.state is SearchState.RESULTS else "yellow"
    click.echo(click.style(area.text, fg=colour))
    for i, (href, title) in enumerate(zip(area.links, area.titles()), 1):
        click.echo(f"{i}. {title}\n   {href}")


def _run_search(search: SearchOrchestrator, query: str, open_index: int | None) -> None:
    search.submit(query)
    _print_area(search)
    if search.state is SearchState.ERROR:
        sys.exit(1)
    if open_index is not None:
        area = search.surface.result_area()
        if not 1 <= open_index <= len(area.links):
            raise click.BadParameter(f"no result #{open_index}", param_hint="--open")
        if area.click(open_index) is Outcome.FAILED:
            sys.exit(1)


@click.group()
@click.option("--mirror", "mirror_origin", default=MIRROR_ORIGIN, show_default=True,
              help="Origin the static mirror is served from.")
@click.option("--live-site", default=LIVE_SITE, show_default=True, help="Live dynamic site.")
@click.option("--key-map", default=None, help="Override the composition table location.")
@click.option("--timeout", default=TIMEOUT, show_default=True, type=float)
@click.pass_context
def cli(ctx: click.Context, mirror_origin: str, live_site: str,
        key_map: str | None, timeout: float) -> None:
    """Search and browse a static mirror through its live site."""
    ctx.obj = SiteConfig(mirror_origin=mirror_origin, live_site=live_site,
                         key_map=key_map, timeout=timeout)


@cli.command()
@click.pass_obj
def mode(config: SiteConfig) -> None:
    """Show which transport this mirror host resolves to."""
    click.echo(resolve_mode(config.host).value)


@cli.command()
@click.argument("query", nargs=-1, required=True)
@click.option("--open", "open_index", type=int, default=None, help="Open the N-th result.")
@click.pass_obj
def search(config: SiteConfig, query: tuple[str, ...], open_index: int | None) -> None:
    """Run a search on the live site and list the results."""
    _run_search(_build(config), " ".join(query), open_index)


@cli.command()
@click.argument("pairs", nargs=-1, required=True)
@click.option("--search", "do_search", is_flag=True, help="Submit the composed query.")
@click.option("--open", "open_index", type=int, default=None, help="Open the N-th result.")
@click.pass_obj
def keypad(config: SiteConfig, pairs: tuple[str, ...], do_search: bool,
           open_index: int | None) -> None:
    """
    Compose a query from LEFT+RIGHT radical pairs (DEL removes the last character).
    """
    steps = []
    for pair in pairs:
        if pair.upper() == "DEL":
            steps.append(None)
            continue
        left, sep, right = pair.partition("+")
        if not sep:
            raise click.BadParameter(f"expected LEFT+RIGHT, got {pair!r}", param_hint="PAIRS")
        steps.append((left, right))

    # table loads on a worker thread while the search surface is built
    loading = TABLE.load_async(config.key_map_url, config.key_map_fallback_url,
                               timeout=config.timeout)
    app = _build(config) if do_search else None
    loading.result()
    pad = Keypad(TABLE)
    for step in steps:
        if step is None:
            pad.delete()
            continue
        left, right = step
        pad.select_left(left)
        if pad.select_right(right) is None:
            click.echo(click.style(f"✗ no character for {left}+{right}", fg="yellow"), err=True)
            pad.left = pad.right = None
    click.echo(pad.value)
    if do_search:
        if not pad.submit_enabled:
            click.echo(click.style("nothing to search", fg="yellow"), err=True)
            return
        _run_search(app, pad.value, open_index)


@cli.command(name="open")
@click.argument("hrefs", nargs=-1, required=True)
@click.pass_obj
def open_pages(config: SiteConfig, hrefs: tuple[str, ...]) -> None:
    """Open mirror pages, falling back to the live site when they are missing."""
    app = _build(config)
    outcomes = app.resolver.open_many(hrefs)
    for href, outcome in zip(hrefs, outcomes):
        colour = "red" if outcome is Outcome.FAILED else "green"
        click.echo(click.style(f"{outcome.value:6} {href}", fg=colour))
    if Outcome.FAILED in outcomes:
        sys.exit(1)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
def deactivate(config: SiteConfig, source: Path, output: Path | None) -> None:
    """Rewrite a saved live-site page so it is safe to drop into the mirror."""
    html = markup.transform(source.read_text(encoding="utf-8"), config)
    if output is None:
        click.echo(html, nl=False)
    else:
        output.write_text(html, encoding="utf-8")
        click.echo(click.style(f"✓ wrote {output}", fg="green"))


if __name__ == "__main__":
    cli()
