"""CLI entrypoint for the sportsbook vs prediction-market arbitrage scanner."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from polyarb.adapters.odds_api import OddsAPIAdapter
from polyarb.adapters.polymarket import PolymarketAdapter
from polyarb.config import MatchPolicy, Settings, get_settings
from polyarb.core.aliases import DEFAULT_ALIASES, LEAGUE_TO_POLYMARKET, LEAGUE_TO_SPORT, alias_table_for
from polyarb.core.arbitrage import find_bookmaker_arbitrage, split_for, stake_split
from polyarb.core.matcher import EventMatcher
from polyarb.core.odds_math import american_to_decimal, american_to_prob, no_vig_two_way
from polyarb.core.scanner import ArbScanner, group_by_event
from polyarb.errors import AdapterError, PolyArbError
from polyarb.models.comparison import ArbitrageResult, ScanReport
from polyarb.models.odds import MarketQuote, Source
from polyarb.observability.logging import bind_scan_context, setup_logging
from polyarb.report import default_report_path, load_quotes_csv, write_quotes_csv, write_results_csv

app = typer.Typer(
    name="polyarb",
    help="Sportsbook vs prediction-market moneyline arbitrage scanner (detection only).",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def _configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override POLYARB_LOG_LEVEL"),
) -> None:
    settings = get_settings()
    setup_logging(level=log_level or settings.log_level, format=settings.log_format.value)


def _fmt_pct(p: float) -> str:
    return f"{p * 100:.2f}%"


def _profit_style(profit_percent: float) -> str:
    if profit_percent >= 2.0:
        return "green"
    if profit_percent > 0:
        return "yellow"
    return "dim"


def _render_results_table(results: list[ArbitrageResult], title: str = "Arbitrage") -> None:
    if not results:
        console.print("[dim]No matched events[/]")
        return
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Game", width=34)
    table.add_column("Arb", width=4)
    table.add_column("Cost", width=7)
    table.add_column("Profit", width=7)
    table.add_column("Away leg", width=22)
    table.add_column("Home leg", width=22)
    for i, r in enumerate(results, 1):
        style = _profit_style(r.profit_percent)
        a, b = r.chosen.side_a_leg, r.chosen.side_b_leg
        table.add_row(
            str(i),
            f"{r.side_a} @ {r.side_b}"[:34],
            "[green]YES[/]" if r.has_opportunity else "NO",
            f"{r.best_combined_cost:.4f}",
            f"[{style}]{r.profit_percent:.2f}%[/]",
            f"{a.venue} {_fmt_pct(a.implied_probability)}"[:22],
            f"{b.venue} {_fmt_pct(b.implied_probability)}"[:22],
        )
    console.print(table)


def _render_report(report: ScanReport, settings: Settings) -> None:
    now = datetime.now(timezone.utc).strftime("%b %d %Y %H:%M UTC")
    console.print(
        f"\n[bold]POLYARB[/]  |  [cyan]{len(report.opportunities)} opportunities[/]"
        f"  |  {len(report.results)} matched  |  {now}\n"
    )
    _render_results_table(report.results)

    for r in report.opportunities:
        split = split_for(r.chosen, settings.total_stake)
        a, b = r.chosen.side_a_leg, r.chosen.side_b_leg
        console.print(
            f"  [bold]{r.side_a} @ {r.side_b}[/]: "
            f"${split.stake_1:.2f} on {a.team} at {a.venue}, "
            f"${split.stake_2:.2f} on {b.team} at {b.venue} "
            f"→ ${split.guaranteed_return:.2f} ([green]+${split.profit:.2f}[/])"
        )

    if report.unmatched:
        console.print(f"\n[yellow]{len(report.unmatched)} unmatched:[/] " + ", ".join(e.label for e in report.unmatched))
    if report.ambiguous:
        console.print(f"[yellow]{len(report.ambiguous)} ambiguous:[/] " + ", ".join(e.label for e in report.ambiguous))
    if report.skipped:
        console.print(f"[dim]{len(report.skipped)} quotes/events skipped[/]")


def _build_scanner(settings: Settings, league: str, policy: Optional[MatchPolicy]) -> ArbScanner:
    matcher = EventMatcher(
        aliases=alias_table_for(league, settings.alias_path),
        tie_tolerance=settings.match_tie_tolerance,
    )
    return ArbScanner(matcher=matcher, match_policy=policy or settings.match_policy)


def _write_results(report: ScanReport, output: Optional[Path], settings: Settings, league: str) -> None:
    path = output or default_report_path(settings.output_path, league)
    count = write_results_csv(path, report.results)
    console.print(f"\n[green]✓[/] {count} results saved to {path}")


async def _fetch_all(settings: Settings, league: str) -> tuple[list[MarketQuote], list[MarketQuote]]:
    sport = LEAGUE_TO_SPORT.get(league)
    if sport is None:
        raise AdapterError("odds_api", f"no sport key for league {league!r}. Supported: {list(LEAGUE_TO_SPORT)}")

    async with (
        OddsAPIAdapter(
            api_key=settings.odds_api_key,
            base_url=settings.odds_api_base_url,
            requests_per_second=settings.odds_api_requests_per_second,
        ) as odds_api,
        PolymarketAdapter(
            base_url=settings.polymarket_base_url,
            requests_per_second=settings.polymarket_requests_per_second,
            page_size=settings.polymarket_page_size,
        ) as polymarket,
    ):
        console.print(f"[blue]Fetching {league.upper()} sportsbook lines...[/]")
        book_quotes = await odds_api.fetch_quotes(sport, regions=settings.odds_api_regions)
        console.print(f"[green]✓[/] {len(book_quotes)} sportsbook quotes")

        console.print(f"[blue]Fetching {league.upper()} Polymarket lines...[/]")
        market_quotes = await polymarket.fetch_quotes(LEAGUE_TO_POLYMARKET.get(league, league))
        console.print(f"[green]✓[/] {len(market_quotes)} Polymarket quotes")

    return book_quotes, market_quotes


@app.command("scan")
def scan(
    league: Optional[str] = typer.Option(None, "--league", "-l", help="League (default from config)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Results CSV path"),
    policy: Optional[MatchPolicy] = typer.Option(None, "--policy", help="Event matching policy"),
    save_quotes: bool = typer.Option(True, "--save-quotes/--no-save-quotes", help="Also save fetched quotes as CSV"),
) -> None:
    """Fetch both sources, find cross-source hedges, display and save ranked results."""
    settings = get_settings()
    league = (league or settings.default_league).lower()
    bind_scan_context(league, "scan")
    if not settings.odds_api_configured:
        console.print("[red]✗ The Odds API not configured. Set POLYARB_ODDS_API_KEY[/]")
        raise typer.Exit(1)

    try:
        book_quotes, market_quotes = asyncio.run(_fetch_all(settings, league))
    except AdapterError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    if save_quotes:
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
        quotes_dir = settings.output_path.parent
        write_quotes_csv(quotes_dir / league / f"{league}_games_{stamp}.csv", book_quotes)
        write_quotes_csv(quotes_dir / "polymarket" / f"polymarket_{league}.csv", market_quotes)

    report = _build_scanner(settings, league, policy).scan(book_quotes, market_quotes)
    _render_report(report, settings)
    _write_results(report, output, settings, league)


@app.command("analyze")
def analyze(
    books_csv: Path = typer.Argument(..., exists=True, dir_okay=False, help="Sportsbook quotes CSV"),
    market_csv: Path = typer.Argument(..., exists=True, dir_okay=False, help="Prediction-market quotes CSV"),
    league: Optional[str] = typer.Option(None, "--league", "-l"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
    policy: Optional[MatchPolicy] = typer.Option(None, "--policy"),
) -> None:
    """Offline run over previously saved quote files."""
    settings = get_settings()
    league = (league or settings.default_league).lower()
    bind_scan_context(league, "analyze")

    book_quotes = load_quotes_csv(books_csv, Source.SPORTSBOOK)
    market_quotes = load_quotes_csv(market_csv, Source.PREDICTION_MARKET)
    console.print(f"[blue]{len(book_quotes)} sportsbook rows, {len(market_quotes)} market rows[/]")

    report = _build_scanner(settings, league, policy).scan(book_quotes, market_quotes)
    _render_report(report, settings)
    _write_results(report, output, settings, league)


@app.command("devig")
def devig(
    odds_a: int = typer.Argument(..., help="American odds, side A"),
    odds_b: int = typer.Argument(..., help="American odds, side B"),
) -> None:
    """Implied and de-vigged probabilities for a two-way moneyline."""
    try:
        p_a, p_b = american_to_prob(odds_a), american_to_prob(odds_b)
        true_a, true_b, margin = no_vig_two_way(p_a, p_b)
    except PolyArbError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Side")
    table.add_column("Odds")
    table.add_column("Implied")
    table.add_column("True")
    table.add_row("A", f"{odds_a:+d}", _fmt_pct(p_a), _fmt_pct(true_a))
    table.add_row("B", f"{odds_b:+d}", _fmt_pct(p_b), _fmt_pct(true_b))
    console.print(table)
    console.print(f"  Vig: {margin * 100:.2f}%")


@app.command("hedge")
def hedge(
    odds_1: int = typer.Argument(..., help="American odds, leg 1"),
    odds_2: int = typer.Argument(..., help="American odds, leg 2"),
    stake: Optional[float] = typer.Option(None, "--stake", "-s", help="Total stake (default from config)"),
) -> None:
    """Equal-payout stake split for two American prices."""
    settings = get_settings()
    try:
        split = stake_split(american_to_decimal(odds_1), american_to_decimal(odds_2), stake or settings.total_stake)
    except (PolyArbError, ValueError) as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    console.print(f"  Leg 1 ({odds_1:+d}): stake ${split.stake_1:.2f} → pays ${split.payout_1:.2f}")
    console.print(f"  Leg 2 ({odds_2:+d}): stake ${split.stake_2:.2f} → pays ${split.payout_2:.2f}")
    style = "green" if split.profit > 0 else "red"
    console.print(
        f"  Guaranteed return ${split.guaranteed_return:.2f}  |  "
        f"[{style}]profit ${split.profit:.2f} ({split.profit_percent:.2f}%)[/]"
    )


@app.command("book-arbs")
def book_arbs(
    league: Optional[str] = typer.Option(None, "--league", "-l"),
    books_csv: Optional[Path] = typer.Option(None, "--from-csv", exists=True, dir_okay=False, help="Use a saved quotes CSV instead of fetching"),
) -> None:
    """Hedges between two sportsbooks on the same game."""
    settings = get_settings()
    league = (league or settings.default_league).lower()
    bind_scan_context(league, "book-arbs")

    if books_csv is not None:
        quotes = load_quotes_csv(books_csv, Source.SPORTSBOOK)
    else:
        if not settings.odds_api_configured:
            console.print("[red]✗ The Odds API not configured. Set POLYARB_ODDS_API_KEY[/]")
            raise typer.Exit(1)
        sport = LEAGUE_TO_SPORT.get(league)
        if sport is None:
            console.print(f"[red]✗ Unknown league {league!r}. Supported: {', '.join(LEAGUE_TO_SPORT)}[/]")
            raise typer.Exit(1)

        async def _run() -> list[MarketQuote]:
            async with OddsAPIAdapter(
                api_key=settings.odds_api_key,
                base_url=settings.odds_api_base_url,
                requests_per_second=settings.odds_api_requests_per_second,
            ) as odds_api:
                return await odds_api.fetch_quotes(sport, regions=settings.odds_api_regions)

        try:
            quotes = asyncio.run(_run())
        except AdapterError as e:
            console.print(f"[red]✗ {e}[/]")
            raise typer.Exit(1)

    aliases = alias_table_for(league, settings.alias_path)
    found = 0
    for event_id, group in group_by_event(quotes).items():
        arbs = find_bookmaker_arbitrage(group, settings.total_stake, aliases)
        if not arbs:
            continue
        first = group[0]
        console.print(f"\n[bold]{first.side_a_name} @ {first.side_b_name}[/]  [dim]{event_id}[/]")
        for arb in arbs:
            found += 1
            console.print(
                f"  [green]{arb.profit_percent:.2f}%[/]  "
                f"${arb.split.stake_1:.2f} on {arb.bet_1.team} at {arb.bet_1.venue} ({arb.bet_1.odds:+d}), "
                f"${arb.split.stake_2:.2f} on {arb.bet_2.team} at {arb.bet_2.venue} ({arb.bet_2.odds:+d})  "
                f"margin {arb.arb_margin_percent:.2f}%"
            )

    if not found:
        console.print("[dim]No bookmaker arbitrage[/]")


@app.command("leagues")
def leagues() -> None:
    """List supported leagues and their alias tables."""
    settings = get_settings()
    table = Table(show_header=True, header_style="bold")
    table.add_column("League")
    table.add_column("Odds API sport")
    table.add_column("Polymarket sport")
    table.add_column("Aliases")
    for league, sport in LEAGUE_TO_SPORT.items():
        aliases = alias_table_for(league, settings.alias_path)
        table.add_row(
            league,
            sport,
            LEAGUE_TO_POLYMARKET.get(league, league),
            str(len(aliases)) + ("" if league in DEFAULT_ALIASES else " (custom only)"),
        )
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
