# pricetrend/cli/runner.py

"""Headless CLI commands built on the async scan orchestrator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from pricetrend.config.settings import Settings
from pricetrend.errors import ConfigError, PriceTrendError
from pricetrend.models.trend import Direction, TrendResult
from pricetrend.services.scan_orchestrator import ScanOrchestrator

logger = logging.getLogger("pricetrend.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_DIRECTION_STYLES: dict[Direction, str] = {
    Direction.INCREASE: "red",
    Direction.DECREASE: "green",
    Direction.FLAT: "yellow",
    Direction.UNKNOWN: "dim",
}


def _emit_json(payload: dict[str, object]) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def format_summary(trend: TrendResult) -> str:
    """One-line human summary of a trend."""
    s = trend.summary
    if s.start is None or s.end is None:
        return f"direction={s.direction.value}"
    currency = f"{s.currency} " if s.currency else ""
    pct = f" ({s.pct_change:+.2f}%)" if s.pct_change is not None else ""
    return (
        f"{currency}{s.start:,.2f} → {currency}{s.end:,.2f}{pct} "
        f"direction={s.direction.value}"
    )


def _print_trend_table(trend: TrendResult, title: str) -> None:
    """Render the series and summary as Rich tables on stdout."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Date")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Source", overflow="fold", style="dim")

    for idx, p in enumerate(trend.series, 1):
        currency = f"{p.currency} " if p.currency else ""
        table.add_row(
            str(idx),
            p.date,
            f"{currency}{p.price:,.2f}",
            p.title or p.source_url,
        )

    console = Console()
    console.print(table)
    style = _DIRECTION_STYLES[trend.summary.direction]
    console.print(f"[{style}]{format_summary(trend)}[/{style}]")


async def cli_trend_search(
    settings: Settings,
    query: str,
    max_results: int,
    concurrency: int | None,
    output_format: str,
) -> int:
    """Search, scan and print a trend. Returns 0 when a series was found."""
    orchestrator = ScanOrchestrator(settings)
    _err.print(
        f"[bold]Searching:[/bold] {query}  "
        f"[dim]provider={settings.search_provider}[/dim]"
    )
    try:
        trend = await orchestrator.price_trend_search(
            query, max_results=max_results, concurrency=concurrency
        )
    except ConfigError as exc:
        _err.print(f"[red]Configuration error: {exc}[/red]")
        return 2
    except PriceTrendError as exc:
        logger.error("Trend search failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.aclose()

    if output_format == "table":
        _print_trend_table(trend, f"Price history: {query}")
    else:
        _emit_json(trend.to_dict())

    if not trend.series:
        _err.print("[yellow]No price signal found.[/yellow]")
        return 1
    _err.print(
        f"[green]✓ {len(trend.series)} points from "
        f"{len(trend.sources)} sources[/green]"
    )
    return 0


async def cli_scrape_url(
    settings: Settings,
    url: str,
    output_format: str,
) -> int:
    """Scrape a single page and print its trend and metadata."""
    orchestrator = ScanOrchestrator(settings)
    _err.print(f"[bold]Scraping:[/bold] {url}")
    try:
        result = await orchestrator.scrape_url(url)
    except PriceTrendError as exc:
        logger.error("Scrape failed for %s: %s", url, exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.aclose()

    if output_format == "table":
        _print_trend_table(result.trend, result.meta.get("title") or url)
    else:
        _emit_json(result.to_dict())
    return 0 if result.trend.series else 1


async def cli_sentiment(settings: Settings, topic: str) -> int:
    """Print a demand-sentiment report as JSON."""
    orchestrator = ScanOrchestrator(settings)
    try:
        report = await orchestrator.analyze_sentiment(topic)
    except ConfigError as exc:
        _err.print(f"[red]Configuration error: {exc}[/red]")
        return 2
    except PriceTrendError as exc:
        logger.error("Sentiment analysis failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.aclose()

    _emit_json(report.to_dict())
    return 0
