# pricetrend/ui/app.py

"""Terminal UI for the pricetrend engine."""

import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from pricetrend.cli.runner import format_summary
from pricetrend.config.settings import Settings
from pricetrend.errors import PriceTrendError
from pricetrend.models.price_point import PricePoint
from pricetrend.models.trend import Direction, TrendResult
from pricetrend.services.scan_orchestrator import ScanOrchestrator

logger = logging.getLogger("pricetrend.ui")

_DIRECTION_ICONS: dict[Direction, str] = {
    Direction.INCREASE: "📈",
    Direction.DECREASE: "📉",
    Direction.FLAT: "➖",
    Direction.UNKNOWN: "❔",
}


class PriceTrendApp(App[object]):
    """Search for a product and browse its reconstructed price history."""

    CSS = """
    #search_bar { height: auto; }
    #search_input { width: 1fr; }
    #status, #summary { padding: 0 1; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("d", "sort_date", "Date Sort"),
        Binding("p", "sort_price", "Price Sort"),
    ]

    def __init__(
        self,
        settings: Settings | None = None,
        orchestrator: ScanOrchestrator | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings.from_env()
        self.orchestrator = orchestrator or ScanOrchestrator(self.settings)
        self.points: list[PricePoint] = []
        self.trend: TrendResult | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("💹 Historic Price Trends", id="title"),
            Horizontal(
                Input(
                    placeholder="e.g. 'iPhone launch price'",
                    id="search_input",
                ),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            Static("", id="summary"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table columns on startup."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns("Date", "Price", "Source")

    async def on_unmount(self) -> None:
        await self.orchestrator.aclose()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the search input."""
        if event.input.id == "search_input":
            await self.perform_search()

    async def perform_search(self) -> None:
        """Run a price trend search for the typed query."""
        query = self.query_one("#search_input", Input).value.strip()
        if not query:
            self.notify("Please enter a search term", severity="warning")
            return

        status = self.query_one("#status", Static)
        summary = self.query_one("#summary", Static)
        status.update(f"🔍 Scanning the web for '{query}'...")
        summary.update("")

        try:
            trend = await self.orchestrator.price_trend_search(query)
        except PriceTrendError as exc:
            logger.error("Trend search failed: %s", exc, exc_info=True)
            self.notify(f"Error: {exc}", severity="error")
            status.update("❌ Search failed")
            return

        self.trend = trend
        self.points = list(trend.series)
        self.populate_table()

        if not self.points:
            status.update("❌ No price signal found")
            return
        status.update(
            f"✅ {len(self.points)} price points from "
            f"{len(trend.sources)} sources"
        )
        icon = _DIRECTION_ICONS[trend.summary.direction]
        summary.update(f"{icon} {format_summary(trend)}")

    def populate_table(self) -> None:
        """Fill the DataTable with the current series."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        for p in self.points:
            currency = f"{p.currency} " if p.currency else ""
            table.add_row(
                p.date,
                Text(f"{currency}{p.price:,.2f}", style="bold"),
                (p.title or p.source_url)[:60],
            )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected point's source page in the browser."""
        if 0 <= event.cursor_row < len(self.points):
            webbrowser.open(self.points[event.cursor_row].source_url)

    def action_sort_date(self) -> None:
        """Sort points chronologically."""
        self.points.sort(key=lambda p: p.date)
        self.populate_table()

    def action_sort_price(self) -> None:
        """Sort points by price, ascending."""
        self.points.sort(key=lambda p: p.price)
        self.populate_table()
