# main.py

"""Entry point for the pricetrend application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from pricetrend.config.logging_config import setup_logging
from pricetrend.config.settings import Settings

logger = logging.getLogger("pricetrend.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pricetrend",
        description="Historic price signal extraction and trend summary.",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Product/category query. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        help="Scrape a single page instead of searching.",
    )
    parser.add_argument(
        "--sentiment",
        default=None,
        metavar="TOPIC",
        help="Analyse demand sentiment for a topic.",
    )
    parser.add_argument(
        "-n",
        "--max-results",
        type=int,
        default=Settings.DEFAULT_MAX_RESULTS,
        dest="max_results",
        help=(
            "Max candidate pages to analyse "
            f"(default {Settings.DEFAULT_MAX_RESULTS}, "
            f"capped at {Settings.MAX_SITES})."
        ),
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=None,
        help="Max pages fetched at once (default: MAX_CONCURRENCY).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    return parser


def _run_tui(settings: Settings) -> None:
    """Launch the interactive Textual TUI."""
    from pricetrend.ui.app import PriceTrendApp

    try:
        PriceTrendApp(settings).run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("pricetrend TUI shutting down")


def main() -> None:
    """Route to TUI (no args) or one of the headless commands."""
    log_file = setup_logging()
    logger.info("pricetrend starting, log file: %s", log_file)

    args = _build_parser().parse_args()
    settings = Settings.from_env()

    from pricetrend.cli import runner

    if args.sentiment is not None:
        exit_code = asyncio.run(runner.cli_sentiment(settings, args.sentiment))
    elif args.url is not None:
        exit_code = asyncio.run(
            runner.cli_scrape_url(settings, args.url, args.output_format)
        )
    elif args.query is None:
        _run_tui(settings)
        return
    else:
        exit_code = asyncio.run(
            runner.cli_trend_search(
                settings,
                args.query,
                args.max_results,
                args.concurrency,
                args.output_format,
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
