#!/usr/bin/env python3
"""
Standalone script for portfolio analysis.

Refreshes holdings from every source, prints the headline metrics and
insights, and optionally asks the LLM for a narrative analysis.

Usage:
  # Metrics and insights only
  python scripts/run_portfolio_analysis.py

  # Add an LLM analysis of the whole portfolio (saved to the history)
  python scripts/run_portfolio_analysis.py --llm

  # Analyze one holding without saving
  python scripts/run_portfolio_analysis.py --llm --symbol INFY --no-save

  # Verbose logging
  python scripts/run_portfolio_analysis.py --verbose
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for local execution
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
import structlog

from src.agent.llm_client import DashScopeClient
from src.agent.portfolio_analyst import PortfolioAnalyst
from src.core.config import get_settings
from src.core.exceptions import AppError
from src.services.analysis_history import AnalysisHistoryStore
from src.services.fx_rate_service import FxRateService
from src.services.holdings_import import ForeignHoldingsImporter
from src.services.insights import InsightFilter, filter_insights
from src.services.kite import KiteConnectClient
from src.services.portfolio_service import PortfolioService
from src.shared.formatters import format_currency, format_percentage

logger = structlog.get_logger()


async def main():
    """Main execution function."""
    # Parse arguments
    parser = argparse.ArgumentParser(description="Run portfolio analysis")
    parser.add_argument(
        "--llm",
        action="store_true",
        help="Request a narrative analysis from the LLM",
    )
    parser.add_argument(
        "--symbol",
        type=str,
        help="Analyze a single holding (requires --llm)",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Don't write the LLM analysis to the history directory",
    )
    parser.add_argument(
        "--filter",
        choices=[f.value for f in InsightFilter],
        default=InsightFilter.ALL.value,
        help="Insight filter (default: all)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    # Configure logging
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    logger.info(
        "Portfolio analysis script started",
        llm=args.llm,
        symbol=args.symbol,
        save=not args.no_save,
    )

    settings = get_settings()
    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    try:
        kite_client = KiteConnectClient(
            api_key=settings.kite_api_key,
            access_token=settings.kite_access_token,
            base_url=settings.kite_base_url,
            client=http_client,
        )
        fx_service = FxRateService(
            fallback_rate=settings.fx_fallback_rate,
            url=settings.fx_rate_url,
            base_currency=settings.foreign_currency,
            quote_currency=settings.home_currency,
            client=http_client,
        )
        service = PortfolioService(
            kite_client=kite_client,
            fx_service=fx_service,
            importer=ForeignHoldingsImporter(
                settings.vested_holdings_path, currency=settings.foreign_currency
            ),
            config=settings.analytics,
            home_currency=settings.home_currency,
        )

        snapshot = await service.refresh()
        metrics, insights = service.analyze(snapshot)
        insights = filter_insights(insights, args.filter)

        # Print summary
        print("\n" + "=" * 60)
        print("PORTFOLIO SUMMARY")
        print("=" * 60)
        print(f"Holdings: {metrics.number_of_holdings} across {metrics.number_of_sectors} sectors")
        print(f"Invested: {format_currency(metrics.total_investment)}")
        print(f"Current Value: {format_currency(metrics.current_value)}")
        print(
            f"P&L: {format_currency(metrics.total_pnl)} "
            f"({format_percentage(metrics.total_pnl_pct)})"
        )
        print(f"Diversification Score: {metrics.diversification_score:.0f}/100")
        print(f"Overall Risk Score: {metrics.overall_risk_score:.0f}/100")
        print(f"FX Rate: {snapshot.fx_rate.rate} ({snapshot.fx_rate.source})")
        for warning in snapshot.warnings:
            print(f"Warning: {warning}")

        print("\n" + "=" * 60)
        print(f"INSIGHTS ({len(insights)})")
        print("=" * 60)
        for insight in insights:
            print(f"[{insight.impact.value.upper()}] {insight.title}")
            print(f"    {insight.description}")

        if args.llm:
            analyst = PortfolioAnalyst(
                llm_client=DashScopeClient(settings),
                history_store=AnalysisHistoryStore(settings.analyses_dir),
                config=settings.analytics,
                temperature=settings.default_llm_temperature,
                max_tokens=settings.analysis_max_tokens,
            )
            result = await analyst.analyze(
                snapshot.holdings, symbol=args.symbol, save=not args.no_save
            )

            print("\n" + "=" * 60)
            print(f"LLM ANALYSIS ({result.model})")
            print("=" * 60)
            print(result.content)
            if result.record:
                print(f"\nSaved as {result.record.filename}")

        logger.info("Analysis completed successfully")

    except AppError as e:
        logger.error(
            "Portfolio analysis failed",
            error=e.message,
            error_type=e.error_type,
        )
        print(f"\nError: {e.message}", file=sys.stderr)
        sys.exit(1)

    finally:
        await http_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
