"""
Unit tests for the analysis prompt builders.

The prompts must describe the portfolio in percentages only; no prices,
cost basis, P&L or portfolio value may appear.
"""

from datetime import UTC, datetime

import pytest

from src.agent.prompts import build_holding_analysis_prompt, build_portfolio_analysis_prompt
from src.core.analytics.metrics import compute_portfolio_metrics
from src.core.exceptions import NotFoundError
from src.models.holding import Holding, InstrumentKind

AS_OF = datetime(2025, 10, 19, 9, 30, tzinfo=UTC)

# Distinctive amounts that must never leak into a prompt
MONETARY_STRINGS = ["123456", "1,23,456", "61728", "61,728", "4321", "987654", "9,87,654"]


# ===== Fixtures =====


@pytest.fixture
def metrics():
    """Two equities and a fund with distinctive amounts"""
    holdings = [
        Holding(
            symbol="INFY",
            quantity=2,
            average_price=30864,
            last_price=61728,
            pnl=61728,
            sector="IT",
            day_change_percentage=1.25,
        ),
        Holding(
            symbol="HDFCBANK",
            quantity=1,
            average_price=4321,
            last_price=4321,
            pnl=0,
            sector="Banking",
        ),
        Holding(
            symbol="XYZ Liquid Fund",
            quantity=1,
            average_price=987654,
            last_price=987654,
            pnl=0,
            sector="Liquid",
            kind=InstrumentKind.FUND,
        ),
    ]
    return compute_portfolio_metrics(holdings)


# ===== Portfolio Prompt =====


class TestPortfolioPrompt:
    """Test the full-portfolio briefing"""

    def test_sections(self, metrics):
        """Test header, date and data sections"""
        prompt = build_portfolio_analysis_prompt(metrics, AS_OF)

        assert prompt.startswith("# PORTFOLIO INTELLIGENCE BRIEFING")
        assert "**Analysis Date:** Sunday, 19 October 2025" in prompt
        for heading in (
            "### Asset Allocation Summary",
            "### Holdings List (Symbol: Allocation %)",
            "### Sector Allocation Breakdown",
            "### Portfolio Statistics",
        ):
            assert heading in prompt

    def test_holdings_ordered_by_weight(self, metrics):
        """Test the largest holding is listed first"""
        prompt = build_portfolio_analysis_prompt(metrics, AS_OF)

        assert "1. **XYZ Liquid Fund** - " in prompt
        assert "| MF | Sector: Liquid |" in prompt
        assert prompt.index("**INFY**") < prompt.index("**HDFCBANK**")

    def test_allocation_summary(self, metrics):
        """Test equity and fund shares with counts"""
        prompt = build_portfolio_analysis_prompt(metrics, AS_OF)

        assert "(2 stocks)" in prompt
        assert "- **Mutual Fund Holdings:** " in prompt
        assert "- **Total Positions:** 3" in prompt

    def test_no_monetary_amounts(self, metrics):
        """Test no currency symbol or amount appears"""
        prompt = build_portfolio_analysis_prompt(metrics, AS_OF)

        assert "₹" not in prompt
        assert "$" not in prompt
        for amount in MONETARY_STRINGS:
            assert amount not in prompt

    def test_empty_portfolio(self):
        """Test an empty portfolio still renders"""
        prompt = build_portfolio_analysis_prompt(compute_portfolio_metrics([]), AS_OF)

        assert "- Largest Sector: N/A" in prompt
        assert "- Largest Holding: N/A" in prompt


# ===== Holding Prompt =====


class TestHoldingPrompt:
    """Test the single-holding briefing"""

    def test_position_data(self, metrics):
        """Test position weight, return and sector context"""
        prompt = build_holding_analysis_prompt(metrics, "infy", AS_OF)

        assert prompt.startswith("# INFY POSITION REVIEW")
        assert "## POSITION DATA" in prompt
        assert "## PORTFOLIO CONTEXT" in prompt
        assert "- **Sector:** IT" in prompt
        assert "- **Return Since Purchase:** +100.0%" in prompt
        assert "- **Today's Change:** +1.2%" in prompt

    def test_no_monetary_amounts(self, metrics):
        """Test no currency symbol or amount appears"""
        prompt = build_holding_analysis_prompt(metrics, "INFY", AS_OF)

        assert "₹" not in prompt
        for amount in MONETARY_STRINGS:
            assert amount not in prompt

    def test_missing_day_change(self, metrics):
        """Test absent day change renders as N/A"""
        prompt = build_holding_analysis_prompt(metrics, "HDFCBANK", AS_OF)
        assert "- **Today's Change:** N/A" in prompt

    def test_unknown_symbol(self, metrics):
        """Test symbols not held raise NotFoundError"""
        with pytest.raises(NotFoundError):
            build_holding_analysis_prompt(metrics, "TCS", AS_OF)
