"""
Unit tests for the portfolio metrics engine.

Tests:
- Totals, weights and per-holding risk levels
- Concentration (HHI), effective diversification, top-K concentration
- Sector aggregation and sector balance
- Scores clamped to 0..100
- Tax summary
- Degenerate inputs: empty portfolio, zero average price, zero value
"""

import pytest

from src.core.analytics.config import AnalyticsConfig
from src.core.analytics.metrics import (
    MetricsEngine,
    RiskLevel,
    clamp,
    compute_portfolio_metrics,
    herfindahl_index,
    safe_divide,
    top_k_concentration,
)
from src.models.holding import Holding, InstrumentKind


def make_holding(symbol, quantity, average_price, last_price, pnl=None, sector="IT", **kwargs):
    """Build a Holding; pnl defaults to the price move times quantity."""
    if pnl is None:
        pnl = (last_price - average_price) * quantity
    return Holding(
        symbol=symbol,
        quantity=quantity,
        average_price=average_price,
        last_price=last_price,
        pnl=pnl,
        sector=sector,
        **kwargs,
    )


# ===== Fixtures =====


@pytest.fixture
def engine():
    """Metrics engine with default thresholds"""
    return MetricsEngine()


@pytest.fixture
def two_holdings():
    """One doubled position and one flat position"""
    return [
        make_holding("INFY", 10, 100, 200, pnl=1000, sector="IT"),
        make_holding("HDFCBANK", 10, 100, 100, pnl=0, sector="Banking"),
    ]


@pytest.fixture
def equal_weight():
    """Four equal positions in four sectors"""
    return [
        make_holding(symbol, 10, 100, 100, sector=sector)
        for symbol, sector in [
            ("INFY", "IT"),
            ("HDFCBANK", "Banking"),
            ("SUNPHARMA", "Pharma"),
            ("ITC", "FMCG"),
        ]
    ]


# ===== Helpers =====


class TestHelpers:
    """Test numeric helpers"""

    def test_safe_divide(self):
        """Test zero denominator gives default"""
        assert safe_divide(10, 4) == 2.5
        assert safe_divide(10, 0) == 0.0
        assert safe_divide(10, 0, default=-1.0) == -1.0

    def test_clamp(self):
        """Test clamp to 0..100"""
        assert clamp(-5) == 0.0
        assert clamp(150) == 100.0
        assert clamp(42.5) == 42.5

    def test_herfindahl_index(self):
        """Test HHI on percentage weights"""
        assert herfindahl_index([50, 50]) == pytest.approx(0.5)
        assert herfindahl_index([100]) == pytest.approx(1.0)
        assert herfindahl_index([]) == 0.0

    def test_top_k_concentration(self):
        """Test sum of the K largest weights"""
        assert top_k_concentration([10, 40, 20, 30], 2) == pytest.approx(70.0)
        assert top_k_concentration([10, 20], 5) == pytest.approx(30.0)


# ===== Totals and Weights =====


class TestTotals:
    """Test portfolio totals"""

    def test_totals(self, engine, two_holdings):
        """Test investment, value and P&L sums"""
        metrics = engine.compute(two_holdings)

        assert metrics.total_investment == pytest.approx(2000.0)
        assert metrics.current_value == pytest.approx(3000.0)
        assert metrics.total_pnl == pytest.approx(1000.0)
        assert metrics.total_pnl_pct == pytest.approx(50.0)
        assert metrics.number_of_holdings == 2
        assert metrics.number_of_sectors == 2

    def test_weights_sum_to_100(self, engine, two_holdings, equal_weight):
        """Test weights sum to 100 for any non-zero portfolio"""
        for holdings in (two_holdings, equal_weight):
            metrics = engine.compute(holdings)
            assert sum(h.weight_pct for h in metrics.holdings) == pytest.approx(100.0)
            assert sum(s.weight_pct for s in metrics.sectors) == pytest.approx(100.0)

    def test_holding_order_preserved(self, engine, two_holdings):
        """Test per-holding metrics follow input order"""
        metrics = engine.compute(two_holdings)
        assert [h.symbol for h in metrics.holdings] == ["INFY", "HDFCBANK"]

    def test_day_change(self, engine):
        """Test day change aggregates per-unit change times quantity"""
        holdings = [make_holding("INFY", 10, 100, 100, day_change=2.0)]
        metrics = engine.compute(holdings)

        assert metrics.day_change == pytest.approx(20.0)
        assert metrics.day_change_pct == pytest.approx(2.0)

    def test_input_not_mutated(self, engine, two_holdings):
        """Test computing twice gives equal results"""
        assert engine.compute(two_holdings) == engine.compute(two_holdings)


class TestHoldingMetrics:
    """Test per-holding figures and risk levels"""

    def test_weights_and_risk(self, engine, two_holdings):
        """Test weight, overweight flag and risk level"""
        infy, hdfc = engine.compute(two_holdings).holdings

        assert infy.weight_pct == pytest.approx(200 / 3)
        assert infy.return_pct == pytest.approx(100.0)
        assert infy.is_overweight is True
        assert infy.risk_level == RiskLevel.HIGH
        assert hdfc.weight_pct == pytest.approx(100 / 3)
        assert hdfc.return_pct == 0.0

    def test_risk_bands(self):
        """Test weight above 8 is medium and at most 8 is low"""
        holdings = [make_holding("A", 9, 100, 100)] + [
            make_holding(f"S{i}", 91 / 13, 100, 100) for i in range(13)
        ]
        metrics = MetricsEngine().compute(holdings)

        assert metrics.holdings[0].weight_pct == pytest.approx(9.0)
        assert metrics.holdings[0].risk_level == RiskLevel.MEDIUM
        assert metrics.holdings[0].is_overweight is False
        assert metrics.holdings[1].risk_level == RiskLevel.LOW

    def test_hhi_contributions_sum_to_100(self, engine, two_holdings):
        """Test each holding's share of HHI"""
        metrics = engine.compute(two_holdings)
        assert sum(h.hhi_contribution_pct for h in metrics.holdings) == pytest.approx(100.0)

    def test_zero_average_price(self, engine):
        """Test zero cost basis gives 0% returns instead of dividing by zero"""
        metrics = engine.compute([make_holding("GIFT", 10, 0, 50, pnl=500)])
        holding = metrics.holdings[0]

        assert holding.return_pct == 0.0
        assert holding.holding.price_return_pct == 0.0
        assert metrics.total_pnl_pct == 0.0
        assert metrics.top_gainer is None
        assert metrics.top_loser is None


# ===== Concentration and Scores =====


class TestConcentration:
    """Test HHI-based metrics and scores"""

    def test_equal_weight_hhi(self, engine, equal_weight):
        """Test equal weights give HHI% = 100 / N"""
        metrics = engine.compute(equal_weight)

        assert metrics.concentration_index == pytest.approx(25.0)
        assert metrics.effective_diversification == pytest.approx(4.0)
        assert metrics.concentration_risk == RiskLevel.MEDIUM

    def test_two_holding_scores(self, engine, two_holdings):
        """Test scores for a concentrated two-stock portfolio"""
        metrics = engine.compute(two_holdings)

        assert metrics.concentration_index == pytest.approx(500 / 9)
        assert metrics.effective_diversification == pytest.approx(1.8)
        assert metrics.top5_concentration == pytest.approx(100.0)
        assert metrics.max_sector_weight == pytest.approx(200 / 3)
        assert metrics.concentration_risk == RiskLevel.HIGH
        # 100 - 55.56 - 20 (one sector above 30%)
        assert metrics.diversification_score == pytest.approx(100 - 500 / 9 - 20)
        # 55.56 + 15 (sector above 40%) + 10 (top 5 above 60%)
        assert metrics.overall_risk_score == pytest.approx(500 / 9 + 25)

    def test_single_holding_scores_are_clamped(self, engine):
        """Test one holding pins risk at 100 and diversification at 0"""
        metrics = engine.compute([make_holding("INFY", 1, 100, 100)])

        assert metrics.concentration_index == pytest.approx(100.0)
        assert metrics.diversification_score == 0.0
        assert metrics.overall_risk_score == 100.0

    def test_scores_within_bounds(self, engine, two_holdings, equal_weight):
        """Test every score stays in 0..100"""
        for holdings in (two_holdings, equal_weight):
            metrics = engine.compute(holdings)
            for score in (
                metrics.diversification_score,
                metrics.overall_risk_score,
                metrics.sector_balance_score,
                metrics.concentration_index,
            ):
                assert 0.0 <= score <= 100.0

    def test_custom_thresholds(self, two_holdings):
        """Test penalties follow the injected configuration"""
        config = AnalyticsConfig(diversification_sector_penalty=0.0)
        metrics = MetricsEngine(config).compute(two_holdings)

        assert metrics.diversification_score == pytest.approx(100 - 500 / 9)


# ===== Sectors =====


class TestSectors:
    """Test sector aggregation"""

    def test_sector_aggregates(self, engine, two_holdings):
        """Test sectors sorted by value with per-sector figures"""
        metrics = engine.compute(two_holdings)
        it, banking = metrics.sectors

        assert it.name == "IT"
        assert it.count == 1
        assert it.return_pct == pytest.approx(100.0)
        assert it.risk_level == RiskLevel.HIGH
        assert it.deviation_from_equal_pct == pytest.approx(200 / 3 - 50)
        assert it.symbols == ("INFY",)
        assert banking.name == "Banking"
        assert banking.risk_level == RiskLevel.HIGH

    def test_sector_lookup(self, engine, two_holdings):
        """Test lookup by sector name"""
        metrics = engine.compute(two_holdings)

        assert metrics.sector("Banking").current_value == pytest.approx(1000.0)
        assert metrics.sector("Energy") is None

    def test_sector_balance(self, engine, two_holdings, equal_weight):
        """Test balance is 100 for equal sectors and lower otherwise"""
        assert engine.compute(equal_weight).sector_balance_score == pytest.approx(100.0)
        assert engine.compute(two_holdings).sector_balance_score == pytest.approx(
            100 - (50 / 3) * 2
        )


# ===== References and Breakdown =====


class TestReferences:
    """Test largest holding, movers and asset breakdown"""

    def test_largest_and_movers(self, engine):
        """Test movers rank by price move since acquisition"""
        holdings = [
            make_holding("BIG", 100, 100, 90),
            make_holding("UP", 10, 100, 150),
            make_holding("DOWN", 10, 100, 80),
        ]
        metrics = engine.compute(holdings)

        assert metrics.largest_holding.symbol == "BIG"
        assert metrics.top_gainer.symbol == "UP"
        assert metrics.top_gainer.return_pct == pytest.approx(50.0)
        assert metrics.top_loser.symbol == "DOWN"
        assert metrics.top_loser.return_pct == pytest.approx(-20.0)
        assert [r.symbol for r in metrics.top_gainers] == ["UP"]
        assert [r.symbol for r in metrics.top_losers] == ["DOWN", "BIG"]

    def test_all_losing_portfolio_has_no_gainer(self, engine):
        """Test holdings below cost never count as gainers"""
        holdings = [
            make_holding("A", 10, 100, 90),
            make_holding("B", 10, 100, 50),
        ]
        metrics = engine.compute(holdings)

        assert metrics.top_gainer is None
        assert metrics.top_gainers == ()
        assert metrics.top_loser.symbol == "B"
        assert metrics.top_loser.return_pct == pytest.approx(-50.0)
        assert [r.symbol for r in metrics.top_losers] == ["B", "A"]

    def test_movers_capped(self, engine):
        """Test at most five gainers are listed, best first"""
        holdings = [make_holding(f"S{i}", 10, 100, 100 + 10 * i) for i in range(1, 8)]
        metrics = engine.compute(holdings)

        assert [r.symbol for r in metrics.top_gainers] == ["S7", "S6", "S5", "S4", "S3"]
        assert metrics.top_losers == ()
        assert metrics.top_loser is None

    def test_asset_breakdown(self, engine):
        """Test one breakdown entry per instrument kind"""
        holdings = [
            make_holding("INFY", 10, 100, 300),
            make_holding("XYZ Liquid Fund", 10, 100, 100, kind=InstrumentKind.FUND),
        ]
        breakdown = {b.kind: b for b in engine.compute(holdings).asset_breakdown}

        assert breakdown[InstrumentKind.EQUITY].weight_pct == pytest.approx(75.0)
        assert breakdown[InstrumentKind.FUND].count == 1
        assert breakdown[InstrumentKind.FUND].weight_pct == pytest.approx(25.0)


# ===== Tax =====


class TestTaxSummary:
    """Test unrealized gain summary"""

    def test_below_exemption(self, engine, two_holdings):
        """Test gains under the exemption carry no tax"""
        tax = engine.compute(two_holdings).tax

        assert tax.total_profits == pytest.approx(1000.0)
        assert tax.profitable_count == 1
        assert tax.losing_count == 0
        assert tax.taxable_gain == 0.0
        assert tax.estimated_tax == 0.0
        assert tax.potential_tax_savings == 0.0

    def test_above_exemption_with_losses(self, engine):
        """Test taxable gain and harvesting savings"""
        holdings = [
            make_holding("WIN", 100, 1000, 3500, pnl=250_000),
            make_holding("LOSE", 100, 1000, 600, pnl=-40_000),
        ]
        tax = engine.compute(holdings).tax

        assert tax.total_unrealized_gain == pytest.approx(210_000.0)
        assert tax.total_losses == pytest.approx(40_000.0)
        assert tax.taxable_gain == pytest.approx(150_000.0)
        assert tax.estimated_tax == pytest.approx(15_000.0)
        assert tax.potential_tax_savings == pytest.approx(4_000.0)


# ===== Degenerate Inputs =====


class TestEmptyPortfolio:
    """Test empty and zero-value portfolios"""

    def test_empty(self):
        """Test empty input yields zeroed metrics"""
        metrics = compute_portfolio_metrics([])

        assert metrics.is_empty is True
        assert metrics.current_value == 0.0
        assert metrics.total_pnl_pct == 0.0
        assert metrics.concentration_index == 0.0
        assert metrics.diversification_score == 0.0
        assert metrics.overall_risk_score == 0.0
        assert metrics.sector_balance_score == 0.0
        assert metrics.largest_holding is None
        assert metrics.top_gainer is None
        assert metrics.sectors == ()
        assert all(b.weight_pct == 0.0 for b in metrics.asset_breakdown)

    def test_zero_value_portfolio(self, engine):
        """Test zero market value gives zero weights, not division errors"""
        metrics = engine.compute([make_holding("DELISTED", 10, 100, 0, pnl=-1000)])

        assert metrics.holdings[0].weight_pct == 0.0
        assert metrics.concentration_index == 0.0
        assert metrics.effective_diversification == 1.0
        assert metrics.diversification_score == 0.0
        assert metrics.top_loser.symbol == "DELISTED"
