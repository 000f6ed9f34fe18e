"""
Analytics thresholds and constants.

Every threshold the metrics engine and the insight rules compare against lives
here as an immutable configuration object. Defaults reproduce the dashboard's
long-standing behavior; callers substitute a different instance instead of
patching module state.
"""

from pydantic import BaseModel, ConfigDict, Field


class AnalyticsConfig(BaseModel):
    """Immutable thresholds for portfolio metrics and insight rules."""

    model_config = ConfigDict(frozen=True)

    # Position sizing (percent of portfolio value)
    overweight_position_pct: float = Field(default=12.0, description="Overweight position rule")
    stock_overweight_pct: float = Field(default=10.0, description="Risk table overweight flag")
    stock_high_risk_pct: float = 15.0
    stock_medium_risk_pct: float = 8.0

    # Profit booking
    profit_booking_return_pct: float = 50.0
    profit_booking_min_value: float = 10_000.0

    # Underperformers
    underperformer_return_pct: float = -20.0

    # Tax-loss harvesting
    tax_loss_min_loss: float = 5_000.0
    tax_offset_rate: float = Field(default=0.15, description="Illustrative rate for harvestable loss")

    # Cost basis tax summary
    ltcg_exemption: float = 100_000.0
    ltcg_rate: float = 0.10

    # Sector concentration
    sector_concentration_pct: float = 30.0
    sector_medium_risk_pct: float = 20.0

    # Small positions
    small_position_max_value: float = 5_000.0
    small_position_max_weight_pct: float = 1.0
    small_position_min_count: int = Field(
        default=5, description="Rule fires when strictly more positions qualify"
    )

    # Sector performance
    best_sector_return_pct: float = 20.0
    worst_sector_return_pct: float = -10.0

    # Portfolio health (40-70 band intentionally silent)
    healthy_profit_ratio_pct: float = 70.0
    unhealthy_profit_ratio_pct: float = 40.0

    # Rebalancing
    rebalance_deviation_pct: float = 5.0

    # Momentum (exclusive bounds)
    momentum_min_return_pct: float = 30.0
    momentum_max_return_pct: float = 80.0
    momentum_min_count: int = 3

    # Diversification score
    diversification_sector_threshold_pct: float = 30.0
    diversification_sector_penalty: float = 20.0

    # Concentration index (HHI %) risk bands
    concentration_high_pct: float = 30.0
    concentration_medium_pct: float = 15.0

    # Overall risk score penalties
    risk_sector_threshold_pct: float = 40.0
    risk_sector_penalty: float = 15.0
    risk_top5_threshold_pct: float = 60.0
    risk_top5_penalty: float = 10.0

    # Related holdings attached to an insight
    top_k_related: int = 5
    sector_related: int = 3


DEFAULT_ANALYTICS_CONFIG = AnalyticsConfig()
