"""
Prompt builders for the portfolio analysis.

Prompts carry percentages and allocation weights only: no prices, no cost
basis, no P&L amounts and no portfolio value ever leave the process.
"""

from datetime import UTC, datetime

from ..core.analytics.metrics import HoldingMetrics, PortfolioMetrics
from ..core.exceptions import NotFoundError
from ..models.holding import InstrumentKind
from ..shared.formatters import allocation_bar, format_percentage

PORTFOLIO_ANALYST_SYSTEM_PROMPT = """You are a Chief Investment Officer with 25+ years of experience across Indian and global equity markets, asset allocation, risk management, sector rotation and behavioral finance.

You review retail portfolios against current market conditions and give decisive, specific recommendations.

You MUST:
- Discuss holdings only in terms of PERCENTAGES and ALLOCATION weights
- Cite specific data (news, technical levels, valuation) for every recommendation
- Be direct: BUY, HOLD, REDUCE or SELL, with a one or two sentence rationale

You MUST NOT:
- Mention or estimate any monetary amount, portfolio value or P&L figure
- Give generic advice ("diversification is important", "invest for the long term")
"""

PORTFOLIO_OUTPUT_SECTIONS = """## OUTPUT FORMAT

### 1. Executive Summary
Market pulse (mood, volatility regime, index trend, FII/DII stance, sector leaders and laggards) and the top 5 drivers moving the market right now.

### 2. Portfolio Health Scorecard
Overall score out of 10 with a one-line verdict, then scores for market alignment, diversification quality, sector allocation, risk management and growth potential. Flag any holding facing an immediate severe risk.

### 3. Concentration Analysis
| Metric | Current | Recommended | Status |
|--------|---------|-------------|--------|
| Top Holding Weight | [X]% | <15% | [OK/WATCH/ALERT] |
| Top 5 Holdings Weight | [X]% | <50% | [OK/WATCH/ALERT] |
| Largest Sector Weight | [X]% | <30% | [OK/WATCH/ALERT] |

### 4. Holding-by-Holding Verdicts
| # | Ticker | Type | Sector | Current % | Action | Conviction | Target % | Rationale |
|---|--------|------|--------|-----------|--------|------------|----------|-----------|

### 5. Sector Strategy Matrix
Portfolio weight vs benchmark (Nifty 50) weight, position (OW/UW/N), outlook and strategy per sector.

### 6. Alpha Opportunities
3-5 new ideas with type, sector, catalyst, risk level and suggested allocation range.

### 7. Rebalancing Roadmap
Immediate actions (this week), short-term actions (1-4 weeks) and a watch list with trigger levels.

### 8. Scenarios
Bull, base and bear case with probability, market impact and portfolio impact.
"""

HOLDING_OUTPUT_SECTIONS = """## OUTPUT FORMAT

### 1. Verdict
BUY / HOLD / REDUCE / SELL with conviction and a target allocation percentage.

### 2. Recent Developments
Earnings, management, regulatory and analyst actions from the last 2-4 weeks.

### 3. Technical Setup
Trend, price relative to 50/200 DMA, RSI, volume, key support and resistance.

### 4. Fundamental View
Valuation against sector peers, earnings momentum, balance sheet quality.

### 5. Position Sizing
Whether the current weight fits the portfolio given its sector exposure.

### 6. Risks to Monitor
Specific events or levels that would invalidate the verdict.
"""


def _analysis_date(as_of: datetime | None) -> str:
    return (as_of or datetime.now(UTC)).strftime("%A, %d %B %Y")


def _kind_label(item: HoldingMetrics) -> str:
    return "MF" if item.holding.kind == InstrumentKind.FUND else "Equity"


def _by_weight(metrics: PortfolioMetrics) -> list[HoldingMetrics]:
    return sorted(metrics.holdings, key=lambda h: h.weight_pct, reverse=True)


def _allocation_summary(metrics: PortfolioMetrics) -> list[str]:
    lines = []
    for breakdown in metrics.asset_breakdown:
        label = "Direct Equity Holdings" if breakdown.kind == InstrumentKind.EQUITY else "Mutual Fund Holdings"
        unit = "stocks" if breakdown.kind == InstrumentKind.EQUITY else "funds"
        lines.append(
            f"- **{label}:** {breakdown.weight_pct:.1f}% of portfolio "
            f"({breakdown.count} {unit})"
        )
    lines.append(f"- **Total Positions:** {metrics.number_of_holdings}")
    return lines


def _holdings_list(metrics: PortfolioMetrics) -> list[str]:
    return [
        f"{index}. **{item.symbol}** - {item.weight_pct:.2f}% | {_kind_label(item)} "
        f"| Sector: {item.sector} | Return: {format_percentage(item.return_pct)}"
        for index, item in enumerate(_by_weight(metrics), start=1)
    ]


def _sector_breakdown(metrics: PortfolioMetrics) -> list[str]:
    sectors = sorted(metrics.sectors, key=lambda s: s.weight_pct, reverse=True)
    return [
        f"- **{sector.name}:** {sector.weight_pct:.1f}% {allocation_bar(sector.weight_pct)}"
        for sector in sectors
    ]


def _statistics(metrics: PortfolioMetrics) -> list[str]:
    equity = next(b for b in metrics.asset_breakdown if b.kind == InstrumentKind.EQUITY)
    funds = next(b for b in metrics.asset_breakdown if b.kind == InstrumentKind.FUND)
    largest_sector = max(metrics.sectors, key=lambda s: s.weight_pct, default=None)
    largest = metrics.largest_holding

    return [
        f"- Total Unique Positions: {metrics.number_of_holdings}",
        f"- Equity Positions: {equity.count}",
        f"- Mutual Fund Positions: {funds.count}",
        f"- Number of Sectors: {metrics.number_of_sectors}",
        (
            f"- Largest Sector: {largest_sector.name} ({largest_sector.weight_pct:.1f}%)"
            if largest_sector
            else "- Largest Sector: N/A"
        ),
        (
            f"- Largest Holding: {largest.symbol} ({largest.weight_pct:.1f}%)"
            if largest
            else "- Largest Holding: N/A"
        ),
        f"- Top 5 Concentration: {metrics.top5_concentration:.1f}%",
        f"- Top 10 Concentration: {metrics.top10_concentration:.1f}%",
        f"- Concentration Index (HHI): {metrics.concentration_index:.1f}",
        f"- Effective Number of Positions: {metrics.effective_diversification:.1f}",
        f"- Diversification Score: {metrics.diversification_score:.0f}/100",
        f"- Overall Return: {format_percentage(metrics.total_pnl_pct)}",
    ]


def build_portfolio_analysis_prompt(
    metrics: PortfolioMetrics, as_of: datetime | None = None
) -> str:
    """
    Build the full-portfolio briefing.

    Args:
        metrics: Metrics of the current holdings
        as_of: Analysis date shown in the header (defaults to now)

    Returns:
        Markdown prompt with allocation, holdings, sectors and statistics
    """
    sections = [
        "# PORTFOLIO INTELLIGENCE BRIEFING",
        f"**Analysis Date:** {_analysis_date(as_of)}",
        "",
        "Conduct an institutional-grade review of the portfolio below against "
        "CURRENT market conditions: macro backdrop (RBI, Fed, inflation, USD/INR), "
        "sector rotation, and recent news for every holding.",
        "",
        "**CRITICAL:** NEVER mention or calculate monetary amounts. Only percentages "
        "and allocation weights.",
        "",
        "---",
        "",
        PORTFOLIO_OUTPUT_SECTIONS,
        "---",
        "",
        "## USER'S PORTFOLIO DATA",
        "",
        "### Asset Allocation Summary",
        *_allocation_summary(metrics),
        "",
        "### Holdings List (Symbol: Allocation %)",
        *_holdings_list(metrics),
        "",
        "### Sector Allocation Breakdown",
        *_sector_breakdown(metrics),
        "",
        "### Portfolio Statistics",
        *_statistics(metrics),
        "",
        "---",
        "",
        "**NOW EXECUTE THE FULL ANALYSIS. REMEMBER: NO MONETARY VALUES - ONLY "
        "PERCENTAGES AND ALLOCATIONS.**",
    ]
    return "\n".join(sections)


def build_holding_analysis_prompt(
    metrics: PortfolioMetrics, symbol: str, as_of: datetime | None = None
) -> str:
    """
    Build the briefing for one holding in its portfolio context.

    Raises:
        NotFoundError: Symbol is not held
    """
    wanted = symbol.strip().upper()
    item = next((h for h in metrics.holdings if h.symbol.upper() == wanted), None)
    if item is None:
        raise NotFoundError("Holding not found in portfolio", symbol=symbol)

    sector = metrics.sector(item.sector)
    day_change = item.holding.day_change_percentage

    sections = [
        f"# {item.symbol} POSITION REVIEW",
        f"**Analysis Date:** {_analysis_date(as_of)}",
        "",
        f"Review this single position against current market conditions and "
        f"recent news for {item.symbol}. Only percentages and allocation weights; "
        "never monetary amounts.",
        "",
        "---",
        "",
        HOLDING_OUTPUT_SECTIONS,
        "---",
        "",
        "## POSITION DATA",
        f"- **Symbol:** {item.symbol}",
        f"- **Type:** {_kind_label(item)}",
        f"- **Sector:** {item.sector}",
        f"- **Portfolio Weight:** {item.weight_pct:.2f}%",
        f"- **Return Since Purchase:** {format_percentage(item.return_pct)}",
        f"- **Price Move Since Purchase:** {format_percentage(item.holding.price_return_pct)}",
        f"- **Today's Change:** {format_percentage(day_change)}",
        f"- **Risk Level (by weight):** {item.risk_level.value}",
        "",
        "## PORTFOLIO CONTEXT",
        (
            f"- **Sector Weight:** {sector.weight_pct:.1f}% across {sector.count} "
            f"holding(s) {allocation_bar(sector.weight_pct)}"
            if sector
            else "- **Sector Weight:** N/A"
        ),
        f"- **Total Positions:** {metrics.number_of_holdings}",
        f"- **Top 5 Concentration:** {metrics.top5_concentration:.1f}%",
        f"- **Diversification Score:** {metrics.diversification_score:.0f}/100",
    ]
    return "\n".join(sections)
