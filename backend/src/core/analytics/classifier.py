"""
Sector and mutual fund category classification.

Equities resolve through an exact table lookup, then the alias table, then
the "Others" label. Funds resolve through the ordered keyword rules in
`sectors.FUND_CATEGORY_RULES`, falling back to "Other MF". Both paths are
total: any input, including None and blank strings, yields a label.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .sectors import (
    FUND_CATEGORY_RULES,
    FUND_ISIN_PREFIX,
    ISIN_LENGTH,
    OTHER_MF,
    OTHERS,
    SECTOR_MAPPING,
    SYMBOL_ALIASES,
    FundCategoryRule,
)


@dataclass(frozen=True)
class SectorClassifier:
    """Classifier over injectable, read-only lookup tables."""

    sector_mapping: Mapping[str, str] = field(default_factory=lambda: SECTOR_MAPPING)
    symbol_aliases: Mapping[str, str] = field(default_factory=lambda: SYMBOL_ALIASES)
    fund_rules: Sequence[FundCategoryRule] = FUND_CATEGORY_RULES
    default_sector: str = OTHERS
    default_fund_category: str = OTHER_MF

    def classify_symbol(self, symbol: str | None) -> str:
        """
        Get sector for an equity trading symbol.

        Args:
            symbol: Trading symbol (e.g., "RELIANCE", "M&M")

        Returns:
            Sector label, "Other MF" for mutual fund ISINs, "Others" if unknown
        """
        normalized = (symbol or "").strip().upper()
        if not normalized:
            return self.default_sector

        sector = self.sector_mapping.get(normalized)
        if sector:
            return sector

        alias = self.symbol_aliases.get(normalized)
        if alias and alias in self.sector_mapping:
            return self.sector_mapping[alias]

        # Table first: INFY and INFIBEAM share the fund ISIN prefix
        if len(normalized) == ISIN_LENGTH and normalized.startswith(FUND_ISIN_PREFIX):
            return self.default_fund_category

        return self.default_sector

    def classify_fund(self, fund_name: str | None) -> str:
        """
        Get mutual fund category from the fund's display name.

        Args:
            fund_name: Fund name (e.g., "Parag Parikh Flexi Cap Fund - Direct Growth")

        Returns:
            Category of the first matching rule, "Other MF" if none match
        """
        name = (fund_name or "").lower()
        for rule in self.fund_rules:
            if rule.matches(name):
                return rule.label
        return self.default_fund_category


DEFAULT_CLASSIFIER = SectorClassifier()


def get_sector(symbol: str | None) -> str:
    """Classify an equity symbol with the default tables."""
    return DEFAULT_CLASSIFIER.classify_symbol(symbol)


def get_fund_category(fund_name: str | None) -> str:
    """Classify a mutual fund name with the default rules."""
    return DEFAULT_CLASSIFIER.classify_fund(fund_name)
