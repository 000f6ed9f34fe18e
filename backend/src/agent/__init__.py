"""
LLM-powered portfolio analysis.

Builds allocation-only prompts from portfolio metrics and sends them to an
Alibaba Cloud Qwen model through DashScope. Results can be stored in the
flat-file analysis history.
"""

from .llm_client import DashScopeClient, TokenUsage
from .portfolio_analyst import AnalysisResult, PortfolioAnalyst

__all__ = ["AnalysisResult", "DashScopeClient", "PortfolioAnalyst", "TokenUsage"]
