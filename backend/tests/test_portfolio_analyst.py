"""
Unit tests for the LLM analysis layer.

Tests:
- DashScopeClient configuration, message conversion and error mapping
- PortfolioAnalyst prompt selection, saving and empty responses

The chat model is always mocked; no DashScope calls are made.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from src.agent.llm_client import DashScopeClient, TokenUsage
from src.agent.portfolio_analyst import PortfolioAnalyst
from src.agent.prompts import PORTFOLIO_ANALYST_SYSTEM_PROMPT
from src.core.config import Settings
from src.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from src.models.holding import Holding
from src.services.analysis_history import AnalysisHistoryStore

AS_OF = datetime(2025, 10, 19, 9, 30, tzinfo=UTC)


# ===== Fixtures =====


@pytest.fixture
def holdings():
    """Two equities"""
    return [
        Holding(
            symbol="INFY", quantity=10, average_price=100, last_price=200, pnl=1000, sector="IT"
        ),
        Holding(
            symbol="HDFCBANK",
            quantity=10,
            average_price=100,
            last_price=100,
            pnl=0,
            sector="Banking",
        ),
    ]


@pytest.fixture
def mock_llm():
    """Mock DashScope client"""
    llm = Mock()
    llm.model = "qwen-plus-latest"
    llm.generate = AsyncMock(return_value="## Executive Summary\nHold.")
    llm.get_last_token_usage = Mock(
        return_value=TokenUsage(input_tokens=900, output_tokens=100, total_tokens=1000)
    )
    return llm


@pytest.fixture
def store(tmp_path):
    """History store in a temp directory"""
    return AnalysisHistoryStore(tmp_path / "analyses")


@pytest.fixture
def settings():
    """Settings with a fake DashScope key"""
    return Settings(dashscope_api_key="sk-test", default_llm_model="qwen-plus-latest")


# ===== DashScopeClient =====


class TestDashScopeClient:
    """Test the LangChain wrapper"""

    def test_requires_api_key(self):
        """Test missing key raises ConfigurationError"""
        with pytest.raises(ConfigurationError):
            DashScopeClient(Settings(dashscope_api_key=""))

    def test_model_override(self, settings):
        """Test explicit model wins over the default"""
        assert DashScopeClient(settings, model="qwen-max").model == "qwen-max"
        assert DashScopeClient(settings).model == "qwen-plus-latest"

    def test_message_conversion(self, settings):
        """Test role mapping to LangChain messages"""
        client = DashScopeClient(settings)

        messages = client._convert_to_langchain_messages(
            [
                {"role": "system", "content": "s"},
                {"role": "user", "content": "u"},
                {"role": "assistant", "content": "a"},
                {"role": "tool", "content": "ignored"},
            ]
        )

        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage]

    @pytest.mark.asyncio
    async def test_generate(self, settings):
        """Test content and token usage from the response"""
        client = DashScopeClient(settings)
        bound = Mock()
        bound.ainvoke = AsyncMock(
            return_value=AIMessage(
                content="Analysis",
                response_metadata={
                    "token_usage": {"input_tokens": 10, "output_tokens": 5, "total_tokens": 15}
                },
            )
        )
        client.chat = Mock()
        client.chat.bind = Mock(return_value=bound)

        result = await client.generate([{"role": "user", "content": "hi"}], temperature=0.2)

        assert result == "Analysis"
        client.chat.bind.assert_called_once_with(temperature=0.2, max_tokens=8000)
        assert client.get_last_token_usage().total_tokens == 15

    @pytest.mark.asyncio
    async def test_token_usage_reset_per_call(self, settings):
        """Test a response without usage does not report the previous call's"""
        client = DashScopeClient(settings)
        bound = Mock()
        bound.ainvoke = AsyncMock(
            side_effect=[
                AIMessage(
                    content="First",
                    response_metadata={
                        "token_usage": {"input_tokens": 10, "output_tokens": 5, "total_tokens": 15}
                    },
                ),
                AIMessage(content="Second"),
            ]
        )
        client.chat = Mock()
        client.chat.bind = Mock(return_value=bound)

        await client.generate([{"role": "user", "content": "hi"}])
        assert client.get_last_token_usage().total_tokens == 15

        await client.generate([{"role": "user", "content": "again"}])
        assert client.get_last_token_usage() is None

    @pytest.mark.asyncio
    async def test_generate_failure(self, settings):
        """Test provider errors become ExternalServiceError"""
        client = DashScopeClient(settings)
        bound = Mock()
        bound.ainvoke = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        client.chat = Mock()
        client.chat.bind = Mock(return_value=bound)

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.generate([{"role": "user", "content": "hi"}])

        assert exc_info.value.context["service"] == "dashscope"


# ===== PortfolioAnalyst =====


class TestPortfolioAnalyst:
    """Test analysis orchestration"""

    @pytest.mark.asyncio
    async def test_portfolio_analysis_saved(self, holdings, mock_llm, store):
        """Test portfolio prompt, saved file and token count"""
        analyst = PortfolioAnalyst(llm_client=mock_llm, history_store=store)

        result = await analyst.analyze(holdings, as_of=AS_OF)

        messages = mock_llm.generate.call_args.args[0]
        assert messages[0] == {"role": "system", "content": PORTFOLIO_ANALYST_SYSTEM_PROMPT}
        assert messages[1]["content"].startswith("# PORTFOLIO INTELLIGENCE BRIEFING")
        assert result.content == "## Executive Summary\nHold."
        assert result.symbol is None
        assert result.model == "qwen-plus-latest"
        assert result.total_tokens == 1000
        assert result.record is not None
        assert store.list()[0].id == result.record.id

    @pytest.mark.asyncio
    async def test_holding_analysis(self, holdings, mock_llm, store):
        """Test single-holding prompt and symbol in filename"""
        analyst = PortfolioAnalyst(llm_client=mock_llm, history_store=store)

        result = await analyst.analyze(holdings, symbol="infy", as_of=AS_OF)

        prompt = mock_llm.generate.call_args.args[0][1]["content"]
        assert prompt.startswith("# INFY POSITION REVIEW")
        assert result.symbol == "INFY"
        assert result.record.symbol == "INFY"

    @pytest.mark.asyncio
    async def test_without_saving(self, holdings, mock_llm, store):
        """Test save=False leaves the history untouched"""
        analyst = PortfolioAnalyst(llm_client=mock_llm, history_store=store)

        result = await analyst.analyze(holdings, save=False)

        assert result.record is None
        assert store.list() == []

    @pytest.mark.asyncio
    async def test_sampling_parameters(self, holdings, mock_llm):
        """Test temperature and max tokens are forwarded"""
        analyst = PortfolioAnalyst(llm_client=mock_llm, temperature=0.3, max_tokens=4000)

        await analyst.analyze(holdings)

        assert mock_llm.generate.call_args.kwargs == {"temperature": 0.3, "max_tokens": 4000}

    @pytest.mark.asyncio
    async def test_empty_holdings(self, mock_llm):
        """Test nothing to analyze"""
        analyst = PortfolioAnalyst(llm_client=mock_llm)

        with pytest.raises(ValidationError):
            await analyst.analyze([])
        mock_llm.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_symbol(self, holdings, mock_llm):
        """Test symbol not in the portfolio"""
        analyst = PortfolioAnalyst(llm_client=mock_llm)

        with pytest.raises(NotFoundError):
            await analyst.analyze(holdings, symbol="TCS")

    @pytest.mark.asyncio
    async def test_empty_response(self, holdings, mock_llm, store):
        """Test blank model output is an error and nothing is saved"""
        mock_llm.generate.return_value = "   "
        analyst = PortfolioAnalyst(llm_client=mock_llm, history_store=store)

        with pytest.raises(ExternalServiceError):
            await analyst.analyze(holdings)
        assert store.list() == []
