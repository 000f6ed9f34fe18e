"""
LangChain-based LLM client wrapper for Qwen models.

Uses ChatTongyi (langchain-community) via Alibaba Cloud DashScope. The
portfolio analysis is one long prompt and one long answer, so the client
exposes a single non-streaming `generate` call.
"""

from dataclasses import dataclass

import structlog
from langchain_community.chat_models import ChatTongyi
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, ExternalServiceError

logger = structlog.get_logger()


@dataclass
class TokenUsage:
    """Token usage information from LLM API."""

    input_tokens: int
    output_tokens: int
    total_tokens: int


class DashScopeClient:
    """
    LangChain-based client for Qwen models via DashScope.

    Temperature and max_tokens are bound per request, so one client serves
    both portfolio and single-holding analyses.
    """

    def __init__(self, settings: Settings, model: str | None = None):
        """
        Initialize LangChain chat model client.

        Args:
            settings: Application settings with API keys
            model: Model ID (defaults to settings.default_llm_model)

        Raises:
            ConfigurationError: DashScope API key is not set
        """
        if not settings.dashscope_api_key:
            raise ConfigurationError(
                "DashScope API key not configured", missing="DASHSCOPE_API_KEY"
            )

        self.model = model or settings.default_llm_model
        self.settings = settings

        self.chat = ChatTongyi(  # type: ignore[call-arg]  # LangChain stubs incomplete
            model_name=self.model,
            dashscope_api_key=settings.dashscope_api_key,
            streaming=False,
            model_kwargs={"result_format": "message"},
        )
        logger.info("ChatTongyi client initialized", model=self.model)

        self.last_token_usage: TokenUsage | None = None

    def _convert_to_langchain_messages(
        self, messages: list[dict[str, str]]
    ) -> list[SystemMessage | HumanMessage | AIMessage]:
        """
        Convert dict messages to LangChain message objects.

        Args:
            messages: List of message dicts with 'role' and 'content'

        Returns:
            List of LangChain message objects
        """
        lc_messages: list[SystemMessage | HumanMessage | AIMessage] = []
        for msg in messages:
            role = msg["role"]
            content = msg["content"]

            if role == "system":
                lc_messages.append(SystemMessage(content=content))
            elif role == "user":
                lc_messages.append(HumanMessage(content=content))
            elif role == "assistant":
                lc_messages.append(AIMessage(content=content))
            else:
                logger.warning("Unknown message role", role=role)

        return lc_messages

    async def generate(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 8000,
    ) -> str:
        """
        Run one chat completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens in response

        Returns:
            Response text (may be empty; callers decide whether that is an error)

        Raises:
            ExternalServiceError: DashScope call failed
        """
        lc_messages = self._convert_to_langchain_messages(messages)

        logger.info(
            "Requesting completion",
            model=self.model,
            message_count=len(messages),
            temperature=temperature,
            max_tokens=max_tokens,
        )

        self.last_token_usage = None
        chat_with_params = self.chat.bind(temperature=temperature, max_tokens=max_tokens)
        try:
            response = await chat_with_params.ainvoke(lc_messages)
        except Exception as e:
            logger.error(
                "DashScope completion failed",
                error=str(e),
                model=self.model,
                error_type=type(e).__name__,
            )
            raise ExternalServiceError(
                f"LLM request failed: {e}", service="dashscope", model=self.model
            ) from e

        token_usage = response.response_metadata.get("token_usage", {})
        if token_usage:
            self.last_token_usage = TokenUsage(
                input_tokens=token_usage.get("input_tokens", 0),
                output_tokens=token_usage.get("output_tokens", 0),
                total_tokens=token_usage.get("total_tokens", 0),
            )
            logger.info(
                "Completion finished",
                input_tokens=self.last_token_usage.input_tokens,
                output_tokens=self.last_token_usage.output_tokens,
                total_tokens=self.last_token_usage.total_tokens,
            )

        content = response.content
        if isinstance(content, list):
            content = "".join(
                part if isinstance(part, str) else str(part.get("text", ""))
                for part in content
            )
        return content

    def get_last_token_usage(self) -> TokenUsage | None:
        """
        Get token usage from the last completion.

        Returns:
            TokenUsage if available, None otherwise
        """
        return self.last_token_usage
