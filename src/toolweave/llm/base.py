"""Base class for LLM providers.

Providers make direct HTTP calls to vendor APIs with httpx. Every call runs
inside an OpenTelemetry span and HTTP failures are converted to LLMError so
callers only need to handle toolweave errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

import httpx
from opentelemetry import trace

from ..context import RunContext
from ..errors import LLMError, TokenLimitExceededError
from .config import LLMConfig, ProviderType
from .response import LLMResponse
from .token_length import TokenLengthValidator

# Get tracer for LLM operation spans
tracer = trace.get_tracer(__name__)

# Phrases vendors use when a request does not fit the context window
CONTEXT_LENGTH_MARKERS = (
    "context_length_exceeded",
    "maximum context length",
    "prompt is too long",
    "input is too long",
    "too many tokens",
)


class LLMProvider(ABC):
    """Async client for one LLM vendor.

    Subclasses declare their ``provider_type``, ``response_class`` and a
    ``DEFAULT`` LLMConfig preset, and implement ``_chat_request``.
    """

    provider_type: ClassVar[ProviderType]
    response_class: ClassVar[type[LLMResponse]] = LLMResponse
    DEFAULT: ClassVar[LLMConfig]

    def __init__(self, ctx: RunContext, config: Optional[LLMConfig] = None):
        """Initialize LLM provider.

        Args:
            ctx: Run context (config, logger, agent id)
            config: LLM configuration (defaults to the provider's DEFAULT preset)
        """
        self.ctx = ctx
        self.config = config or self.DEFAULT
        self.logger = ctx.child_logger(f"llm.{self.provider_type.value}")
        self.token_validator = TokenLengthValidator()

    @abstractmethod
    def _chat_request(
        self,
        messages: list[dict[str, Any]],
        *,
        system: Optional[str],
        tools: Optional[list[dict[str, Any]]],
        tool_choice: Any,
        parallel_tool_calls: Optional[bool],
        temperature: float,
        max_tokens: int,
        stop_sequences: Optional[list[str]],
    ) -> tuple[str, dict[str, Any]]:
        """Build (url, payload) for a chat request in the vendor's shape."""

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def user_message(self, text: str) -> dict[str, Any]:
        """Single user message in the vendor's wire shape."""
        return {"role": "user", "content": text}

    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        system: Optional[str] = None,
        tools: Optional[list[dict[str, Any]]] = None,
        tool_choice: Any = None,
        parallel_tool_calls: Optional[bool] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        stop_sequences: Optional[list[str]] = None,
    ) -> LLMResponse:
        """Chat completion with message history.

        Args:
            messages: Vendor-shaped message dicts
            system: Optional system instructions (for vendors with a system parameter)
            tools: Vendor-shaped tool definitions
            tool_choice: Vendor-shaped tool choice
            parallel_tool_calls: Whether the model may request several tools at once
            temperature: Override default temperature
            max_tokens: Override default max tokens
            stop_sequences: Stop generation at any of these strings

        Returns:
            Normalized LLMResponse

        Raises:
            TokenLimitExceededError: If the request does not fit the context window
            LLMError: If the LLM call fails
        """
        temp = temperature if temperature is not None else self.config.temperature
        tokens = max_tokens or self.config.max_tokens

        self._validate_context_window(messages, system)

        url, payload = self._chat_request(
            messages,
            system=system,
            tools=tools,
            tool_choice=tool_choice,
            parallel_tool_calls=parallel_tool_calls,
            temperature=temp,
            max_tokens=tokens,
            stop_sequences=stop_sequences,
        )
        raw = await self._request(
            "llm.chat",
            url,
            payload,
            attributes={
                "llm.temperature": temp,
                "llm.max_tokens": tokens,
                "llm.messages.count": len(messages),
                "llm.tools.count": len(tools or []),
            },
        )
        response = self.response_class(raw, model=self.config.model)
        self.logger.debug(
            "chat completed: model=%s prompt_tokens=%s completion_tokens=%s tool_calls=%d",
            response.model,
            response.prompt_tokens,
            response.completion_tokens,
            len(response.tool_calls),
        )
        return response

    async def complete(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        stop_sequences: Optional[list[str]] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate a completion for a single prompt.

        Args:
            prompt: User prompt/input
            system: Optional system prompt
            stop_sequences: Stop generation at any of these strings
            temperature: Override default temperature
            max_tokens: Override default max tokens

        Returns:
            Normalized LLMResponse (use ``.completion`` for the text)
        """
        return await self.chat(
            [self.user_message(prompt)],
            system=system,
            stop_sequences=stop_sequences,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def embed(self, text: str) -> LLMResponse:
        """Embed text. Providers without an embeddings endpoint raise."""
        raise NotImplementedError(f"{type(self).__name__} does not support embeddings")

    async def summarize(self, text: str) -> str:
        """Summarize text with the packaged summarization prompt."""
        from ..prompts import load_packaged_prompt

        prompt = load_packaged_prompt("summarize").format(text=text)
        response = await self.complete(prompt)
        return response.completion or ""

    def _validate_context_window(
        self, messages: list[dict[str, Any]], system: Optional[str]
    ) -> None:
        """Raise TokenLimitExceededError before sending an oversized request."""
        limit = self.config.context_window
        if limit is None:
            return
        content: list[Any] = list(messages)
        if system:
            content.append(system)
        self.token_validator.validate_max_tokens(content, limit=limit)

    async def _request(
        self,
        span_name: str,
        url: str,
        payload: dict[str, Any],
        *,
        params: Optional[dict[str, Any]] = None,
        attributes: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """POST a JSON payload inside a tracing span.

        Raises:
            TokenLimitExceededError: If the vendor rejects the context length
            LLMError: On any other HTTP or transport failure
        """
        timeout = self.config.timeout_ms / 1000.0

        with tracer.start_as_current_span(
            span_name,
            attributes={
                "llm.provider": self.provider_type.value,
                "llm.base_url": self.config.base_url,
                "llm.model": self.config.model,
                "agent.id": self.ctx.agent_id if self.ctx else "unknown",
                **(attributes or {}),
            },
        ) as span:
            try:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(
                        url, json=payload, headers=self._headers(), params=params
                    )
                    response.raise_for_status()
                    result = response.json()

                span.set_attribute("llm.status", "success")
                span.set_status(trace.Status(trace.StatusCode.OK))
                return result

            except httpx.HTTPStatusError as e:
                body = e.response.text
                error_msg = f"LLM HTTP error {e.response.status_code}: {body}"
                span.set_attribute("llm.status", "error")
                span.set_status(trace.Status(trace.StatusCode.ERROR, error_msg))
                span.record_exception(e)
                if any(marker in body.lower() for marker in CONTEXT_LENGTH_MARKERS):
                    raise TokenLimitExceededError(error_msg) from e
                raise LLMError(error_msg) from e
            except httpx.HTTPError as e:
                span.set_attribute("llm.status", "error")
                span.set_status(
                    trace.Status(trace.StatusCode.ERROR, f"LLM request failed: {e}")
                )
                span.record_exception(e)
                raise LLMError(f"LLM request failed: {e}") from e


__all__ = ["LLMProvider"]
