"""OpenRouter chat client built on the OpenAI SDK."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic_settings import BaseSettings

from ..constants import DEFAULT_MODEL

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterError(RuntimeError):
    """Raised when the OpenRouter API call fails or is misconfigured."""


class OpenRouterConfig(BaseSettings):
    """OpenRouter configuration from environment."""

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    site_url: Optional[str] = None
    site_name: Optional[str] = None

    class Config:
        env_prefix = "OPENROUTER_"
        case_sensitive = False


@dataclass
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatOptions:
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    stop: Optional[List[str]] = None

    def to_kwargs(self) -> Dict[str, Any]:
        return {key: value for key, value in vars(self).items() if value is not None}


@dataclass
class ChatUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatResponse:
    content: str
    model: str
    id: str
    usage: ChatUsage = field(default_factory=ChatUsage)


class OpenRouterClient:
    """
    Caller-owned client for OpenRouter chat completions.

    Args:
        config: API key, model and endpoint settings.
        client: Pre-built ``AsyncOpenAI`` client (mainly for tests).
    """

    def __init__(self, config: OpenRouterConfig, *, client: Optional[AsyncOpenAI] = None):
        self.config = config
        self._model = config.model

        headers: Dict[str, str] = {}
        if config.site_url:
            headers["HTTP-Referer"] = config.site_url
        if config.site_name:
            headers["X-Title"] = config.site_name

        self.client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            default_headers=headers or None,
        )

    @property
    def model(self) -> str:
        return self._model

    def set_model(self, model: str) -> None:
        self._model = model

    async def chat(
        self, messages: List[ChatMessage], options: Optional[ChatOptions] = None
    ) -> ChatResponse:
        """Send a chat completion request and return the first choice."""
        kwargs = (options or ChatOptions()).to_kwargs()
        try:
            completion = await self.client.chat.completions.create(
                model=self._model,
                messages=[message.to_dict() for message in messages],
                **kwargs,
            )
        except OpenAIError as exc:
            raise OpenRouterError(f"OpenRouter API error: {exc}") from exc

        content = ""
        if completion.choices:
            content = completion.choices[0].message.content or ""

        usage = ChatUsage()
        if completion.usage is not None:
            usage = ChatUsage(
                prompt_tokens=completion.usage.prompt_tokens,
                completion_tokens=completion.usage.completion_tokens,
                total_tokens=completion.usage.total_tokens,
            )

        logger.debug("OpenRouter %s used %s tokens", completion.model, usage.total_tokens)
        return ChatResponse(content=content, model=completion.model, id=completion.id, usage=usage)

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> str:
        """Simple text completion helper."""
        messages: List[ChatMessage] = []
        if system_prompt:
            messages.append(ChatMessage(role="system", content=system_prompt))
        messages.append(ChatMessage(role="user", content=prompt))
        response = await self.chat(messages, options)
        return response.content


def create_openrouter_client(**overrides: Any) -> OpenRouterClient:
    """
    Create a client from ``OPENROUTER_*`` environment variables.

    Keyword overrides take precedence over the environment.

    Raises:
        OpenRouterError: If no API key is configured.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        config = OpenRouterConfig(**values)
    except ValueError as exc:
        raise OpenRouterError("OPENROUTER_API_KEY environment variable is required") from exc
    return OpenRouterClient(config)


WEB3_ASSISTANT_PROMPT = "You are a helpful Web3 assistant."


class Web3Assistant:
    """Conversational helper answering user messages with a fixed system prompt."""

    def __init__(
        self,
        client: OpenRouterClient,
        *,
        system_prompt: str = WEB3_ASSISTANT_PROMPT,
        temperature: float = 0.7,
    ):
        self.client = client
        self.system_prompt = system_prompt
        self.temperature = temperature

    async def generate_response(
        self, user_message: str, history: Optional[List[ChatMessage]] = None
    ) -> str:
        messages = [ChatMessage(role="system", content=self.system_prompt)]
        messages.extend(history or [])
        messages.append(ChatMessage(role="user", content=user_message))
        response = await self.client.chat(messages, ChatOptions(temperature=self.temperature))
        return response.content
