"""LLM chat completion client."""

from .openrouter import (
    ChatMessage,
    ChatOptions,
    ChatResponse,
    ChatUsage,
    OpenRouterClient,
    OpenRouterConfig,
    OpenRouterError,
    Web3Assistant,
    create_openrouter_client,
)

__all__ = [
    "ChatMessage",
    "ChatOptions",
    "ChatResponse",
    "ChatUsage",
    "OpenRouterClient",
    "OpenRouterConfig",
    "OpenRouterError",
    "Web3Assistant",
    "create_openrouter_client",
]
