"""Provider selection for chat requests.

The provider is fixed when the router is built: Google if its key is set,
otherwise OpenAI if its key is set, otherwise no provider and every chat
request gets the static fallback reply.
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

import httpx

from .adapter.base_adapter import ChatAdapter
from .adapter.registry import get_chat_adapter, select_provider
from .config.parser import Settings
from .models import ChatMessage, ChatReply, HealthStatus, Provider
from .telemetry import logged_call

log = logging.getLogger("intentive.router")

FALLBACK_CONTENT = (
    "No AI provider configured. Set GOOGLE_API_KEY (Gemini) or OPENAI_API_KEY on the server."
)


def fallback_reply() -> ChatReply:
    return ChatReply(
        message=ChatMessage(role="assistant", content=FALLBACK_CONTENT),
        provider=Provider.NONE,
    )


@dataclass
class ChatRouter:
    """Dispatch chat requests to the adapter chosen from Settings.

    Parameters
    ----------
    settings: immutable process configuration; read once here.
    transport: optional httpx transport forwarded to the adapter.
    """

    settings: Settings
    transport: Optional[httpx.AsyncBaseTransport] = None
    provider: Provider = field(init=False)
    _adapter: Optional[ChatAdapter] = field(default=None, init=False, repr=False)
    _chat: Optional[Callable[[List[ChatMessage]], Awaitable[ChatMessage]]] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.provider = select_provider(
            self.settings.google_api_key,
            self.settings.openai_api_key,
        )
        if self.provider is not Provider.NONE:
            self._adapter = get_chat_adapter(
                self.settings, self.provider, transport=self.transport
            )
            self._chat = logged_call(f"{self.provider.value}.chat", self._adapter.chat)
        log.info("chat router ready provider=%s", self.provider.value)

    def health(self) -> HealthStatus:
        """Report the configured provider without touching the network."""
        return HealthStatus(
            ok=True,
            provider=self.provider,
            python=platform.python_version(),
        )

    async def route(self, messages: List[ChatMessage]) -> ChatReply:
        """Answer a conversation with the selected adapter.

        Adapter errors propagate to the caller unchanged.
        """
        if self.provider is Provider.NONE or self._chat is None:
            log.info("chat fallback reply, no provider configured")
            return fallback_reply()

        message = await self._chat(messages)
        return ChatReply(message=message, provider=self.provider)
