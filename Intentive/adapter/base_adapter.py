from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from ..models import ChatMessage, Provider
from .errors import UpstreamHTTPError, UpstreamResponseError

log = logging.getLogger("intentive.adapter")


class ChatAdapter(ABC):
    """
    Abstract base class for chat adapters.

    Each provider-specific adapter implements `chat` using the configuration
    dictionary passed in the constructor (api_base, api_key, model, timeout...).
    `transport` is handed to httpx unchanged; tests use it to stub the upstream.
    """

    provider: Provider = Provider.NONE

    def __init__(
        self,
        config: Dict[str, Any],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.transport = transport

    @abstractmethod
    async def chat(self, messages: List[ChatMessage]) -> ChatMessage:
        """
        Send the conversation to the underlying model and return its reply.

        The reply always has role "assistant" and a string content. Failures
        are raised as AdapterError subclasses, never returned as content.
        """
        raise NotImplementedError

    def _client(self, base_url: str) -> httpx.AsyncClient:
        timeout = float(self.config.get("timeout", 30))
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            trust_env=False,
            transport=self.transport,
        )

    def _check_status(self, response: httpx.Response) -> None:
        log.debug("[%s] status_code: %s", self.provider.value, response.status_code)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            text_snippet = exc.response.text[:500]
            raise UpstreamHTTPError(
                self.provider,
                exc.response.status_code,
                text_snippet,
            ) from exc

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamResponseError(
                self.provider,
                f"{self.provider.value} returned a non-JSON body",
            ) from exc
