from __future__ import annotations

from typing import Any, Dict, List

from ..models import ChatMessage, Provider, to_wire
from .base_adapter import ChatAdapter, log
from .errors import UpstreamResponseError


def to_openai_messages(messages: List[ChatMessage]) -> List[Dict[str, str]]:
    """OpenAI accepts system/user/assistant roles as-is."""
    return to_wire(messages)


class OpenAIAdapter(ChatAdapter):
    """
    Adapter for OpenAI-style chat completion APIs.

    It expects the following keys in `self.config`:
    - api_base:    base URL of the API, e.g. https://api.openai.com/v1
    - api_key:     API key string, sent as a bearer token
    - model:       model name to use
    - temperature: optional sampling temperature (default: 0.2)
    - max_tokens:  optional output cap (default: 300)
    - timeout:     optional request timeout in seconds (default: 30)
    """

    provider = Provider.OPENAI

    async def chat(self, messages: List[ChatMessage]) -> ChatMessage:
        api_base = self.config["api_base"]
        api_key = self.config["api_key"]
        model = self.config["model"]

        payload: Dict[str, Any] = {
            "model": model,
            "messages": to_openai_messages(messages),
            "temperature": float(self.config.get("temperature", 0.2)),
            "max_tokens": int(self.config.get("max_tokens", 300)),
        }
        log.debug("[openai] model=%s messages=%d", model, len(messages))

        async with self._client(api_base) as client:
            response = await client.post(
                "/chat/completions",
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            self._check_status(response)
            data = self._json(response)

        try:
            message = data["choices"][0]["message"]
            return ChatMessage(
                role=message.get("role") or "assistant",
                content=message.get("content") or "",
            )
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as exc:
            raise UpstreamResponseError(
                self.provider, "openai response has no choices[0].message"
            ) from exc
