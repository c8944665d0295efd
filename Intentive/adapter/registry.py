from __future__ import annotations

from typing import Dict, Optional, Type

import httpx

from ..config.parser import Settings, get_provider_api_config
from ..models import Provider
from .base_adapter import ChatAdapter
from .google_adapter import GoogleGeminiAdapter
from .openai_adapter import OpenAIAdapter


ADAPTERS: Dict[Provider, Type[ChatAdapter]] = {
    Provider.GOOGLE: GoogleGeminiAdapter,
    Provider.OPENAI: OpenAIAdapter,
}


def select_provider(google_api_key: Optional[str], openai_api_key: Optional[str]) -> Provider:
    """
    Pick the provider from credential presence. First match wins:
    Google, then OpenAI, then NONE.
    """
    if google_api_key:
        return Provider.GOOGLE
    if openai_api_key:
        return Provider.OPENAI
    return Provider.NONE


def get_chat_adapter(
    settings: Settings,
    provider: Optional[Provider] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChatAdapter:
    """
    Unified entrypoint for creating chat adapters.

    - If provider is not given, it is selected from the credentials in settings.
    - Provider.NONE has no adapter and raises ValueError.
    """
    if provider is None:
        provider = select_provider(settings.google_api_key, settings.openai_api_key)

    if provider not in ADAPTERS:
        raise ValueError(f"Unsupported provider: {provider.value}")

    api_cfg = get_provider_api_config(settings, provider)
    adapter_cls = ADAPTERS[provider]
    return adapter_cls(api_cfg, transport=transport)
