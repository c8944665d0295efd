"""
Adapter package for calling the upstream LLM providers.

Each provider has its own adapter implementation in this directory, all
conforming to the ChatAdapter interface defined in base_adapter.py.
"""

from .base_adapter import ChatAdapter
from .errors import AdapterError, UpstreamHTTPError, UpstreamResponseError
from .registry import get_chat_adapter, select_provider

__all__ = [
    "AdapterError",
    "ChatAdapter",
    "UpstreamHTTPError",
    "UpstreamResponseError",
    "get_chat_adapter",
    "select_provider",
]
