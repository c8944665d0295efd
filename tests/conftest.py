"""Pytest configuration and fixtures for Intentive tests."""

from typing import Any, Callable, List, Optional, Tuple

import httpx
import pytest

from Intentive.config.parser import Settings, load_config, load_settings
from Intentive.models import ChatMessage


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings from the bundled config.yaml with the given credentials."""

    def _make(google: str = "", openai: str = "", **env: str) -> Settings:
        environ = {"GOOGLE_API_KEY": google, "OPENAI_API_KEY": openai}
        environ.update(env)
        return load_settings(load_config(environ=environ))

    return _make


@pytest.fixture
def stub_upstream() -> Callable[..., Tuple[httpx.MockTransport, List[httpx.Request]]]:
    """Create a MockTransport answering every request the same way.

    Returns the transport and the list of requests it has seen.
    """

    def _stub(
        status_code: int = 200,
        json_body: Optional[Any] = None,
        text: Optional[str] = None,
    ) -> Tuple[httpx.MockTransport, List[httpx.Request]]:
        calls: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})

        return httpx.MockTransport(handler), calls

    return _stub


@pytest.fixture
def conversation():
    return [
        ChatMessage(role="system", content="You help users express intent-centric goals."),
        ChatMessage(role="user", content="Swap 100 USDC to ETH"),
        ChatMessage(role="assistant", content="Any slippage limit?"),
        ChatMessage(role="user", content="0.5%"),
    ]
