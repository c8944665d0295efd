from __future__ import annotations

from typing import Any, Dict, List

from ..models import ChatMessage, Provider
from .base_adapter import ChatAdapter, log

NO_CONTENT = "(no content)"


def to_gemini_contents(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    """
    Map chat messages to Gemini `contents`.

    Gemini only knows "user" and "model": assistant turns become "model",
    everything else (system included) becomes "user". Order is kept.
    """
    return [
        {
            "role": "model" if m.role == "assistant" else "user",
            "parts": [{"text": m.content}],
        }
        for m in messages
    ]


def extract_candidate_text(data: Any) -> str:
    """Concatenate the text parts of the first candidate, or NO_CONTENT."""
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not isinstance(candidates, list) or not candidates:
        return NO_CONTENT
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return NO_CONTENT
    text = "".join(
        str(p.get("text") or "") for p in parts if isinstance(p, dict)
    )
    return text or NO_CONTENT


class GoogleGeminiAdapter(ChatAdapter):
    """
    Adapter for the Google Generative Language generateContent endpoint.

    期望 config 中包含以下字段：
    - api_base: 接口地址，例如 https://generativelanguage.googleapis.com/v1beta
    - api_key:  Gemini API Key（通过 query 参数 key 传递）
    - model:    模型资源名，例如 models/gemini-1.5-flash
    - timeout:  可选，请求超时时间（秒）
    """

    provider = Provider.GOOGLE

    async def chat(self, messages: List[ChatMessage]) -> ChatMessage:
        api_base = self.config["api_base"].rstrip("/")
        api_key = self.config["api_key"]
        model = self.config["model"].strip("/")

        # POST {api_base}/{model}:generateContent?key=xxx
        path = f"/{model}:generateContent"

        # The key travels in the query string, so only the path is logged.
        log.debug("[google] base_url=%s path=%s messages=%d", api_base, path, len(messages))

        async with self._client(api_base) as client:
            response = await client.post(
                path,
                params={"key": api_key},
                headers={"Content-Type": "application/json"},
                json={"contents": to_gemini_contents(messages)},
            )
            self._check_status(response)
            data = self._json(response)

        return ChatMessage(role="assistant", content=extract_candidate_text(data))
