"""HTTP entry point for the chat relay.

Routes:
- GET  /api/health  which provider is configured (no network call)
- POST /api/chat    relay {messages: [...]} to the configured provider
- POST /api/intent  echo a structured intent back to the caller
- GET  /*           the static single-page UI
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from .adapter.errors import UpstreamHTTPError
from .config.parser import Settings, load_settings
from .models import ChatRequest, ErrorBody, IntentReceipt
from .router import ChatRouter

log = logging.getLogger("intentive.server")

CHAT_FAILED = "Failed to process chat request."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorBody(error=message).model_dump())


async def _read_json(request: Request, limit: int) -> Tuple[Any, Optional[JSONResponse]]:
    """Parse the request body as JSON. An empty body counts as {}.

    A declared Content-Length over the limit is rejected before reading, and
    the stream is abandoned as soon as it passes the limit.
    """
    too_large = _error(413, "Request body too large.")
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        return None, too_large

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            return None, too_large
    if not body.strip():
        return {}, None
    try:
        return json.loads(bytes(body)), None
    except ValueError:
        return None, _error(400, "Request body must be valid JSON.")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the FastAPI app around a ChatRouter.

    settings defaults to load_settings(); transport is forwarded to the
    provider adapter (tests pass an httpx.MockTransport).
    """
    if settings is None:
        settings = load_settings()
    router = ChatRouter(settings, transport=transport)
    static_dir = settings.static_dir.resolve()

    app = FastAPI(title="Intentive")
    app.state.settings = settings
    app.state.router = router
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        """Return server info and which provider is configured."""
        return router.health().model_dump(mode="json")

    @app.post("/api/chat")
    async def chat(request: Request):
        """Relay a conversation to the configured provider."""
        payload, error = await _read_json(request, settings.max_body_bytes)
        if error is not None:
            return error

        messages = payload.get("messages") if isinstance(payload, dict) else None
        if not isinstance(messages, list):
            return _error(400, "Body must include messages: []")
        if not messages:
            return _error(400, "Body must include at least one message.")
        try:
            chat_request = ChatRequest.model_validate({"messages": messages})
        except ValidationError as exc:
            log.info("chat request rejected: %d invalid field(s)", exc.error_count())
            return _error(
                400,
                "Each message needs a role (system, user or assistant) and string content.",
            )

        try:
            reply = await router.route(chat_request.messages)
        except UpstreamHTTPError as exc:
            log.error(
                "Chat error: %s returned HTTP %s: %s",
                exc.provider.value,
                exc.status_code,
                exc.detail,
            )
            return _error(500, CHAT_FAILED)
        except Exception:
            log.exception("Chat error")
            return _error(500, CHAT_FAILED)
        return reply.model_dump(mode="json")

    @app.post("/api/intent")
    async def intent(request: Request):
        """Echo back the intent object. Nothing is dispatched or stored."""
        payload, error = await _read_json(request, settings.max_body_bytes)
        if error is not None:
            return error

        intent_obj = payload.get("intent") if isinstance(payload, dict) else None
        if not intent_obj:
            return _error(400, "No intent provided.")
        log.info("intent received type=%s", type(intent_obj).__name__)
        return IntentReceipt(intent=intent_obj).model_dump(mode="json")

    @app.get("/{full_path:path}", include_in_schema=False)
    def static_ui(full_path: str):
        """Serve a static asset if it exists, otherwise the SPA index.html."""
        if full_path:
            candidate = (static_dir / full_path).resolve()
            if candidate.is_relative_to(static_dir) and candidate.is_file():
                return FileResponse(candidate)
        index = static_dir / "index.html"
        if index.is_file():
            return FileResponse(index)
        return _error(404, "Not found.")

    return app
