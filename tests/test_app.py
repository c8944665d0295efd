import dataclasses
import logging

from fastapi.testclient import TestClient

from Intentive.app import CHAT_FAILED, create_app
from Intentive.router import FALLBACK_CONTENT

MESSAGES = [
    {"role": "system", "content": "You help users express intent-centric goals."},
    {"role": "user", "content": "Stake 10 ATOM"},
]


def _client(settings, transport=None) -> TestClient:
    return TestClient(create_app(settings, transport=transport))


def test_health_with_only_openai_key(make_settings):
    client = _client(make_settings(openai="o-key"))

    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["provider"] == "openai"
    assert data["python"]


def test_chat_rejects_non_array_without_upstream_call(make_settings, stub_upstream):
    transport, calls = stub_upstream(json_body={"choices": []})
    client = _client(make_settings(google="g-key"), transport)

    response = client.post("/api/chat", json={"messages": "not-an-array"})

    assert response.status_code == 400
    assert response.json() == {"error": "Body must include messages: []"}
    assert calls == []


def test_chat_rejects_missing_messages(make_settings):
    response = _client(make_settings()).post("/api/chat", json={})
    assert response.status_code == 400


def test_chat_rejects_empty_and_malformed_messages(make_settings, stub_upstream):
    transport, calls = stub_upstream()
    client = _client(make_settings(openai="o-key"), transport)

    assert client.post("/api/chat", json={"messages": []}).status_code == 400
    bad = client.post("/api/chat", json={"messages": [{"role": "tool", "content": "x"}]})
    assert bad.status_code == 400
    assert "error" in bad.json()
    assert calls == []


def test_chat_rejects_invalid_json(make_settings):
    response = _client(make_settings()).post(
        "/api/chat",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be valid JSON."}


def test_chat_rejects_oversized_body(make_settings):
    settings = dataclasses.replace(make_settings(), max_body_bytes=32)
    response = _client(settings).post("/api/chat", json={"messages": MESSAGES})
    assert response.status_code == 413


def test_chat_rejects_oversized_body_without_content_length(make_settings, stub_upstream):
    transport, calls = stub_upstream()
    settings = dataclasses.replace(make_settings(google="g-key"), max_body_bytes=32)
    chunks = iter([b"{\"messages\": [", b" " * 64, b"]}"])

    response = _client(settings, transport).post("/api/chat", content=chunks)

    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large."}
    assert calls == []


def test_chat_fallback_without_credentials(make_settings):
    response = _client(make_settings()).post("/api/chat", json={"messages": MESSAGES})

    assert response.status_code == 200
    assert response.json() == {
        "message": {"role": "assistant", "content": FALLBACK_CONTENT},
        "provider": "none",
    }


def test_chat_accepts_null_and_numeric_content(make_settings):
    messages = [{"role": "user", "content": None}, {"role": "user", "content": 42}]

    response = _client(make_settings()).post("/api/chat", json={"messages": messages})

    assert response.status_code == 200
    assert response.json()["provider"] == "none"

def test_chat_google_reply(make_settings, stub_upstream):
    transport, calls = stub_upstream(
        json_body={"candidates": [{"content": {"parts": [{"text": "foo"}, {"text": "bar"}]}}]}
    )
    client = _client(make_settings(google="g-key", openai="o-key"), transport)

    response = client.post("/api/chat", json={"messages": MESSAGES})

    assert response.status_code == 200
    assert response.json() == {
        "message": {"role": "assistant", "content": "foobar"},
        "provider": "google",
    }
    assert len(calls) == 1


def test_chat_openai_reply(make_settings, stub_upstream):
    transport, _ = stub_upstream(
        json_body={"choices": [{"message": {"role": "assistant", "content": "Staking 10 ATOM."}}]}
    )
    client = _client(make_settings(openai="o-key"), transport)

    response = client.post("/api/chat", json={"messages": MESSAGES})

    assert response.status_code == 200
    assert response.json()["provider"] == "openai"
    assert response.json()["message"]["content"] == "Staking 10 ATOM."


def test_chat_upstream_500_is_server_error_not_fallback(make_settings, stub_upstream):
    transport, calls = stub_upstream(status_code=500, json_body={"error": "internal"})
    client = _client(make_settings(google="g-key"), transport)

    response = client.post("/api/chat", json={"messages": MESSAGES})

    assert response.status_code == 500
    assert response.json() == {"error": CHAT_FAILED}
    assert FALLBACK_CONTENT not in response.text
    assert len(calls) == 1


def test_chat_malformed_upstream_body_is_server_error(make_settings, stub_upstream):
    transport, _ = stub_upstream(text="not json at all")
    client = _client(make_settings(openai="o-key"), transport)

    response = client.post("/api/chat", json={"messages": MESSAGES})

    assert response.status_code == 500
    assert response.json() == {"error": CHAT_FAILED}


def test_chat_failure_traceback_is_logged_once(make_settings, stub_upstream, caplog):
    transport, _ = stub_upstream(text="not json at all")
    client = _client(make_settings(openai="o-key"), transport)

    with caplog.at_level(logging.INFO, logger="intentive"):
        response = client.post("/api/chat", json={"messages": MESSAGES})

    assert response.status_code == 500
    with_traceback = [r for r in caplog.records if r.exc_info]
    assert len(with_traceback) == 1
    assert with_traceback[0].name == "intentive.server"


def test_intent_is_echoed_verbatim(make_settings):
    intent = {
        "action": "swap",
        "fromToken": "USDC",
        "toToken": "ETH",
        "amount": 100.5,
        "preferences": "slippage 0.5%",
    }
    response = _client(make_settings()).post("/api/intent", json={"intent": intent})

    assert response.status_code == 200
    assert response.json() == {"status": "received", "intent": intent}


def test_intent_missing(make_settings):
    client = _client(make_settings())
    response = client.post("/api/intent", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "No intent provided."}
    assert client.post("/api/intent", json={"intent": None}).status_code == 400


def test_unknown_paths_serve_the_ui(make_settings):
    client = _client(make_settings())

    root = client.get("/")
    deep = client.get("/some/client/route")

    assert root.status_code == 200
    assert "Intentive" in root.text
    assert deep.status_code == 200
    assert deep.text == root.text


def test_static_assets_and_traversal(make_settings, tmp_path):
    (tmp_path / "index.html").write_text("<html>index</html>", encoding="utf-8")
    (tmp_path / "app.js").write_text("console.log('app')", encoding="utf-8")
    (tmp_path.parent / "secret.txt").write_text("secret", encoding="utf-8")
    settings = dataclasses.replace(make_settings(), static_dir=tmp_path)
    client = _client(settings)

    assert client.get("/app.js").text == "console.log('app')"
    assert client.get("/missing.png").text == "<html>index</html>"
    assert "secret" not in client.get("/..%2Fsecret.txt").text


def test_missing_ui_is_404(make_settings, tmp_path):
    settings = dataclasses.replace(make_settings(), static_dir=tmp_path / "nowhere")
    response = _client(settings).get("/")
    assert response.status_code == 404
