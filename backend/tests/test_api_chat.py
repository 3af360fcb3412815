"""Tests for the chat REST endpoints."""

from app.core.config import settings
from app.core.errors import ExternalServiceError


def test_post_chat_returns_both_messages(client, llm):
    response = client.post("/api/chat", json={"message": "Hi", "sessionId": "s1"})
    assert response.status_code == 200
    data = response.json()

    user, assistant = data["userMessage"], data["assistantMessage"]
    assert user["role"] == "user"
    assert user["content"] == "Hi"
    assert user["sessionId"] == "s1"
    assert user["messageType"] == "text"
    assert user["imageUrl"] is None
    assert assistant["role"] == "assistant"
    assert assistant["content"] == "Hello from Gemini"
    assert {"id", "timestamp"} <= assistant.keys()

    assert len(llm.histories) == 1


def test_get_history_in_order(client):
    client.post("/api/chat", json={"message": "first", "sessionId": "s1"})
    client.post("/api/chat", json={"message": "second", "sessionId": "s1"})
    client.post("/api/chat", json={"message": "elsewhere", "sessionId": "s2"})

    response = client.get("/api/chat/s1")
    assert response.status_code == 200
    data = response.json()
    assert [(m["role"], m["content"]) for m in data] == [
        ("user", "first"),
        ("assistant", "Hello from Gemini"),
        ("user", "second"),
        ("assistant", "Hello from Gemini"),
    ]
    assert all(m["sessionId"] == "s1" for m in data)
    timestamps = [m["timestamp"] for m in data]
    assert timestamps == sorted(timestamps)


def test_get_history_unknown_session_is_empty(client):
    response = client.get("/api/chat/unknown")
    assert response.status_code == 200
    assert response.json() == []


def test_delete_clears_session(client):
    client.post("/api/chat", json={"message": "Hi", "sessionId": "s1"})
    client.post("/api/chat", json={"message": "Hi", "sessionId": "s2"})

    response = client.delete("/api/chat/s1")
    assert response.status_code == 200
    assert response.json() == {"message": "Chat history cleared"}

    assert client.get("/api/chat/s1").json() == []
    assert len(client.get("/api/chat/s2").json()) == 2


def test_delete_twice_on_empty_session(client):
    assert client.delete("/api/chat/empty").status_code == 200
    assert client.delete("/api/chat/empty").status_code == 200


def test_post_chat_validation(client, store, llm):
    for body in [
        {"message": "", "sessionId": "s1"},
        {"message": "x" * (settings.max_message_length + 1), "sessionId": "s1"},
        {"message": "Hi", "sessionId": ""},
        {"message": "Hi"},
        {"sessionId": "s1"},
    ]:
        response = client.post("/api/chat", json=body)
        assert response.status_code == 400, body
        assert "message" in response.json()

    assert store.list_by_session("s1") == []
    assert llm.histories == []


def test_post_chat_model_failure(client, llm):
    llm.error = ExternalServiceError("Failed to generate response from Gemini API")

    response = client.post("/api/chat", json={"message": "Hi", "sessionId": "s1"})
    assert response.status_code >= 500
    assert response.json() == {"message": "Failed to generate response from Gemini API"}

    history = client.get("/api/chat/s1").json()
    assert [m["role"] for m in history] == ["user"]


def test_post_chat_accepts_whitespace_message(client, llm):
    response = client.post("/api/chat", json={"message": "   ", "sessionId": "s1"})
    assert response.status_code == 200
    assert response.json()["userMessage"]["content"] == "   "
    assert llm.histories[0][0].text == "   "


def test_unknown_route_uses_message_body(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_wrong_method_uses_message_body(client):
    response = client.put("/api/chat", json={})
    assert response.status_code == 405
    assert response.json() == {"message": "Method Not Allowed"}
