"""HTTP API tests through FastAPI's TestClient with a scripted provider."""

import json

from conftest import (
    ScriptedProvider,
    call,
    echo_tool,
    text,
)
from fastapi.testclient import TestClient

from openclaw.agent.agent_loop import AgentLoopConfig
from openclaw.agent.runtime import AgentRuntime
from openclaw.agent.skill_router import SkillRouter
from openclaw.api.app import create_app
from openclaw.core.schema import Skill
from openclaw.tools import ToolRegistry


def _runtime(provider: ScriptedProvider) -> AgentRuntime:
    return AgentRuntime(
        provider=provider,
        registry=ToolRegistry([echo_tool()]),
        skills=[Skill(name="echo", folder="echo", description="Echo things", content="Use echo.")],
        base_prompt="You are a test assistant.",
        router=SkillRouter(provider, "router"),
        config=AgentLoopConfig(max_iterations=4, model="chat-model"),
    )


def _events(body: str):
    frames = [frame for frame in body.split("\n\n") if frame]
    assert frames[-1] == "data: [DONE]"
    return [json.loads(frame[len("data: ") :]) for frame in frames[:-1]]


def test_health() -> None:
    """Health lists the loaded skills and tools."""
    with TestClient(create_app(_runtime(ScriptedProvider([text("hi")])))) as client:
        resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["skills"] == ["echo"]
    assert body["tools"] == ["echo"]


def test_chat_streams_events() -> None:
    """A chat request streams loop events as SSE and ends with the sentinel."""
    provider = ScriptedProvider(
        [[call(0, "c1", "echo", '{"value": "pong"}')], text("Echoed ", "pong")],
        reply='["echo"]',
    )

    with TestClient(create_app(_runtime(provider))) as client:
        resp = client.post("/api/chat", json={"messages": [{"role": "user", "content": "ping"}]})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    events = _events(resp.text)
    assert [e["type"] for e in events] == [
        "iteration",
        "tool_call",
        "tool_result",
        "iteration",
        "content",
        "content",
    ]
    assert events[2]["output"] == "pong"

    first_turn = provider.stream_calls[0]["messages"]
    assert first_turn[0].content == "You are a test assistant."
    assert first_turn[1].content.startswith("# Available Tools")
    assert first_turn[-1].content == "ping"
    assert provider.stream_calls[0]["model"] == "chat-model"


def test_chat_model_override() -> None:
    """The request may name a different model."""
    provider = ScriptedProvider([text("ok")])

    with TestClient(create_app(_runtime(provider))) as client:
        client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "hi"}], "model": "other-model"},
        )

    assert provider.stream_calls[0]["model"] == "other-model"


def test_chat_provider_error_is_streamed() -> None:
    """Provider failures arrive as an error event before the sentinel."""
    provider = ScriptedProvider([RuntimeError("quota exceeded")])

    with TestClient(create_app(_runtime(provider))) as client:
        resp = client.post("/api/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    events = _events(resp.text)
    assert events[-1] == {"type": "error", "error": "quota exceeded"}


def test_chat_requires_messages() -> None:
    """An empty message list is rejected."""
    with TestClient(create_app(_runtime(ScriptedProvider([text("hi")])))) as client:
        resp = client.post("/api/chat", json={"messages": []})

    assert resp.status_code == 400


def test_telegram_status_and_bad_start() -> None:
    """The poller starts stopped and rejects an empty token."""
    with TestClient(create_app(_runtime(ScriptedProvider([text("hi")])))) as client:
        status = client.get("/api/integrations/telegram").json()
        resp = client.post("/api/integrations/telegram", json={"token": ""})
        stopped = client.delete("/api/integrations/telegram").json()

    assert status == {"state": "stopped", "running": False}
    assert resp.status_code == 400
    assert stopped["running"] is False


def test_shutdown_releases_tool_resources() -> None:
    """Stopping the app closes the runtime's tools."""
    runtime = _runtime(ScriptedProvider([text("hi")]))
    closed = []
    runtime.registry.add_cleanup(lambda: closed.append(True))

    with TestClient(create_app(runtime)) as client:
        client.get("/api/health")
        assert closed == []

    assert closed == [True]
