"""Tests for request orchestration: route, assemble, run."""

from datetime import (
    datetime,
    timezone,
)

from conftest import (
    ScriptedProvider,
    echo_tool,
    text,
)

from openclaw.agent.agent_loop import AgentLoopConfig
from openclaw.agent.runtime import AgentRuntime
from openclaw.agent.skill_router import SkillRouter
from openclaw.core.events import CollectingSink
from openclaw.core.schema import (
    Message,
    Skill,
)
from openclaw.tools import ToolRegistry

SKILLS = [
    Skill(name="google", folder="google", description="Google", content="GOOGLE DOCS"),
    Skill(name="notion", folder="notion", description="Notion", content="NOTION DOCS"),
]


def _runtime(provider: ScriptedProvider) -> AgentRuntime:
    return AgentRuntime(
        provider=provider,
        registry=ToolRegistry([echo_tool()]),
        skills=list(SKILLS),
        base_prompt="BASE",
        router=SkillRouter(provider, "router"),
        config=AgentLoopConfig(max_iterations=2, model="chat"),
    )


def test_respond_injects_only_routed_skills() -> None:
    """Only the router's selection reaches the model context."""
    provider = ScriptedProvider([text("done")], reply='["notion"]')
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    state = _runtime(provider).respond([Message.user("notes?")], CollectingSink(), now=now)

    sent = provider.stream_calls[0]["messages"]
    assert sent[0].content == "BASE"
    assert "NOTION DOCS" in sent[1].content
    assert "GOOGLE DOCS" not in sent[1].content
    assert "2025-01-01T00:00:00+00:00" in sent[2].content
    assert sent[3] == Message.user("notes?")
    assert state.messages[-1] == Message.assistant("done")


def test_respond_without_routed_skills() -> None:
    """With no selection the context is base prompt, time and history."""
    provider = ScriptedProvider([text("hi")], reply="[]")

    _runtime(provider).respond([Message.user("hello")], CollectingSink())

    sent = provider.stream_calls[0]["messages"]
    assert [m.role for m in sent] == ["system", "system", "user"]
    assert "Available Tools" not in sent[1].content


def test_skill_names() -> None:
    """The catalog names are exposed for health checks."""
    assert _runtime(ScriptedProvider([text("x")])).skill_names() == ["google", "notion"]
