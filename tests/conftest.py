"""Shared fixtures: a scripted model provider and a small tool registry."""

from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Union,
)

import pytest

from openclaw.agent.provider import (
    ModelProvider,
    StreamDelta,
    ToolCallDelta,
)
from openclaw.core.schema import (
    Message,
    ToolDefinition,
    ToolResult,
)
from openclaw.tools import ToolRegistry

Turn = Union[List[StreamDelta], Exception]


class ScriptedProvider(ModelProvider):
    """Replays prepared streamed turns; the last turn repeats once the script runs out."""

    def __init__(self, turns: Sequence[Turn] = (), reply: Union[str, Exception] = "[]") -> None:
        self.turns = list(turns)
        self.reply = reply
        self.stream_calls: List[Dict[str, Any]] = []
        self.complete_calls: List[List[Message]] = []

    def stream(
        self,
        messages: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]],
        model: str,
    ) -> Iterator[StreamDelta]:
        self.stream_calls.append({"messages": list(messages), "tools": tools, "model": model})
        index = min(len(self.stream_calls) - 1, len(self.turns) - 1)
        turn = self.turns[index]
        if isinstance(turn, Exception):
            raise turn
        yield from turn

    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 100,
    ) -> str:
        self.complete_calls.append(list(messages))
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def text(*parts: str) -> List[StreamDelta]:
    """A turn that only streams text."""
    return [StreamDelta(content=part) for part in parts]


def call(index: int, call_id: str, name: str, arguments: str) -> StreamDelta:
    """A delta carrying one complete tool call."""
    return StreamDelta(
        tool_calls=[ToolCallDelta(index=index, id=call_id, name=name, arguments=arguments)]
    )


def echo_tool(name: str = "echo") -> ToolDefinition:
    """Tool that returns its ``value`` argument."""
    return ToolDefinition(
        name=name,
        description="Echo the value back",
        parameters={"type": "object", "properties": {"value": {"type": "string"}}},
        executor=lambda args: ToolResult(success=True, output=str(args.get("value", ""))),
    )


@pytest.fixture
def scripted():
    """Factory for :class:`ScriptedProvider`."""
    return ScriptedProvider


@pytest.fixture
def registry() -> ToolRegistry:
    """Registry holding the ``echo`` tool."""
    return ToolRegistry([echo_tool()])
