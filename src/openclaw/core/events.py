"""
Events emitted by the agent loop and the sinks that receive them.

The loop reports everything through a single ``emit(event)`` call.  Events are pydantic models; the
transport-facing dict is produced by :meth:`AgentEvent.to_wire`, which uses the camelCase field
names clients expect and omits absent optional fields.
"""

from __future__ import annotations

import json
import queue
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Literal,
    Optional,
    Protocol,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

DONE_SENTINEL = "[DONE]"
# Streamed when a model turn ends with neither text nor tool calls.
NO_RESPONSE = "(No response)"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Return the JSON-ready dict sent to transport consumers."""
        return self.model_dump(by_alias=True, exclude_none=True)


class IterationEvent(_WireModel):
    """A new model invocation is starting."""

    type: Literal["iteration"] = "iteration"
    iteration: int
    max_iterations: int = Field(..., alias="maxIterations")


class ContentEvent(_WireModel):
    """A fragment of assistant text."""

    type: Literal["content"] = "content"
    content: str


class ToolCallEvent(_WireModel):
    """The model asked for a tool; execution is about to start."""

    type: Literal["tool_call"] = "tool_call"
    name: str
    tool_call_id: str = Field(..., alias="toolCallId")
    arguments: Optional[Dict[str, Any]] = None
    command: Optional[str] = None
    icon: Optional[str] = None
    label: Optional[str] = None


class ToolResultEvent(_WireModel):
    """A tool finished."""

    type: Literal["tool_result"] = "tool_result"
    tool_call_id: str = Field(..., alias="toolCallId")
    name: str
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    label: Optional[str] = None


class ErrorEvent(_WireModel):
    """The request was aborted."""

    type: Literal["error"] = "error"
    error: str


AgentEvent = Union[IterationEvent, ContentEvent, ToolCallEvent, ToolResultEvent, ErrorEvent]


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------
class EventSink(Protocol):
    """Anything that accepts loop events.  ``emit`` must not block the loop."""

    def emit(self, event: AgentEvent) -> None:
        """Receive one event."""


class CallbackSink:
    """Forward every event to a plain callable."""

    def __init__(self, callback: Callable[[AgentEvent], None]) -> None:
        self._callback = callback

    def emit(self, event: AgentEvent) -> None:
        self._callback(event)


class CollectingSink:
    """Keep every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: List[AgentEvent] = []

    def emit(self, event: AgentEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> List[AgentEvent]:
        """Return the collected events whose ``type`` is *event_type*."""
        return [event for event in self.events if event.type == event_type]

    @property
    def text(self) -> str:
        """Concatenated content of every ``content`` event."""
        return collect_reply(self.events)


_CLOSED = object()


class QueueSink:
    """
    Hand events from the loop's thread to a transport reading on another thread.

    The queue is unbounded so ``emit`` never waits on the consumer; a disconnected consumer simply
    stops draining and the remaining events are dropped with the sink.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[Any]" = queue.Queue()

    def emit(self, event: AgentEvent) -> None:
        self._queue.put(event)

    def close(self) -> None:
        """Mark the end of the stream."""
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[AgentEvent]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item

    def iter_sse(self) -> Iterator[str]:
        """Yield Server-Sent-Event frames followed by the completion sentinel."""
        for event in self:
            yield format_sse(event)
        yield f"data: {DONE_SENTINEL}\n\n"


def format_sse(event: AgentEvent) -> str:
    """Render one event as an SSE ``data:`` frame."""
    return f"data: {json.dumps(event.to_wire(), ensure_ascii=False)}\n\n"


def collect_reply(events: List[AgentEvent]) -> str:
    """Join the text of all ``content`` events."""
    return "".join(event.content for event in events if isinstance(event, ContentEvent))
