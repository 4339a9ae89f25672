"""
Main orchestration loop for OpenClaw.

One call to :meth:`AgentLoop.run` answers one request: the model is streamed, any tool calls it
asks for are executed in order, their results are appended to the history, and the model is called
again until it answers without tools or the iteration cap is hit.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    List,
    Sequence,
)

from openclaw.agent.provider import (
    ModelProvider,
    StreamDelta,
)
from openclaw.core.events import (
    NO_RESPONSE,
    ContentEvent,
    ErrorEvent,
    EventSink,
    IterationEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from openclaw.core.schema import (
    LoopState,
    Message,
    ToolCallRequest,
)
from openclaw.tools import ToolRegistry
from openclaw.tools.metadata import (
    extract_result_url,
    should_suppress_output,
    tool_icon,
    tool_label,
)

__all__ = [
    "AgentLoop",
    "AgentLoopConfig",
    "DEFAULT_CONFIG",
    "MaxIterationsExceeded",
]

logger = logging.getLogger(__name__)



@dataclass(frozen=True)
class AgentLoopConfig:
    """Limits of one loop run."""

    max_iterations: int = 20
    model: str = "gpt-4o-mini"


DEFAULT_CONFIG = AgentLoopConfig()


class MaxIterationsExceeded(RuntimeError):
    """The model kept requesting tools past the configured iteration bound."""

    def __init__(self, max_iterations: int) -> None:
        super().__init__(
            f"Reached maximum iterations ({max_iterations}). "
            "The agent may not have completed its task."
        )
        self.max_iterations = max_iterations


def parse_arguments(raw: str) -> Dict[str, Any]:
    """Decode streamed argument text; anything but a JSON object becomes ``{}``."""
    try:
        args = json.loads(raw) if raw else {}
    except json.JSONDecodeError:
        logger.warning("Could not parse tool arguments: %r", raw)
        return {}
    return args if isinstance(args, dict) else {}


def merge_tool_call_deltas(state: LoopState, delta: StreamDelta) -> None:
    """
    Fold the tool-call fragments of *delta* into ``state.fragments``.

    Fragments are keyed by their index.  ``id`` and ``name`` are kept once seen; argument text is
    concatenated in arrival order.
    """
    for part in delta.tool_calls:
        call = state.fragments.setdefault(part.index, ToolCallRequest())
        if part.id:
            call.id = part.id
        if part.name:
            call.name = part.name
        if part.arguments:
            call.arguments += part.arguments


# ---------------------------------------------------------------------------
# Agent Loop
# ---------------------------------------------------------------------------
class AgentLoop:
    """Drive a model through repeated tool use for a single request."""

    def __init__(
        self,
        provider: ModelProvider,
        registry: ToolRegistry,
        config: AgentLoopConfig = DEFAULT_CONFIG,
    ) -> None:
        self.provider = provider
        self.registry = registry
        self.config = config

    def run(self, messages: Sequence[Message], sink: EventSink) -> LoopState:
        """
        Run the loop over a copy of *messages*, reporting progress to *sink*.

        Never raises: a provider failure or the iteration cap ends the run with exactly one
        ``error`` event, also recorded on the returned state.
        """
        state = LoopState(messages=list(messages))
        try:
            self._run(state, sink)
        except MaxIterationsExceeded as exc:
            logger.warning("Agent loop reached max iterations (%d)", exc.max_iterations)
            state.error = str(exc)
            sink.emit(ErrorEvent(error=state.error))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Agent loop aborted at iteration %d", state.iteration)
            state.error = str(exc) or exc.__class__.__name__
            sink.emit(ErrorEvent(error=state.error))
        return state

    def _run(self, state: LoopState, sink: EventSink) -> None:
        tools = self.registry.list_schemas() or None

        while state.iteration < self.config.max_iterations:
            state.iteration += 1
            state.reset_fragments()
            sink.emit(
                IterationEvent(
                    iteration=state.iteration, max_iterations=self.config.max_iterations
                )
            )
            logger.info(
                "Agent loop iteration %d/%d", state.iteration, self.config.max_iterations
            )

            content = self._stream_turn(state, tools, sink)
            calls = state.pending_calls()

            if not calls:
                if content:
                    state.messages.append(Message.assistant(content))
                else:
                    sink.emit(ContentEvent(content=NO_RESPONSE))
                return

            logger.info(
                "Model requested %d tool call(s): %s",
                len(calls),
                ", ".join(call.name for call in calls),
            )
            capped = state.iteration >= self.config.max_iterations
            # Text streamed alongside tool calls in the final allowed turn is dropped from history.
            state.messages.append(
                Message.assistant(None if capped else content or None, tool_calls=calls)
            )
            self._execute_calls(state, calls, sink)

        raise MaxIterationsExceeded(self.config.max_iterations)

    def _stream_turn(
        self, state: LoopState, tools: List[Dict[str, Any]] | None, sink: EventSink
    ) -> str:
        """Consume one streamed model response and return its text."""
        parts: List[str] = []
        for delta in self.provider.stream(state.messages, tools, self.config.model):
            if delta.content:
                parts.append(delta.content)
                sink.emit(ContentEvent(content=delta.content))
            if delta.tool_calls:
                merge_tool_call_deltas(state, delta)
        return "".join(parts)

    def _execute_calls(
        self, state: LoopState, calls: List[ToolCallRequest], sink: EventSink
    ) -> None:
        """Run *calls* one after another, appending one tool message per call."""
        for call in calls:
            args = parse_arguments(call.arguments)
            sink.emit(
                ToolCallEvent(
                    name=call.name,
                    tool_call_id=call.id,
                    arguments=args,
                    command=json.dumps(args, indent=2),
                    icon=tool_icon(call.name),
                    label=tool_label(call.name, complete=False),
                )
            )
            logger.debug("Executing tool %s with %s", call.name, args)

            result = self.registry.execute(call.name, args)
            if not result.success:
                logger.warning("Tool %s failed: %s", call.name, result.error)

            sink.emit(
                ToolResultEvent(
                    tool_call_id=call.id,
                    name=call.name,
                    success=result.success,
                    output=None if should_suppress_output(call.name) else result.output,
                    error=result.error,
                    url=extract_result_url(result.output),
                    icon=tool_icon(call.name),
                    label=tool_label(call.name, complete=True),
                )
            )
            state.messages.append(
                Message.tool(call.id, self.registry.format_result(result))
            )
