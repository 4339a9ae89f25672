"""
Model provider interface for OpenClaw.

This module is the only place that *directly* calls an LLM.  Everything else (agent loop, router,
tools) stays model-agnostic and talks to a :class:`ModelProvider`.

We support two back-ends out of the box:

1. **OpenAI** chat completions (streaming, native function calling).
2. **Anthropic** messages API, translated to the same chat-completions message shape.

Additional providers can be added by subclassing :class:`ModelProvider` and registering via
:func:`register_provider`.
"""

import json
import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Type,
)

from pydantic import (
    BaseModel,
    Field,
)

from openclaw.config import settings
from openclaw.core.schema import Message

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when a provider is misconfigured or cannot be constructed."""


# ---------------------------------------------------------------------------
# Streaming deltas
# ---------------------------------------------------------------------------
class ToolCallDelta(BaseModel):
    """A fragment of one tool call, identified by its position in the assistant turn."""

    index: int
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Optional[str] = None


class StreamDelta(BaseModel):
    """One increment of a streamed model response."""

    content: Optional[str] = None
    tool_calls: List[ToolCallDelta] = Field(default_factory=list)
    finish_reason: Optional[str] = None


# ---------------------------------------------------------------------------
# Registry helpers
# ---------------------------------------------------------------------------
_PROVIDER_REGISTRY: dict[str, Type["ModelProvider"]] = {}


def register_provider(name: str) -> Callable:
    """Decorator to register a provider class under *name*."""

    def wrapper(cls: Type["ModelProvider"]) -> Type["ModelProvider"]:
        _PROVIDER_REGISTRY[name] = cls
        return cls

    return wrapper


def load_provider(name: str | None = None) -> "ModelProvider":
    """
    Factory that returns an instantiated provider.

    Fallback order:
    1. *name* arg
    2. ``settings.PROVIDER`` env option
    """

    target = (name or settings.PROVIDER).lower()
    cls = _PROVIDER_REGISTRY.get(target)
    if cls is None:
        raise ProviderError(f"Provider '{target}' is not registered.")
    return cls()


def available_providers() -> List[str]:
    """Names accepted by :func:`load_provider`."""
    return sorted(_PROVIDER_REGISTRY)


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------
class ModelProvider(ABC):
    """Abstract chat model with streaming tool calls."""

    @abstractmethod
    def stream(
        self,
        messages: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]],
        model: str,
    ) -> Iterator[StreamDelta]:
        """
        Stream one assistant turn.

        *tools* is the function-tool catalog, or *None* to call the model without tool use.
        """

    @abstractmethod
    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 100,
    ) -> str:
        """Return the text of a single non-streaming completion without tools."""


# ---------------------------------------------------------------------------
# Concrete providers
# ---------------------------------------------------------------------------
@register_provider("openai")
class OpenAIProvider(ModelProvider):
    """OpenAI chat-completions provider."""

    def __init__(self, api_key: str | None = None, client: Any = None) -> None:
        if client is None:
            import openai  # pylint: disable=import-outside-toplevel

            api_key = api_key or settings.OPENAI_API_KEY
            if not api_key:
                raise ProviderError("OPENAI_API_KEY is not set. Check your .env file.")
            client = openai.OpenAI(api_key=api_key)
        self._client = client

    def stream(
        self,
        messages: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]],
        model: str,
    ) -> Iterator[StreamDelta]:
        request: Dict[str, Any] = {
            "model": model,
            "messages": [message.to_provider() for message in messages],
            "stream": True,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        for chunk in self._client.chat.completions.create(**request):
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            delta = choice.delta
            yield StreamDelta(
                content=delta.content if delta else None,
                tool_calls=[
                    ToolCallDelta(
                        index=call.index,
                        id=call.id,
                        name=call.function.name if call.function else None,
                        arguments=call.function.arguments if call.function else None,
                    )
                    for call in ((delta.tool_calls or []) if delta else [])
                ],
                finish_reason=choice.finish_reason,
            )

    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 100,
    ) -> str:
        resp = self._client.chat.completions.create(
            model=model,
            messages=[message.to_provider() for message in messages],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = resp.choices[0].message.content if resp.choices else None
        logger.debug("OpenAI completion: %s", content)
        return content or ""


def _parse_tool_input(arguments: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(arguments or "{}")
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def to_anthropic_messages(messages: Sequence[Message]) -> tuple[str, List[Dict[str, Any]]]:
    """
    Split chat-completions style *messages* into Anthropic's ``system`` text and message list.

    Assistant tool calls become ``tool_use`` blocks and consecutive tool messages are merged into a
    single user turn of ``tool_result`` blocks, as the messages API requires.
    """
    system_parts: List[str] = []
    converted: List[Dict[str, Any]] = []

    for message in messages:
        if message.role == "system":
            if message.content:
                system_parts.append(message.content)
        elif message.role == "user":
            converted.append({"role": "user", "content": message.content or ""})
        elif message.role == "assistant":
            blocks: List[Dict[str, Any]] = []
            if message.content:
                blocks.append({"type": "text", "text": message.content})
            for call in message.tool_calls or []:
                blocks.append(
                    {
                        "type": "tool_use",
                        "id": call.id,
                        "name": call.name,
                        "input": _parse_tool_input(call.arguments),
                    }
                )
            converted.append({"role": "assistant", "content": blocks})
        else:
            block = {
                "type": "tool_result",
                "tool_use_id": message.tool_call_id,
                "content": message.content or "",
            }
            previous = converted[-1] if converted else None
            if (
                previous is not None
                and previous["role"] == "user"
                and isinstance(previous["content"], list)
            ):
                previous["content"].append(block)
            else:
                converted.append({"role": "user", "content": [block]})

    return "\n\n".join(system_parts), converted


def to_anthropic_tools(tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert function-tool schemas to Anthropic tool definitions."""
    return [
        {
            "name": tool["function"]["name"],
            "description": tool["function"].get("description", ""),
            "input_schema": tool["function"].get("parameters", {"type": "object"}),
        }
        for tool in tools
    ]


@register_provider("anthropic")
class AnthropicProvider(ModelProvider):
    """Anthropic Claude provider."""

    MAX_TOKENS = 8192

    def __init__(self, api_key: str | None = None, client: Any = None) -> None:
        if client is None:
            import anthropic  # pylint: disable=import-outside-toplevel

            api_key = api_key or settings.ANTHROPIC_API_KEY
            if not api_key:
                raise ProviderError("ANTHROPIC_API_KEY is not set. Check your .env file.")
            client = anthropic.Anthropic(api_key=api_key)
        self._client = client

    def stream(
        self,
        messages: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]],
        model: str,
    ) -> Iterator[StreamDelta]:
        system, converted = to_anthropic_messages(messages)
        request: Dict[str, Any] = {
            "model": model,
            "max_tokens": self.MAX_TOKENS,
            "messages": converted,
            "stream": True,
        }
        if system:
            request["system"] = system
        if tools:
            request["tools"] = to_anthropic_tools(tools)

        for event in self._client.messages.create(**request):
            if event.type == "content_block_start" and event.content_block.type == "tool_use":
                block = event.content_block
                yield StreamDelta(
                    tool_calls=[ToolCallDelta(index=event.index, id=block.id, name=block.name)]
                )
            elif event.type == "content_block_delta":
                if event.delta.type == "text_delta":
                    yield StreamDelta(content=event.delta.text)
                elif event.delta.type == "input_json_delta":
                    yield StreamDelta(
                        tool_calls=[
                            ToolCallDelta(index=event.index, arguments=event.delta.partial_json)
                        ]
                    )
            elif event.type == "message_delta" and event.delta.stop_reason:
                yield StreamDelta(finish_reason=event.delta.stop_reason)

    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 100,
    ) -> str:
        system, converted = to_anthropic_messages(messages)
        request: Dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": converted,
            "temperature": temperature,
        }
        if system:
            request["system"] = system
        response = self._client.messages.create(**request)
        text = "".join(block.text for block in response.content if block.type == "text")
        logger.debug("Anthropic completion: %s", text)
        return text
