"""
Schema definitions for model <-> agent <-> tool messages.

These data models serve as the contract between the model provider, the agent loop, and individual
tools.  We keep them separate from runtime logic so they can be imported anywhere without
side-effects.
"""

from dataclasses import (
    dataclass,
    field,
)
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Literal,
    Optional,
)

from pydantic import (
    BaseModel,
    Field,
)

Role = Literal["system", "user", "assistant", "tool"]


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model inside an assistant turn."""

    id: str = Field("", description="Opaque id correlating the call with its tool message")
    name: str = Field("", description="Registered tool name")
    arguments: str = Field("", description="Raw JSON argument text as streamed by the model")

    def to_provider(self) -> Dict[str, Any]:
        """Return the chat-completions wire shape of this call."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class Message(BaseModel):
    """One turn in the conversation."""

    role: Role
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCallRequest]] = None
    tool_call_id: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> "Message":
        """Build a system message."""
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        """Build a user message."""
        return cls(role="user", content=content)

    @classmethod
    def assistant(
        cls, content: Optional[str] = None, tool_calls: Optional[List[ToolCallRequest]] = None
    ) -> "Message":
        """Build an assistant message, optionally carrying tool calls."""
        return cls(role="assistant", content=content, tool_calls=tool_calls or None)

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        """Build a tool-result message answering *tool_call_id*."""
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    def to_provider(self) -> Dict[str, Any]:
        """Return the chat-completions wire shape of this message."""
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.to_provider() for call in self.tool_calls]
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        return payload


class ToolResult(BaseModel):
    """Outcome of a single tool execution."""

    success: bool
    output: str = ""
    error: Optional[str] = None


ToolExecutor = Callable[[Dict[str, Any]], ToolResult]


@dataclass(frozen=True)
class ToolDefinition:
    """A named tool: the schema handed to the model plus the function that runs it."""

    name: str
    description: str
    parameters: Dict[str, Any]
    executor: ToolExecutor

    def schema(self) -> Dict[str, Any]:
        """Return the function-tool schema advertised to the model."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class Skill(BaseModel):
    """A documentation bundle describing a related group of tools."""

    name: str
    folder: str
    description: str
    content: str = Field(..., description="Full SKILL.md text injected into the prompt")
    homepage: Optional[str] = None


@dataclass
class LoopState:
    """Per-request state of the agent loop.  Never shared between requests."""

    messages: List[Message]
    iteration: int = 0
    fragments: Dict[int, ToolCallRequest] = field(default_factory=dict)
    error: Optional[str] = None

    def reset_fragments(self) -> None:
        """Forget the tool-call fragments of the previous model turn."""
        self.fragments = {}

    def pending_calls(self) -> List[ToolCallRequest]:
        """Return the accumulated tool calls in declaration (index) order."""
        return [self.fragments[index] for index in sorted(self.fragments)]
