"""
Pydantic models for OpenClaw API requests and responses.
"""

from typing import (
    List,
    Literal,
    Optional,
)

from pydantic import (
    BaseModel,
    Field,
)


# ---------------------------------------------------------------------------
# Pydantic request / response schema
# ---------------------------------------------------------------------------
class ChatMessage(BaseModel):
    """One prior turn sent by the client."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Conversation to continue."""

    messages: List[ChatMessage] = Field(..., description="Conversation so far, oldest first")
    model: Optional[str] = Field(None, description="Override the configured chat model")


class HealthResponse(BaseModel):
    """Liveness payload with the loaded catalog."""

    status: str = "ok"
    message: str
    skills: List[str]
    tools: List[str]


class TelegramStartRequest(BaseModel):
    """Start the Telegram poller; the configured token is used when omitted."""

    token: Optional[str] = None


class TelegramStatusResponse(BaseModel):
    """Current poller state."""

    state: str
    running: bool
