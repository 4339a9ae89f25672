"""
Request-independent agent wiring shared by the HTTP API and the Telegram poller.

An :class:`AgentRuntime` is built once at startup and then only read: each request routes its
history to a skill subset, assembles the context and runs a fresh :class:`AgentLoop`.
"""

import dataclasses
import logging
from datetime import datetime
from typing import (
    List,
    Optional,
    Sequence,
)

from openclaw.agent.agent_loop import (
    AgentLoop,
    AgentLoopConfig,
)
from openclaw.agent.context import (
    ContextAssembler,
    current_time_context,
)
from openclaw.agent.provider import (
    ModelProvider,
    load_provider,
)
from openclaw.agent.skill_router import SkillRouter
from openclaw.agent.skills import (
    load_base_prompt,
    load_skills,
)
from openclaw.config import Settings
from openclaw.core.events import EventSink
from openclaw.core.schema import (
    LoopState,
    Message,
    Skill,
)
from openclaw.tools import (
    ToolRegistry,
    build_default_registry,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class AgentRuntime:
    """Everything a request needs that does not change between requests."""

    provider: ModelProvider
    registry: ToolRegistry
    skills: List[Skill]
    base_prompt: str
    router: SkillRouter
    config: AgentLoopConfig = dataclasses.field(default_factory=AgentLoopConfig)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentRuntime":
        """Build the provider, tool registry and skill catalog described by *settings*."""
        provider = load_provider(settings.PROVIDER)
        skills = load_skills(settings.SKILLS_DIR, settings.SKILL_FOLDERS)
        registry = build_default_registry(settings)
        logger.info(
            "Runtime ready: provider=%s model=%s skills=%d tools=%d",
            settings.PROVIDER,
            settings.model,
            len(skills),
            len(registry),
        )
        return cls(
            provider=provider,
            registry=registry,
            skills=skills,
            base_prompt=load_base_prompt(settings.SYSTEM_PROMPT_PATH),
            router=SkillRouter(provider, settings.ROUTER_MODEL or settings.model),
            config=AgentLoopConfig(max_iterations=settings.MAX_ITERATIONS, model=settings.model),
        )

    def close(self) -> None:
        """Release tool resources such as the shared browser."""
        self.registry.close()

    def skill_names(self) -> List[str]:
        """Names of every skill in the catalog."""
        return [skill.name for skill in self.skills]

    def respond(
        self,
        history: Sequence[Message],
        sink: EventSink,
        model: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LoopState:
        """Route, assemble and run the agent loop for one conversation turn."""
        selected = self.router.select(history, self.skills)
        messages = ContextAssembler.build(
            self.base_prompt,
            selected,
            history,
            extra_context=current_time_context(now or datetime.now().astimezone()),
        )
        config = dataclasses.replace(self.config, model=model) if model else self.config
        return AgentLoop(self.provider, self.registry, config).run(messages, sink)
