"""Assemble the message list handed to the agent loop."""

from datetime import datetime
from typing import (
    List,
    Optional,
    Sequence,
)

from openclaw.core.schema import (
    Message,
    Skill,
)

TOOLS_HEADER = (
    "# Available Tools\n\n"
    "You now have access to the following tools. Use them to help the user with their request:\n\n"
)
SKILL_SEPARATOR = "\n\n---\n\n"


def build_tools_message(skills: Sequence[Skill]) -> Optional[str]:
    """Render the selected skills as one document, or *None* when there are none."""
    if not skills:
        return None
    docs = SKILL_SEPARATOR.join(f"## {skill.name.upper()}\n\n{skill.content}" for skill in skills)
    return TOOLS_HEADER + docs


def current_time_context(now: datetime) -> str:
    """Describe *now* so the model can resolve relative dates such as "tomorrow"."""
    zone = now.tzname() or "local time"
    return (
        f"Current date and time: {now.strftime('%A, %B %d, %Y %H:%M')} ({zone}).\n"
        f"ISO timestamp: {now.isoformat(timespec='seconds')}"
    )


class ContextAssembler:
    """Stateless builder of the system preamble plus conversation history."""

    @staticmethod
    def build(
        base_instructions: str,
        selected_skills: Sequence[Skill],
        history: Sequence[Message],
        extra_context: Optional[str] = None,
    ) -> List[Message]:
        """
        Build the full message list.

        Parameters
        ----------
        base_instructions:
            The base system prompt, always the first message.
        selected_skills:
            Skills chosen by the router; rendered into a second system message when non-empty.
        history:
            Conversation so far, appended unmodified.
        extra_context:
            Optional text (e.g. the current time) given its own system message.
        """
        messages = [Message.system(base_instructions)]
        tools_message = build_tools_message(selected_skills)
        if tools_message:
            messages.append(Message.system(tools_message))
        if extra_context:
            messages.append(Message.system(extra_context))
        messages.extend(history)
        return messages
