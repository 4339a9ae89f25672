"""
Skill router: a cheap, tool-less model call that picks which skills a request needs.

Failures are handled asymmetrically:

* the provider call itself fails  -> every skill is selected;
* the reply is not a JSON array     -> no skill is selected.
"""

import json
import logging
import re
from typing import (
    List,
    Sequence,
)

from openclaw.agent.provider import ModelProvider
from openclaw.core.schema import (
    Message,
    Skill,
)

logger = logging.getLogger(__name__)

RECENT_USER_MESSAGES = 3

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

ROUTER_PROMPT = """You are a skill router. Based on the user's request, determine which skills (if any) are needed to help them.

Available skills:
{summaries}

Respond with ONLY a JSON array of skill names that are relevant to help with this request.
- Return [] (empty array) if no skills are needed (e.g., for general questions, greetings, or topics not covered by any skill)
- Return one or more skill names if they are needed
- Only include skills that are directly relevant to the user's request

Examples of valid responses:
["google"]
["browser", "notion"]
[]

User's request:
{request}"""


def build_router_prompt(messages: Sequence[Message], catalog: Sequence[Skill]) -> str:
    """Render the router prompt from the catalog and the most recent user messages."""
    summaries = "\n".join(f"- {skill.name}: {skill.description}" for skill in catalog)
    recent = [m.content or "" for m in messages if m.role == "user"][-RECENT_USER_MESSAGES:]
    return ROUTER_PROMPT.format(summaries=summaries, request="\n".join(recent))


def parse_selection(reply: str) -> List[str]:
    """Return the skill identifiers named in *reply*, or ``[]`` if it is not a JSON array."""
    text = reply.strip() or "[]"
    fenced = _CODE_FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        names = json.loads(text)
    except json.JSONDecodeError:
        logger.error("Failed to parse router response: %s", reply)
        return []
    if not isinstance(names, list):
        logger.error("Router response is not a list: %s", reply)
        return []
    return [name for name in names if isinstance(name, str)]


class SkillRouter:
    """Select the subset of a skill catalog relevant to the current conversation."""

    def __init__(self, provider: ModelProvider, model: str) -> None:
        self.provider = provider
        self.model = model

    def select(self, messages: Sequence[Message], catalog: Sequence[Skill]) -> List[Skill]:
        """
        Return the skills needed for *messages*, in catalog order.

        Identifiers in the model reply are matched against both the skill name and its folder.
        """
        if not catalog:
            return []

        prompt = build_router_prompt(messages, catalog)
        try:
            reply = self.provider.complete(
                [Message.user(prompt)], model=self.model, temperature=0.0, max_tokens=100
            )
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Router error, falling back to all skills")
            return list(catalog)

        names = set(parse_selection(reply))
        selected = [skill for skill in catalog if skill.name in names or skill.folder in names]
        logger.info(
            "Router selected skills: %s",
            ", ".join(skill.name for skill in selected) if selected else "(none)",
        )
        return selected
