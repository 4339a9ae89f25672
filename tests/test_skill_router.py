"""Tests for skill routing and its asymmetric failure policy."""

from conftest import ScriptedProvider

from openclaw.agent.skill_router import (
    SkillRouter,
    build_router_prompt,
    parse_selection,
)
from openclaw.core.schema import (
    Message,
    Skill,
)

CATALOG = [
    Skill(name="google", folder="gog", description="Gmail and Calendar", content="g"),
    Skill(name="notion", folder="notion", description="Notion pages", content="n"),
    Skill(name="browser", folder="browser", description="Web browsing", content="b"),
]


def _route(reply, messages=None, catalog=CATALOG):
    provider = ScriptedProvider(reply=reply)
    selected = SkillRouter(provider, "router-model").select(
        messages or [Message.user("check my calendar")], catalog
    )
    return selected, provider


def test_selects_named_skills_in_catalog_order() -> None:
    """Matching skills come back in catalog order, whatever the reply order."""
    selected, _ = _route('["browser", "google"]')

    assert [s.name for s in selected] == ["google", "browser"]


def test_matches_folder_names() -> None:
    """Identifiers may name the skill folder instead of the skill."""
    selected, _ = _route('["gog"]')

    assert [s.name for s in selected] == ["google"]


def test_empty_array_selects_nothing() -> None:
    """``[]`` means no skill is needed."""
    selected, _ = _route("[]")

    assert selected == []


def test_provider_failure_selects_everything() -> None:
    """When the router call itself fails, every skill stays available."""
    selected, _ = _route(RuntimeError("network down"))

    assert selected == CATALOG


def test_garbage_reply_selects_nothing() -> None:
    """An unparseable reply injects no skills."""
    selected, _ = _route("I think you need google")

    assert selected == []


def test_non_list_reply_selects_nothing() -> None:
    """Valid JSON that is not an array is treated as no selection."""
    selected, _ = _route('{"skills": ["google"]}')

    assert selected == []


def test_code_fenced_reply_is_accepted() -> None:
    """Markdown fences around the array are stripped."""
    selected, _ = _route('```json\n["notion"]\n```')

    assert [s.name for s in selected] == ["notion"]


def test_empty_catalog_skips_the_model() -> None:
    """No catalog means no router call."""
    selected, provider = _route('["google"]', catalog=[])

    assert selected == []
    assert provider.complete_calls == []


def test_prompt_uses_last_three_user_messages() -> None:
    """Only the three most recent user messages reach the router."""
    history = [
        Message.user("one"),
        Message.assistant("reply"),
        Message.user("two"),
        Message.user("three"),
        Message.user("four"),
    ]

    prompt = build_router_prompt(history, CATALOG)

    assert prompt.endswith("two\nthree\nfour")
    assert "one" not in prompt.split("User's request:")[1]
    assert "reply" not in prompt
    assert "- google: Gmail and Calendar" in prompt


def test_router_sends_one_user_message() -> None:
    """The router call carries a single user message with the rendered prompt."""
    _, provider = _route("[]")

    (messages,) = provider.complete_calls
    assert len(messages) == 1
    assert messages[0].role == "user"
    assert "Available skills:" in messages[0].content


def test_parse_selection_ignores_non_strings() -> None:
    """Non-string entries are dropped."""
    assert parse_selection('["google", 3, null]') == ["google"]
    assert parse_selection("") == []
