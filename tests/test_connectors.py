"""Connector tools against mocked HTTP, plus the shell tool."""

import base64
import json
from typing import (
    Any,
    Dict,
    List,
)

import httpx

from openclaw.tools import ToolRegistry
from openclaw.tools.google import (
    GoogleClient,
    google_tools,
)
from openclaw.tools.notion import (
    NotionClient,
    notion_tools,
)
from openclaw.tools.shell import shell_tools


def _google(handler) -> ToolRegistry:
    client = GoogleClient("token", transport=httpx.MockTransport(handler))
    return ToolRegistry(google_tools(client=client))


def _notion(handler) -> ToolRegistry:
    client = NotionClient("secret", transport=httpx.MockTransport(handler))
    return ToolRegistry(notion_tools(client=client))


def test_google_not_connected() -> None:
    """Without a token every Google tool fails with a clear message."""
    result = ToolRegistry(google_tools(access_token=None)).execute("google_calendar_list", {})

    assert result.success is False
    assert "Google not connected" in result.error


def test_calendar_list_formats_events() -> None:
    """Events are numbered with id, title and times; query params are forwarded."""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": "evt1",
                        "summary": "Team Sync",
                        "start": {"dateTime": "2025-01-02T10:00:00Z"},
                        "end": {"dateTime": "2025-01-02T10:30:00Z"},
                        "location": "Room 4",
                    }
                ]
            },
        )

    result = _google(handler).execute(
        "google_calendar_list", {"timeMin": "2025-01-02T00:00:00Z"}
    )

    assert result.success
    assert result.output == (
        "Found 1 event(s):\n\n"
        "1. [evt1] Team Sync\n"
        "   Start: 2025-01-02T10:00:00Z\n"
        "   End: 2025-01-02T10:30:00Z\n"
        "   Location: Room 4"
    )
    assert requests[0].headers["authorization"] == "Bearer token"
    assert requests[0].url.params["timeMin"] == "2025-01-02T00:00:00Z"
    assert requests[0].url.path == "/calendar/v3/calendars/primary/events"


def test_calendar_list_empty() -> None:
    """No events yields a friendly message."""
    result = _google(lambda request: httpx.Response(200, json={})).execute(
        "google_calendar_list", {}
    )

    assert result.output == "No events found in the specified time range."


def test_google_http_error_becomes_failed_result() -> None:
    """API errors carry the status code into the tool error."""
    result = _google(lambda request: httpx.Response(403, text="forbidden")).execute(
        "google_calendar_get", {"eventId": "x"}
    )

    assert result.success is False
    assert result.error == "Google API error (403): forbidden"


def test_calendar_get_requires_event_id() -> None:
    """Missing required arguments are reported without calling the API."""
    result = _google(lambda request: httpx.Response(500)).execute("google_calendar_get", {})

    assert result.success is False
    assert result.error == "'eventId' is required"


def test_sheets_get_formats_rows() -> None:
    """Rows are rendered one per line."""
    result = _google(
        lambda request: httpx.Response(200, json={"values": [["Name", "Score"], ["Ada", 10]]})
    ).execute("google_sheets_get", {"spreadsheetId": "s1", "range": "A1:B2"})

    assert result.output == "Found 2 row(s):\n\nRow 1: Name | Score\nRow 2: Ada | 10"


def test_sheets_update_validates_values() -> None:
    """Values must be a two-dimensional array."""
    result = _google(lambda request: httpx.Response(200, json={})).execute(
        "google_sheets_update", {"spreadsheetId": "s1", "range": "A1", "values": ["flat"]}
    )

    assert result.success is False
    assert "2D array" in result.error


def test_gmail_draft_create_and_send() -> None:
    """Drafts are saved with an encoded message and later sent by id."""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/drafts"):
            return httpx.Response(200, json={"id": "d1", "message": {"id": "m1"}})
        return httpx.Response(200, json={"id": "m1", "threadId": "t1"})

    registry = _google(handler)
    created = registry.execute(
        "google_gmail_draft_create", {"to": "ada@example.com", "subject": "Hi", "body": "Hello"}
    )
    sent = registry.execute("google_gmail_draft_send", {"draftId": "d1"})

    assert created.output == "Draft created successfully!\nDraft ID: d1\nMessage ID: m1"
    assert sent.output == "Draft sent successfully!\nMessage ID: m1\nThread ID: t1"
    assert requests[0].url.path == "/gmail/v1/users/me/drafts"
    raw = json.loads(requests[0].content)["message"]["raw"]
    decoded = base64.urlsafe_b64decode(raw).decode()
    assert "To: ada@example.com" in decoded
    assert "Subject: Hi" in decoded
    assert requests[1].url.path == "/gmail/v1/users/me/drafts/send"
    assert json.loads(requests[1].content) == {"id": "d1"}


def test_gmail_draft_send_requires_id() -> None:
    """Sending a draft needs its id."""
    result = _google(lambda request: httpx.Response(500)).execute("google_gmail_draft_send", {})

    assert result.success is False
    assert result.error == "'draftId' is required"


def test_notion_search() -> None:
    """Search results list pages with their location and URL."""
    bodies: List[Dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        assert request.headers["notion-version"] == "2022-06-28"
        return httpx.Response(
            200,
            json={
                "results": [
                    {
                        "object": "page",
                        "id": "p1",
                        "url": "https://www.notion.so/p1",
                        "last_edited_time": "2025-01-01T00:00:00.000Z",
                        "parent": {"type": "workspace", "workspace": True},
                        "properties": {
                            "title": {
                                "type": "title",
                                "title": [{"plain_text": "Roadmap"}],
                            }
                        },
                    }
                ],
                "has_more": False,
            },
        )

    result = _notion(handler).execute("notion_search", {"query": "roadmap", "filter": "page"})

    assert result.success
    assert result.output.startswith("Found 1 result(s):\n\n1. [p1] Roadmap (workspace)")
    assert "URL: https://www.notion.so/p1" in result.output
    assert bodies[0]["query"] == "roadmap"
    assert bodies[0]["filter"] == {"property": "object", "value": "page"}


def test_notion_create_page_requires_parent() -> None:
    """A page needs a database or page parent."""
    result = _notion(lambda request: httpx.Response(200, json={})).execute(
        "notion_create_page", {"title": "Notes"}
    )

    assert result.success is False
    assert "parentDatabaseId or parentPageId" in result.error


def test_notion_get_blocks() -> None:
    """Blocks render as markdown-like lines."""
    blocks = {
        "results": [
            {"type": "heading_2", "heading_2": {"rich_text": [{"plain_text": "Plan"}]}},
            {"type": "to_do", "to_do": {"rich_text": [{"plain_text": "ship"}], "checked": True}},
        ]
    }
    result = _notion(lambda request: httpx.Response(200, json=blocks)).execute(
        "notion_get_blocks", {"blockId": "b1"}
    )

    assert result.output == "## Plan\n[x] ship"


def test_notion_update_page_archives() -> None:
    """Updates PATCH the page and report the archive flag."""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "p1", "url": "https://www.notion.so/p1"})

    result = _notion(handler).execute(
        "notion_update_page", {"pageId": "p1", "archived": True, "emoji": ""}
    )

    assert result.output == (
        "Page updated successfully!\nID: p1\nURL: https://www.notion.so/p1\nArchived: True"
    )
    assert requests[0].method == "PATCH"
    assert requests[0].url.path == "/v1/pages/p1"
    assert json.loads(requests[0].content) == {"archived": True, "icon": None}


def test_notion_update_page_needs_changes() -> None:
    """An update with nothing to change fails without calling the API."""
    result = _notion(lambda request: httpx.Response(500)).execute(
        "notion_update_page", {"pageId": "p1"}
    )

    assert result.success is False
    assert result.error == "Nothing to update"


def test_notion_get_database_lists_schema() -> None:
    """The schema lists each property with its type."""
    database = {
        "id": "db1",
        "url": "https://www.notion.so/db1",
        "title": [{"plain_text": "Tasks"}],
        "properties": {"Name": {"type": "title"}, "Due": {"type": "date"}},
    }
    result = _notion(lambda request: httpx.Response(200, json=database)).execute(
        "notion_get_database", {"databaseId": "db1"}
    )

    assert result.output == (
        "Database: Tasks\nID: db1\nURL: https://www.notion.so/db1\n\n"
        "Properties:\n  - Name (title)\n  - Due (date)"
    )


def test_notion_create_database() -> None:
    """New databases are created under a page with the given schema."""
    bodies: List[Dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "id": "db2",
                "url": "https://www.notion.so/db2",
                "title": [{"plain_text": "Reading"}],
                "properties": {"Name": {"type": "title"}, "Done": {"type": "checkbox"}},
            },
        )

    properties = {"Name": {"title": {}}, "Done": {"checkbox": {}}}
    result = _notion(handler).execute(
        "notion_create_database",
        {"parentPageId": "p1", "title": "Reading", "properties": properties},
    )

    assert result.success
    assert "ID: db2" in result.output
    assert result.output.endswith("Properties: 2")
    assert bodies[0]["parent"] == {"type": "page_id", "page_id": "p1"}
    assert bodies[0]["properties"] == properties
    assert bodies[0]["is_inline"] is False


def test_notion_create_database_requires_properties() -> None:
    """A database without property definitions is rejected."""
    result = _notion(lambda request: httpx.Response(500)).execute(
        "notion_create_database", {"parentPageId": "p1", "title": "Empty"}
    )

    assert result.success is False
    assert result.error == "properties are required"


def test_shell_success_and_failure() -> None:
    """Output is captured; non-zero exits fail with stderr as the error."""
    registry = ToolRegistry(shell_tools(timeout=10))

    ok = registry.execute("run_bash_command", {"command": "echo hello"})
    silent = registry.execute("run_bash_command", {"command": "true"})
    failed = registry.execute("run_bash_command", {"command": "echo out; echo bad >&2; exit 3"})

    assert ok.output == "hello\n"
    assert silent.output == "(no output)"
    assert failed.success is False
    assert failed.error == "bad"
    assert failed.output == "out\n"


def test_shell_timeout() -> None:
    """Commands exceeding the timeout fail instead of hanging."""
    result = ToolRegistry(shell_tools(timeout=0.2)).execute(
        "run_bash_command", {"command": "sleep 5"}
    )

    assert result.success is False
    assert "timed out" in result.error
