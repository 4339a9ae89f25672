"""Display metadata for tool events: icons, progress labels, result links."""

import re
from typing import (
    Dict,
    NamedTuple,
    Optional,
)


class ToolDisplay(NamedTuple):
    """How a client should present a tool while it runs and after it finishes."""

    icon: str
    label_in_progress: str
    label_complete: str


_DISPLAY: Dict[str, ToolDisplay] = {
    # Google Docs
    "google_docs_create": ToolDisplay("google.docs", "Creating document...", "Document created"),
    "google_docs_get": ToolDisplay("google.docs", "Reading document...", "Document read"),
    "google_docs_export": ToolDisplay("google.docs", "Exporting document...", "Document exported"),
    # Gmail
    "google_gmail_list": ToolDisplay("google.gmail", "Fetching emails...", "Emails fetched"),
    "google_gmail_get": ToolDisplay("google.gmail", "Reading email...", "Email read"),
    "google_gmail_send": ToolDisplay("google.gmail", "Sending email...", "Email sent"),
    "google_gmail_draft_create": ToolDisplay("google.gmail", "Creating draft...", "Draft created"),
    "google_gmail_draft_send": ToolDisplay("google.gmail", "Sending draft...", "Draft sent"),
    # Calendar
    "google_calendar_list": ToolDisplay("google.calendar", "Fetching events...", "Events fetched"),
    "google_calendar_get": ToolDisplay("google.calendar", "Reading event...", "Event read"),
    "google_calendar_create": ToolDisplay("google.calendar", "Creating event...", "Event created"),
    "google_calendar_update": ToolDisplay("google.calendar", "Updating event...", "Event updated"),
    "google_calendar_delete": ToolDisplay("google.calendar", "Deleting event...", "Event deleted"),
    # Sheets
    "google_sheets_get": ToolDisplay("google.sheets", "Reading sheet...", "Sheet read"),
    "google_sheets_update": ToolDisplay("google.sheets", "Updating sheet...", "Sheet updated"),
    "google_sheets_append": ToolDisplay("google.sheets", "Adding rows...", "Rows added"),
    "google_sheets_clear": ToolDisplay("google.sheets", "Clearing sheet...", "Sheet cleared"),
    "google_sheets_metadata": ToolDisplay(
        "google.sheets", "Fetching metadata...", "Metadata fetched"
    ),
    # Notion
    "notion_search": ToolDisplay("notion", "Searching Notion...", "Search complete"),
    "notion_get_page": ToolDisplay("notion", "Reading page...", "Page read"),
    "notion_create_page": ToolDisplay("notion", "Creating page...", "Page created"),
    "notion_update_page": ToolDisplay("notion", "Updating page...", "Page updated"),
    "notion_get_blocks": ToolDisplay("notion", "Reading page content...", "Page content read"),
    "notion_add_blocks": ToolDisplay("notion", "Updating page...", "Page updated"),
    "notion_get_database": ToolDisplay("notion", "Reading database...", "Database read"),
    "notion_query_database": ToolDisplay("notion", "Querying database...", "Database queried"),
    "notion_create_database": ToolDisplay(
        "notion", "Creating database...", "Database created"
    ),
    # Browser / shell
    "browser": ToolDisplay("safari", "Browsing...", "Page loaded"),
    "run_bash_command": ToolDisplay("terminal", "Running command...", "Command complete"),
}

_DEFAULT = ToolDisplay("gearshape", "Working...", "Done")

# First match wins, so the explicit "URL:" / "Link:" markers take precedence.
_URL_PATTERNS = [
    re.compile(r"URL: (https?://\S+)", re.IGNORECASE),
    re.compile(r"Link: (https?://\S+)", re.IGNORECASE),
    re.compile(r"(https://docs\.google\.com/document/d/\S+)"),
    re.compile(r"(https://docs\.google\.com/spreadsheets/d/\S+)"),
    re.compile(r"(https://calendar\.google\.com/\S+)"),
    re.compile(r"(https://mail\.google\.com/\S+)"),
    re.compile(r"(https://github\.com/[^\s/]+/[^\s/]+/(?:issues|pull)/\d+)"),
    re.compile(r"(https://(?:www\.)?notion\.so/\S+)"),
]
_TRAILING_PUNCTUATION = re.compile(r"[.,;:!?)]+$")

# Browser snapshots are whole pages of HTML; clients only need the label.
_SUPPRESS_OUTPUT = frozenset({"browser"})


def tool_icon(name: str) -> str:
    """Icon name for *name*."""
    return _DISPLAY.get(name, _DEFAULT).icon


def tool_label(name: str, complete: bool) -> str:
    """User-facing label for *name*, either in progress or complete."""
    display = _DISPLAY.get(name, _DEFAULT)
    return display.label_complete if complete else display.label_in_progress


def extract_result_url(output: str) -> Optional[str]:
    """Return the first link worth surfacing from a tool's output."""
    for pattern in _URL_PATTERNS:
        match = pattern.search(output)
        if match:
            return _TRAILING_PUNCTUATION.sub("", match.group(1))
    return None


def should_suppress_output(name: str) -> bool:
    """True when *name*'s output should not be relayed to clients."""
    return name in _SUPPRESS_OUTPUT
