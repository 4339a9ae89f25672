"""
Gmail, Calendar, Sheets and Docs tools.

:class:`GoogleClient` is a thin httpx wrapper around the Google REST endpoints; the tool executors
below only validate arguments and turn API payloads into text the model can read.
"""

import base64
import logging
from email.message import EmailMessage
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
)
from urllib.parse import quote

import httpx

from openclaw.agent.tool_executor import (
    ToolExecutionError,
    require_str,
)
from openclaw.core.schema import (
    ToolDefinition,
    ToolResult,
)

logger = logging.getLogger(__name__)

GMAIL_API = "https://gmail.googleapis.com/gmail/v1/users/me"
CALENDAR_API = "https://www.googleapis.com/calendar/v3"
SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"
DOCS_API = "https://docs.googleapis.com/v1/documents"
DRIVE_API = "https://www.googleapis.com/drive/v3/files"

_EXPORT_MIME_TYPES = {
    "txt": "text/plain",
    "html": "text/html",
    "pdf": "application/pdf",
}


class GoogleClient:
    """Authenticated access to the Google REST APIs used by the tools."""

    def __init__(
        self,
        access_token: Optional[str],
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self._access_token = access_token
        self._transport = transport
        self._timeout = timeout

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send an authenticated request and raise :class:`ToolExecutionError` on HTTP errors."""
        if not self._access_token:
            raise ToolExecutionError(
                "Google not connected. Set GOOGLE_ACCESS_TOKEN to enable Google tools."
            )
        headers = {"Authorization": f"Bearer {self._access_token}"}
        logger.debug("Google %s %s", method, url)
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ToolExecutionError(f"Google API request failed: {exc}") from exc
        if response.is_error:
            raise ToolExecutionError(f"Google API error ({response.status_code}): {response.text}")
        return response

    def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """GET *url* and decode the JSON body."""
        return self.request("GET", url, **kwargs).json()

    # ------------------------------------------------------------------ #
    # Gmail
    # ------------------------------------------------------------------ #
    def gmail_list(self, query: Optional[str], max_results: int) -> List[Dict[str, Any]]:
        """Return message summaries matching *query*."""
        params: Dict[str, Any] = {"maxResults": max_results}
        if query:
            params["q"] = query
        listing = self.get_json(f"{GMAIL_API}/messages", params=params)
        messages = []
        for ref in listing.get("messages", []):
            data = self.get_json(
                f"{GMAIL_API}/messages/{ref['id']}",
                params={"format": "metadata", "metadataHeaders": ["From", "Subject", "Date"]},
            )
            headers = _headers(data)
            messages.append(
                {
                    "id": data.get("id", ref["id"]),
                    "from": headers.get("from"),
                    "subject": headers.get("subject"),
                    "date": headers.get("date"),
                    "snippet": data.get("snippet", ""),
                }
            )
        return messages

    def gmail_get(self, message_id: str) -> Dict[str, Any]:
        """Return one message with its decoded plain-text body."""
        data = self.get_json(f"{GMAIL_API}/messages/{quote(message_id)}", params={"format": "full"})
        headers = _headers(data)
        return {
            "id": data.get("id", message_id),
            "threadId": data.get("threadId", ""),
            "from": headers.get("from"),
            "to": headers.get("to"),
            "subject": headers.get("subject"),
            "date": headers.get("date"),
            "labels": data.get("labelIds", []),
            "body": _plain_text_body(data.get("payload", {})),
        }

    def gmail_send(
        self, to: str, subject: str, body: str, html: bool = False, thread_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Send a message and return ``{id, threadId}``."""
        payload: Dict[str, Any] = {"raw": _raw_message(to, subject, body, html)}
        if thread_id:
            payload["threadId"] = thread_id
        return self.request("POST", f"{GMAIL_API}/messages/send", json=payload).json()

    def gmail_draft_create(
        self, to: str, subject: str, body: str, html: bool = False
    ) -> Dict[str, Any]:
        """Save an unsent draft and return ``{id, message}``."""
        payload = {"message": {"raw": _raw_message(to, subject, body, html)}}
        return self.request("POST", f"{GMAIL_API}/drafts", json=payload).json()

    def gmail_draft_send(self, draft_id: str) -> Dict[str, Any]:
        """Send an existing draft and return the sent ``{id, threadId}``."""
        return self.request("POST", f"{GMAIL_API}/drafts/send", json={"id": draft_id}).json()

    # ------------------------------------------------------------------ #
    # Calendar
    # ------------------------------------------------------------------ #
    @staticmethod
    def _events_url(calendar_id: str, event_id: Optional[str] = None) -> str:
        url = f"{CALENDAR_API}/calendars/{quote(calendar_id, safe='')}/events"
        if event_id:
            url += f"/{quote(event_id, safe='')}"
        return url

    def calendar_list(
        self,
        calendar_id: str,
        time_min: Optional[str],
        time_max: Optional[str],
        max_results: int,
    ) -> List[Dict[str, Any]]:
        """Return events ordered by start time."""
        params: Dict[str, Any] = {
            "maxResults": max_results,
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        if time_min:
            params["timeMin"] = time_min
        if time_max:
            params["timeMax"] = time_max
        return self.get_json(self._events_url(calendar_id), params=params).get("items", [])

    def calendar_get(self, calendar_id: str, event_id: str) -> Dict[str, Any]:
        """Return one event."""
        return self.get_json(self._events_url(calendar_id, event_id))

    def calendar_create(self, calendar_id: str, event: Dict[str, Any]) -> Dict[str, Any]:
        """Create an event."""
        return self.request("POST", self._events_url(calendar_id), json=event).json()

    def calendar_update(
        self, calendar_id: str, event_id: str, updates: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Patch an event."""
        return self.request("PATCH", self._events_url(calendar_id, event_id), json=updates).json()

    def calendar_delete(self, calendar_id: str, event_id: str) -> None:
        """Delete an event."""
        self.request("DELETE", self._events_url(calendar_id, event_id))

    # ------------------------------------------------------------------ #
    # Sheets
    # ------------------------------------------------------------------ #
    def sheets_get(self, spreadsheet_id: str, cell_range: str) -> List[List[Any]]:
        """Return the values of *cell_range*."""
        url = f"{SHEETS_API}/{quote(spreadsheet_id)}/values/{quote(cell_range, safe='')}"
        return self.get_json(url).get("values", [])

    def sheets_update(
        self, spreadsheet_id: str, cell_range: str, values: List[List[Any]]
    ) -> Dict[str, Any]:
        """Overwrite *cell_range* with *values*."""
        url = f"{SHEETS_API}/{quote(spreadsheet_id)}/values/{quote(cell_range, safe='')}"
        return self.request(
            "PUT", url, params={"valueInputOption": "USER_ENTERED"}, json={"values": values}
        ).json()

    def sheets_append(
        self, spreadsheet_id: str, cell_range: str, values: List[List[Any]]
    ) -> Dict[str, Any]:
        """Append rows after the table found in *cell_range*."""
        url = f"{SHEETS_API}/{quote(spreadsheet_id)}/values/{quote(cell_range, safe='')}:append"
        data = self.request(
            "POST",
            url,
            params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
            json={"values": values},
        ).json()
        return data.get("updates", {})

    def sheets_clear(self, spreadsheet_id: str, cell_range: str) -> None:
        """Clear the values of *cell_range*."""
        url = f"{SHEETS_API}/{quote(spreadsheet_id)}/values/{quote(cell_range, safe='')}:clear"
        self.request("POST", url, json={})

    def sheets_metadata(self, spreadsheet_id: str) -> Dict[str, Any]:
        """Return the spreadsheet title and its sheets."""
        return self.get_json(
            f"{SHEETS_API}/{quote(spreadsheet_id)}",
            params={"fields": "spreadsheetId,properties.title,sheets.properties"},
        )

    # ------------------------------------------------------------------ #
    # Docs
    # ------------------------------------------------------------------ #
    def docs_create(self, title: str, content: Optional[str] = None) -> Dict[str, Any]:
        """Create a document, optionally writing initial text."""
        doc = self.request("POST", DOCS_API, json={"title": title}).json()
        if content:
            self.request(
                "POST",
                f"{DOCS_API}/{doc['documentId']}:batchUpdate",
                json={"requests": [{"insertText": {"location": {"index": 1}, "text": content}}]},
            )
        return doc

    def docs_get(self, document_id: str) -> Dict[str, Any]:
        """Return the document title and its plain text."""
        doc = self.get_json(f"{DOCS_API}/{quote(document_id)}")
        text_runs = [
            element["textRun"].get("content", "")
            for block in doc.get("body", {}).get("content", [])
            for element in block.get("paragraph", {}).get("elements", [])
            if "textRun" in element
        ]
        return {
            "documentId": doc.get("documentId", document_id),
            "title": doc.get("title", ""),
            "body": "".join(text_runs),
        }

    def docs_export(self, document_id: str, export_format: str) -> bytes:
        """Export a document through Drive."""
        response = self.request(
            "GET",
            f"{DRIVE_API}/{quote(document_id)}/export",
            params={"mimeType": _EXPORT_MIME_TYPES[export_format]},
        )
        return response.content


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------
def _raw_message(to: str, subject: str, body: str, html: bool) -> str:
    """RFC 2822 message, base64url-encoded as the Gmail API expects."""
    message = EmailMessage()
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body, subtype="html" if html else "plain")
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


def _headers(message: Dict[str, Any]) -> Dict[str, str]:
    return {
        header["name"].lower(): header["value"]
        for header in message.get("payload", {}).get("headers", [])
    }


def _plain_text_body(payload: Dict[str, Any]) -> str:
    """Find and decode the first text/plain part of a Gmail payload."""
    if payload.get("mimeType") == "text/plain" and payload.get("body", {}).get("data"):
        data = payload["body"]["data"]
        return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4)).decode("utf-8", "replace")
    for part in payload.get("parts", []):
        body = _plain_text_body(part)
        if body:
            return body
    return ""


def _max_results(args: Dict[str, Any], default: int = 10, limit: int = 50) -> int:
    try:
        value = int(args.get("maxResults") or default)
    except (TypeError, ValueError):
        value = default
    return max(1, min(value, limit))


def _values(args: Dict[str, Any]) -> List[List[Any]]:
    values = args.get("values")
    if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
        raise ToolExecutionError("values must be a 2D array of rows")
    return values


def _event_time(value: Dict[str, Any]) -> str:
    return value.get("dateTime") or value.get("date") or "Unknown"


def _format_event(event: Dict[str, Any], index: Optional[int] = None) -> str:
    prefix = f"{index}. " if index is not None else ""
    lines = [
        f"{prefix}[{event.get('id', '')}] {event.get('summary', '(no title)')}",
        f"   Start: {_event_time(event.get('start', {}))}",
        f"   End: {_event_time(event.get('end', {}))}",
    ]
    if event.get("location"):
        lines.append(f"   Location: {event['location']}")
    if event.get("description"):
        lines.append(f"   Description: {event['description']}")
    return "\n".join(lines)


def _params(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required or []}


def _string(description: str) -> Dict[str, str]:
    return {"type": "string", "description": description}


_CALENDAR_ID = _string("Calendar ID (default: 'primary' for the user's main calendar)")
_SPREADSHEET_ID = _string("The spreadsheet ID")
_VALUES = {
    "type": "array",
    "description": "2D array of rows, e.g. [['Name', 'Score'], ['Ada', 10]]",
    "items": {"type": "array", "items": {}},
}


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------
def google_tools(
    access_token: Optional[str] = None, client: Optional[GoogleClient] = None
) -> List[ToolDefinition]:
    """Definitions for every Google tool, sharing one client."""
    api = client or GoogleClient(access_token)

    # -- Gmail ---------------------------------------------------------------
    def gmail_list(args: Dict[str, Any]) -> ToolResult:
        messages = api.gmail_list(args.get("query") or None, _max_results(args))
        if not messages:
            return ToolResult(success=True, output="No emails found matching the query.")
        formatted = "\n\n".join(
            f"{i}. [{m['id']}]\n   From: {m['from'] or 'Unknown'}\n"
            f"   Subject: {m['subject'] or '(no subject)'}\n"
            f"   Date: {m['date'] or 'Unknown'}\n   Snippet: {m['snippet']}"
            for i, m in enumerate(messages, start=1)
        )
        return ToolResult(success=True, output=f"Found {len(messages)} email(s):\n\n{formatted}")

    def gmail_get(args: Dict[str, Any]) -> ToolResult:
        m = api.gmail_get(require_str(args, "messageId"))
        output = "\n".join(
            [
                f"ID: {m['id']}",
                f"Thread ID: {m['threadId']}",
                f"From: {m['from'] or 'Unknown'}",
                f"To: {m['to'] or 'Unknown'}",
                f"Subject: {m['subject'] or '(no subject)'}",
                f"Date: {m['date'] or 'Unknown'}",
                f"Labels: {', '.join(m['labels']) or 'None'}",
                "",
                "--- Body ---",
                m["body"] or "(no body content)",
            ]
        )
        return ToolResult(success=True, output=output)

    def gmail_send(args: Dict[str, Any]) -> ToolResult:
        sent = api.gmail_send(
            require_str(args, "to"),
            require_str(args, "subject"),
            require_str(args, "body"),
            html=bool(args.get("html", False)),
            thread_id=args.get("threadId") or None,
        )
        return ToolResult(
            success=True,
            output=f"Email sent successfully!\nMessage ID: {sent.get('id')}\n"
            f"Thread ID: {sent.get('threadId')}",
        )

    def gmail_draft_create(args: Dict[str, Any]) -> ToolResult:
        draft = api.gmail_draft_create(
            require_str(args, "to"),
            require_str(args, "subject"),
            require_str(args, "body"),
            html=bool(args.get("html", False)),
        )
        return ToolResult(
            success=True,
            output=f"Draft created successfully!\nDraft ID: {draft.get('id')}\n"
            f"Message ID: {(draft.get('message') or {}).get('id')}",
        )

    def gmail_draft_send(args: Dict[str, Any]) -> ToolResult:
        sent = api.gmail_draft_send(require_str(args, "draftId"))
        return ToolResult(
            success=True,
            output=f"Draft sent successfully!\nMessage ID: {sent.get('id')}\n"
            f"Thread ID: {sent.get('threadId')}",
        )

    # -- Calendar ------------------------------------------------------------
    def calendar_list(args: Dict[str, Any]) -> ToolResult:
        events = api.calendar_list(
            args.get("calendarId") or "primary",
            args.get("timeMin") or None,
            args.get("timeMax") or None,
            _max_results(args),
        )
        if not events:
            return ToolResult(success=True, output="No events found in the specified time range.")
        formatted = "\n\n".join(_format_event(e, i) for i, e in enumerate(events, start=1))
        return ToolResult(success=True, output=f"Found {len(events)} event(s):\n\n{formatted}")

    def calendar_get(args: Dict[str, Any]) -> ToolResult:
        event = api.calendar_get(args.get("calendarId") or "primary", require_str(args, "eventId"))
        output = _format_event(event)
        if event.get("htmlLink"):
            output += f"\n   Link: {event['htmlLink']}"
        return ToolResult(success=True, output=output)

    def calendar_create(args: Dict[str, Any]) -> ToolResult:
        event: Dict[str, Any] = {
            "summary": require_str(args, "summary"),
            "start": {"dateTime": require_str(args, "startDateTime")},
            "end": {"dateTime": require_str(args, "endDateTime")},
        }
        if args.get("timeZone"):
            event["start"]["timeZone"] = event["end"]["timeZone"] = args["timeZone"]
        for key in ("description", "location"):
            if args.get(key):
                event[key] = args[key]
        if args.get("attendees"):
            event["attendees"] = [{"email": email} for email in args["attendees"]]
        created = api.calendar_create(args.get("calendarId") or "primary", event)
        output = (
            f"Event created successfully!\nID: {created.get('id')}\n"
            f"Summary: {created.get('summary')}\n"
            f"Start: {_event_time(created.get('start', {}))}\n"
            f"End: {_event_time(created.get('end', {}))}"
        )
        if created.get("htmlLink"):
            output += f"\nLink: {created['htmlLink']}"
        return ToolResult(success=True, output=output)

    def calendar_update(args: Dict[str, Any]) -> ToolResult:
        event_id = require_str(args, "eventId")
        updates: Dict[str, Any] = {}
        if args.get("summary"):
            updates["summary"] = args["summary"]
        if args.get("startDateTime"):
            updates["start"] = {"dateTime": args["startDateTime"]}
        if args.get("endDateTime"):
            updates["end"] = {"dateTime": args["endDateTime"]}
        for key in ("description", "location", "colorId"):
            if args.get(key):
                updates[key] = args[key]
        if not updates:
            raise ToolExecutionError("Nothing to update")
        updated = api.calendar_update(args.get("calendarId") or "primary", event_id, updates)
        return ToolResult(
            success=True,
            output=f"Event updated successfully!\nID: {updated.get('id')}\n"
            f"Summary: {updated.get('summary')}",
        )

    def calendar_delete(args: Dict[str, Any]) -> ToolResult:
        event_id = require_str(args, "eventId")
        api.calendar_delete(args.get("calendarId") or "primary", event_id)
        return ToolResult(success=True, output=f"Event deleted successfully (ID: {event_id})")

    # -- Sheets --------------------------------------------------------------
    def sheets_get(args: Dict[str, Any]) -> ToolResult:
        rows = api.sheets_get(require_str(args, "spreadsheetId"), require_str(args, "range"))
        if not rows:
            return ToolResult(success=True, output="No data found in the specified range.")
        formatted = "\n".join(
            f"Row {i}: {' | '.join(str(cell) for cell in row)}" for i, row in enumerate(rows, 1)
        )
        return ToolResult(success=True, output=f"Found {len(rows)} row(s):\n\n{formatted}")

    def sheets_update(args: Dict[str, Any]) -> ToolResult:
        result = api.sheets_update(
            require_str(args, "spreadsheetId"), require_str(args, "range"), _values(args)
        )
        return ToolResult(
            success=True,
            output=f"Updated {result.get('updatedCells', 0)} cell(s) in "
            f"{result.get('updatedRows', 0)} row(s)",
        )

    def sheets_append(args: Dict[str, Any]) -> ToolResult:
        result = api.sheets_append(
            require_str(args, "spreadsheetId"), require_str(args, "range"), _values(args)
        )
        return ToolResult(
            success=True,
            output=f"Appended {result.get('updatedRows', 0)} row(s) "
            f"({result.get('updatedCells', 0)} cells)",
        )

    def sheets_clear(args: Dict[str, Any]) -> ToolResult:
        cell_range = require_str(args, "range")
        api.sheets_clear(require_str(args, "spreadsheetId"), cell_range)
        return ToolResult(success=True, output=f"Cleared range: {cell_range}")

    def sheets_metadata(args: Dict[str, Any]) -> ToolResult:
        meta = api.sheets_metadata(require_str(args, "spreadsheetId"))
        sheets_info = "\n".join(
            f"- {props.get('title')} (ID: {props.get('sheetId')}, "
            f"{props.get('gridProperties', {}).get('rowCount', '?')} rows x "
            f"{props.get('gridProperties', {}).get('columnCount', '?')} cols)"
            for props in (sheet.get("properties", {}) for sheet in meta.get("sheets", []))
        )
        return ToolResult(
            success=True,
            output=f"Spreadsheet: {meta.get('properties', {}).get('title')}\n"
            f"ID: {meta.get('spreadsheetId')}\n\nSheets:\n{sheets_info}",
        )

    # -- Docs ----------------------------------------------------------------
    def docs_create(args: Dict[str, Any]) -> ToolResult:
        content = args.get("content") or None
        doc = api.docs_create(require_str(args, "title"), content)
        url = f"https://docs.google.com/document/d/{doc['documentId']}/edit"
        output = f"Document created successfully!\nTitle: {doc.get('title')}\n"
        output += f"ID: {doc['documentId']}\nURL: {url}"
        if content:
            output += f"\n\nContent written: {len(content)} characters"
        return ToolResult(success=True, output=output)

    def docs_get(args: Dict[str, Any]) -> ToolResult:
        doc = api.docs_get(require_str(args, "documentId"))
        return ToolResult(
            success=True,
            output=f"Document: {doc['title']}\nID: {doc['documentId']}\n\n--- Content ---\n"
            f"{doc['body'] or '(empty document)'}",
        )

    def docs_export(args: Dict[str, Any]) -> ToolResult:
        export_format = str(args.get("format") or "txt").lower()
        if export_format not in _EXPORT_MIME_TYPES:
            raise ToolExecutionError(f"Unsupported export format: {export_format}")
        content = api.docs_export(require_str(args, "documentId"), export_format)
        if export_format == "pdf":
            encoded = base64.b64encode(content).decode("ascii")
            return ToolResult(
                success=True,
                output=f"PDF exported (base64, {len(encoded)} characters).\n\n"
                f"Base64 content:\n{encoded[:500]}...",
            )
        text = content.decode("utf-8", "replace")
        return ToolResult(success=True, output=f"Exported as {export_format.upper()}:\n\n{text}")

    specs: List[tuple[str, str, Dict[str, Any], Callable[[Dict[str, Any]], ToolResult]]] = [
        (
            "google_gmail_list",
            "Search and list Gmail emails. Returns subject, from, date, and snippet.",
            _params(
                {
                    "query": _string(
                        "Gmail search query (e.g. 'from:someone@example.com', 'newer_than:7d', "
                        "'is:unread'). Leave empty to list recent emails."
                    ),
                    "maxResults": {
                        "type": "number",
                        "description": "Maximum number of emails to return (default: 10, max: 50)",
                    },
                }
            ),
            gmail_list,
        ),
        (
            "google_gmail_get",
            "Read the full content of one email.",
            _params(
                {"messageId": _string("The email message ID (obtained from google_gmail_list)")},
                ["messageId"],
            ),
            gmail_get,
        ),
        (
            "google_gmail_send",
            "Send an email from the user's Gmail account.",
            _params(
                {
                    "to": _string("Recipient email address"),
                    "subject": _string("Email subject"),
                    "body": _string("Email body"),
                    "html": {"type": "boolean", "description": "Send the body as HTML"},
                    "threadId": _string("Thread ID when replying (optional)"),
                },
                ["to", "subject", "body"],
            ),
            gmail_send,
        ),
        (
            "google_gmail_draft_create",
            "Create a draft email without sending it. The user can review and send it later.",
            _params(
                {
                    "to": _string("Recipient email address"),
                    "subject": _string("Email subject line"),
                    "body": _string("Email body content"),
                    "html": {
                        "type": "boolean",
                        "description": "If true, body is treated as HTML (default: false)",
                    },
                },
                ["to", "subject", "body"],
            ),
            gmail_draft_create,
        ),
        (
            "google_gmail_draft_send",
            "Send an existing draft email by its draft ID.",
            _params(
                {"draftId": _string("The draft ID (obtained from google_gmail_draft_create)")},
                ["draftId"],
            ),
            gmail_draft_send,
        ),
        (
            "google_calendar_list",
            "List calendar events within a date range. Returns title, time, location, and "
            "description.",
            _params(
                {
                    "calendarId": _CALENDAR_ID,
                    "timeMin": _string(
                        "Start of time range in ISO 8601 format (e.g. '2024-01-15T00:00:00Z')"
                    ),
                    "timeMax": _string(
                        "End of time range in ISO 8601 format (e.g. '2024-01-22T23:59:59Z')"
                    ),
                    "maxResults": {
                        "type": "number",
                        "description": "Maximum number of events to return (default: 10, max: 50)",
                    },
                }
            ),
            calendar_list,
        ),
        (
            "google_calendar_get",
            "Get the details of one calendar event.",
            _params({"eventId": _string("The event ID"), "calendarId": _CALENDAR_ID}, ["eventId"]),
            calendar_get,
        ),
        (
            "google_calendar_create",
            "Create a calendar event.",
            _params(
                {
                    "summary": _string("Event title/summary"),
                    "startDateTime": _string("Start time in ISO 8601 format"),
                    "endDateTime": _string("End time in ISO 8601 format"),
                    "description": _string("Event description (optional)"),
                    "location": _string("Event location (optional)"),
                    "attendees": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "List of attendee email addresses (optional)",
                    },
                    "timeZone": _string("IANA time zone, e.g. 'Europe/Berlin' (optional)"),
                    "calendarId": _CALENDAR_ID,
                },
                ["summary", "startDateTime", "endDateTime"],
            ),
            calendar_create,
        ),
        (
            "google_calendar_update",
            "Update fields of an existing calendar event.",
            _params(
                {
                    "eventId": _string("The event ID to update"),
                    "summary": _string("New event title (optional)"),
                    "startDateTime": _string("New start time in ISO 8601 format (optional)"),
                    "endDateTime": _string("New end time in ISO 8601 format (optional)"),
                    "description": _string("New description (optional)"),
                    "location": _string("New location (optional)"),
                    "colorId": _string("New color ID 1-11 (optional)"),
                    "calendarId": _CALENDAR_ID,
                },
                ["eventId"],
            ),
            calendar_update,
        ),
        (
            "google_calendar_delete",
            "Delete a calendar event.",
            _params(
                {"eventId": _string("The event ID to delete"), "calendarId": _CALENDAR_ID},
                ["eventId"],
            ),
            calendar_delete,
        ),
        (
            "google_sheets_get",
            "Read values from a Google Sheets range.",
            _params(
                {
                    "spreadsheetId": _SPREADSHEET_ID,
                    "range": _string("The A1 notation range (e.g. 'Sheet1!A1:D10')"),
                },
                ["spreadsheetId", "range"],
            ),
            sheets_get,
        ),
        (
            "google_sheets_update",
            "Overwrite values in a Google Sheets range.",
            _params(
                {
                    "spreadsheetId": _SPREADSHEET_ID,
                    "range": _string("The A1 notation range to write"),
                    "values": _VALUES,
                },
                ["spreadsheetId", "range", "values"],
            ),
            sheets_update,
        ),
        (
            "google_sheets_append",
            "Append rows to a Google Sheets table.",
            _params(
                {
                    "spreadsheetId": _SPREADSHEET_ID,
                    "range": _string("The A1 notation range of the table (e.g. 'Sheet1!A:D')"),
                    "values": _VALUES,
                },
                ["spreadsheetId", "range", "values"],
            ),
            sheets_append,
        ),
        (
            "google_sheets_clear",
            "Clear all values from a Google Sheets range.",
            _params(
                {
                    "spreadsheetId": _SPREADSHEET_ID,
                    "range": _string("The A1 notation range to clear (e.g. 'Sheet1!A2:Z')"),
                },
                ["spreadsheetId", "range"],
            ),
            sheets_clear,
        ),
        (
            "google_sheets_metadata",
            "Get a spreadsheet's title and the list of its sheets.",
            _params({"spreadsheetId": _SPREADSHEET_ID}, ["spreadsheetId"]),
            sheets_metadata,
        ),
        (
            "google_docs_create",
            "Create a new Google Doc, optionally with initial text.",
            _params(
                {
                    "title": _string("The title of the new document"),
                    "content": _string("Optional initial text content for the document"),
                },
                ["title"],
            ),
            docs_create,
        ),
        (
            "google_docs_get",
            "Read the text of a Google Doc.",
            _params(
                {"documentId": _string("The document ID (from the document URL)")},
                ["documentId"],
            ),
            docs_get,
        ),
        (
            "google_docs_export",
            "Export a Google Doc as txt, html or pdf.",
            _params(
                {
                    "documentId": _string("The document ID"),
                    "format": _string("Export format: txt (default), html, pdf"),
                },
                ["documentId"],
            ),
            docs_export,
        ),
    ]
    return [
        ToolDefinition(name=name, description=description, parameters=parameters, executor=fn)
        for name, description, parameters, fn in specs
    ]
