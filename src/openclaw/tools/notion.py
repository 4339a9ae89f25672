"""Notion knowledge-base tools (search, pages, blocks, databases)."""

import logging
from typing import (
    Any,
    Dict,
    List,
    Optional,
)

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

NOTION_API = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"


class NotionClient:
    """Thin httpx wrapper around the Notion REST API."""

    def __init__(
        self,
        api_key: Optional[str],
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._transport = transport
        self._timeout = timeout

    def request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """Send a request to *path* and return the decoded JSON body."""
        if not self._api_key:
            raise ToolExecutionError("Notion not connected. Set NOTION_API_KEY to enable Notion.")
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Notion-Version": NOTION_VERSION,
        }
        logger.debug("Notion %s %s", method, path)
        try:
            with httpx.Client(
                base_url=NOTION_API, timeout=self._timeout, transport=self._transport
            ) as client:
                response = client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ToolExecutionError(f"Notion API request failed: {exc}") from exc
        if response.is_error:
            raise ToolExecutionError(f"Notion API error ({response.status_code}): {response.text}")
        return response.json()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
def plain_text(rich_text: Optional[List[Dict[str, Any]]]) -> str:
    """Concatenate the plain text of a Notion rich-text array."""
    return "".join(part.get("plain_text", "") for part in rich_text or [])


def page_title(page: Dict[str, Any]) -> str:
    """Return the title property of *page*."""
    for prop in page.get("properties", {}).values():
        if prop.get("type") == "title":
            return plain_text(prop.get("title")) or "(Untitled)"
    return "(Untitled)"


def format_property(prop: Dict[str, Any]) -> str:
    """Render one page property value as text."""
    kind = prop.get("type")
    value = prop.get(kind) if kind else None
    if kind in ("title", "rich_text"):
        return plain_text(value)
    if kind in ("select", "status"):
        return (value or {}).get("name", "")
    if kind == "multi_select":
        return ", ".join(option.get("name", "") for option in value or [])
    if kind == "date":
        if not value:
            return ""
        return value.get("start", "") + (f" -> {value['end']}" if value.get("end") else "")
    if kind == "checkbox":
        return "Yes" if value else "No"
    if value is None:
        return ""
    return str(value)


def format_block(block: Dict[str, Any]) -> str:
    """Render one block as a line of text."""
    kind = block.get("type", "")
    data = block.get(kind, {})
    text = plain_text(data.get("rich_text")) if isinstance(data, dict) else ""
    if kind.startswith("heading_"):
        return f"{'#' * int(kind[-1])} {text}"
    if kind == "bulleted_list_item":
        return f"- {text}"
    if kind == "numbered_list_item":
        return f"1. {text}"
    if kind == "to_do":
        return f"[{'x' if data.get('checked') else ' '}] {text}"
    if kind == "code":
        return f"```{data.get('language', '')}\n{text}\n```"
    if kind == "child_page":
        return f"[Subpage] {data.get('title', '')}"
    return text


def _summary(item: Dict[str, Any], index: int) -> str:
    if item.get("object") == "database":
        title = plain_text(item.get("title")) or "(Untitled Database)"
        return (
            f"{index}. [{item['id']}] {title}\n"
            f"   Properties: {len(item.get('properties', {}))}\n   URL: {item.get('url')}"
        )
    parent = item.get("parent", {})
    if parent.get("database_id"):
        where = "(in database)"
    elif parent.get("page_id"):
        where = "(subpage)"
    else:
        where = "(workspace)"
    return (
        f"{index}. [{item['id']}] {page_title(item)} {where}\n"
        f"   URL: {item.get('url')}\n   Last edited: {item.get('last_edited_time')}"
    )


def _paragraphs(content: str) -> List[Dict[str, Any]]:
    return [
        {
            "object": "block",
            "type": "paragraph",
            "paragraph": {"rich_text": [{"type": "text", "text": {"content": line}}]},
        }
        for line in content.split("\n\n")
        if line.strip()
    ]


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------
def notion_tools(
    api_key: Optional[str] = None, client: Optional[NotionClient] = None
) -> List[ToolDefinition]:
    """Definitions for every Notion tool, sharing one client."""
    api = client or NotionClient(api_key)

    def search(args: Dict[str, Any]) -> ToolResult:
        body: Dict[str, Any] = {"page_size": min(int(args.get("maxResults") or 20), 100)}
        if args.get("query"):
            body["query"] = args["query"]
        if args.get("filter") in ("page", "database"):
            body["filter"] = {"property": "object", "value": args["filter"]}
        result = api.request("POST", "/search", json=body)
        items = result.get("results", [])
        if not items:
            return ToolResult(success=True, output="No results found.")
        more = " (more available)" if result.get("has_more") else ""
        formatted = "\n\n".join(_summary(item, i) for i, item in enumerate(items, start=1))
        return ToolResult(success=True, output=f"Found {len(items)} result(s){more}:\n\n{formatted}")

    def get_page(args: Dict[str, Any]) -> ToolResult:
        page = api.request("GET", f"/pages/{require_str(args, 'pageId')}")
        props = "\n".join(
            f"- {name}: {format_property(prop)}" for name, prop in page.get("properties", {}).items()
        )
        return ToolResult(
            success=True,
            output=f"Page: {page_title(page)}\nID: {page['id']}\nURL: {page.get('url')}\n"
            f"Last edited: {page.get('last_edited_time')}\n\nProperties:\n{props}",
        )

    def get_blocks(args: Dict[str, Any]) -> ToolResult:
        block_id = require_str(args, "blockId")
        result = api.request("GET", f"/blocks/{block_id}/children", params={"page_size": 100})
        lines = [line for line in (format_block(b) for b in result.get("results", [])) if line]
        if not lines:
            return ToolResult(success=True, output="(empty page)")
        return ToolResult(success=True, output="\n".join(lines))

    def create_page(args: Dict[str, Any]) -> ToolResult:
        title = require_str(args, "title")
        database_id = args.get("parentDatabaseId")
        page_id = args.get("parentPageId")
        if not database_id and not page_id:
            raise ToolExecutionError("Either parentDatabaseId or parentPageId is required")

        properties: Dict[str, Any] = dict(args.get("properties") or {})
        title_value = {"title": [{"text": {"content": title}}]}
        if database_id:
            title_key = next(
                (key for key in properties if key.lower() in ("name", "title")), "Name"
            )
            properties[title_key] = title_value
            parent = {"database_id": database_id}
        else:
            properties["title"] = title_value
            parent = {"page_id": page_id}

        body: Dict[str, Any] = {"parent": parent, "properties": properties}
        if args.get("content"):
            body["children"] = _paragraphs(args["content"])
        if args.get("emoji"):
            body["icon"] = {"type": "emoji", "emoji": args["emoji"]}
        page = api.request("POST", "/pages", json=body)
        return ToolResult(
            success=True,
            output=f"Page created successfully!\nTitle: {title}\nID: {page['id']}\n"
            f"URL: {page.get('url')}",
        )

    def update_page(args: Dict[str, Any]) -> ToolResult:
        page_id = require_str(args, "pageId")
        body: Dict[str, Any] = {}
        if isinstance(args.get("properties"), dict):
            body["properties"] = args["properties"]
        if isinstance(args.get("archived"), bool):
            body["archived"] = args["archived"]
        if "emoji" in args:
            body["icon"] = {"type": "emoji", "emoji": args["emoji"]} if args["emoji"] else None
        if not body:
            raise ToolExecutionError("Nothing to update")
        page = api.request("PATCH", f"/pages/{page_id}", json=body)
        output = f"Page updated successfully!\nID: {page['id']}\nURL: {page.get('url')}"
        if "archived" in body:
            output += f"\nArchived: {body['archived']}"
        return ToolResult(success=True, output=output)

    def add_blocks(args: Dict[str, Any]) -> ToolResult:
        block_id = require_str(args, "blockId")
        children = _paragraphs(require_str(args, "content"))
        result = api.request("PATCH", f"/blocks/{block_id}/children", json={"children": children})
        return ToolResult(
            success=True, output=f"Added {len(result.get('results', children))} block(s)"
        )

    def get_database(args: Dict[str, Any]) -> ToolResult:
        database = api.request("GET", f"/databases/{require_str(args, 'databaseId')}")
        props = "\n".join(
            f"  - {name} ({prop.get('type')})"
            for name, prop in database.get("properties", {}).items()
        )
        return ToolResult(
            success=True,
            output=f"Database: {plain_text(database.get('title')) or '(Untitled)'}\n"
            f"ID: {database['id']}\nURL: {database.get('url')}\n\nProperties:\n{props}",
        )

    def create_database(args: Dict[str, Any]) -> ToolResult:
        parent_page_id = require_str(args, "parentPageId")
        title = require_str(args, "title")
        properties = args.get("properties")
        if not isinstance(properties, dict) or not properties:
            raise ToolExecutionError("properties are required")
        body = {
            "parent": {"type": "page_id", "page_id": parent_page_id},
            "title": [{"type": "text", "text": {"content": title}}],
            "properties": properties,
            "is_inline": bool(args.get("isInline", False)),
        }
        database = api.request("POST", "/databases", json=body)
        return ToolResult(
            success=True,
            output=f"Database created successfully!\n"
            f"Title: {plain_text(database.get('title')) or title}\nID: {database['id']}\n"
            f"URL: {database.get('url')}\nProperties: {len(database.get('properties', {}))}",
        )

    def query_database(args: Dict[str, Any]) -> ToolResult:
        database_id = require_str(args, "databaseId")
        body: Dict[str, Any] = {"page_size": min(int(args.get("maxResults") or 20), 100)}
        if isinstance(args.get("filter"), dict):
            body["filter"] = args["filter"]
        if isinstance(args.get("sorts"), list):
            body["sorts"] = args["sorts"]
        result = api.request("POST", f"/databases/{database_id}/query", json=body)
        rows = result.get("results", [])
        if not rows:
            return ToolResult(success=True, output="No entries found.")
        formatted = []
        for i, row in enumerate(rows, start=1):
            fields = "\n".join(
                f"   {name}: {format_property(prop)}"
                for name, prop in row.get("properties", {}).items()
                if prop.get("type") != "title"
            )
            formatted.append(f"{i}. [{row['id']}] {page_title(row)}\n{fields}".rstrip())
        return ToolResult(
            success=True, output=f"Found {len(rows)} entr(ies):\n\n" + "\n\n".join(formatted)
        )

    def _string(description: str) -> Dict[str, str]:
        return {"type": "string", "description": description}

    return [
        ToolDefinition(
            name="notion_search",
            description="Search Notion pages and databases shared with the integration.",
            parameters={
                "type": "object",
                "properties": {
                    "query": _string("Text to search for. Leave empty to list recent items."),
                    "filter": _string("Restrict results to 'page' or 'database'"),
                    "maxResults": {
                        "type": "number",
                        "description": "Maximum results to return (default: 20, max: 100)",
                    },
                },
                "required": [],
            },
            executor=search,
        ),
        ToolDefinition(
            name="notion_get_page",
            description="Get a Notion page's title and properties.",
            parameters={
                "type": "object",
                "properties": {"pageId": _string("The page ID")},
                "required": ["pageId"],
            },
            executor=get_page,
        ),
        ToolDefinition(
            name="notion_get_blocks",
            description="Read the content blocks of a Notion page.",
            parameters={
                "type": "object",
                "properties": {"blockId": _string("The page or block ID")},
                "required": ["blockId"],
            },
            executor=get_blocks,
        ),
        ToolDefinition(
            name="notion_create_page",
            description=(
                "Create a new page in Notion, either as a database item or as a child of another "
                "page."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "parentDatabaseId": _string("Database ID to create the page in"),
                    "parentPageId": _string("Parent page ID to create a subpage under"),
                    "title": _string("The page title"),
                    "properties": {
                        "type": "object",
                        "description": (
                            "Additional Notion property values for database pages, e.g. "
                            '{"Status": {"select": {"name": "Done"}}}'
                        ),
                    },
                    "content": _string("Initial text; blank lines separate paragraphs"),
                    "emoji": _string("Emoji icon for the page"),
                },
                "required": ["title"],
            },
            executor=create_page,
        ),
        ToolDefinition(
            name="notion_update_page",
            description=(
                "Update a Notion page's properties, change its icon, or archive/unarchive it."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "pageId": _string("The page ID to update"),
                    "properties": {
                        "type": "object",
                        "description": (
                            "Property values to set, in the same format as notion_create_page"
                        ),
                    },
                    "archived": {
                        "type": "boolean",
                        "description": "True to archive (delete) the page, false to restore it",
                    },
                    "emoji": _string("New emoji icon; an empty string removes the icon"),
                },
                "required": ["pageId"],
            },
            executor=update_page,
        ),
        ToolDefinition(
            name="notion_add_blocks",
            description="Append paragraphs of text to a Notion page.",
            parameters={
                "type": "object",
                "properties": {
                    "blockId": _string("The page or block ID to append to"),
                    "content": _string("Text to append; blank lines separate paragraphs"),
                },
                "required": ["blockId", "content"],
            },
            executor=add_blocks,
        ),
        ToolDefinition(
            name="notion_get_database",
            description="Get a Notion database's title and property schema.",
            parameters={
                "type": "object",
                "properties": {"databaseId": _string("The database ID")},
                "required": ["databaseId"],
            },
            executor=get_database,
        ),
        ToolDefinition(
            name="notion_query_database",
            description="List entries of a Notion database, optionally filtered and sorted.",
            parameters={
                "type": "object",
                "properties": {
                    "databaseId": _string("The database ID"),
                    "filter": {"type": "object", "description": "Notion filter object"},
                    "sorts": {
                        "type": "array",
                        "items": {"type": "object"},
                        "description": "Notion sort objects",
                    },
                    "maxResults": {
                        "type": "number",
                        "description": "Maximum entries to return (default: 20, max: 100)",
                    },
                },
                "required": ["databaseId"],
            },
            executor=query_database,
        ),
        ToolDefinition(
            name="notion_create_database",
            description="Create a new Notion database as a child of a page.",
            parameters={
                "type": "object",
                "properties": {
                    "parentPageId": _string("The page the database is created under"),
                    "title": _string("Title of the database"),
                    "properties": {
                        "type": "object",
                        "description": (
                            "Property definitions; include one title property, e.g. "
                            '{"Name": {"title": {}}, "Status": {"select": {"options": '
                            '[{"name": "Todo"}, {"name": "Done"}]}}, "Due": {"date": {}}}'
                        ),
                    },
                    "isInline": {
                        "type": "boolean",
                        "description": "Embed the database in the page (default: false)",
                    },
                },
                "required": ["parentPageId", "title", "properties"],
            },
            executor=create_database,
        ),
    ]
