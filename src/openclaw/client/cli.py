"""CLI client for the OpenClaw API."""

from __future__ import annotations

import json
import logging
import time
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Tuple,
)

import httpx

from openclaw.common import (
    AnsiColors,
    colored_print,
)
from openclaw.config import settings
from openclaw.core.events import (
    DONE_SENTINEL,
    NO_RESPONSE,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# CLI Client
# ---------------------------------------------------------------------------
def get_user_message() -> Tuple[str, bool]:
    """
    Get a message from the user via standard input.

    Returns:
        Tuple of (user_input, success_flag)
        The success_flag is False if input couldn't be read (e.g., Ctrl+C)
    """
    try:
        user_input = input().strip()
        return user_input, True
    except (EOFError, KeyboardInterrupt):
        return "", False


def parse_sse_line(line: str) -> Optional[Dict[str, Any]]:
    """Decode one ``data:`` line; blank lines, other fields and the sentinel give *None*."""
    if not line.startswith("data:"):
        return None
    payload = line[len("data:") :].strip()
    if not payload or payload == DONE_SENTINEL:
        return None
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Skipping malformed event: %s", payload)
        return None


def stream_chat(
    messages: List[Dict[str, str]],
    base_url: str | None = None,
    max_retries: int = 5,
    transport: httpx.BaseTransport | None = None,
) -> Iterator[Dict[str, Any]]:
    """POST *messages* to ``/api/chat`` and yield each streamed event, retrying while the API boots."""
    api_url = f"{base_url or f'http://localhost:{settings.API_PORT}'}/api/chat"

    for attempt in range(max_retries):
        try:
            with httpx.Client(timeout=None, transport=transport) as client:
                with client.stream("POST", api_url, json={"messages": messages}) as response:
                    if response.is_error:
                        response.read()
                        yield {"type": "error", "error": f"API error: {response.text}"}
                        return
                    for line in response.iter_lines():
                        event = parse_sse_line(line)
                        if event is not None:
                            yield event
            return
        except httpx.ConnectError:
            if attempt == max_retries - 1:
                break
            retry_delay = 0.5 * (2**attempt)  # exponential backoff: 0.5s, 1s, 2s, 4s...
            logger.info(
                "API not ready yet, retrying in %.1f seconds (attempt %d/%d)...",
                retry_delay,
                attempt + 1,
                max_retries,
            )
            time.sleep(retry_delay)
        except httpx.HTTPError as exc:
            logger.error("API request error: %s", exc)
            yield {"type": "error", "error": f"Error connecting to API: {exc}"}
            return

    yield {"type": "error", "error": f"Failed to connect to API after {max_retries} attempts"}


def render_event(event: Dict[str, Any]) -> None:
    """Print one event to the terminal."""
    kind = event.get("type")
    if kind == "content":
        colored_print(event.get("content", ""), AnsiColors.YELLOW, end="", flush=True)
    elif kind == "tool_call":
        colored_print(f"\n[{event.get('name')}] {event.get('label', '')}", AnsiColors.BLUE)
    elif kind == "tool_result":
        status = event.get("label", "") if event.get("success") else event.get("error", "")
        color = AnsiColors.GREEN if event.get("success") else AnsiColors.RED
        colored_print(f"[{event.get('name')}] {status}", color)
        if event.get("url"):
            colored_print(event["url"], color)
    elif kind == "error":
        colored_print(f"\n{event.get('error')}", AnsiColors.RED)


def assistant_reply(events: List[Dict[str, Any]]) -> Optional[str]:
    """Text to keep in history for one exchange; the no-response placeholder is not a reply."""
    reply = "".join(e.get("content", "") for e in events if e.get("type") == "content")
    if not reply or reply == NO_RESPONSE:
        return None
    return reply


def run_cli() -> None:
    """Run the CLI client that communicates with the API."""
    history: List[Dict[str, str]] = []

    colored_print("\nOpenClaw shell - type 'exit' or 'quit' (or Ctrl+C) to exit", AnsiColors.GREEN)
    while True:
        colored_print("\nYou: ", AnsiColors.BLUE, end="")
        user_msg, ok = get_user_message()
        if not ok:
            break
        if user_msg.lower() in {"exit", "quit"}:
            break

        history.append({"role": "user", "content": user_msg})
        events: List[Dict[str, Any]] = []
        for event in stream_chat(history):
            render_event(event)
            events.append(event)
        print()
        reply = assistant_reply(events)
        if reply:
            history.append({"role": "assistant", "content": reply})


if __name__ == "__main__":
    run_cli()
