"""
Browser automation tool backed by Playwright.

Playwright's sync API is bound to the thread that started it, while tool calls arrive on whichever
worker thread runs the request.  :class:`BrowserSession` therefore owns one dedicated thread and
submits every page operation to it, which also serialises concurrent requests onto the single
shared page.
"""

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    TypeVar,
)

from openclaw.agent.tool_executor import (
    ToolExecutionError,
    require_str,
)
from openclaw.core.schema import (
    ToolDefinition,
    ToolResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NAVIGATION_TIMEOUT_MS = 30_000
_WAIT_TIMEOUT_MS = 15_000
_MAX_SNAPSHOT_CHARS = 12_000


def _truncate(value: str, limit: int = _MAX_SNAPSHOT_CHARS) -> str:
    if len(value) <= limit:
        return value
    return f"{value[:limit]}\n... (truncated {len(value) - limit} chars)"


class BrowserSession:
    """One lazily launched Chromium page shared by every browser tool call."""

    def __init__(self, headless: bool = True) -> None:
        self._headless = headless
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="browser")
        self._lock = threading.Lock()
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None

    # ------------------------------------------------------------------ #
    # Internals (run on the browser thread)
    # ------------------------------------------------------------------ #
    def _run(self, fn: Callable[[], T]) -> T:
        with self._lock:
            return self._executor.submit(fn).result()

    def _active_page(self) -> Any:
        if self._page is not None and not self._page.is_closed():
            return self._page

        if self._browser is None or not self._browser.is_connected():
            try:
                from playwright.sync_api import (  # pylint: disable=import-outside-toplevel
                    sync_playwright,
                )
            except ImportError as exc:
                raise ToolExecutionError(
                    "playwright is not installed. Install with: pip install 'openclaw[browser]'; "
                    "then run: playwright install chromium"
                ) from exc

            logger.info("Launching Chromium (headless=%s)", self._headless)
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self._headless,
                args=["--disable-blink-features=AutomationControlled"],
            )

        context = self._browser.new_context(viewport={"width": 1280, "height": 720})
        self._page = context.new_page()
        return self._page

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def navigate(self, target_url: str) -> Dict[str, Any]:
        """Load *target_url* in the shared page."""

        def _navigate() -> Dict[str, Any]:
            page = self._active_page()
            response = page.goto(
                target_url, wait_until="domcontentloaded", timeout=_NAVIGATION_TIMEOUT_MS
            )
            if response is None:
                raise ToolExecutionError("Navigation failed - no response received")
            if not response.ok:
                logger.warning("Navigation to %s returned status %d", target_url, response.status)
            return {"url": page.url, "title": page.title(), "status": response.status}

        return self._run(_navigate)

    def snapshot(self) -> Dict[str, Any]:
        """Return the current page's URL, title, HTML and visible text."""

        def _snapshot() -> Dict[str, Any]:
            page = self._active_page()
            return {
                "url": page.url,
                "title": page.title(),
                "html": _truncate(page.content()),
                "text": _truncate(page.inner_text("body")),
            }

        return self._run(_snapshot)

    def act(
        self,
        kind: str,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        input_text: Optional[str] = None,
        time_ms: Optional[float] = None,
        submit: bool = False,
    ) -> Dict[str, Any]:
        """Click, type into, or wait for an element of the current page."""

        def _locate(page: Any) -> Any:
            if selector:
                return page.locator(selector).first
            if text:
                return page.get_by_text(text).first
            raise ToolExecutionError(f"selector or text is required for {kind}")

        def _act() -> Dict[str, Any]:
            page = self._active_page()
            if kind == "wait":
                if time_ms:
                    page.wait_for_timeout(time_ms)
                else:
                    _locate(page).wait_for(timeout=_WAIT_TIMEOUT_MS)
            elif kind == "click":
                _locate(page).click(timeout=_WAIT_TIMEOUT_MS)
            elif kind == "type":
                if input_text is None:
                    raise ToolExecutionError("input is required for type")
                target = _locate(page)
                target.fill(input_text, timeout=_WAIT_TIMEOUT_MS)
                if submit:
                    target.press("Enter")
            else:
                raise ToolExecutionError(f"Unsupported act kind: {kind}")
            return {"ok": True, "kind": kind, "url": page.url}

        return self._run(_act)

    def close(self) -> None:
        """Shut the browser down and stop the browser thread."""
        if self._playwright is None:
            self._executor.shutdown(wait=True)
            return

        def _close() -> None:
            if self._browser is not None:
                self._browser.close()
            if self._playwright is not None:
                self._playwright.stop()
            self._browser = self._playwright = self._page = None

        self._run(_close)
        self._executor.shutdown(wait=True)


def browser_tools(
    headless: bool = True, session: Optional[BrowserSession] = None
) -> List[ToolDefinition]:
    """Definitions for the browser tool.  The session is created on first use."""
    holder: Dict[str, BrowserSession] = {}
    if session is not None:
        holder["session"] = session

    def _session() -> BrowserSession:
        if "session" not in holder:
            holder["session"] = BrowserSession(headless=headless)
        return holder["session"]

    def _execute(args: Dict[str, Any]) -> ToolResult:
        action = str(args.get("action") or "").strip()
        if action == "navigate":
            result = _session().navigate(require_str(args, "targetUrl").strip())
        elif action == "snapshot":
            result = _session().snapshot()
        elif action == "act":
            kind = str(args.get("kind") or "").strip()
            if not kind:
                raise ToolExecutionError("kind is required for act")
            time_ms = args.get("timeMs")
            result = _session().act(
                kind,
                selector=args.get("selector") if isinstance(args.get("selector"), str) else None,
                text=args.get("text") if isinstance(args.get("text"), str) else None,
                input_text=args.get("input") if isinstance(args.get("input"), str) else None,
                time_ms=float(time_ms) if isinstance(time_ms, (int, float)) else None,
                submit=bool(args.get("submit", False)),
            )
        else:
            raise ToolExecutionError(f"Unsupported action: {action}")
        return ToolResult(success=True, output=json.dumps(result, indent=2))

    return [
        ToolDefinition(
            name="browser",
            description="Control a browser session for automation (navigate, snapshot, act).",
            parameters={
                "type": "object",
                "properties": {
                    "action": {
                        "type": "string",
                        "description": "Action to perform: navigate, snapshot, act",
                    },
                    "targetUrl": {
                        "type": "string",
                        "description": "URL to navigate to when action=navigate",
                    },
                    "kind": {
                        "type": "string",
                        "description": "Action kind when action=act: click, type, wait",
                    },
                    "selector": {"type": "string", "description": "CSS selector for act"},
                    "text": {"type": "string", "description": "Visible text for act"},
                    "input": {"type": "string", "description": "Text input for type"},
                    "timeMs": {"type": "number", "description": "Time to wait for wait action"},
                    "submit": {"type": "boolean", "description": "Press Enter after type"},
                },
                "required": ["action"],
            },
            executor=_execute,
        )
    ]
