"""
Tool registry for OpenClaw.

The registry maps tool names to :class:`~openclaw.core.schema.ToolDefinition` objects.  It is built
once at startup by :func:`build_default_registry` (or by hand in tests) and only read afterwards, so
one instance can be shared by every request.
"""

import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
)

from openclaw.agent.tool_executor import run_tool
from openclaw.core.schema import (
    ToolDefinition,
    ToolResult,
)

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Lookup from tool name to definition."""

    def __init__(self, definitions: Iterable[ToolDefinition] = ()) -> None:
        self._tools: Dict[str, ToolDefinition] = {}
        self._cleanups: List[Callable[[], None]] = []
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ToolDefinition) -> None:
        """
        Insert *definition* under its name.

        Registering a name twice replaces the earlier definition, which lets a deployment override
        a built-in tool.
        """
        if definition.name in self._tools:
            logger.info("Overriding tool '%s'", definition.name)
        else:
            logger.debug("Registering tool '%s'", definition.name)
        self._tools[definition.name] = definition

    def get(self, name: str) -> Optional[ToolDefinition]:
        """Return the definition registered as *name*, if any."""
        return self._tools.get(name)

    def names(self) -> List[str]:
        """Registered tool names, in registration order."""
        return list(self._tools)

    def list_schemas(self) -> List[Dict[str, Any]]:
        """Return the function-tool catalog handed to the model."""
        return [definition.schema() for definition in self._tools.values()]

    def execute(self, name: str, args: Dict[str, Any] | None = None) -> ToolResult:
        """Run the tool called *name*.  Unknown names produce a failed result, never an exception."""
        definition = self._tools.get(name)
        if definition is None:
            logger.warning("Model requested unknown tool '%s'", name)
            return ToolResult(success=False, error=f"Unknown tool: {name}")
        return run_tool(definition, args)

    def add_cleanup(self, fn: Callable[[], None]) -> None:
        """Run *fn* when the registry is closed, e.g. to release a tool's browser."""
        self._cleanups.append(fn)

    def close(self) -> None:
        """Release resources held by tools.  Each cleanup runs once, newest first."""
        while self._cleanups:
            fn = self._cleanups.pop()
            try:
                fn()
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Tool cleanup failed")

    @staticmethod
    def format_result(result: ToolResult) -> str:
        """Render *result* as the content of a tool message."""
        return format_tool_result(result)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def format_tool_result(result: ToolResult) -> str:
    """Raw output on success; ``"Error: <error>\\n<output>"`` (trimmed) on failure."""
    if result.success:
        return result.output
    return f"Error: {result.error}\n{result.output}".strip()


def build_default_registry(settings: Any) -> ToolRegistry:
    """
    Build the registry with every built-in tool.

    The tools are listed explicitly here; nothing registers itself at import time.
    """
    # pylint: disable=import-outside-toplevel
    from openclaw.tools.browser import (
        BrowserSession,
        browser_tools,
    )
    from openclaw.tools.google import google_tools
    from openclaw.tools.notion import notion_tools
    from openclaw.tools.shell import shell_tools

    browser = BrowserSession(headless=settings.BROWSER_HEADLESS)
    definitions: List[ToolDefinition] = []
    definitions.extend(shell_tools(timeout=settings.SHELL_TIMEOUT))
    definitions.extend(browser_tools(session=browser))
    definitions.extend(google_tools(access_token=settings.GOOGLE_ACCESS_TOKEN))
    definitions.extend(notion_tools(api_key=settings.NOTION_API_KEY))
    registry = ToolRegistry(definitions)
    registry.add_cleanup(browser.close)
    return registry
