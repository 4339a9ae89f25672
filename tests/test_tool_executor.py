"""
Sanity tests for the tool boundary and the registry.

Run with:
$ pytest -q
"""

from types import SimpleNamespace
from typing import (
    Any,
    Dict,
)

from conftest import echo_tool

from openclaw.agent.tool_executor import (
    ToolExecutionError,
    require_str,
    run_tool,
)
from openclaw.core.schema import (
    ToolDefinition,
    ToolResult,
)
from openclaw.tools import (
    ToolRegistry,
    build_default_registry,
    format_tool_result,
)


def _tool(executor) -> ToolDefinition:
    return ToolDefinition(name="t", description="test tool", parameters={}, executor=executor)


def _add(args: Dict[str, Any]) -> ToolResult:
    return ToolResult(success=True, output=str(args["a"] + args["b"]))


def test_run_tool_success() -> None:
    """Executor should return the tool's result unchanged."""
    assert run_tool(_tool(_add), {"a": 2, "b": 3}) == ToolResult(success=True, output="5")


def test_run_tool_bad_args() -> None:
    """Missing arguments become a failed result instead of an exception."""
    result = run_tool(_tool(_add), {"a": 2})

    assert result.success is False
    assert "Invalid arguments" in result.error


def test_run_tool_execution_error() -> None:
    """ToolExecutionError messages are passed through verbatim."""

    def _fail(args: Dict[str, Any]) -> ToolResult:
        raise ToolExecutionError("Google not connected")

    assert run_tool(_tool(_fail)).error == "Google not connected"


def test_run_tool_unexpected_exception() -> None:
    """Any other exception is caught at the boundary."""

    def _crash(args: Dict[str, Any]) -> ToolResult:
        raise RuntimeError("kaboom")

    result = run_tool(_tool(_crash))

    assert result.success is False
    assert "kaboom" in result.error


def test_run_tool_rejects_non_result() -> None:
    """A tool that forgets to return a ToolResult is reported as failed."""
    result = run_tool(_tool(lambda args: "plain string"))

    assert result.success is False


def test_require_str() -> None:
    """Blank or missing strings raise ToolExecutionError."""
    assert require_str({"k": "v"}, "k") == "v"
    for args in ({}, {"k": "  "}, {"k": 3}):
        try:
            require_str(args, "k")
        except ToolExecutionError as exc:
            assert "'k' is required" in str(exc)
        else:  # pragma: no cover
            raise AssertionError("ToolExecutionError was not raised")


def test_registry_unknown_tool() -> None:
    """Unknown names produce a descriptive failure, never an exception."""
    result = ToolRegistry().execute("not_a_tool", {})

    assert result == ToolResult(success=False, error="Unknown tool: not_a_tool")


def test_registry_last_registration_wins() -> None:
    """Registering an existing name overrides the earlier definition."""
    registry = ToolRegistry([echo_tool()])
    registry.register(
        ToolDefinition(
            name="echo",
            description="shout",
            parameters={},
            executor=lambda args: ToolResult(success=True, output="LOUD"),
        )
    )

    assert len(registry) == 1
    assert registry.execute("echo", {"value": "x"}).output == "LOUD"
    assert registry.list_schemas()[0]["function"]["description"] == "shout"


def test_registry_schemas() -> None:
    """Schemas use the function-tool shape."""
    registry = ToolRegistry([echo_tool()])

    assert registry.list_schemas() == [
        {
            "type": "function",
            "function": {
                "name": "echo",
                "description": "Echo the value back",
                "parameters": {"type": "object", "properties": {"value": {"type": "string"}}},
            },
        }
    ]
    assert "echo" in registry
    assert registry.get("missing") is None


def test_format_tool_result() -> None:
    """Success is raw output; failure combines error and partial output."""
    assert format_tool_result(ToolResult(success=True, output="data")) == "data"
    assert format_tool_result(ToolResult(success=False, error="bad", output="partial")) == (
        "Error: bad\npartial"
    )
    assert format_tool_result(ToolResult(success=False, error="bad")) == "Error: bad"


def test_build_default_registry() -> None:
    """The default registry lists shell, browser, Google and Notion tools in that order."""
    settings = SimpleNamespace(
        SHELL_TIMEOUT=5.0,
        BROWSER_HEADLESS=True,
        GOOGLE_ACCESS_TOKEN=None,
        NOTION_API_KEY=None,
    )

    names = build_default_registry(settings).names()

    assert names[:2] == ["run_bash_command", "browser"]
    assert names[2].startswith("google_")
    assert names[-1].startswith("notion_")
    assert len(names) == 2 + 18 + 9


def test_registry_close_runs_cleanups_once() -> None:
    """Cleanups run newest first, keep going after a failure and never run twice."""
    calls = []

    def broken() -> None:
        raise RuntimeError("boom")

    registry = ToolRegistry()
    registry.add_cleanup(lambda: calls.append("first"))
    registry.add_cleanup(broken)
    registry.add_cleanup(lambda: calls.append("last"))

    registry.close()
    registry.close()

    assert calls == ["last", "first"]
