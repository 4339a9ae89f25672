"""Runs a single tool definition and turns every failure into a ``ToolResult``."""

import logging
from typing import (
    Any,
    Dict,
)

from openclaw.core.schema import (
    ToolDefinition,
    ToolResult,
)

logger = logging.getLogger(__name__)


class ToolExecutionError(RuntimeError):
    """Raised by tool code when a requested operation cannot run or fails."""


def run_tool(definition: ToolDefinition, args: Dict[str, Any] | None = None) -> ToolResult:
    """
    Invoke *definition* with *args* and never raise.

    Parameters
    ----------
    definition:
        The registered tool.
    args:
        Parsed arguments from the model.  If *None*, an empty dict is assumed.

    Returns
    -------
    ToolResult
        Whatever the tool returned, or a failed result describing the exception it raised.
    """

    if args is None:
        args = {}

    try:
        logger.debug("Executing tool '%s' with args=%s", definition.name, args)
        result = definition.executor(args)
    except ToolExecutionError as exc:
        logger.warning("Tool '%s' failed: %s", definition.name, exc)
        return ToolResult(success=False, error=str(exc))
    except (KeyError, TypeError, ValueError) as exc:
        # Argument mismatch - give the model a clean message it can act on.
        logger.warning("Invalid arguments for tool '%s': %s", definition.name, exc)
        return ToolResult(success=False, error=f"Invalid arguments for tool '{definition.name}': {exc}")
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unhandled error in tool '%s'", definition.name)
        return ToolResult(success=False, error=f"Tool '{definition.name}' raised an error: {exc}")

    if not isinstance(result, ToolResult):
        logger.error("Tool '%s' returned %r instead of a ToolResult", definition.name, result)
        return ToolResult(success=False, error=f"Tool '{definition.name}' returned no result")
    return result


def require_str(args: Dict[str, Any], key: str) -> str:
    """Return a non-empty string argument or raise :class:`ToolExecutionError`."""
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ToolExecutionError(f"'{key}' is required")
    return value
