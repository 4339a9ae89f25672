"""Shell command tool."""

import logging
import subprocess
from typing import (
    Any,
    Dict,
    List,
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


def run_bash_command(command: str, timeout: float = 120.0) -> ToolResult:
    """Run *command* with ``bash -c`` and capture its output."""
    try:
        proc = subprocess.run(
            ["bash", "-c", command],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise ToolExecutionError(f"Command timed out after {timeout:g}s") from exc
    except OSError as exc:
        raise ToolExecutionError(f"Failed to execute command: {exc}") from exc

    if proc.returncode != 0:
        logger.info("Command exited with code %d", proc.returncode)
        return ToolResult(
            success=False,
            output=proc.stdout,
            error=proc.stderr.strip() or f"Command exited with code {proc.returncode}",
        )
    return ToolResult(success=True, output=proc.stdout or "(no output)")


def shell_tools(timeout: float = 120.0) -> List[ToolDefinition]:
    """Definitions for the shell tool."""

    def _execute(args: Dict[str, Any]) -> ToolResult:
        return run_bash_command(require_str(args, "command"), timeout=timeout)

    return [
        ToolDefinition(
            name="run_bash_command",
            description="Execute a bash command.",
            parameters={
                "type": "object",
                "properties": {
                    "command": {
                        "type": "string",
                        "description": "The bash command to execute",
                    },
                },
                "required": ["command"],
            },
            executor=_execute,
        )
    ]
