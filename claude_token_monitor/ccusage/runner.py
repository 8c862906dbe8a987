"""
Execution of the ccusage command.

Builds the child environment so a ccusage launched outside an interactive
shell can still find Node.js, and captures its output.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from ..config.loader import DEFAULT_TIMEOUT_SECONDS
from ..core.errors import ExecutionError, ExecutionTimeout

logger = logging.getLogger(__name__)

COMMON_BIN_DIRS: List[str] = ["/opt/homebrew/bin", "/usr/local/bin", "/usr/bin", "/bin"]
DEFAULT_RUNTIME_DIR = "/usr/local/bin"


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of one ccusage run."""
    stdout: bytes
    stderr: bytes
    exit_status: int

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0

    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def build_child_environment(
    runtime_path: str,
    base_env: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Return the environment for the ccusage child process.

    PATH is prefixed with the runtime's directory and the common install
    directories; NODE_PATH points at the resolved runtime.
    """
    env = dict(os.environ if base_env is None else base_env)
    runtime_dir = os.path.dirname(runtime_path) or DEFAULT_RUNTIME_DIR

    current_path = env.get("PATH", "")
    parts = [runtime_dir] + COMMON_BIN_DIRS
    if current_path:
        parts.append(current_path)

    env["PATH"] = os.pathsep.join(parts)
    env["NODE_PATH"] = runtime_path
    return env


def run_tool(
    tool_path: str,
    runtime_path: str,
    args: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    env: Optional[Mapping[str, str]] = None
) -> CommandOutput:
    """Run `tool_path args...` and capture its output.

    Args:
        tool_path: ccusage executable
        runtime_path: Node.js executable exposed to the child
        args: Command-line arguments
        timeout: Seconds to wait before killing the child
        env: Base environment (defaults to os.environ)

    Returns:
        CommandOutput, whatever the exit status

    Raises:
        ExecutionError: If the program cannot be started
        ExecutionTimeout: If the program runs longer than `timeout`
    """
    command = [tool_path] + list(args)
    logger.debug("Running %s", " ".join(command))

    try:
        completed = subprocess.run(
            command,
            env=build_child_environment(runtime_path, env),
            capture_output=True,
            timeout=timeout
        )
    except subprocess.TimeoutExpired:
        # subprocess.run kills the child before re-raising
        raise ExecutionTimeout(
            f"ccusage {' '.join(args)} did not finish within {timeout:g} seconds "
            "and was stopped",
            timeout=timeout
        )
    except OSError as e:
        raise ExecutionError(f"Could not start {tool_path}: {e}", os_error=e) from e

    logger.debug("%s exited with status %d", tool_path, completed.returncode)
    return CommandOutput(
        stdout=completed.stdout,
        stderr=completed.stderr,
        exit_status=completed.returncode
    )
