"""
Translation of low-level execution failures into actionable errors.

Start failures are classified by which resolved path was a bare fallback
name. Nonzero exits are classified by matching stderr against an ordered
pattern table; the first matching pattern wins.
"""

from typing import List, Tuple

from .errors import (
    ExecutionError,
    ExecutionFailed,
    ExecutionNotFound,
    ExecutionTimeout,
    FailureReason,
    PermissionDenied,
    UsageError,
)
from ..ccusage.locator import ResolvedPaths


STDERR_PATTERNS: List[Tuple[str, FailureReason]] = [
    ("command not found", FailureReason.MISSING_BINARY),
    ("No such file", FailureReason.MISSING_BINARY),
    ("ENOENT", FailureReason.NOT_ACCESSIBLE),
    ("permission", FailureReason.ACCESS_DENIED),
    ("EACCES", FailureReason.ACCESS_DENIED),
    ("Claude Code", FailureReason.SESSION),
    ("session", FailureReason.SESSION),
]

_INSTALL_HINT = (
    "   npm install -g ccusage\n"
    "   (or: yarn global add ccusage / pnpm add -g ccusage)"
)


def classify_stderr(stderr: str) -> FailureReason:
    """Return the reason of the first pattern contained in stderr."""
    for pattern, reason in STDERR_PATTERNS:
        if pattern in stderr:
            return reason
    return FailureReason.GENERIC


def translate_start_failure(error: ExecutionError, paths: ResolvedPaths) -> UsageError:
    """Map a failure to start ccusage onto the error taxonomy.

    Args:
        error: Error raised by the process invoker
        paths: Paths that were used for the attempt

    Returns:
        Categorized error carrying a display-ready message
    """
    if isinstance(error, ExecutionTimeout):
        return error

    os_error = error.os_error
    if isinstance(os_error, FileNotFoundError):
        return _not_found(paths, os_error)
    if isinstance(os_error, PermissionError):
        return PermissionDenied(
            "Permission denied\n\n"
            "ccusage or Node.js was found but cannot be executed.\n\n"
            "1. Check file permissions:\n"
            f"   ls -la {paths.runtime_path}\n"
            f"   ls -la {paths.tool_path}\n"
            "2. Reinstall without sudo using a Node version manager "
            "(nvm, fnm or volta)\n\n"
            f"Error details: {os_error}"
        )

    return ExecutionFailed(
        "Unexpected error while starting ccusage\n\n"
        f"Node.js path: {paths.runtime_path}\n"
        f"ccusage path: {paths.tool_path}\n\n"
        "1. Restart the application\n"
        "2. Reinstall ccusage:\n"
        f"{_INSTALL_HINT}\n"
        "3. Run ccusage from a terminal to see detailed errors\n\n"
        f"Error details: {os_error or error.message}",
        command=paths.tool_path,
        reason=FailureReason.UNEXPECTED
    )


def _not_found(paths: ResolvedPaths, os_error: OSError) -> ExecutionNotFound:
    if paths.tool_is_fallback:
        return ExecutionNotFound(
            "ccusage not found\n\n"
            "Install ccusage globally:\n"
            f"{_INSTALL_HINT}\n\n"
            "Make sure ccusage is on your PATH, or set CCUSAGE_PATH "
            "to its location.",
            component="tool"
        )
    if paths.runtime_is_fallback:
        return ExecutionNotFound(
            "Node.js not found\n\n"
            "Install Node.js from https://nodejs.org, with Homebrew "
            "(brew install node) or with a version manager (nvm, fnm, volta), "
            "then install ccusage:\n"
            f"{_INSTALL_HINT}\n\n"
            "Or set NODE_PATH to a custom Node.js executable.",
            component="runtime"
        )
    return ExecutionNotFound(
        "Command execution failed\n\n"
        f"Detected paths:\n  Node.js: {paths.runtime_path}\n"
        f"  ccusage: {paths.tool_path}\n\n"
        "1. Verify Node.js installation:\n"
        f"   {paths.runtime_path} --version\n"
        "2. Verify ccusage installation:\n"
        f"   {paths.tool_path} --version\n"
        "3. Try reinstalling ccusage:\n"
        f"{_INSTALL_HINT}\n\n"
        f"Error details: {os_error}",
        component=None
    )


def translate_exit_failure(command: str, stderr: str, exit_status: int) -> ExecutionFailed:
    """Build an ExecutionFailed for a nonzero exit of `ccusage <command>`."""
    reason = classify_stderr(stderr)

    if reason == FailureReason.MISSING_BINARY:
        message = (
            "ccusage command not found\n\n"
            f"{_INSTALL_HINT}\n\n"
            "Then verify with: ccusage --version"
        )
    elif reason == FailureReason.NOT_ACCESSIBLE:
        message = (
            "Node.js or ccusage not accessible\n\n"
            "Node.js or ccusage is not installed, or PATH does not reach them.\n"
            "1. Install Node.js: https://nodejs.org\n"
            "2. Install ccusage: npm install -g ccusage\n\n"
            f"Error: {stderr}"
        )
    elif reason == FailureReason.ACCESS_DENIED:
        message = (
            "Permission denied\n\n"
            "ccusage execution was blocked by permissions.\n"
            "1. Use a Node version manager (nvm, fnm, volta), no sudo required\n"
            "2. Or fix npm permissions: npm config set prefix ~/.npm-global\n\n"
            f"Error: {stderr}"
        )
    elif reason == FailureReason.SESSION:
        message = (
            "Claude Code session issue\n\n"
            "ccusage cannot access Claude data. Make sure Claude Code is "
            "installed, you are logged in and have used it recently, "
            "then refresh.\n\n"
            f"ccusage {command} error: {stderr}"
        )
    else:
        message = (
            f"ccusage {command} command failed (exit {exit_status})\n\n"
            "1. Update ccusage: npm update -g ccusage\n"
            "2. Check the version: ccusage --version\n"
            f"3. Test manually: ccusage {command}\n\n"
            f"Raw error: {stderr}"
        )

    return ExecutionFailed(
        message,
        command=command,
        stderr=stderr,
        exit_status=exit_status,
        reason=reason
    )
