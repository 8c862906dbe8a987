"""
Repository pattern for ccusage data access.

Runs the reporting tool and turns each outcome into parsed records or a
categorized error.
"""

import logging
from typing import Callable, List, Optional

from ..config.loader import DEFAULT_TIMEOUT_SECONDS, MonitorConfig, load_monitor_config
from ..core.errors import ExecutionError
from ..core.translator import translate_exit_failure, translate_start_failure
from .locator import ResolvedPaths, get_resolved_paths
from .models import DailyEntry, UsageBlock
from .parser import parse_blocks, parse_daily
from .runner import CommandOutput, run_tool

logger = logging.getLogger(__name__)


class CcusageRepository:
    """Repository for reading usage reports from ccusage.

    Every call runs the tool again; nothing is cached except the
    executable paths.
    """

    def __init__(
        self,
        paths: Optional[ResolvedPaths] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        runner: Callable[..., CommandOutput] = run_tool
    ):
        """Initialize the repository.

        Args:
            paths: Executables to use (resolved lazily when omitted)
            timeout: Seconds to wait for each ccusage run
            runner: Process invoker, replaceable in tests
        """
        self._paths = paths
        self.timeout = timeout
        self.runner = runner

    @property
    def paths(self) -> ResolvedPaths:
        if self._paths is None:
            self._paths = get_resolved_paths()
        return self._paths

    def fetch_blocks(self) -> List[UsageBlock]:
        """Run `ccusage blocks --json` and parse the blocks."""
        return parse_blocks(self._run("blocks"))

    def fetch_daily(self) -> List[DailyEntry]:
        """Run `ccusage daily --json` and parse the daily entries."""
        return parse_daily(self._run("daily"))

    def _run(self, command: str) -> bytes:
        paths = self.paths
        try:
            output = self.runner(
                paths.tool_path,
                paths.runtime_path,
                [command, "--json"],
                timeout=self.timeout
            )
        except ExecutionError as e:
            logger.error("ccusage %s could not be started: %s", command, e.message)
            raise translate_start_failure(e, paths) from e

        if not output.succeeded:
            stderr = output.stderr_text()
            logger.error("ccusage %s exited with status %d", command, output.exit_status)
            raise translate_exit_failure(command, stderr, output.exit_status)

        return output.stdout


# Global repository instance
_default_repository: Optional[CcusageRepository] = None


def get_repository(config: Optional[MonitorConfig] = None) -> CcusageRepository:
    """Get a repository instance.

    Provides a process-wide CcusageRepository; the first call's config
    decides the executable paths and timeout. Without one, the file named
    by CLAUDE_TOKEN_MONITOR_CONFIG is loaded, or defaults are used.
    """
    global _default_repository
    if _default_repository is None:
        if config is None:
            config = load_monitor_config()
        _default_repository = CcusageRepository(
            paths=get_resolved_paths(config),
            timeout=config.timeout_seconds
        )
    return _default_repository


def reset_repository() -> None:
    """Drop the process-wide repository."""
    global _default_repository
    _default_repository = None
