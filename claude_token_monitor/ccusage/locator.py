"""
Discovery of the Node.js runtime and the ccusage executable.

Resolution never fails: when nothing is found the bare program name is
returned so the platform's own PATH search is the last resort.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from ..config.loader import MonitorConfig

logger = logging.getLogger(__name__)

RUNTIME_ENV_VAR = "NODE_PATH"
TOOL_ENV_VAR = "CCUSAGE_PATH"
RUNTIME_NAME = "node"
TOOL_NAME = "ccusage"
# npm installs a batch shim on Windows, which CreateProcess only runs by full name
WINDOWS_TOOL_NAME = "ccusage.cmd"

# (manager root relative to home, suffix appended to each version directory)
VERSION_MANAGERS: List[Tuple[str, str]] = [
    (".nvm/versions/node", "bin/node"),
    (".local/share/fnm/node-versions", "installation/bin/node"),
    (".asdf/installs/nodejs", "bin/node"),
]


@dataclass(frozen=True)
class ResolvedPaths:
    """Executables chosen for this process."""
    runtime_path: str
    tool_path: str

    @property
    def runtime_is_fallback(self) -> bool:
        return self.runtime_path == RUNTIME_NAME

    @property
    def tool_is_fallback(self) -> bool:
        return self.tool_path in (TOOL_NAME, WINDOWS_TOOL_NAME)


def os_family(platform: Optional[str] = None) -> str:
    """Normalize sys.platform to darwin, win32 or linux."""
    platform = platform or sys.platform
    if platform.startswith("darwin"):
        return "darwin"
    if platform.startswith("win") or platform.startswith("cygwin"):
        return "win32"
    return "linux"


class RuntimeLocator:
    """Finds the runtime and tool executables on the host.

    Order per executable: environment override, configured path, static
    candidates for the OS family, version-manager installs (runtime only),
    then the bare program name.
    """

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        home: Optional[Path] = None,
        platform: Optional[str] = None,
        config: Optional[MonitorConfig] = None
    ):
        self.env = os.environ if env is None else env
        self.home = Path(home) if home is not None else Path.home()
        self.family = os_family(platform)
        self.config = config or MonitorConfig()

    def runtime_candidates(self) -> List[str]:
        """Static runtime candidates followed by version-manager installs."""
        return self._static_runtime_candidates() + self._version_manager_candidates()

    def _static_runtime_candidates(self) -> List[str]:
        home = self.home
        if self.family == "darwin":
            return [
                "/opt/homebrew/bin/node",
                "/usr/local/bin/node",
                str(home / ".volta/bin/node"),
                "/usr/bin/node",
            ]
        if self.family == "win32":
            program_files = self.env.get("ProgramFiles", r"C:\Program Files")
            local_app_data = self.env.get("LOCALAPPDATA", str(home / "AppData/Local"))
            return [
                str(Path(program_files) / "nodejs" / "node.exe"),
                str(Path(local_app_data) / "Volta" / "bin" / "node.exe"),
                str(home / ".volta/bin/node.exe"),
            ]
        return [
            "/usr/local/bin/node",
            "/usr/bin/node",
            str(home / ".volta/bin/node"),
            "/home/linuxbrew/.linuxbrew/bin/node",
            "/snap/bin/node",
        ]

    def _version_manager_candidates(self) -> List[str]:
        candidates = []
        for root, suffix in VERSION_MANAGERS:
            versions_dir = self.home / root
            try:
                versions = os.listdir(versions_dir)
            except OSError:
                continue
            for version in versions:
                candidates.append(str(versions_dir / version / suffix))
        return candidates

    def tool_candidates(self) -> List[str]:
        home = self.home
        if self.family == "darwin":
            return [
                "/opt/homebrew/bin/ccusage",
                "/usr/local/bin/ccusage",
                str(home / ".yarn/bin/ccusage"),
                str(home / ".local/share/pnpm/ccusage"),
            ]
        if self.family == "win32":
            app_data = self.env.get("APPDATA", str(home / "AppData/Roaming"))
            local_app_data = self.env.get("LOCALAPPDATA", str(home / "AppData/Local"))
            return [
                str(Path(app_data) / "npm" / "ccusage.cmd"),
                str(Path(local_app_data) / "pnpm" / "ccusage.cmd"),
                str(Path(local_app_data) / "Yarn" / "bin" / "ccusage.cmd"),
            ]
        return [
            "/usr/local/bin/ccusage",
            "/usr/bin/ccusage",
            str(home / ".npm-global/bin/ccusage"),
            str(home / ".yarn/bin/ccusage"),
            str(home / ".local/share/pnpm/ccusage"),
        ]

    def resolve_runtime(self) -> str:
        return self._resolve(
            label="Node.js",
            env_var=RUNTIME_ENV_VAR,
            configured=self.config.paths.node,
            candidates=self.runtime_candidates,
            fallback=RUNTIME_NAME
        )

    def resolve_tool(self) -> str:
        return self._resolve(
            label="ccusage",
            env_var=TOOL_ENV_VAR,
            configured=self.config.paths.ccusage,
            candidates=self.tool_candidates,
            fallback=WINDOWS_TOOL_NAME if self.family == "win32" else TOOL_NAME
        )

    def resolve(self) -> ResolvedPaths:
        """Resolve both executables. Never raises."""
        paths = ResolvedPaths(
            runtime_path=self.resolve_runtime(),
            tool_path=self.resolve_tool()
        )
        logger.info(
            "Selected paths - Node.js: %s, ccusage: %s",
            paths.runtime_path, paths.tool_path
        )
        return paths

    def _resolve(self, label, env_var, configured, candidates, fallback) -> str:
        override = self.env.get(env_var)
        if override is not None:
            logger.debug("Using %s environment variable: %s", env_var, override)
            return override

        if configured:
            logger.debug("Using configured %s path: %s", label, configured)
            return configured

        # Version-manager directories are listed before the search begins
        search = candidates()
        logger.debug("Searching for %s in %d candidates", label, len(search))
        for candidate in search:
            exists = Path(candidate).exists()
            logger.debug("Checking %s path: %s -> %s", label, candidate, exists)
            if exists:
                return candidate

        logger.warning("No %s found in candidates, falling back to system PATH", label)
        return fallback


_resolved_paths: Optional[ResolvedPaths] = None


def get_resolved_paths(config: Optional[MonitorConfig] = None) -> ResolvedPaths:
    """Get the process-wide resolved paths, resolving them on first use.

    Host binary locations do not change while the process runs, so the
    result is cached. Concurrent first calls may both resolve; the last
    write wins and both results are equivalent.
    """
    global _resolved_paths
    if _resolved_paths is None:
        _resolved_paths = RuntimeLocator(config=config).resolve()
    return _resolved_paths


def reset_resolved_paths() -> None:
    """Forget cached paths so the next call re-probes the host."""
    global _resolved_paths
    _resolved_paths = None
