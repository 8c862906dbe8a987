"""
Unit tests for the process invoker.

Tests child environment construction, output capture and start failures.
"""

import os
import subprocess
import sys
from unittest.mock import patch

import pytest

from claude_token_monitor.ccusage.runner import (
    COMMON_BIN_DIRS,
    CommandOutput,
    build_child_environment,
    run_tool,
)
from claude_token_monitor.core.errors import ExecutionError, ExecutionTimeout


class TestBuildChildEnvironment:
    """Test PATH augmentation and NODE_PATH export."""

    def test_runtime_dir_is_prepended(self):
        env = build_child_environment("/opt/node/bin/node", {"PATH": "/home/me/bin"})
        parts = env["PATH"].split(os.pathsep)
        assert parts[0] == "/opt/node/bin"
        assert parts[1:1 + len(COMMON_BIN_DIRS)] == COMMON_BIN_DIRS
        assert parts[-1] == "/home/me/bin"

    def test_node_path_is_set_to_runtime(self):
        env = build_child_environment("/opt/node/bin/node", {})
        assert env["NODE_PATH"] == "/opt/node/bin/node"

    def test_bare_runtime_uses_default_dir(self):
        env = build_child_environment("node", {"PATH": "/x"})
        assert env["PATH"].split(os.pathsep)[0] == "/usr/local/bin"

    def test_missing_path_variable(self):
        env = build_child_environment("/opt/node/bin/node", {})
        assert env["PATH"].split(os.pathsep) == ["/opt/node/bin"] + COMMON_BIN_DIRS

    def test_other_variables_are_inherited(self):
        env = build_child_environment("node", {"HOME": "/home/me", "PATH": ""})
        assert env["HOME"] == "/home/me"

    def test_base_environment_is_not_mutated(self):
        base = {"PATH": "/x"}
        build_child_environment("node", base)
        assert base == {"PATH": "/x"}


class TestRunTool:
    """Test running external programs."""

    def test_captures_stdout(self):
        output = run_tool(sys.executable, "node", ["-c", "print('hello')"])
        assert output.succeeded
        assert output.stdout.strip() == b"hello"
        assert output.exit_status == 0

    def test_nonzero_exit_is_returned_not_raised(self):
        script = "import sys; sys.stderr.write('boom'); sys.exit(3)"
        output = run_tool(sys.executable, "node", ["-c", script])
        assert not output.succeeded
        assert output.exit_status == 3
        assert output.stderr_text() == "boom"

    def test_child_sees_node_path(self):
        script = "import os; print(os.environ['NODE_PATH'])"
        output = run_tool(sys.executable, "/opt/node/bin/node", ["-c", script])
        assert output.stdout.strip() == b"/opt/node/bin/node"

    def test_missing_program_raises_execution_error(self):
        with pytest.raises(ExecutionError) as exc_info:
            run_tool("/definitely/not/here/ccusage", "node", ["daily", "--json"])
        assert isinstance(exc_info.value.os_error, FileNotFoundError)

    def test_permission_error_is_wrapped(self):
        with patch("claude_token_monitor.ccusage.runner.subprocess.run",
                   side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(ExecutionError) as exc_info:
                run_tool("/usr/local/bin/ccusage", "node", ["blocks", "--json"])
        assert isinstance(exc_info.value.os_error, PermissionError)

    def test_timeout_kills_and_raises(self):
        with pytest.raises(ExecutionTimeout) as exc_info:
            run_tool(sys.executable, "node", ["-c", "import time; time.sleep(10)"], timeout=0.5)
        assert exc_info.value.timeout == 0.5

    def test_arguments_and_timeout_are_forwarded(self):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"{}", stderr=b"")
        with patch("claude_token_monitor.ccusage.runner.subprocess.run", return_value=completed) as run:
            output = run_tool("/usr/local/bin/ccusage", "/usr/bin/node", ["daily", "--json"], timeout=5)

        args, kwargs = run.call_args
        assert args[0] == ["/usr/local/bin/ccusage", "daily", "--json"]
        assert kwargs["timeout"] == 5
        assert kwargs["env"]["NODE_PATH"] == "/usr/bin/node"
        assert output == CommandOutput(stdout=b"{}", stderr=b"", exit_status=0)
