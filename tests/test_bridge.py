# tests/test_bridge.py
"""Tests for the shell bridge hand-off."""

import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path

import pytest

from fastcd.bridge import ShellAction, ShellBridge, wrapper_script
from fastcd.errors import BridgeError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def bridge(temp_dir):
    return ShellBridge(temp_dir / "fastcd_cmd")


class TestShellAction:
    """Test action rendering."""

    def test_change_directory_is_bare_path(self):
        action = ShellAction.change_directory(Path("/home/me/site"))
        assert action.kind == "cd"
        assert action.render() == "/home/me/site"

    def test_run_in_quotes_paths(self):
        action = ShellAction.run_in("/my projects/it's", "vim", "/my projects/it's")
        quoted = shlex.quote("/my projects/it's")
        assert action.kind == "eval"
        assert action.render() == f"cd -- {quoted} && vim {quoted}"
        # Round-trips through shell word splitting
        assert shlex.split(action.render()) == [
            "cd", "--", "/my projects/it's", "&&", "vim", "/my projects/it's",
        ]

    def test_relative_directory_rejected(self):
        with pytest.raises(BridgeError):
            ShellAction.change_directory("relative/dir").render()

    def test_command_starting_with_slash_rejected(self):
        with pytest.raises(BridgeError):
            ShellAction.command("/usr/bin/env true").render()

    def test_multiline_rejected(self):
        with pytest.raises(BridgeError):
            ShellAction.command("echo a\necho b").render()


class TestShellBridge:
    """Test writing and consuming the artifact."""

    def test_emit_and_consume(self, bridge):
        bridge.emit(ShellAction.change_directory("/home/me/site"))

        assert bridge.path.read_text() == "/home/me/site\n"
        assert bridge.consume(0) == "/home/me/site"
        assert not bridge.path.exists()

    def test_consume_ignored_on_failure(self, bridge):
        bridge.emit(ShellAction.change_directory("/a"))
        assert bridge.consume(1) is None
        # Left for the next run to clear
        assert bridge.path.exists()

    def test_consume_absent(self, bridge):
        assert bridge.consume(0) is None

    def test_emit_replaces_previous(self, bridge):
        bridge.emit(ShellAction.change_directory("/a"))
        bridge.emit(ShellAction.change_directory("/b"))
        assert bridge.consume(0) == "/b"

    def test_clear(self, bridge):
        assert not bridge.clear()
        bridge.emit(ShellAction.change_directory("/a"))
        assert bridge.clear()
        assert not bridge.path.exists()

    def test_emit_failure(self, temp_dir):
        bridge = ShellBridge(temp_dir / "missing" / "fastcd_cmd")
        with pytest.raises(BridgeError):
            bridge.emit(ShellAction.change_directory("/a"))

    def test_default_location(self):
        assert ShellBridge().path.name == "fastcd_cmd"


class TestWrapperScript:
    """Test generated shell functions."""

    def test_bash(self):
        script = wrapper_script("bash", "/tmp/fastcd_cmd")
        assert script.startswith("f() {")
        assert 'command fastcd "$@"' in script
        assert "local bridge=/tmp/fastcd_cmd" in script
        assert 'cd -- "$action"' in script
        assert 'eval "$action"' in script
        assert "return $rc" in script

    def test_zsh_matches_bash(self):
        assert wrapper_script("zsh", "/x") == wrapper_script("bash", "/x")

    def test_fish(self):
        script = wrapper_script("fish", "/tmp/fastcd_cmd")
        assert script.startswith("function f")
        assert "command fastcd $argv" in script
        assert "set -l bridge /tmp/fastcd_cmd" in script
        assert script.rstrip().endswith("end")

    def test_quotes_artifact_path(self):
        script = wrapper_script("bash", "/tmp/with space/cmd")
        assert "local bridge='/tmp/with space/cmd'" in script

    def test_unknown_shell(self):
        with pytest.raises(ValueError):
            wrapper_script("powershell")


def run_wrapper(temp_dir: Path, bridge: ShellBridge, exit_code: int = 0):
    """
    Run the bash wrapper against a stub fastcd that exits with exit_code.

    Returns (wrapper exit status, working directory after the call).
    """
    bin_dir = temp_dir / "bin"
    bin_dir.mkdir(exist_ok=True)
    stub = bin_dir / "fastcd"
    stub.write_text(f"#!/bin/sh\nexit {exit_code}\n")
    stub.chmod(0o755)

    script = wrapper_script("bash", bridge.path) + 'f; rc=$?; echo "$rc"; pwd -P\n'
    env = dict(os.environ, PATH=f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    result = subprocess.run(
        ["bash", "-c", script],
        cwd=temp_dir,
        env=env,
        capture_output=True,
        text=True,
        check=True,
    )
    rc, cwd = result.stdout.strip().splitlines()[-2:]
    return int(rc), Path(cwd)


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")
class TestWrapperBehaviour:
    """Test the generated bash function applying the artifact."""

    @pytest.fixture
    def root(self, temp_dir):
        return temp_dir.resolve()

    @pytest.fixture
    def project(self, root):
        path = root / "project"
        path.mkdir()
        return path

    def test_changes_directory(self, root, project):
        bridge = ShellBridge(root / "fastcd_cmd")
        bridge.emit(ShellAction.change_directory(project))

        rc, cwd = run_wrapper(root, bridge)

        assert rc == 0
        assert cwd == project
        assert not bridge.path.exists()

    def test_evaluates_command(self, root, project):
        bridge = ShellBridge(root / "fastcd_cmd")
        bridge.emit(ShellAction.run_in(project, "touch", project / "edited"))

        rc, cwd = run_wrapper(root, bridge)

        assert rc == 0
        assert cwd == project
        assert (project / "edited").exists()
        assert not bridge.path.exists()

    def test_ignored_on_failure(self, root, project):
        bridge = ShellBridge(root / "fastcd_cmd")
        bridge.emit(ShellAction.change_directory(project))

        rc, cwd = run_wrapper(root, bridge, exit_code=3)

        assert rc == 3
        assert cwd == root
        assert bridge.path.exists()

    def test_no_artifact(self, root):
        bridge = ShellBridge(root / "fastcd_cmd")

        rc, cwd = run_wrapper(root, bridge)

        assert rc == 0
        assert cwd == root

    def test_missing_directory_is_never_evaluated(self, root):
        marker = root / "pwned"
        bridge = ShellBridge(root / "fastcd_cmd")
        bridge.emit(ShellAction.change_directory(f"{root}/gone;touch {marker}"))

        rc, cwd = run_wrapper(root, bridge)

        assert rc == 0
        assert cwd == root
        assert not marker.exists()
        assert not bridge.path.exists()
