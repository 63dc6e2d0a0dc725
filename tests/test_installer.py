"""Unit tests for npm invocation (electroinit.installer).

Tests cover:
- Command runner argv shapes per OS family
- install_args with and without audit
- install_all ordering, abort on first failure, signal and spawn errors
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from electroinit.errors import InstallError
from electroinit.installer import (
    CommandRunner,
    InstallRunner,
    PosixCommandRunner,
    WindowsCommandRunner,
    command_runner_for,
)
from electroinit.utils import OSFamily


# ---------------------------------------------------------------------------
# Command runners
# ---------------------------------------------------------------------------


class TestCommandRunners:
    @pytest.mark.unit
    def test_posix_argv(self):
        assert PosixCommandRunner().argv("npm", "install") == ["npm", "install"]

    @pytest.mark.unit
    def test_windows_argv_explicit_comspec(self):
        runner = WindowsCommandRunner(comspec="C:\\Windows\\system32\\cmd.exe")
        assert runner.argv("npm", "-v") == ["C:\\Windows\\system32\\cmd.exe", "/c", "npm", "-v"]

    @pytest.mark.unit
    def test_windows_argv_from_env(self):
        with patch.dict("os.environ", {"ComSpec": "X:\\cmd.exe"}):
            assert WindowsCommandRunner().argv("npm")[:2] == ["X:\\cmd.exe", "/c"]

    @pytest.mark.unit
    def test_windows_argv_fallback(self):
        with patch.dict("os.environ", {}, clear=True):
            assert WindowsCommandRunner().argv("npm")[0] == "cmd.exe"

    @pytest.mark.unit
    def test_runner_for_os(self):
        assert isinstance(command_runner_for(OSFamily.POSIX), PosixCommandRunner)
        assert isinstance(command_runner_for(OSFamily.WINDOWS), WindowsCommandRunner)

    @pytest.mark.unit
    def test_base_runner_is_abstract(self):
        with pytest.raises(TypeError):
            CommandRunner()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_run_returns_exit_code(self):
        runner = PosixCommandRunner()
        code = await runner.run(sys.executable, "-c", "raise SystemExit(4)")
        assert code == 4

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_run_does_not_capture(self):
        with patch(
            "electroinit.installer.run_command",
            AsyncMock(return_value=(0, "", "")),
        ) as mock_run:
            await PosixCommandRunner().run("npm", "install", cwd="/tmp/x", env={"A": "1"})

        mock_run.assert_awaited_once_with(
            ["npm", "install"], cwd="/tmp/x", capture=False, env={"A": "1"}
        )


# ---------------------------------------------------------------------------
# InstallRunner
# ---------------------------------------------------------------------------


def fake_runner(*codes: int) -> PosixCommandRunner:
    runner = PosixCommandRunner()
    runner.run = AsyncMock(side_effect=list(codes))
    return runner


class TestInstallArgs:
    @pytest.mark.unit
    def test_audit_disabled_by_default(self):
        assert InstallRunner(PosixCommandRunner()).install_args() == ["install", "--no-audit"]

    @pytest.mark.unit
    def test_audit_enabled(self):
        runner = InstallRunner(PosixCommandRunner(), enable_audit=True)
        assert runner.install_args() == ["install"]


class TestInstallAll:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_root_then_frontend(self, tmp_path):
        runner = fake_runner(0, 0)
        await InstallRunner(runner).install_all(tmp_path, env={"ELECTRON_MIRROR": "m"})

        calls = runner.run.await_args_list
        assert len(calls) == 2
        assert calls[0].kwargs["cwd"] == tmp_path
        assert calls[1].kwargs["cwd"] == tmp_path / "src" / "frontend"
        for call in calls:
            assert call.args == ("npm", "install", "--no-audit")
            assert call.kwargs["env"] == {"ELECTRON_MIRROR": "m"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_root_failure_skips_frontend(self, tmp_path):
        runner = fake_runner(1, 0)
        with pytest.raises(InstallError) as exc_info:
            await InstallRunner(runner).install_all(tmp_path)

        assert runner.run.await_count == 1
        assert exc_info.value.label == "root"
        assert exc_info.value.returncode == 1
        assert "npm exit code: 1" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_frontend_failure(self, tmp_path):
        runner = fake_runner(0, 2)
        with pytest.raises(InstallError) as exc_info:
            await InstallRunner(runner).install_all(tmp_path)

        assert runner.run.await_count == 2
        assert exc_info.value.label == "frontend"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_signal_termination(self, tmp_path):
        runner = fake_runner(-int(signal.SIGTERM))
        with pytest.raises(InstallError) as exc_info:
            await InstallRunner(runner).install_all(tmp_path)

        assert exc_info.value.signal_name == "SIGTERM"
        assert "terminated by signal: SIGTERM" in str(exc_info.value)
        assert "exit code" not in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_spawn_error(self, tmp_path):
        runner = PosixCommandRunner()
        runner.run = AsyncMock(side_effect=FileNotFoundError("npm"))
        with pytest.raises(InstallError) as exc_info:
            await InstallRunner(runner).install_all(tmp_path)

        assert exc_info.value.spawn_error is not None
        assert "npm spawn error" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_accepts_string_target(self, tmp_path):
        runner = fake_runner(0, 0)
        await InstallRunner(runner).install_all(str(tmp_path))
        assert runner.run.await_args_list[1].kwargs["cwd"] == Path(tmp_path) / "src" / "frontend"
