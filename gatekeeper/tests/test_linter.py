"""Tests for the linter dispatcher."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from gatekeeper.scanner.linter import (
    LINTERS,
    LinterDispatcher,
    LinterSpec,
    file_extension,
)


def _process(returncode=0, stdout=b"", stderr=b""):
    process = AsyncMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    return process


class TestLinterTable:
    """Tests for the extension table."""

    def test_python_uses_ruff(self):
        assert LINTERS["py"] == LinterSpec("ruff", ("check",))

    @pytest.mark.parametrize("ext", ["js", "jsx", "ts", "tsx"])
    def test_js_family_uses_eslint(self, ext):
        assert LINTERS[ext].executable == "eslint"

    def test_rust_uses_cargo_fmt(self):
        assert LINTERS["rs"].command("src/main.rs") == ["cargo", "fmt", "--check", "--", "src/main.rs"]

    @pytest.mark.parametrize(
        "path,expected",
        [("a.py", "py"), ("web/App.TSX", "tsx"), ("Makefile", ""), ("dir.d/file", "")],
    )
    def test_file_extension(self, path, expected):
        assert file_extension(path) == expected


class TestRunLinter:
    """Tests for LinterDispatcher.run_linter."""

    @pytest.mark.asyncio
    async def test_no_linter_configured(self):
        with patch("asyncio.create_subprocess_exec") as mock_exec:
            result = await LinterDispatcher().run_linter("README.md")

        assert result.skipped is True
        assert result.passed is True
        assert result.tool == "none"
        assert result.skip_reason == "No linter configured for .md files"
        mock_exec.assert_not_called()

    @pytest.mark.asyncio
    async def test_tool_not_installed(self):
        with patch("shutil.which", return_value=None), patch(
            "asyncio.create_subprocess_exec"
        ) as mock_exec:
            result = await LinterDispatcher().run_linter("app.py")

        assert result.skipped is True
        assert result.passed is True
        assert result.tool == "ruff"
        assert result.skip_reason == "ruff is not installed"
        assert result.is_important_skip
        mock_exec.assert_not_called()

    @pytest.mark.asyncio
    async def test_spawn_failure_is_skipped(self):
        with patch("shutil.which", return_value="/usr/bin/ruff"), patch(
            "asyncio.create_subprocess_exec",
            side_effect=PermissionError("permission denied"),
        ):
            result = await LinterDispatcher().run_linter("app.py")

        assert result.skipped is True
        assert result.passed is True
        assert result.skip_reason.startswith("Failed to run ruff")

    @pytest.mark.asyncio
    async def test_non_zero_exit_fails(self):
        process = _process(returncode=1, stdout=b"app.py:1:1: F401 unused import\n", stderr=b"warn\n")
        with patch("shutil.which", return_value="/usr/bin/ruff"), patch(
            "asyncio.create_subprocess_exec", return_value=process
        ) as mock_exec:
            result = await LinterDispatcher().run_linter("app.py")

        assert result.passed is False
        assert result.skipped is False
        assert result.skip_reason is None
        assert "F401" in result.output
        assert "warn" in result.output
        assert mock_exec.call_args.args == ("ruff", "check", "app.py")

    @pytest.mark.asyncio
    async def test_zero_exit_passes(self):
        with patch("shutil.which", return_value="/usr/bin/eslint"), patch(
            "asyncio.create_subprocess_exec", return_value=_process(returncode=0)
        ) as mock_exec:
            result = await LinterDispatcher().run_linter("web/app.ts")

        assert result.passed is True
        assert result.skipped is False
        assert result.tool == "eslint"
        assert mock_exec.call_args.args == (
            "eslint",
            "--no-error-on-unmatched-pattern",
            "web/app.ts",
        )


class TestRun:
    """Tests for concurrent dispatch."""

    @pytest.mark.asyncio
    async def test_one_result_per_file_in_order(self):
        processes = {"a.py": _process(0), "b.py": _process(1, stdout=b"E501")}

        async def fake_exec(*command, **kwargs):
            return processes[command[-1]]

        with patch("shutil.which", return_value="/usr/bin/ruff"), patch(
            "asyncio.create_subprocess_exec", side_effect=fake_exec
        ):
            results = await LinterDispatcher().run(["a.py", "notes.txt", "b.py"])

        assert [r.file for r in results] == ["a.py", "notes.txt", "b.py"]
        assert results[0].passed is True
        assert results[1].skipped is True
        assert results[2].passed is False

    @pytest.mark.asyncio
    async def test_failure_for_one_file_does_not_drop_others(self):
        dispatcher = LinterDispatcher()
        original = dispatcher.run_linter

        async def flaky(path):
            if path == "bad.py":
                raise RuntimeError("boom")
            return await original(path)

        dispatcher.run_linter = flaky
        results = await dispatcher.run(["bad.py", "README.md"])

        assert len(results) == 2
        assert results[0].skipped is True
        assert "boom" in results[0].skip_reason
        assert results[1].skip_reason == "No linter configured for .md files"

    @pytest.mark.asyncio
    async def test_linters_run_concurrently(self):
        paths = ["a.py", "b.py", "c.py"]
        started = []
        all_started = asyncio.Event()

        async def fake_exec(*command, **kwargs):
            started.append(command[-1])
            if len(started) == len(paths):
                all_started.set()
            # Only released once every linter process has been spawned
            await asyncio.wait_for(all_started.wait(), timeout=1.0)
            return _process(0)

        with patch("shutil.which", return_value="/usr/bin/ruff"), patch(
            "asyncio.create_subprocess_exec", side_effect=fake_exec
        ):
            results = await LinterDispatcher().run(paths)

        assert sorted(started) == paths
        assert [r.file for r in results] == paths
        assert all(r.passed and not r.skipped for r in results)

    @pytest.mark.asyncio
    async def test_waits_for_slowest_linter(self):
        delays = {"fast.py": 0.0, "slow.py": 0.05}

        async def fake_exec(*command, **kwargs):
            await asyncio.sleep(delays[command[-1]])
            return _process(1 if command[-1] == "slow.py" else 0)

        with patch("shutil.which", return_value="/usr/bin/ruff"), patch(
            "asyncio.create_subprocess_exec", side_effect=fake_exec
        ):
            results = await LinterDispatcher().run(["slow.py", "fast.py"])

        assert [(r.file, r.passed) for r in results] == [("slow.py", False), ("fast.py", True)]

    @pytest.mark.asyncio
    async def test_empty_input(self):
        assert await LinterDispatcher().run([]) == []
