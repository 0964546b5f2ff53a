"""Unit tests for ProcessRunner and the result types."""

import sys

from aicli.integrations.process import CommandResult, FunctionResult, ProcessResult, ProcessRunner


class TestProcessRunner:
    """ProcessRunner against real child processes."""

    def test_captures_stdout(self):
        result = ProcessRunner().run([sys.executable, "-c", "print('hello')"])

        assert result.ok
        assert result.code == 0
        assert result.stdout.strip() == "hello"
        assert result.duration_ms >= 0

    def test_non_zero_exit_with_stderr(self):
        result = ProcessRunner().run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom\\n'); sys.exit(3)"]
        )

        assert not result.ok
        assert result.code == 3
        assert result.details == "boom"

    def test_non_zero_exit_without_stderr(self):
        result = ProcessRunner().run([sys.executable, "-c", "raise SystemExit(4)"])

        assert not result.ok
        assert "exit code 4" in result.details

    def test_missing_executable_does_not_raise(self):
        result = ProcessRunner().run(["definitely-not-a-real-binary-aicli"])

        assert not result.ok
        assert result.code == 127
        assert "Command not found" in result.details

    def test_timeout_does_not_raise(self):
        result = ProcessRunner(timeout=0.5).run(
            [sys.executable, "-c", "import time; time.sleep(5)"]
        )

        assert not result.ok
        assert "timed out" in result.details

    def test_undecodable_output_does_not_raise(self):
        result = ProcessRunner().run(
            [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe bad')"]
        )

        assert result.ok
        assert result.stdout.endswith(" bad")
        assert "�" in result.stdout

    def test_undecodable_stderr_on_failure(self):
        result = ProcessRunner().run(
            [sys.executable, "-c", "import sys; sys.stderr.buffer.write(b'\\xff oops'); sys.exit(2)"]
        )

        assert not result.ok
        assert result.code == 2
        assert "oops" in result.details

    def test_cwd_is_honored(self, tmp_path):
        result = ProcessRunner().run(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=str(tmp_path)
        )

        assert result.stdout.strip() == str(tmp_path.resolve())

    def test_probe(self):
        runner = ProcessRunner()
        assert runner.probe([sys.executable, "--version"]) is True
        assert runner.probe(["definitely-not-a-real-binary-aicli"]) is False


class TestResults:
    def test_command_result_from_success(self):
        result = CommandResult.from_process(ProcessResult(code=0, stdout=" out \n", stderr=""))
        assert result == CommandResult(success=True, data="out")

    def test_command_result_from_success_unstripped(self):
        result = CommandResult.from_process(
            ProcessResult(code=0, stdout=" out \n", stderr=""), strip=False
        )
        assert result.data == " out \n"

    def test_command_result_from_failure(self):
        result = CommandResult.from_process(ProcessResult(code=1, stdout="", stderr="bad\n"))
        assert result == CommandResult(success=False, error="bad")

    def test_command_result_to_dict(self):
        assert CommandResult(success=True, data=[1]).to_dict() == {
            "success": True,
            "data": [1],
            "error": None,
        }

    def test_function_result_ok(self):
        assert FunctionResult(name="t", result="x").ok
        assert not FunctionResult(name="t", error="nope").ok
