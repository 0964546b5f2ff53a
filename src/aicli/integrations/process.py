"""Process execution utilities for tool integrations."""

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Result of a process execution."""

    code: int
    stdout: str
    stderr: str
    ok: bool = False
    details: str = ""
    duration_ms: int = 0

    def __post_init__(self):
        self.ok = self.code == 0
        if not self.details:
            self.details = self.stderr.strip() if self.stderr else "Process completed"


@dataclass
class CommandResult:
    """Uniform outcome of an operation: success flag plus payload or error."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def from_process(cls, result: ProcessResult, strip: bool = True) -> "CommandResult":
        if not result.ok:
            return cls(success=False, error=result.details)
        return cls(success=True, data=result.stdout.strip() if strip else result.stdout)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "data": self.data, "error": self.error}


@dataclass
class FunctionResult:
    """Outcome of running a tool or agent function binary."""

    name: str
    result: Optional[str] = None
    error: Optional[str] = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class ProcessRunner:
    """Run one external command synchronously and capture its output."""

    def __init__(self, timeout: Optional[float] = None):
        """Initialize ProcessRunner.

        Args:
            timeout: Seconds to wait for each command; None waits forever
        """
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def run(
        self,
        argv: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> ProcessResult:
        """Run a command and return the result.

        Never raises for process-level failures: a missing executable, a
        timeout or a non-zero exit all come back as a ProcessResult with
        ``ok`` False.

        Args:
            argv: Program followed by its arguments
            cwd: Working directory for the command
            env: Environment for the child; inherits ours when None

        Returns:
            ProcessResult with execution details
        """
        cmd = [str(a) for a in argv]
        cmd_str = " ".join(shlex.quote(a) for a in cmd)
        self.logger.debug(f"Running: {cmd_str}")
        start = time.monotonic()

        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                env=env,
                timeout=self.timeout,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
            )
        except subprocess.TimeoutExpired:
            return ProcessResult(
                code=-1,
                stdout="",
                stderr="",
                details=f"Command timed out after {self.timeout} seconds: {cmd_str}",
                duration_ms=elapsed_ms(start),
            )
        except FileNotFoundError:
            return ProcessResult(
                code=127,
                stdout="",
                stderr="",
                details=f"Command not found: {cmd[0]}",
                duration_ms=elapsed_ms(start),
            )
        except OSError as e:
            return ProcessResult(
                code=-1,
                stdout="",
                stderr=str(e),
                details=f"Process execution failed: {e}",
                duration_ms=elapsed_ms(start),
            )

        result = ProcessResult(
            code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_ms=elapsed_ms(start),
        )
        if not result.ok:
            if not (completed.stderr or "").strip():
                result.details = f"Command failed with exit code {result.code}: {cmd_str}"
            self.logger.debug(f"Command exited with {result.code}: {result.details}")
        return result

    def probe(self, argv: List[str]) -> bool:
        """Return True if ``argv`` runs and exits cleanly."""
        return self.run(argv).ok


def elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
