"""argc integration."""

import logging
from typing import List, Optional

from .process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)


class ArgcAdapter:
    """Adapter for the argc shell argument parser and task runner."""

    def __init__(self, runner: Optional[ProcessRunner] = None, binary: str = "argc"):
        self.runner = runner or ProcessRunner()
        self.binary = binary

    def validate_installation(self) -> bool:
        """Check whether argc is installed and runnable."""
        return self.runner.probe([self.binary, "--argc-version"])

    def generate_eval(self, script_path: str) -> CommandResult:
        """Generate argument-parsing code for ``script_path``."""
        logger.debug(f"Generating argc eval for script: {script_path}")
        result = CommandResult.from_process(
            self.runner.run([self.binary, "--argc-eval", str(script_path)]), strip=False
        )
        if not result.success:
            logger.error(f"Error generating argc eval: {result.error}")
        return result

    def execute(self, args: List[str], cwd: Optional[str] = None) -> CommandResult:
        """Run ``argc ARGS...`` in ``cwd``."""
        logger.debug(f"Executing argc command: {' '.join(args)}")
        result = CommandResult.from_process(
            self.runner.run([self.binary] + list(args), cwd=cwd), strip=False
        )
        if not result.success:
            logger.error(f"Error executing argc command: {result.error}")
        return result

    def completions(self, script_path: str, args: List[str]) -> CommandResult:
        """Return completion candidates, one per output line."""
        logger.debug(f"Getting argc completions for script: {script_path}")
        result = CommandResult.from_process(
            self.runner.run(
                [self.binary, "--argc-compgen", "complete", str(script_path)] + list(args)
            )
        )
        if not result.success:
            logger.error(f"Error getting argc completions: {result.error}")
            return result
        result.data = [line for line in result.data.split("\n") if line] if result.data else []
        return result
