"""aichat CLI integration."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000


@dataclass
class ChatOptions:
    """Per-invocation options for aichat."""

    model: str = DEFAULT_MODEL
    temperature: Optional[float] = DEFAULT_TEMPERATURE
    max_tokens: Optional[int] = DEFAULT_MAX_TOKENS
    system_prompt: Optional[str] = None


class AIChatAdapter:
    """Adapter for the aichat command-line client."""

    def __init__(
        self,
        options: Optional[ChatOptions] = None,
        runner: Optional[ProcessRunner] = None,
        binary: str = "aichat",
    ):
        """Initialize aichat adapter.

        Args:
            options: Model and sampling options; library defaults when omitted
            runner: ProcessRunner instance
            binary: aichat executable name or path
        """
        self.options = options or ChatOptions()
        self.runner = runner or ProcessRunner()
        self.binary = binary

    def _base_args(self) -> List[str]:
        temperature = self.options.temperature
        if temperature is None:
            temperature = DEFAULT_TEMPERATURE
        return [
            "--model",
            self.options.model or DEFAULT_MODEL,
            "--temperature",
            str(temperature),
        ]

    def _limit_args(self, include_system: bool = True) -> List[str]:
        args: List[str] = []
        if self.options.max_tokens:
            args.extend(["--max-tokens", str(self.options.max_tokens)])
        if include_system and self.options.system_prompt:
            args.extend(["--system", self.options.system_prompt])
        return args

    def build_message_args(self, message: str) -> List[str]:
        return self._base_args() + self._limit_args() + [message]

    def build_functions_args(self, message: str, functions_dir: str) -> List[str]:
        return (
            self._base_args()
            + ["--role", "%functions%", "--functions-dir", str(functions_dir)]
            + self._limit_args()
            + [message]
        )

    def build_agent_args(self, message: str, agent_name: str, functions_dir: str) -> List[str]:
        return (
            self._base_args()
            + ["--agent", agent_name, "--functions-dir", str(functions_dir)]
            + self._limit_args(include_system=False)
            + [message]
        )

    def _call(self, args: List[str], action: str) -> CommandResult:
        result = CommandResult.from_process(self.runner.run([self.binary] + args))
        if not result.success:
            logger.error(f"Error {action}: {result.error}")
        return result

    def send_message(self, message: str) -> CommandResult:
        """Send a single message and return the reply text."""
        logger.debug(f"Sending message to aichat ({len(message)} chars)")
        return self._call(self.build_message_args(message), "sending message to aichat")

    def send_message_with_functions(self, message: str, functions_dir: str) -> CommandResult:
        """Send a message with the llm-functions tools enabled."""
        if not Path(functions_dir).exists():
            return CommandResult(
                success=False, error=f"Functions directory not found: {functions_dir}"
            )
        logger.debug(f"Sending message with functions from {functions_dir}")
        return self._call(
            self.build_functions_args(message, functions_dir),
            "sending message with functions to aichat",
        )

    def use_agent(self, message: str, agent_name: str, functions_dir: str) -> CommandResult:
        """Send a message to a named llm-functions agent."""
        if not Path(functions_dir).exists():
            return CommandResult(
                success=False, error=f"Functions directory not found: {functions_dir}"
            )
        logger.debug(f"Using agent {agent_name}")
        return self._call(
            self.build_agent_args(message, agent_name, functions_dir),
            f"using agent {agent_name}",
        )

    def validate_installation(self) -> bool:
        """Check whether aichat is installed and runnable."""
        return self.runner.probe([self.binary, "--version"])
