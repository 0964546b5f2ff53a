"""llm-functions integration.

An llm-functions checkout holds two manifests (``tools.txt``, ``agents.txt``),
a ``bin/`` directory of generated executables and a ``functions.json`` file
with the declarations handed to the model.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from .argc import ArgcAdapter
from .process import CommandResult, FunctionResult, ProcessRunner, elapsed_ms

logger = logging.getLogger(__name__)

TOOLS_MANIFEST = "tools.txt"
AGENTS_MANIFEST = "agents.txt"
DECLARATIONS_FILE = "functions.json"

FUNCTION_DECLARATIONS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "description", "parameters"],
        "properties": {
            "name": {"type": "string"},
            "description": {"type": "string"},
            "parameters": {
                "type": "object",
                "required": ["type", "properties"],
                "properties": {
                    "type": {"type": "string"},
                    "properties": {"type": "object"},
                    "required": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
}


def parse_manifest(text: str) -> List[str]:
    """Return the names listed in a manifest, skipping blanks and ``#`` comments."""
    return [
        line.strip()
        for line in text.split("\n")
        if line.strip() and not line.startswith("#")
    ]


class LLMFunctionsAdapter:
    """Adapter for an llm-functions directory."""

    def __init__(
        self,
        functions_dir: str,
        runner: Optional[ProcessRunner] = None,
        argc: Optional[ArgcAdapter] = None,
    ):
        self.functions_dir = Path(functions_dir)
        self.runner = runner or ProcessRunner()
        self.argc = argc or ArgcAdapter(self.runner)

    def _read_manifest(self, filename: str, kind: str) -> CommandResult:
        manifest = self.functions_dir / filename
        if not manifest.exists():
            return CommandResult(success=False, error=f"{kind} list not found: {manifest}")
        try:
            names = parse_manifest(manifest.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error listing {kind.lower()}: {e}")
            return CommandResult(success=False, error=str(e))
        return CommandResult(success=True, data=names)

    def list_tools(self) -> CommandResult:
        """List tools declared in ``tools.txt``."""
        return self._read_manifest(TOOLS_MANIFEST, "Tools")

    def list_agents(self) -> CommandResult:
        """List agents declared in ``agents.txt``."""
        return self._read_manifest(AGENTS_MANIFEST, "Agents")

    def _binary(self, name: str) -> Optional[Path]:
        bin_path = self.functions_dir / "bin" / name
        if bin_path.exists() or bin_path.with_name(f"{name}.cmd").exists():
            return bin_path
        return None

    def _run_binary(self, label: str, kind: str, name: str, args: List[str]) -> FunctionResult:
        start = time.monotonic()
        bin_path = self._binary(name)
        if bin_path is None:
            error = f"{kind} binary not found: {self.functions_dir / 'bin' / name}"
            logger.error(f"Error executing {label}: {error}")
            return FunctionResult(name=label, error=error, duration_ms=elapsed_ms(start))

        proc = self.runner.run([str(bin_path)] + args)
        if not proc.ok:
            logger.error(f"Error executing {label}: {proc.details}")
            return FunctionResult(name=label, error=proc.details, duration_ms=elapsed_ms(start))
        return FunctionResult(
            name=label, result=proc.stdout.rstrip("\n"), duration_ms=elapsed_ms(start)
        )

    def execute_tool(self, tool_name: str, params: Dict[str, Any]) -> FunctionResult:
        """Run ``bin/<tool_name>`` with the JSON-encoded parameters."""
        logger.debug(f"Executing tool {tool_name} with {len(params)} parameter(s)")
        return self._run_binary(tool_name, "Tool", tool_name, [json.dumps(params)])

    def execute_agent_function(
        self, agent_name: str, function_name: str, params: Dict[str, Any]
    ) -> FunctionResult:
        """Run ``bin/<agent_name> <function_name>`` with the JSON-encoded parameters."""
        label = f"{agent_name}:{function_name}"
        logger.debug(f"Executing agent function {label}")
        return self._run_binary(label, "Agent", agent_name, [function_name, json.dumps(params)])

    def build(self) -> CommandResult:
        """Run ``argc build`` inside the functions directory."""
        logger.info("Building llm-functions project...")
        return self.argc.execute(["build"], cwd=str(self.functions_dir))

    def check(self) -> CommandResult:
        """Run ``argc check`` inside the functions directory."""
        logger.info("Checking llm-functions configuration...")
        return self.argc.execute(["check"], cwd=str(self.functions_dir))

    def function_declarations(self) -> CommandResult:
        """Read and validate ``functions.json``."""
        path = self.functions_dir / DECLARATIONS_FILE
        if not path.exists():
            return CommandResult(success=False, error=f"Functions JSON not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                declarations = json.load(f)
            jsonschema.validate(declarations, FUNCTION_DECLARATIONS_SCHEMA)
        except (OSError, ValueError) as e:
            logger.error(f"Error getting function declarations: {e}")
            return CommandResult(success=False, error=str(e))
        except jsonschema.ValidationError as e:
            logger.error(f"Invalid function declarations in {path}: {e.message}")
            return CommandResult(success=False, error=f"Invalid function declarations: {e.message}")
        return CommandResult(success=True, data=declarations)
