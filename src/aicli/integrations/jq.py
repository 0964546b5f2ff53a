"""jq integration."""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, List, Optional

from .process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)


def build_jq_args(filter_expr: str, input_file: str, raw: bool = False, slurp: bool = False) -> List[str]:
    args: List[str] = []
    if raw:
        args.append("-r")
    if slurp:
        args.append("-s")
    args.extend([filter_expr, str(input_file)])
    return args


def process_with_jq(
    filter_expr: str,
    data: Any,
    raw: bool = False,
    slurp: bool = False,
    runner: Optional[ProcessRunner] = None,
    binary: str = "jq",
) -> CommandResult:
    """Run ``data`` through a jq filter.

    The input is written to a temporary ``input.json`` which is removed
    afterwards. Unless ``raw`` is set, output that parses as JSON is returned
    decoded; anything else comes back as text.
    """
    if not filter_expr or not filter_expr.strip():
        return CommandResult(success=False, error="jq filter must not be empty")

    runner = runner or ProcessRunner()
    temp_dir = tempfile.mkdtemp(prefix="aicli-jq-")
    try:
        input_file = Path(temp_dir) / "input.json"
        try:
            input_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error processing with jq: {e}")
            return CommandResult(success=False, error=str(e))

        result = runner.run([binary] + build_jq_args(filter_expr, str(input_file), raw, slurp))
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    if not result.ok:
        logger.error(f"Error processing with jq: {result.details}")
        return CommandResult(success=False, error=result.details)

    output = result.stdout.rstrip("\n")
    if raw:
        return CommandResult(success=True, data=output)
    try:
        return CommandResult(success=True, data=json.loads(output))
    except ValueError:
        return CommandResult(success=True, data=output)


def validate_jq_installation(runner: Optional[ProcessRunner] = None, binary: str = "jq") -> bool:
    """Check whether jq is installed and runnable."""
    return (runner or ProcessRunner()).probe([binary, "--version"])
