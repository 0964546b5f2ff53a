"""Adapters for the external programs aicli drives."""

from .aichat import AIChatAdapter, ChatOptions
from .argc import ArgcAdapter
from .jq import process_with_jq, validate_jq_installation
from .llm_functions import LLMFunctionsAdapter, parse_manifest
from .process import CommandResult, FunctionResult, ProcessResult, ProcessRunner

__all__ = [
    "AIChatAdapter",
    "ChatOptions",
    "ArgcAdapter",
    "process_with_jq",
    "validate_jq_installation",
    "LLMFunctionsAdapter",
    "parse_manifest",
    "CommandResult",
    "FunctionResult",
    "ProcessResult",
    "ProcessRunner",
]
