"""
aicli: AI-powered CLI orchestrator

Stitches together aichat, llm-functions, argc and jq behind one command-line
interface. Configuration is layered: compiled-in defaults, environment
variables, then an optional JSON override file.
"""

__version__ = "0.1.0"
__author__ = "aicli Team"
__description__ = "AI-powered CLI tool integrating aichat, llm-functions, argc, and jq"
