#!/usr/bin/env python3
"""
aicli Main Entry Point

Command-line interface that drives aichat, llm-functions, argc and jq. Every
command loads the layered configuration, translates its flags into one or
more adapter calls and prints the outcome.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from . import __description__, __version__
from .config import DEFAULT_CONFIG_PATH, AppConfig, load_config, save_config
from .integrations import (
    AIChatAdapter,
    ArgcAdapter,
    ChatOptions,
    LLMFunctionsAdapter,
    process_with_jq,
    validate_jq_installation,
)
from .utils.json_logger import configure_logging

app = typer.Typer(
    name="aicli",
    help=__description__,
    rich_markup_mode="rich",
    no_args_is_help=True,
)
config_app = typer.Typer(name="config", help="Inspect the aicli configuration")
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

ConfigOption = typer.Option(
    DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to configuration file"
)
FunctionsDirOption = typer.Option(
    None, "--functions-dir", "-f", help="Path to llm-functions directory"
)


# Cross-platform safe success/failure symbols (avoid Unicode on legacy Windows)
def _symbol(ok: bool) -> str:
    enc = (getattr(sys.stdout, "encoding", None) or "").lower()
    if "utf" in enc:
        return "✓" if ok else "✗"
    return "OK" if ok else "FAIL"


def _load(config_path: Path) -> AppConfig:
    config = load_config(config_path)
    configure_logging(config.logging.level, config.logging.file, console=err_console)
    return config


def _fail(message: str) -> None:
    err_console.print(f"[red]{_symbol(False)} {message}[/red]", highlight=False)
    raise typer.Exit(code=1)


def _echo_data(data: Any) -> None:
    if isinstance(data, str):
        typer.echo(data)
    else:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_json_option(value: str, what: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        logger.error(f"Invalid JSON {what}: {e}")
        _fail(f"Invalid JSON {what}")


@app.callback()
def startup() -> None:
    """AI-powered CLI tool integrating aichat, llm-functions, argc, and jq."""
    load_dotenv()
    configure_logging(os.environ.get("LOG_LEVEL"), console=err_console)


@app.command("version")
def version_cmd() -> None:
    """Show the aicli version."""
    typer.echo(f"aicli {__version__}")


@app.command("chat")
def chat(
    message: Optional[str] = typer.Argument(None, help="Message to send"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="AI model to use"),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", "-t", help="Temperature for response generation"
    ),
    functions_dir: Optional[Path] = FunctionsDirOption,
    system: Optional[str] = typer.Option(None, "--system", "-s", help="System prompt to use"),
    config_path: Path = ConfigOption,
) -> None:
    """Send a message to the AI with llm-functions tools enabled."""
    config = _load(config_path)
    options = ChatOptions(
        model=model or config.ai_chat.model,
        temperature=temperature if temperature is not None else config.ai_chat.temperature,
        max_tokens=config.ai_chat.max_tokens,
        system_prompt=system,
    )
    aichat = AIChatAdapter(options)
    directory = str(functions_dir or config.llm_functions.directory)

    if not aichat.validate_installation():
        _fail("aichat is not installed. Install it from https://github.com/sigoden/aichat")

    if not message:
        console.print("[green]Chat initialized. Pass a message to talk to the AI.[/green]")
        return

    with console.status("Sending message to AI..."):
        result = aichat.send_message_with_functions(message, directory)

    if not result.success:
        _fail(f"Error: {result.error}")
    console.print(f"[green]{_symbol(True)} AI responded[/green]")
    typer.echo("\n" + result.data)


@app.command("tool")
def tool(
    name: str = typer.Option(..., "--name", "-n", help="Tool name to execute"),
    functions_dir: Optional[Path] = FunctionsDirOption,
    params: Optional[str] = typer.Option(
        None, "--params", "-p", help="Parameters for the tool in JSON format"
    ),
    jq_filter: Optional[str] = typer.Option(
        None, "--jq", "-j", help="JQ filter to apply to the result"
    ),
    config_path: Path = ConfigOption,
) -> None:
    """Execute an llm-functions tool."""
    config = _load(config_path)
    tool_params: Dict[str, Any] = {}
    if params:
        tool_params = _parse_json_option(params, "parameters")
        if not isinstance(tool_params, dict):
            _fail("Tool parameters must be a JSON object")

    functions = LLMFunctionsAdapter(str(functions_dir or config.llm_functions.directory))
    with console.status(f"Executing tool {name}..."):
        result = functions.execute_tool(name, tool_params)

    if not result.ok:
        _fail(f"Error executing tool: {result.error}")
    console.print(f"[green]{_symbol(True)} Tool executed in {result.duration_ms}ms[/green]")

    if not (jq_filter and result.result):
        typer.echo(result.result)
        return

    try:
        data: Any = json.loads(result.result)
    except ValueError:
        data = result.result
    jq_result = process_with_jq(jq_filter, data)
    if not jq_result.success:
        _fail(f"JQ processing error: {jq_result.error}")
    _echo_data(jq_result.data)


@app.command("agent")
def agent(
    message: str = typer.Argument(..., help="Message to send to the agent"),
    name: str = typer.Option(..., "--name", "-n", help="Agent name to use"),
    functions_dir: Optional[Path] = FunctionsDirOption,
    model: Optional[str] = typer.Option(None, "--model", "-m", help="AI model to use"),
    config_path: Path = ConfigOption,
) -> None:
    """Send a message to an llm-functions agent."""
    config = _load(config_path)
    options = ChatOptions(
        model=model or config.ai_chat.model,
        temperature=config.ai_chat.temperature,
        max_tokens=config.ai_chat.max_tokens,
    )
    aichat = AIChatAdapter(options)
    directory = str(functions_dir or config.llm_functions.directory)

    with console.status(f"Using agent {name}..."):
        result = aichat.use_agent(message, name, directory)

    if not result.success:
        _fail(f"Error: {result.error}")
    console.print(f"[green]{_symbol(True)} Agent {name} responded[/green]")
    typer.echo("\n" + result.data)


def _print_names(title: str, names: Any, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(names, indent=2))
        return
    console.print(f"\n[bold]{title}:[/bold]")
    for item in names:
        console.print(f"- {item}", markup=False, highlight=False)


@app.command("list-tools")
def list_tools(
    functions_dir: Optional[Path] = FunctionsDirOption,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = ConfigOption,
) -> None:
    """List available llm-functions tools."""
    config = _load(config_path)
    result = LLMFunctionsAdapter(str(functions_dir or config.llm_functions.directory)).list_tools()
    if not result.success:
        _fail(f"Error listing tools: {result.error}")
    _print_names("Available tools", result.data, as_json)


@app.command("list-agents")
def list_agents(
    functions_dir: Optional[Path] = FunctionsDirOption,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = ConfigOption,
) -> None:
    """List available llm-functions agents."""
    config = _load(config_path)
    result = LLMFunctionsAdapter(str(functions_dir or config.llm_functions.directory)).list_agents()
    if not result.success:
        _fail(f"Error listing agents: {result.error}")
    _print_names("Available agents", result.data, as_json)


@app.command("functions")
def functions_cmd(
    functions_dir: Optional[Path] = FunctionsDirOption,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = ConfigOption,
) -> None:
    """Show the function declarations from functions.json."""
    config = _load(config_path)
    functions = LLMFunctionsAdapter(str(functions_dir or config.llm_functions.directory))
    result = functions.function_declarations()
    if not result.success:
        _fail(f"Error reading function declarations: {result.error}")

    if as_json:
        typer.echo(json.dumps(result.data, indent=2, ensure_ascii=False))
        return

    table = Table(title="Function Declarations")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required", style="magenta")
    for decl in result.data:
        required = decl["parameters"].get("required") or []
        table.add_row(decl["name"], decl["description"], ", ".join(required))
    console.print(table)


@app.command("build")
def build(
    functions_dir: Optional[Path] = FunctionsDirOption,
    config_path: Path = ConfigOption,
) -> None:
    """Build the llm-functions project with argc."""
    config = _load(config_path)
    functions = LLMFunctionsAdapter(str(functions_dir or config.llm_functions.directory))
    if not functions.functions_dir.exists():
        _fail(f"Functions directory not found: {functions.functions_dir}")

    with console.status("Building llm-functions..."):
        result = functions.build()
    if not result.success:
        _fail(f"Build failed: {result.error}")
    console.print(f"[green]{_symbol(True)} llm-functions built[/green]")
    if result.data:
        typer.echo(result.data.rstrip("\n"))


@app.command("check")
def check(
    functions_dir: Optional[Path] = FunctionsDirOption,
    config_path: Path = ConfigOption,
) -> None:
    """Check required dependencies and configuration."""
    console.print("[bold]Checking dependencies and configuration...[/bold]")
    config = _load(config_path)
    directory = Path(functions_dir or config.llm_functions.directory)

    table = Table(title="Dependencies")
    table.add_column("Component", style="cyan")
    table.add_column("Status")

    def row(label: str, ok: bool, good: str, bad: str) -> None:
        status = f"[green]{_symbol(True)} {good}[/green]" if ok else f"[red]{_symbol(False)} {bad}[/red]"
        table.add_row(label, status)

    row("aichat", AIChatAdapter().validate_installation(), "Installed", "Not installed")
    row("argc", ArgcAdapter().validate_installation(), "Installed", "Not installed")
    row("jq", validate_jq_installation(), "Installed", "Not installed")
    functions_exist = directory.exists()
    row("llm-functions directory", functions_exist, "Found", "Not found")
    console.print(table)

    if functions_exist:
        result = LLMFunctionsAdapter(str(directory)).check()
        if result.success:
            console.print(f"[green]{_symbol(True)} llm-functions check passed[/green]")
        else:
            console.print(
                f"[red]{_symbol(False)} llm-functions check failed: {result.error}[/red]",
                highlight=False,
            )


@app.command("jq")
def jq(
    filter_expr: str = typer.Option(..., "--filter", "-f", help="JQ filter expression"),
    input_json: Optional[str] = typer.Option(
        None, "--input", "-i", help="JSON input data (reads stdin when omitted)"
    ),
    raw_output: bool = typer.Option(
        False, "--raw-output", "-r", help="Output raw strings, not JSON texts"
    ),
    slurp: bool = typer.Option(
        False, "--slurp", "-s", help="Treat input as array of JSON objects"
    ),
) -> None:
    """Process JSON data with jq."""
    if not validate_jq_installation():
        _fail("jq is not installed. Please install it first.")

    if input_json is not None:
        data = _parse_json_option(input_json, "input")
    else:
        data = _parse_json_option(sys.stdin.read(), "input from stdin")

    result = process_with_jq(filter_expr, data, raw=raw_output, slurp=slurp)
    if not result.success:
        _fail(f"Error processing with jq: {result.error}")
    _echo_data(result.data)


@app.command("init")
def init(config_path: Path = ConfigOption) -> None:
    """Initialize the configuration file."""
    if config_path.exists():
        console.print(f"[yellow]Configuration already exists at {config_path}[/yellow]")
        return

    config = _load(config_path)
    result = save_config(config, config_path)
    if not result.success:
        _fail(f"Error initializing configuration: {result.error}")

    console.print(f"[green]{_symbol(True)} Configuration initialized at {config_path}[/green]")
    console.print(
        "[yellow]You can edit this file manually or run this command again "
        "with a different --config path.[/yellow]"
    )


@config_app.command("show")
def config_show(config_path: Path = ConfigOption) -> None:
    """Print the effective configuration (API key masked)."""
    config = _load(config_path)
    typer.echo(json.dumps(config.redacted(), indent=2))


def main():
    """Main entry point for aicli."""
    app()


if __name__ == "__main__":
    main()
