"""
CLI commands for llmgate.

Provides the main command-line interface using Click.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from llmgate import __version__
from llmgate.core.config import (
    CONFIG_FILE_ENV,
    GatewayConfig,
    get_default_config,
    validate_config,
)
from llmgate.llm.errors import GatewayError
from llmgate.llm.providers import PROVIDER_CLASSES
from llmgate.llm.router import GenerationResult, ProviderRouter, create_router
from llmgate.utils.logging import setup_logging

console = Console()

# Exit codes
EXIT_SUCCESS = 0
EXIT_GENERATION_FAILED = 1
EXIT_CONFIG_ERROR = 2


def _load_config(ctx: click.Context, **overrides: object) -> GatewayConfig:
    """Load configuration, honouring the group's --config and logging flags."""
    cli_args = {
        "verbose": ctx.obj.get("verbose"),
        "quiet": ctx.obj.get("quiet"),
        "log_file": ctx.obj.get("log_file"),
        "json_logs": ctx.obj.get("json_logs"),
        **overrides,
    }
    try:
        return GatewayConfig.load(cli_args=cli_args, config_file=ctx.obj.get("config"))
    except (ValidationError, ValueError) as e:
        console.print(f"[bold red]Invalid configuration:[/] {escape(str(e))}")
        sys.exit(EXIT_CONFIG_ERROR)


@click.group()
@click.version_option(version=__version__, prog_name="llmgate")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output (DEBUG level)")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output (ERROR level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Write logs to file",
)
@click.option("--json-logs", is_flag=True, help="Output logs in JSON format")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path (default: ./.llmgate.yml)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    log_file: Optional[Path],
    json_logs: bool,
    config: Optional[Path],
) -> None:
    """llmgate - text-generation gateway with provider fallback and caching."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        json_logs=json_logs,
        config=config,
    )

    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    else:
        level = "INFO"

    setup_logging(level=level, log_file=log_file, json_format=json_logs)


@cli.command()
@click.option("--host", default=None, help="Bind host address (default from config)")
@click.option("--port", default=None, type=int, help="Bind port (default from config)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Start the HTTP gateway.

    Examples:

        llmgate serve

        llmgate serve --host 127.0.0.1 --port 9000
    """
    import uvicorn

    from llmgate.api.app import create_app

    config = _load_config(ctx, host=host, port=port)
    for warning in validate_config(config):
        console.print(f"[yellow]Warning:[/] {warning}")

    console.print(
        f"[bold green]Starting llmgate on {config.server.host}:{config.server.port}[/]"
    )

    log_level = config.logging.level.lower()
    if reload:
        # The reloader's worker process rebuilds config through the bare factory
        _export_for_worker(ctx, config)
        uvicorn.run(
            "llmgate.api.app:create_app",
            factory=True,
            host=config.server.host,
            port=config.server.port,
            reload=True,
            log_level=log_level,
        )
    else:
        uvicorn.run(
            create_app(config=config),
            host=config.server.host,
            port=config.server.port,
            log_level=log_level,
        )


def _export_for_worker(ctx: click.Context, config: GatewayConfig) -> None:
    """Pass --config and the logging flags on to a reloaded server process."""
    if ctx.obj.get("config"):
        os.environ[CONFIG_FILE_ENV] = str(Path(ctx.obj["config"]).resolve())
    os.environ["LLMGATE_LOGGING__LEVEL"] = config.logging.level
    os.environ["LLMGATE_LOGGING__JSON_FORMAT"] = str(config.logging.json_format).lower()
    if config.logging.file:
        os.environ["LLMGATE_LOGGING__FILE"] = str(Path(config.logging.file).resolve())


@cli.command()
@click.argument("prompt")
@click.option(
    "-p",
    "--provider",
    help="Use only this provider (exact name, e.g. OpenAI or Gemini)",
)
@click.pass_context
def generate(ctx: click.Context, prompt: str, provider: Optional[str]) -> None:
    """Generate text for PROMPT once and print it.

    Examples:

        llmgate generate "Explain TCP slow start"

        llmgate generate "Hello" --provider Gemini
    """
    config = _load_config(ctx)
    router = create_router(config.providers)

    try:
        result = asyncio.run(_run_generate(router, prompt, provider))
    except GatewayError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_GENERATION_FAILED)

    console.print(Panel(Text(result.output), title=f"[bold]{result.provider}[/]", expand=False))


async def _run_generate(
    router: ProviderRouter,
    prompt: str,
    provider: Optional[str],
) -> GenerationResult:
    try:
        if provider is not None:
            return await router.generate_with_provider(prompt, provider)
        return await router.generate(prompt)
    finally:
        await router.close()


@cli.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List configured providers in fallback order."""
    config = _load_config(ctx)

    table = Table(title="Providers")
    table.add_column("#", style="dim")
    table.add_column("Provider", style="cyan")
    table.add_column("Model", style="green")
    table.add_column("API key")

    for position, key in enumerate(config.providers.order, start=1):
        provider_config = getattr(config.providers, key)
        status = "[green]configured[/]" if provider_config.api_key else "[red]missing[/]"
        table.add_row(str(position), PROVIDER_CLASSES[key].name, provider_config.model, status)

    console.print(table)


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), default=".")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(path: Path, force: bool) -> None:
    """Write a default .llmgate.yml into PATH.

    Examples:

        llmgate init

        llmgate init ./deploy --force
    """
    config_path = path / ".llmgate.yml"

    if config_path.exists() and not force:
        console.print(f"[yellow]Configuration already exists:[/] {config_path}")
        console.print("Use --force to overwrite")
        return

    path.mkdir(parents=True, exist_ok=True)
    get_default_config().to_yaml(config_path)

    console.print(f"[green]Created configuration:[/] {config_path}")
    console.print("API keys are read from OPENAI_API_KEY and GEMINI_API_KEY when left empty.")


@cli.command()
def version() -> None:
    """Show version and system information."""
    import platform

    console.print(Panel.fit(
        f"[bold]llmgate[/] v{__version__}\n\n"
        "Text-generation gateway with provider fallback and caching",
        title="Version Info",
    ))

    table = Table(title="System Information")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("Python", platform.python_version())
    table.add_row("Platform", platform.platform())
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
