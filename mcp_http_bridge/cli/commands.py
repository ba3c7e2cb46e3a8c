"""CLI entry point for mcp_http_bridge.

Parses options, configures stderr logging, and runs the stdio bridge until end
of input or a termination signal.
"""

import asyncio
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from mcp_http_bridge import __logo__, __version__
from mcp_http_bridge.bridge.runtime import StdioBridge
from mcp_http_bridge.cli.shared.logging_utils import configure_stderr_logging, ensure_rotating_log_file
from mcp_http_bridge.config.loader import load_config
from mcp_http_bridge.config.schema import BridgeConfig
from mcp_http_bridge.utils.exceptions import ConfigError

app = typer.Typer(
    name="mcp-http-bridge",
    help=f"{__logo__} Bridge a stdio JSON-RPC client to an HTTP MCP endpoint",
    add_completion=False,
)

# stdout is the protocol channel; anything human-readable goes to stderr.
console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} mcp-http-bridge v{__version__}")
        raise typer.Exit()


def _print_startup(config: BridgeConfig) -> None:
    console.print(f"{__logo__} Starting MCP HTTP Bridge...")
    console.print(f"  Endpoint: [cyan]{config.endpoint}[/cyan]")
    console.print(f"  Token: {config.masked_token()}")
    console.print(f"  Timeout: {config.timeout_ms}ms")
    console.print(f"  Retries: {config.retries}")
    if not config.verify_tls:
        console.print("  [yellow]TLS certificate verification disabled[/yellow]")


async def serve(config: BridgeConfig) -> str | None:
    """Run the bridge; returns the shutdown reason (None at end of input)."""
    bridge = StdioBridge(config)
    bridge.install_signal_handlers()
    await bridge.run()
    return bridge.shutdown_reason


@app.command()
def main(
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="HTTP endpoint for the MCP service"),
    token: str = typer.Option(None, "--token", "-t", help="Bearer token for authentication"),
    timeout: int = typer.Option(None, "--timeout", help="Request timeout in milliseconds [default: 30000]"),
    retries: int = typer.Option(None, "--retries", help="Total attempts per request [default: 3]"),
    insecure: bool = typer.Option(False, "--insecure", help="Disable TLS certificate verification (development only)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose diagnostics on stderr"),
    session_id: str = typer.Option(None, "--session-id", help="Pre-seed the upstream session id"),
    log_file: Path = typer.Option(None, "--log-file", help="Also write diagnostics to a rotating log file"),
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Relay line-delimited JSON-RPC from stdin to an HTTP endpoint and answer on stdout."""
    try:
        config = load_config(
            endpoint=endpoint,
            token=token,
            timeout_ms=timeout,
            retries=retries,
            verify_tls=False if insecure else None,
            verbose=True if verbose else None,
            session_id=session_id,
        )
    except ConfigError as e:
        console.print(f"[red]Failed to start MCP HTTP Bridge:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    configure_stderr_logging(config.verbose)
    if log_file is not None:
        ensure_rotating_log_file(log_file)
    if config.verbose:
        _print_startup(config)

    try:
        reason = asyncio.run(serve(config))
    except KeyboardInterrupt:
        reason = "interrupted"
    except Exception as e:
        logger.exception("Bridge failed: {}", e)
        raise typer.Exit(1) from e

    if reason:
        logger.info("Bridge shutting down ({})", reason)
    raise typer.Exit(0)
