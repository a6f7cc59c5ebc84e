"""Command-line entry point: ``mcp-openai-client <path_to_server_script>``."""

import asyncio
from typing import Optional

import typer

from .core import ClientConfig, ConfigurationError, TransportError, get_logger, setup_logging
from .session import ChatSession

logger = get_logger(__name__)

USAGE = "Usage: mcp-openai-client <path_to_server_script>"

app = typer.Typer(add_completion=False, help="Chat with an OpenAI-compatible model that can call MCP server tools.")


async def run_session(config: ClientConfig, script_path: str) -> int:
    """Connects to the server and runs the interactive loop.

    Returns:
        The process exit code.
    """
    async with ChatSession(config) as session:
        try:
            await session.start(script_path)
        except TransportError as e:
            logger.error("Startup failed: %s", e)
            typer.echo(f"Failed to start: {e}", err=True)
            return 1
        await session.run_loop()
    return 0


@app.command()
def main(
    server_script: Optional[str] = typer.Argument(None, help="Path to the MCP server script (.py or .js)."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL (e.g. DEBUG, INFO)."),
) -> None:
    if not server_script:
        typer.echo(USAGE)
        return

    try:
        config = ClientConfig.from_env()
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)

    setup_logging(log_level or config.log_level)

    code = asyncio.run(run_session(config, server_script))
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
