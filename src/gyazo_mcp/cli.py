"""
CLI for the Gyazo MCP server.

Commands:
- serve: Start the MCP server
- info: Show configuration
- latest: Show the latest image
- test-search: Test search queries
- upload: Upload a local image file
"""

import asyncio
from pathlib import Path

import httpx
import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import settings
from .exceptions import GyazoMCPError
from .logging import setup_logging
from .tools import ToolName

app = typer.Typer(
    name="gyazo-mcp",
    help="MCP server for Gyazo images, metadata and OCR text",
)
# stdout belongs to the stdio transport
console = Console(stderr=True)

TRANSPORTS = ("stdio", "http")


def _require_token() -> None:
    """Exit with an error if no Gyazo access token is configured."""
    if not settings.has_access_token:
        logger.error("GYAZO_ACCESS_TOKEN not set - cannot continue")
        console.print("[red]Error: GYAZO_ACCESS_TOKEN environment variable is required[/]")
        raise typer.Exit(1)


def _run(coro):
    """Run a coroutine, turning Gyazo and HTTP failures into a clean exit."""
    try:
        return asyncio.run(coro)
    except (GyazoMCPError, httpx.HTTPError) as e:
        logger.error("Request failed: {}", e)
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1) from e


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Gyazo MCP - expose Gyazo images to AI assistants."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json)
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def serve(
    transport: str = typer.Option(
        settings.transport, "--transport", "-t", help="Transport: stdio or http"
    ),
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to (http)"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind to (http)"),
):
    """Start the MCP server."""
    from .server import mcp

    if transport not in TRANSPORTS:
        logger.error("Unknown transport: {}", transport)
        console.print(f"[red]Error: unknown transport '{transport}' (use stdio or http)[/]")
        raise typer.Exit(1)

    _require_token()

    if transport == "stdio":
        logger.info("Starting MCP server on stdio")
        mcp.run(transport="stdio")
        return

    logger.info("Starting MCP server on {}:{}", host, port)
    console.print("[bold blue]Starting Gyazo MCP Server[/]")
    console.print(f"MCP endpoint: http://{host}:{port}/mcp")
    mcp.run(transport="http", host=host, port=port, path="/mcp")


@app.command()
def info():
    """Show configuration."""
    logger.debug("Displaying configuration")
    console.print("[bold blue]Gyazo MCP Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Access Token", "***" if settings.has_access_token else "[red]NOT SET[/]")
    table.add_row("API URL", settings.gyazo_api_url)
    table.add_row("Upload URL", settings.gyazo_upload_url)
    table.add_row("Request Timeout", f"{settings.request_timeout}s")
    table.add_row("Resource Page Size", str(settings.resource_page_size))
    table.add_row("Transport", settings.transport)
    table.add_row("Server Host", settings.host)
    table.add_row("Server Port", str(settings.port))
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command()
def latest():
    """Show the latest image and its metadata."""
    _require_token()

    async def fetch_latest():
        from .server import get_handlers

        images = await get_handlers().client.list_images(page=1, per_page=1)
        return images[0] if images else None

    image = _run(fetch_latest())
    if image is None:
        logger.info("No images in account")
        console.print("[yellow]No images found[/]")
        return

    from .handlers import image_metadata_markdown

    table = Table(title="Latest Image")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Image ID", image.image_id)
    table.add_row("Permalink", image.permalink_url or "")
    table.add_row("URL", image.url)
    table.add_row("Type", image.type)
    table.add_row("Created", image.created_at)
    console.print(table)

    markdown = image_metadata_markdown(image)
    if markdown:
        console.print(markdown, markup=False)


@app.command()
def test_search(
    query: str = typer.Argument(..., help="Query to test"),
    page: int = typer.Option(1, "--page", help="Page number"),
    per: int = typer.Option(20, "--per", "-n", help="Results per page"),
):
    """Test a search query against Gyazo."""
    logger.info("Testing search query: '{}' (page={}, per={})", query[:50], page, per)
    _require_token()

    async def run_search():
        from .server import get_handlers

        return await get_handlers().call_tool(
            ToolName.SEARCH.value, {"query": query, "page": page, "per": per}
        )

    content = _run(run_search())
    console.print(f"\n[bold]Results for: '{query}'[/]\n")
    for part in content:
        console.print(part.text, markup=False)


@app.command()
def upload(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Image file to upload"),
    title: str | None = typer.Option(None, "--title", help="Image title"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    referer_url: str | None = typer.Option(None, "--referer-url", help="Source page URL"),
    app_name: str | None = typer.Option(None, "--app", help="Source application name"),
    private: bool = typer.Option(False, "--private", help="Only the owner can see the image"),
):
    """Upload a local image file to Gyazo."""
    _require_token()

    image_type = path.suffix.lstrip(".").lower() or "png"
    data = path.read_bytes()
    logger.info("Uploading {} ({} bytes)", path.name, len(data))

    async def run_upload():
        from .server import get_handlers

        return await get_handlers().client.upload_image(
            data,
            image_type,
            title=title,
            desc=description,
            referer_url=referer_url,
            app=app_name,
            access_policy="only_owner" if private else None,
        )

    uploaded = _run(run_upload())
    console.print("[bold green]Upload complete![/]")
    console.print(f"Permalink: {uploaded.permalink_url}")
    console.print(f"Image URL: {uploaded.url}")
    console.print(f"Image ID: {uploaded.image_id}")


if __name__ == "__main__":
    app()
