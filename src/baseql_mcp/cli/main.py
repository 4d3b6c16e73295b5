"""Click command group and CLI commands for baseql-mcp."""

import os
import sys

import click
from rich.panel import Panel

from baseql_mcp.cli.utils import (
    CLAUDE_SERVER_KEY,
    _get_cli_version,
    check_endpoint,
    console,
    get_claude_desktop_config_path,
    is_registered_in_claude_desktop,
)
from baseql_mcp.config import get_settings, reset_settings
from baseql_mcp.connectors.graphql import GraphQLConnector
from baseql_mcp.errors import BaseQLError
from baseql_mcp.graphql.introspection import LIST_TABLES_QUERY, filter_table_types


@click.group()
@click.version_option(version=_get_cli_version())
def main():
    """baseql-mcp - Query Airtable and Google Sheets via BaseQL GraphQL."""
    pass


@main.command()
@click.option(
    "--endpoint", default=None, help="BaseQL API endpoint (overrides BASEQL_API_ENDPOINT)"
)
@click.option("--key", default=None, help="BaseQL API key (overrides BASEQL_API_KEY)")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="MCP transport (default: stdio)",
)
def start(endpoint: str | None, key: str | None, transport: str | None):
    """Start the MCP server."""
    if endpoint:
        os.environ["BASEQL_API_ENDPOINT"] = endpoint
    if key:
        os.environ["BASEQL_API_KEY"] = key
    if transport:
        os.environ["MCP_TRANSPORT"] = transport

    reset_settings()
    settings = get_settings()
    if not settings.is_configured:
        console.print("[red]Missing required credentials[/red]")
        console.print(
            "[dim]Set BASEQL_API_ENDPOINT and BASEQL_API_KEY, "
            "or pass --endpoint and --key.[/dim]"
        )
        sys.exit(1)

    console.print(f"[blue]Starting baseql-mcp ({settings.mcp_transport})...[/blue]")

    # Import after the environment is set so the module-level server sees it
    from baseql_mcp.server import main as server_main

    server_main()


@main.command()
def validate():
    """Check configuration, connectivity and Claude Desktop integration."""
    console.print(
        Panel.fit(
            "[bold blue]Validating BaseQL MCP configuration[/bold blue]",
            border_style="blue",
        )
    )

    reset_settings()
    settings = get_settings()

    console.print("\n[bold]Configuration[/bold]")
    errors, warnings = check_endpoint(settings.baseql_api_endpoint)
    if not settings.baseql_api_key:
        errors.append("BASEQL_API_KEY is not set")
    for warning in warnings:
        console.print(f"  [yellow]⚠ {warning}[/yellow]")
    if errors:
        for error in errors:
            console.print(f"  [red]✗ {error}[/red]")
        sys.exit(1)
    console.print(f"  [green]✓ Endpoint: {settings.baseql_api_endpoint}[/green]")

    console.print("\n[bold]Connection[/bold]")
    connector = GraphQLConnector.from_settings(settings)
    result = connector.test_connection()
    if not result["connected"]:
        console.print("  [red]✗ API connection failed[/red]")
        console.print(f"    {result['error']}")
        sys.exit(1)
    console.print(f"  [green]✓ Connected (query type: {result['query_type']})[/green]")

    try:
        data = connector.execute(LIST_TABLES_QUERY)
    except BaseQLError as exc:
        console.print(f"  [yellow]⚠ Could not list tables: {exc}[/yellow]")
    else:
        tables = filter_table_types((data.get("__schema") or {}).get("types") or [])
        console.print(f"  [dim]Found {len(tables)} tables in your BaseQL schema[/dim]")

    console.print("\n[bold]Claude Desktop[/bold]")
    if is_registered_in_claude_desktop():
        console.print(f"  [green]✓ '{CLAUDE_SERVER_KEY}' server configured[/green]")
    else:
        console.print(f"  [yellow]⚠ '{CLAUDE_SERVER_KEY}' server not found[/yellow]")
        console.print(f"  [dim]Looked in {get_claude_desktop_config_path()}[/dim]")
        console.print("  [dim]This is okay if you're using a different MCP client.[/dim]")

    console.print("\n[green]Validation complete.[/green]")


@main.command()
def status():
    """Show current configuration status."""
    reset_settings()
    settings = get_settings()

    console.print(
        Panel.fit(
            "[bold blue]baseql-mcp Status[/bold blue]",
            border_style="blue",
        )
    )

    console.print("\n[bold]Configuration[/bold]")
    endpoint = settings.baseql_api_endpoint or "[yellow]not set[/yellow]"
    api_key = settings.masked_api_key() or "[yellow]not set[/yellow]"
    console.print(f"  Endpoint:  {endpoint}")
    console.print(f"  API key:   {api_key}")
    console.print(f"  Transport: {settings.mcp_transport}")
    if settings.mcp_transport == "http":
        console.print(f"  Listen:    {settings.mcp_host}:{settings.mcp_port}{settings.mcp_path}")
    console.print(f"  Timeout:   {settings.request_timeout:g}s")

    if not settings.is_configured:
        console.print("  [dim]Set BASEQL_API_ENDPOINT and BASEQL_API_KEY to configure.[/dim]")


if __name__ == "__main__":
    main()
