"""Utility functions for the baseql-mcp CLI.

Shared helpers: version, endpoint checks, Claude Desktop config lookup.
"""

import json
import os
import platform
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from urllib.parse import urlparse

from rich.console import Console

# stdout belongs to the stdio transport once the server starts
console = Console(stderr=True)

CLAUDE_SERVER_KEY = "baseql"
CLAUDE_CONFIG_FILENAME = "claude_desktop_config.json"


def _get_cli_version() -> str:
    """Get installed package version.

    Falls back to "unknown" when package metadata isn't available
    (e.g. running from a source checkout without installation).
    """
    try:
        return version("baseql-mcp")
    except PackageNotFoundError:
        return "unknown"


def check_endpoint(endpoint: str) -> tuple[list[str], list[str]]:
    """Check an endpoint URL.

    Returns (errors, warnings). Errors mean the URL is unusable.
    """
    errors: list[str] = []
    warnings: list[str] = []
    if not endpoint:
        errors.append("BASEQL_API_ENDPOINT is not set")
        return errors, warnings

    parsed = urlparse(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        errors.append(f"Not a valid http(s) URL: {endpoint}")
        return errors, warnings

    host = parsed.hostname or ""
    if host != "baseql.com" and not host.endswith(".baseql.com"):
        warnings.append("Endpoint host is not baseql.com (expected https://api.baseql.com/...)")
    return errors, warnings


def get_claude_desktop_config_path() -> Path:
    """Where Claude Desktop keeps its MCP server registry on this platform.

    macOS: ~/Library/Application Support/Claude, Windows: %APPDATA%/Claude,
    anything else: ~/.config/Claude.
    """
    system = platform.system()
    if system == "Darwin":
        claude_dir = Path.home() / "Library" / "Application Support" / "Claude"
    elif system == "Windows":
        claude_dir = Path(os.environ.get("APPDATA", "")) / "Claude"
    else:
        claude_dir = Path.home() / ".config" / "Claude"
    return claude_dir / CLAUDE_CONFIG_FILENAME


def load_claude_desktop_config() -> tuple[dict, Path]:
    """Read Claude Desktop's config, for checking the ``baseql`` server entry.

    A missing file, unparseable JSON or a non-object document all read as an
    empty config. Returns (config_dict, config_path).
    """
    config_path = get_claude_desktop_config_path()
    if not config_path.exists():
        return {}, config_path

    try:
        config = json.loads(config_path.read_text())
    except json.JSONDecodeError:
        console.print(f"[red]Invalid JSON in {config_path}[/red]")
        return {}, config_path

    if not isinstance(config, dict):
        console.print(f"[red]Expected a JSON object in {config_path}[/red]")
        return {}, config_path
    return config, config_path


def is_registered_in_claude_desktop() -> bool:
    """True when Claude Desktop's config has a ``baseql`` MCP server entry."""
    config, _ = load_claude_desktop_config()
    return CLAUDE_SERVER_KEY in (config.get("mcpServers") or {})
