"""Entry point for ``python -m mcp_http_bridge``."""

from mcp_http_bridge.cli.commands import app

if __name__ == "__main__":
    app()
