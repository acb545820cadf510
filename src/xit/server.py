"""
xit-server: serves the xit! files under XIT_ROOT to MCP clients and over HTTP.

XIT_ROOT must name an existing directory; no tool reaches outside it.
With API_ENABLED (the default) the REST routes listen on API_PORT in a
daemon thread while the MCP tools run on stdio in the main thread.
"""

import logging
import os
import sys
import threading
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from xit.tools import register_xit_tools

log = logging.getLogger(__name__)

DEFAULT_API_PORT = 9410


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _start_api_server(root: Path, port: int) -> None:
    """Serve the xit! REST routes for files under root; blocks, so run it off the main thread."""
    import uvicorn

    from xit.api.app import create_app

    app = create_app(root)
    log.info("Serving xit! REST API for %s on port %d", root, port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="warning")


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    root_env = os.environ.get("XIT_ROOT", "")
    if not root_env:
        log.error("XIT_ROOT environment variable is not set")
        sys.exit(1)

    root = Path(root_env)
    if not root.is_dir():
        log.error("XIT_ROOT does not exist or is not a directory: %s", root)
        sys.exit(1)

    log.info("xit root: %s", root)

    if _env_flag("API_ENABLED", "true"):
        api_port = int(os.environ.get("API_PORT", str(DEFAULT_API_PORT)))
        api_thread = threading.Thread(
            target=_start_api_server, args=(root, api_port), daemon=True
        )
        api_thread.start()

    mcp = FastMCP("xit-tools")
    register_xit_tools(mcp, root)

    log.info("xit-tools MCP tools ready on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
