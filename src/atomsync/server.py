"""Command-line entry point serving the feed engine over MCP.

``atomsync-mcp`` keeps every feed it is asked about in memory, so later
tool calls reuse cached validators and discovered history pages. Nothing
is written to disk: restarting the server starts from empty feeds.
"""

import logging
import signal
import sys

from fastmcp import FastMCP

from .client import FeedClient
from .config import Config, load_config
from .tools import FeedStore, register_tools

logger = logging.getLogger(__name__)


def create_server(config: Config) -> tuple[FastMCP, FeedStore]:
    """Build the MCP app and the store of tracked feeds behind it."""
    store = FeedStore(FeedClient(config), max_history_hops=config.max_history_hops)
    mcp = FastMCP("atomsync")
    register_tools(mcp, store)
    return mcp, store


def main() -> None:
    """Serve the atomsync tools until SIGINT or SIGTERM."""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    # Per-request lines from httpx duplicate our own fetch logging.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    config = load_config()
    mcp, store = create_server(config)

    def stop(signum: int, frame: object) -> None:
        logger.info(
            "Signal %d: dropping %d tracked feeds and closing the HTTP client",
            signum,
            len(store.feeds()),
        )
        store.client.close()
        sys.exit(0)

    for signum in (signal.SIGTERM, signal.SIGINT):
        signal.signal(signum, stop)

    logger.info(
        "Serving atomsync on http://%s:%d/mcp (history hop limit: %s)",
        config.server_host,
        config.server_port,
        config.max_history_hops,
    )
    mcp.run(transport="streamable-http", host=config.server_host, port=config.server_port)


if __name__ == "__main__":
    main()
