"""Combined launcher supporting MCP (stdio), HTTP, or both."""

import argparse
import asyncio
import logging

from .config import config
from .http_server import run_http_server, run_http_server_async
from .server import initialize as mcp_initialize
from .server import mcp, setup_logging

logger = logging.getLogger(__name__)


async def run_combined_server(
    mode: str = "mcp", http_host: str = "0.0.0.0", http_port: int = 8000
) -> None:
    """Run the server in the specified mode.

    Args:
        mode: Server mode ("mcp", "http", or "both")
        http_host: Host for HTTP server
        http_port: Port for HTTP server
    """
    logger.info(f"Starting Pool Hours Server in {mode} mode")

    if mode == "mcp":
        await mcp_initialize()
        await mcp.run_async(show_banner=False)

    elif mode == "http":
        logger.info(f"Running HTTP API on {http_host}:{http_port}")
        http_task = await run_http_server_async(http_host, http_port)
        await http_task

    elif mode == "both":
        logger.info(f"Running in both modes - STDIO + HTTP on {http_host}:{http_port}")

        http_task = await run_http_server_async(http_host, http_port)
        try:
            await mcp_initialize()
            await mcp.run_async(show_banner=False)
        finally:
            http_task.cancel()
            try:
                await http_task
            except asyncio.CancelledError:
                pass

    else:
        logger.error(f"Unknown mode: {mode}")
        raise ValueError(f"Mode must be 'mcp', 'http', or 'both', got: {mode}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for combined server."""
    parser = argparse.ArgumentParser(description="Pool Hours Server")
    parser.add_argument(
        "--mode",
        choices=["mcp", "http", "both"],
        default="http",
        help="Server mode: mcp (stdio), http (REST API), or both",
    )
    parser.add_argument(
        "--host",
        default=config.http_host,
        help=f"Host for HTTP server (default: {config.http_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.http_port,
        help=f"Port for HTTP server (default: {config.http_port})",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="DEBUG" if config.enable_debug_mode else "INFO",
        help="Log level (default: INFO)",
    )

    args = parser.parse_args(argv)

    setup_logging(getattr(logging, args.log_level))

    try:
        if args.mode == "http":
            run_http_server(args.host, args.port)
        else:
            asyncio.run(
                run_combined_server(
                    mode=args.mode, http_host=args.host, http_port=args.port
                )
            )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise


if __name__ == "__main__":
    main()
