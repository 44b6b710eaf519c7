"""MCP server exposing pool hours as tools."""

import asyncio
import logging
from typing import Any

from fastmcp import FastMCP

from .config import config
from .endpoints.hours import hours_endpoint
from .endpoints.weekly import weekly_endpoint
from .models import PoolHoursException

logger = logging.getLogger(__name__)

# Create MCP server
mcp = FastMCP("Pool Hours Server")


def setup_logging(level: int | None = None) -> None:
    """Configure logging for the server process.

    Logs go to the configured log file; stdout belongs to the MCP protocol.

    Args:
        level: Log level, DEBUG or INFO from the debug setting if omitted
    """
    if level is None:
        level = logging.DEBUG if config.enable_debug_mode else logging.INFO
    logging.basicConfig(
        filename=config.log_file,
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@mcp.tool()
async def get_pool_hours(date: str | None = None) -> dict[str, Any]:
    """Get lap and recreational swim sessions for one day.

    Args:
        date: Date in YYYY-MM-DD format (e.g., '2024-01-15'); today if omitted

    Returns:
        Sessions with UTC start/end timestamps, open status and a summary line
    """
    try:
        result = await hours_endpoint.get_pool_hours(date)
        logger.debug(f"Retrieved {len(result['hours'])} sessions for {result['date']}")
        return result

    except PoolHoursException as e:
        logger.warning(f"Rejected pool hours request for {date}: {e}")
        return hours_endpoint.error_payload(e.message, date)
    except Exception as e:
        logger.error(f"Error getting pool hours for {date}: {e}")
        return hours_endpoint.error_payload(
            f"Failed to retrieve pool hours: {str(e)}", date
        )


@mcp.tool()
async def get_weekly_pool_hours(
    week_offset: int = 0, timezone: str | None = None
) -> dict[str, Any]:
    """Get swim sessions for a Monday to Sunday week.

    Args:
        week_offset: 0 for the current week, 1 for next week
        timezone: Caller's IANA timezone (e.g., 'America/Los_Angeles')

    Returns:
        Seven days of sessions plus the next opening
    """
    try:
        result = await weekly_endpoint.get_weekly_hours(week_offset, timezone)
        logger.debug(
            f"Retrieved week {result['weekStartDate']}..{result['weekEndDate']}"
        )
        return result

    except PoolHoursException as e:
        logger.warning(f"Rejected weekly request ({week_offset}, {timezone}): {e}")
        return weekly_endpoint.error_payload(e.message, week_offset)
    except Exception as e:
        logger.error(f"Error aggregating week {week_offset}: {e}")
        return weekly_endpoint.error_payload(
            f"Failed to aggregate weekly pool hours: {str(e)}", week_offset
        )


async def initialize() -> None:
    """Initialize the server components."""
    config_info = config.to_dict()
    logger.debug(f"Configuration loaded: {config_info}")


def main() -> None:
    """Main server entry point."""
    setup_logging()
    asyncio.run(initialize())

    # Run the MCP server (synchronous)
    mcp.run(show_banner=False)


if __name__ == "__main__":
    main()
