"""HTTP API for pool hours."""

import asyncio
import logging

import uvicorn
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from .endpoints.hours import hours_endpoint
from .endpoints.weekly import ALL_DAYS_FAILED, weekly_endpoint
from .models import PoolHoursException

logger = logging.getLogger(__name__)


class HTTPServer:
    """Serves the day and week queries over HTTP."""

    def __init__(self):
        """Initialize HTTP server."""
        self.app = FastAPI(title="Pool Hours API")
        self._setup_routes()

    def _setup_routes(self):
        """Setup FastAPI routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "message": "Pool Hours API",
                "version": "0.1.0",
                "endpoints": {
                    "day": "/api/pool-hours",
                    "week": "/api/weekly-hours",
                    "health": "/health",
                },
            }

        @self.app.get("/health")
        async def health():
            """Health check endpoint."""
            return {"status": "healthy"}

        @self.app.get("/api/pool-hours")
        async def pool_hours(date: str | None = None):
            """Pool hours for one day (YYYY-MM-DD, default today)."""
            try:
                result = await hours_endpoint.get_pool_hours(date)
            except PoolHoursException as e:
                return JSONResponse(
                    status_code=400,
                    content=hours_endpoint.error_payload(e.message, date),
                )
            except Exception as e:
                logger.error(f"Error scraping pool hours: {e}")
                return JSONResponse(
                    status_code=500,
                    content=hours_endpoint.error_payload(
                        f"Failed to scrape pool hours: {e}", date
                    ),
                )

            if result["error"]:
                return JSONResponse(status_code=502, content=result)
            return result

        @self.app.get("/api/weekly-hours")
        async def weekly_hours(
            week_offset: int = Query(0, alias="weekOffset"),
            client_timezone: str | None = Query(None, alias="timezone"),
        ):
            """Pool hours for the week `weekOffset` weeks from now."""
            try:
                result = await weekly_endpoint.get_weekly_hours(
                    week_offset, client_timezone
                )
            except PoolHoursException as e:
                return JSONResponse(
                    status_code=400,
                    content=weekly_endpoint.error_payload(e.message, week_offset),
                )
            except Exception as e:
                logger.error(f"Error aggregating weekly pool hours: {e}")
                return JSONResponse(
                    status_code=500,
                    content=weekly_endpoint.error_payload(
                        f"Failed to aggregate weekly pool hours: {e}", week_offset
                    ),
                )

            if result["error"] == ALL_DAYS_FAILED:
                return JSONResponse(status_code=502, content=result)
            return result

    def run(self, host: str = "0.0.0.0", port: int = 8000):
        """Run the HTTP server.

        Args:
            host: Host to bind to
            port: Port to bind to
        """
        logger.info(f"Starting HTTP server on {host}:{port}")
        uvicorn.run(self.app, host=host, port=port, log_level="info")


# Global HTTP server instance
http_server = HTTPServer()
app = http_server.app


def run_http_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the HTTP server in blocking mode."""
    http_server.run(host, port)


async def run_http_server_async(host: str = "0.0.0.0", port: int = 8000) -> asyncio.Task:
    """Run the HTTP server in non-blocking mode."""
    server_config = uvicorn.Config(http_server.app, host=host, port=port, log_level="info")
    server = uvicorn.Server(server_config)

    # Run in background task
    task = asyncio.create_task(server.serve())
    return task
