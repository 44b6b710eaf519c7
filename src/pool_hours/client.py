import logging
import socket

import httpx

from .config import config
from .models import PoolHoursException

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_MESSAGES = {
    "CONNECTION_REFUSED": "Unable to connect to the pool website. Please check your internet connection.",
    "HOST_NOT_FOUND": "Pool website not found. The website may be temporarily unavailable.",
    "TIMEOUT": "Request timed out. The pool website is taking too long to respond.",
}

_REFUSED_HINTS = ("connection refused", "errno 111", "errno 61")
_NOT_FOUND_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated with hostname",
    "errno -2",
    "errno -3",
    "errno 8",
)


def describe_error(error: PoolHoursException) -> str:
    """User-facing message for a failed page fetch."""
    if error.code in TRANSPORT_ERROR_MESSAGES:
        return TRANSPORT_ERROR_MESSAGES[error.code]
    return f"Failed to retrieve pool hours: {error.message}"


def _classify_connect_error(error: httpx.ConnectError) -> str:
    """Tell a refused connection from a failed DNS lookup."""
    cause: BaseException | None = error
    while cause is not None:
        if isinstance(cause, ConnectionRefusedError):
            return "CONNECTION_REFUSED"
        if isinstance(cause, socket.gaierror):
            return "HOST_NOT_FOUND"
        cause = cause.__cause__ or cause.__context__

    text = str(error).lower()
    if any(hint in text for hint in _REFUSED_HINTS):
        return "CONNECTION_REFUSED"
    if any(hint in text for hint in _NOT_FOUND_HINTS):
        return "HOST_NOT_FOUND"
    return "REQUEST_FAILED"


class PoolSiteClient:
    """HTTP client for the pool schedule website."""

    def __init__(
        self,
        url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP client.

        Args:
            url: Schedule page URL, defaults to the configured one
            transport: Optional httpx transport (used by tests)
        """
        self.url = url or config.pool_url
        self.timeout = config.request_timeout
        self.transport = transport
        self.static_headers = {
            "User-Agent": config.user_agent,
            "Accept": "text/html,application/xhtml+xml,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.7",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }

    async def fetch_schedule_page(self) -> str:
        """Fetch the raw HTML of the pool hours page.

        Returns:
            Page HTML

        Raises:
            PoolHoursException: On transport failure or non-success status.
                The code is one of CONNECTION_REFUSED, HOST_NOT_FOUND,
                TIMEOUT, HTTP_ERROR or REQUEST_FAILED.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(self.url, headers=self.static_headers)

                if 200 <= response.status_code < 300:
                    logger.debug(
                        f"Fetched {self.url}: {len(response.text)} characters"
                    )
                    return response.text

                raise PoolHoursException(
                    code="HTTP_ERROR",
                    message=f"HTTP {response.status_code}",
                    details={"response": response.text[:500]},
                )

        except httpx.TimeoutException as e:
            raise PoolHoursException(
                code="TIMEOUT",
                message=f"GET request timed out for {self.url}",
                details={"error": str(e)},
            ) from e
        except httpx.ConnectError as e:
            code = _classify_connect_error(e)
            raise PoolHoursException(
                code=code,
                message=f"Could not connect to {self.url}: {e}",
                details={"error": str(e)},
            ) from e
        except httpx.RequestError as e:
            raise PoolHoursException(
                code="REQUEST_FAILED",
                message=f"GET request failed for {self.url}: {e}",
                details={"error": str(e)},
            ) from e
