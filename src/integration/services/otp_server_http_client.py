"""HTTP client for the endpoints a freshly launched OTP server exposes about itself.

The instance runs otp-runner, which periodically writes a JSON status file served over
HTTP, and eventually OpenTripPlanner itself. Both are probed here on a best-effort basis:
transport and decoding failures mean "not available yet" and never propagate.
"""

import logging

import httpx

from domain.value_object.runner_status import RunnerStatus

log = logging.getLogger(__name__)


class OtpServerHttpClient:
    """Best-effort GET requests against an OTP server's status endpoints."""

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds
            transport: Optional transport override (used by tests)
        """
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def is_reachable(self, url: str) -> bool:
        """Checks the provided URL for a successful response (HTTP 200).

        The response body is always read to the end so the connection can be released.

        Returns:
            True if the endpoint answered 200, False otherwise (including transport errors)
        """
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    await response.aread()
                    return response.status_code == 200

        except httpx.TimeoutException as e:
            log.warning(f"Request to {url} timed out: {e}")
        except httpx.HTTPError as e:
            log.warning(f"Could not complete request to {url}: {e}")
        return False

    async def fetch_runner_status(self, url: str) -> RunnerStatus | None:
        """Fetch and decode the otp-runner status file.

        Returns:
            RunnerStatus, or None if the file could not be fetched or decoded
        """
        try:
            async with self._client() as client:
                response = await client.get(url)

                if response.status_code != 200:
                    log.warning(f"otp-runner status not available at {url}: HTTP {response.status_code}")
                    return None

                data = response.json()
                if not isinstance(data, dict):
                    log.warning(f"Unexpected otp-runner status payload from {url}: {data!r}")
                    return None
                return RunnerStatus.from_api_response(data)

        except httpx.HTTPError as e:
            log.warning(f"Could not get otp-runner status from {url}: {e}")
        except (ValueError, TypeError) as e:
            log.warning(f"Could not decode otp-runner status from {url}: {e}")
        return None
