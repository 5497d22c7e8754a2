"""Client for the upstream chat completions API."""

from typing import Any, Dict, Optional

import httpx

from .errors import UpstreamError
from .logger import SanitizingLogger
from .models.upstream import UpstreamRequest
from .result import Err, Ok, Result


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamClient:
    """Issues exactly one POST per completion; never retries."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str,
        timeout: float = 90,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[SanitizingLogger] = None,
    ):
        """Initialize with upstream credentials.

        A ``client`` passed in is shared and left open on exit; one created
        here is closed with the context manager.
        """
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.logger = logger
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_client:
            await self.client.aclose()

    def get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for API requests."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(
        self, request: UpstreamRequest, request_id: str
    ) -> Result[Dict[str, Any], UpstreamError]:
        """POST ``request`` upstream and return the decoded body or an error."""
        if self.logger:
            self.logger.debug(f"Request {request_id}: POST {self.url}")

        try:
            response = await self.client.post(
                self.url,
                json=request.to_payload(),
                headers=self.get_headers(),
            )
        except httpx.HTTPError as e:
            return Err(
                UpstreamError(
                    status=None,
                    status_text=None,
                    body=None,
                    message=f"{type(e).__name__}: {e}",
                )
            )

        if not response.is_success:
            return Err(
                UpstreamError(
                    status=response.status_code,
                    status_text=response.reason_phrase,
                    body=_response_body(response),
                    message=f"Request failed with status code {response.status_code}",
                )
            )

        try:
            data = response.json()
        except ValueError as e:
            data = None
            message = f"Invalid JSON in upstream response: {e}"
        else:
            message = "Upstream response is not a JSON object"

        if not isinstance(data, dict):
            return Err(
                UpstreamError(
                    status=response.status_code,
                    status_text=response.reason_phrase,
                    body=response.text,
                    message=message,
                )
            )

        return Ok(data)
