"""HTTP transport that attaches the session token and reacts to 401s."""

import logging
from typing import Any, Callable, Dict, Optional
import requests
from .exceptions import AuthenticationError, EconDataAPIError
from .session import Session
from .utils import decode_json, handle_api_errors, join_url

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Stateless transport for the economic data backend.

    Every request carries ``Authorization: Bearer <token>`` when the session
    holds a token. A 401 from any request tears the session down and invokes
    ``on_unauthorized`` (typically "send the user back to login"), unless a
    newer login happened after the request was issued. Other error statuses
    are raised to the caller as is; nothing is retried.
    """

    def __init__(self,
                 session: Session,
                 base_url: str = "http://localhost:8000",
                 on_unauthorized: Optional[Callable[[], None]] = None,
                 timeout: Optional[float] = None):
        self.session = session
        self.base_url = base_url
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout

    def request(self,
                method: str,
                path: str,
                params: Optional[Dict[str, Any]] = None,
                json: Optional[Dict[str, Any]] = None,
                authenticated: bool = True) -> Any:
        """
        Issue a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url
            params: Query parameters
            json: JSON body
            authenticated: Whether to attach the session token

        Returns:
            Decoded JSON payload
        """
        url = join_url(self.base_url, path)
        headers = {"Content-Type": "application/json"}
        generation = None
        if authenticated:
            auth, generation = self.session.snapshot()
            headers.update(auth)

        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise EconDataAPIError(f"Request to {url} failed: {e}")

        if response.status_code == 401:
            if authenticated:
                self._handle_unauthorized(url, generation)
            raise AuthenticationError(f"Unauthorized: {method} {url}")

        handle_api_errors(response)
        return decode_json(response)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def _handle_unauthorized(self, url: str, generation: int) -> None:
        if not self.session.expire(generation):
            logger.warning("Ignoring 401 from %s issued under a previous session", url)
            return

        logger.warning("Received 401 from %s; session cleared", url)
        if self.on_unauthorized is not None:
            self.on_unauthorized()
