"""Session store holding the bearer token and the derived authenticated flag."""

import logging
import threading
from typing import Dict, Optional, Union
from .models import LoginResponse
from .utils import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)


class Session:
    """
    Holds the current bearer token and persists it to a single durable slot.

    A persisted token found at construction counts as authenticated without
    being checked against the server; expiry is only discovered on the first
    401. Every login and logout bumps ``generation`` so that responses can be
    matched to the session they were issued under.
    """

    def __init__(self, store: Optional[Union[TokenStore, MemoryTokenStore]] = None):
        """
        Initialize the session.

        Args:
            store: Token persistence backend. Defaults to an in-memory slot.
        """
        self.store = store if store is not None else MemoryTokenStore()
        self._lock = threading.Lock()
        self._token = self.store.load()
        self._generation = 0

        if self._token:
            logger.debug("Restored persisted session token")

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def generation(self) -> int:
        return self._generation

    def is_authenticated(self) -> bool:
        """Return True when a non-empty token is held."""
        return bool(self._token)

    def login(self, token_payload: Union[LoginResponse, str]) -> None:
        """
        Persist a freshly issued token and mark the session authenticated.

        Args:
            token_payload: LoginResponse from /auth/login, or a raw token string
        """
        token = token_payload.access_token if isinstance(token_payload, LoginResponse) else token_payload
        if not token:
            raise ValueError("Cannot log in with an empty token")

        with self._lock:
            self.store.save(token)
            self._token = token
            self._generation += 1

        logger.info("Session started")

    def logout(self) -> None:
        """Clear the persisted token and mark the session unauthenticated."""
        with self._lock:
            self.store.clear()
            self._token = None
            self._generation += 1

        logger.info("Session cleared")

    def expire(self, generation: int) -> bool:
        """
        Tear down the session in response to a 401.

        The teardown only happens when ``generation`` is still current; a 401
        for a request issued before a newer login or logout is ignored. A
        current 401 is honoured even when no token is held, so that an
        anonymous caller is still sent to login.

        Returns:
            True if the session was cleared
        """
        with self._lock:
            if generation != self._generation:
                return False
            self.store.clear()
            self._token = None
            self._generation += 1
        return True

    def auth_header(self) -> Dict[str, str]:
        """Authorization header for the current token, or an empty dict."""
        token = self._token
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def snapshot(self):
        """Return (headers, generation) read atomically."""
        with self._lock:
            return self.auth_header(), self._generation
