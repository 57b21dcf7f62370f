"""Bearer token holder shared by every call of one client."""

import threading
from typing import Callable, Optional


class TokenSession:
    """
    Holds the bearer token for a client instance. An empty token counts
    as no token.

    Authentication is single-flight: when several threads find the
    session empty at once, one of them authenticates and the rest
    reuse its token. The token is never refreshed or expired here.
    """

    def __init__(self) -> None:
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    def store(self, token: str) -> None:
        self._token = token

    def ensure(self, authenticate: Callable[[], object]) -> str:
        """
        Return the held token, calling authenticate first if there is none.

        authenticate must call store() on success and raise on failure.
        """
        if self._token:
            return self._token

        with self._lock:
            if not self._token:
                authenticate()
            return self._token
