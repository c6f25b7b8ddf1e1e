"""
Exceptions for the Navy Federal client.

Only transport problems are raised. API-level failures (bad credentials,
unknown account IDs) come back as an `ApiResult` with `error` set, so that
callers handle them through the same channel as successful responses.
"""
from typing import Optional


class NFCUError(Exception):
    """Base class for all errors raised by nfcu_fetch."""
    pass


class TransportError(NFCUError):
    """
    Raised when a request never produced a usable response:
    - The network call itself failed (DNS, TLS, connection reset, timeout).
    - The response body was empty or not valid JSON.
    """

    def __init__(self, endpoint: str, message: str, status: Optional[int] = None, body: Optional[str] = None):
        self.endpoint = endpoint
        self.status = status
        self.body = body
        detail = f"{endpoint}: {message}"
        if status is not None:
            detail += f" (HTTP {status})"
        super().__init__(detail)
