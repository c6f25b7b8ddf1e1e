import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from playwright.async_api import APIRequestContext, APIResponse, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .config import Config, settings
from .errors import TransportError
from .models import ApiResult
from .utils import unwrap

logger = logging.getLogger(__name__)


class BankSession(ABC):
    """
    Abstract base class for mobile-banking API sessions.

    This class owns everything that is common to talking to a bank's JSON API:
    the Playwright request context, the fixed request headers, the session
    token and the request/response normalization shared by every endpoint.
    Subclasses only describe endpoints and payloads.

    Usage:
        async with NavyFederalSession() as session:
            result = await session.login(access_number, password)
    """

    def __init__(
        self,
        cookie: Optional[str] = None,
        config: Config = settings,
        request_context: Optional[APIRequestContext] = None,
    ):
        self.config = config
        self.playwright: Optional[Playwright] = None
        self.request: Optional[APIRequestContext] = request_context
        self._owns_context = request_context is None
        self._token_lock = threading.Lock()
        self._session_token: Optional[str] = cookie if cookie is not None else config.cookie

    async def __aenter__(self):
        await self.setup_context()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.teardown()

    async def setup_context(self):
        """
        Start Playwright and create a standalone API request context.

        No browser is launched; the context is only an HTTP client with its own
        connection pool. An injected request context is used as is.
        """
        if self.request is not None:
            return

        logger.debug("Starting API request context for %s", self.get_bank_name())
        self.playwright = await async_playwright().start()
        options: Dict[str, Any] = {}
        if self.config.timeout is not None:
            options["timeout"] = self.config.timeout
        self.request = await self.playwright.request.new_context(**options)
        self._owns_context = True

    async def teardown(self):
        """Dispose the request context and stop Playwright if we started them."""
        if self._owns_context and self.request is not None:
            await self.request.dispose()
            self.request = None
        if self.playwright is not None:
            await self.playwright.stop()
            self.playwright = None

    @property
    def session_token(self) -> Optional[str]:
        with self._token_lock:
            return self._session_token

    def _set_session_token(self, token: str):
        with self._token_lock:
            self._session_token = token

    def get_headers(self) -> Dict[str, str]:
        """Build the header set sent with every request."""
        headers = {
            "Accept": "application/json; charset=UTF-8",
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/json",
            "Host": self.config.host,
        }

        token = self.session_token
        if token is not None and token.strip() != "":
            headers["Cookie"] = token

        return headers

    def url_for(self, endpoint: str) -> str:
        return self.config.api_base + endpoint

    async def get(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> ApiResult:
        """GET an endpoint and normalize its response."""
        return await self._send("GET", endpoint, params=params or {})

    async def post(self, endpoint: str, payload: Dict[str, Any]) -> ApiResult:
        """POST a JSON payload to an endpoint and normalize its response."""
        return await self._send("POST", endpoint, payload=payload)

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        response = await self._fetch(method, endpoint, params, payload)
        self.on_response(endpoint, response)
        return await self._parse(endpoint, response)

    async def _fetch(self, method, endpoint, params, payload) -> APIResponse:
        if self.request is None:
            raise RuntimeError("Request context is not set up. Use 'async with' or call setup_context().")

        url = self.url_for(endpoint)
        logger.debug("%s %s", method, url)
        try:
            if method == "GET":
                return await self.request.get(url, headers=self.get_headers(), params=params)
            return await self.request.post(url, headers=self.get_headers(), data=json.dumps(payload))
        except PlaywrightError as e:
            raise TransportError(endpoint, str(e)) from e

    async def _parse(self, endpoint: str, response: APIResponse) -> ApiResult:
        try:
            text = await response.text()
        except PlaywrightError as e:
            raise TransportError(endpoint, str(e), status=response.status) from e

        if self.config.debug:
            logger.debug("Response from %s (%s): %s", endpoint, response.status, text)

        try:
            body = json.loads(text)
        except json.JSONDecodeError as e:
            raise TransportError(endpoint, f"Invalid JSON response: {e}", status=response.status, body=text) from e

        result = unwrap(endpoint, body)
        result.status_code = response.status
        result.headers = dict(response.headers)

        if result.error:
            logger.warning("%s failed (HTTP %s, status %s)", endpoint, response.status, result.api_status)
        else:
            logger.debug("%s succeeded (HTTP %s)", endpoint, response.status)
        return result

    def on_response(self, endpoint: str, response: APIResponse):
        """
        Hook called for every response, before its body is parsed.

        Override this in subclasses to pick up state from response headers.
        """
        pass

    @abstractmethod
    def get_bank_name(self) -> str:
        """Return unique bank identifier, used for logging and export directories."""
        pass
