"""Shared fixtures: an in-memory stand-in for Playwright's APIRequestContext."""

import json
from typing import Any, Dict, List, Optional

import pytest

from nfcu_fetch.config import Config
from nfcu_fetch.nfcu import NavyFederalSession


class FakeResponse:
    """Mimics the parts of playwright's APIResponse the session reads."""

    def __init__(self, body: Any = None, status: int = 200, text: Optional[str] = None,
                 set_cookie: Optional[List[str]] = None):
        self.status = status
        self._text = text if text is not None else json.dumps(body)
        self.headers_array = [{"name": "Content-Type", "value": "application/json"}]
        for cookie in set_cookie or []:
            self.headers_array.append({"name": "Set-Cookie", "value": cookie})
        self.headers = {h["name"].lower(): h["value"] for h in self.headers_array}

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        return self._text


class FakeRequestContext:
    """Records every request and answers with queued responses per endpoint."""

    def __init__(self, base: str):
        self.base = base
        self.calls: List[Dict[str, Any]] = []
        self.responses: Dict[str, List[Any]] = {}
        self.disposed = False

    def queue(self, endpoint: str, response: Any):
        """Queue a FakeResponse, or an exception to raise, for an endpoint."""
        self.responses.setdefault(endpoint, []).append(response)

    def calls_to(self, endpoint: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["endpoint"] == endpoint]

    def _answer(self, method: str, url: str, **kwargs):
        endpoint = url[len(self.base):]
        call = {"method": method, "endpoint": endpoint, "url": url, **kwargs}
        if kwargs.get("data") is not None:
            call["json"] = json.loads(kwargs["data"])
        self.calls.append(call)

        queued = self.responses.get(endpoint)
        if not queued:
            raise AssertionError(f"No response queued for {endpoint}")
        response = queued.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def get(self, url: str, headers=None, params=None):
        return self._answer("GET", url, headers=headers, params=params)

    async def post(self, url: str, headers=None, data=None):
        return self._answer("POST", url, headers=headers, data=data)

    async def dispose(self):
        self.disposed = True


def wrapped(endpoint: str, data: Any = None, status: str = "SUCCESS") -> Dict[str, Any]:
    """Build a response body in the API's envelope format."""
    key = endpoint.split("/")[-1]
    return {key: {"status": status, "data": data}}


@pytest.fixture
def config() -> Config:
    """Default configuration, isolated from any config file or environment."""
    return Config(cookie=None, debug=False, timeout=None)


@pytest.fixture
def request_context(config) -> FakeRequestContext:
    return FakeRequestContext(config.api_base)


@pytest.fixture
def session(config, request_context) -> NavyFederalSession:
    """A session wired to the fake request context."""
    return NavyFederalSession(config=config, request_context=request_context)
