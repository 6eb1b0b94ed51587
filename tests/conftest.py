"""Shared fixtures: fake transports and connections that replay canned data."""

import json
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from ctlapi.core.config import ClientConfig
from ctlapi.core.response_wrapper import RawResponse

API_URL = "https://console.example.com:3780/api/API_VERSION/xml"


def make_response(body: Union[str, bytes], status: int = 200, url: str = "https://console.example.com:3780/") -> RawResponse:
    if isinstance(body, str):
        body = body.encode("utf-8")
    return RawResponse(status_code=status, headers={}, body=body, url=url)


class FakeTransport:
    """Replays a script of responses/exceptions, repeating the last entry."""

    def __init__(self, *script: Union[RawResponse, BaseException, str]):
        self.script = list(script)
        self.calls: List[Dict[str, Any]] = []
        self.prepared = 0
        self.closed = False

    def prepare(self):
        self.prepared += 1
        return self

    def _next(self):
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, (str, bytes)):
            return make_response(item)
        return item

    def post(self, url, data=None, headers=None, **kwargs):
        self.calls.append({"method": "POST", "url": url, "data": data, "headers": headers, **kwargs})
        return self._next()

    def get(self, url, headers=None, **kwargs):
        self.calls.append({"method": "GET", "url": url, "headers": headers, **kwargs})
        return self._next()

    def close(self):
        self.closed = True


class FakeConnection:
    """Connection context whose form_post answers from a responder callable."""

    def __init__(
        self,
        responder: Optional[Callable[[Dict[str, Any]], Any]] = None,
        text: Optional[str] = None,
        config: Optional[ClientConfig] = None,
    ):
        self.responder = responder
        self.text = text
        self.config = config or ClientConfig()
        self.form_posts: List[Dict[str, Any]] = []
        self.posts: List[Any] = []
        self.gets: List[str] = []

    def form_post(self, address, parameters):
        self.form_posts.append(dict(parameters))
        return json.dumps(self.responder(parameters))

    def post(self, address, payload):
        self.posts.append((address, payload))
        return self.text

    def get(self, address):
        self.gets.append(address)
        return self.text


def paged_table(total: int, growth: int = 0, short_pages: bool = False):
    """Responder serving ``total`` rows ``{"id": i}``; probe requests get no rows."""
    state = {"requests": 0}

    def responder(params):
        state["requests"] += 1
        reported = total + growth * (state["requests"] - 1)
        start = params["startIndex"]
        if start == -1:
            return {"totalRecords": total, "records": []}
        end = start if short_pages else min(start + params["results"], total)
        return {"totalRecords": reported, "records": [{"id": i} for i in range(start, end)]}

    return responder


@pytest.fixture
def config():
    return ClientConfig()

