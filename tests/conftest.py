"""
Shared fixtures: fake requests sessions so no test touches the network.
"""
import pytest
import requests


class FakeResponse:
    def __init__(self, url, text="", status_code=200, history=None, json_data=None):
        self.url = url
        self.text = text
        self.status_code = status_code
        self.history = history or []
        self._json = json_data

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


class FakeSession:
    """Maps requested URL -> FakeResponse (or exception to raise)."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        result = self.routes.get(url)
        if result is None:
            raise requests.exceptions.ConnectionError(f"unexpected URL {url}")
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        pass


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_session():
    return FakeSession
