"""Shared fixtures: an in-memory stand-in for a requests session."""
import json

import pytest
import requests


class FakeResponse:
    def __init__(self, url, text="", status_code=200):
        self.url = url
        self.text = text
        self.status_code = status_code

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)


class FakeSession:
    """Answers GET requests from a url -> body (or (status, body)) mapping."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params))
        page = self.pages.get(url)
        if page is None:
            return FakeResponse(url, "Not Found", 404)
        if isinstance(page, tuple):
            status, body = page
            return FakeResponse(url, body, status)
        return FakeResponse(url, page)


@pytest.fixture
def fake_session():
    return FakeSession()
