"""
Shared fixtures. No test talks to Gemini: the completion client is faked.
"""

import os

# main.py loads settings at import; give it a key before anything imports it
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest

from ltgd_agent.app.errors import TransportError
from ltgd_agent.app.report import ReportService
from ltgd_agent.app.schemas import Completion


class FakeClient:
    """Records requests and replays a canned completion (or raises)."""

    def __init__(self, text=None, citations=None, error=None):
        self.text = text
        self.citations = citations or []
        self.error = error
        self.requests = []

    async def complete(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return Completion(text=self.text, citations=self.citations)


@pytest.fixture
def fake_client():
    return FakeClient(text='{"analysis": "Yields rose.", "chart": null}')


@pytest.fixture
def make_service():
    def _make(**kwargs):
        client = FakeClient(**kwargs)
        return ReportService(client, system_instruction="Respond with JSON."), client
    return _make


@pytest.fixture
def transport_error():
    return TransportError("Gemini API error: 503 Service Unavailable")
