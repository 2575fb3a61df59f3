"""Shared fixtures: fake I/O capabilities and node builders."""

import pytest

from phazur_sandbox.graph.context import ExecutionContext
from phazur_sandbox.graph.node import NodeSpec
from phazur_sandbox.llm.mock import MockLLMProvider
from phazur_sandbox.net.http_client import HttpResponse
from phazur_sandbox.observability import clear_trace_context


class FakeFetcher:
    """Records requests and replays canned responses."""

    def __init__(self, status=200, text='{"ok": true}', error=None):
        self.status = status
        self.text = text
        self.error = error
        self.requests = []

    async def request(self, method, url, headers=None, content=None):
        self.requests.append(
            {"method": method, "url": url, "headers": headers, "content": content}
        )
        if self.error is not None:
            raise self.error
        return HttpResponse(status=self.status, text=self.text)


def node(node_id, kind, service="", config=None, successors=None):
    return NodeSpec(
        id=node_id,
        kind=kind,
        service=service,
        config=config or {},
        successors=successors or [],
    )


@pytest.fixture
def context():
    return ExecutionContext()


@pytest.fixture
def llm():
    return MockLLMProvider(responses="Hello from the model")


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture(autouse=True)
def _reset_trace_context():
    yield
    clear_trace_context()
