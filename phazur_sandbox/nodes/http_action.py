"""HTTP action executor: one request per node, response returned as ``{status, data}``."""

import json
from typing import Any

from phazur_sandbox.config import DEMO_HTTP_URL
from phazur_sandbox.graph.context import ExecutionContext, LogEvent
from phazur_sandbox.graph.node import HttpConfig, NodeSpec
from phazur_sandbox.net.http_client import HttpFetcher, HttpResponse
from phazur_sandbox.nodes.base import NodeExecutor

DEMO_URL = DEMO_HTTP_URL
DEFAULT_HEADERS = {"Content-Type": "application/json"}


def parse_body(response: HttpResponse) -> Any:
    """JSON-decoded body, or the raw text when it is not JSON."""
    try:
        return json.loads(response.text)
    except ValueError:
        return response.text


class HttpActionExecutor(NodeExecutor):
    """
    Performs the request described by an ``action/http`` node.

    Unconfigured nodes (no ``url``) issue a plain GET to a demo endpoint so a
    learner's first workflow shows a real response. Non-2xx statuses are
    returned like any other response; only transport failures fail the node.
    """

    def __init__(self, fetcher: HttpFetcher, demo_url: str = DEMO_URL):
        self.fetcher = fetcher
        self.demo_url = demo_url

    async def execute(self, node: NodeSpec, context: ExecutionContext, input_data: Any) -> Any:
        config = self.load_config(node, context, HttpConfig)

        if not config.url:
            context.log_event(
                node.id,
                LogEvent.START,
                f"No URL configured, using demo: GET {self.demo_url}",
            )
            response = await self._send(node, context, "GET", self.demo_url, None, None)
            context.log_event(
                node.id,
                LogEvent.SUCCESS,
                f"Demo HTTP {response.status} received",
                data={"status": response.status},
            )
            return {"status": response.status, "data": parse_body(response)}

        method = (config.method or "GET").upper()
        headers = {**DEFAULT_HEADERS, **config.headers}
        body = None
        if method != "GET" and input_data is not None:
            body = json.dumps(input_data, default=str)

        context.log_event(node.id, LogEvent.START, f"{method} {config.url}")
        response = await self._send(node, context, method, config.url, headers, body)
        context.log_event(
            node.id,
            LogEvent.SUCCESS,
            f"HTTP {response.status} received",
            data={"status": response.status},
        )
        return {"status": response.status, "data": parse_body(response)}

    async def _send(
        self,
        node: NodeSpec,
        context: ExecutionContext,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        body: str | None,
    ) -> HttpResponse:
        try:
            return await self.fetcher.request(method, url, headers=headers, content=body)
        except Exception as e:
            message = str(e) or f"HTTP request failed: {type(e).__name__}"
            raise self.fail(node, context, message) from e
