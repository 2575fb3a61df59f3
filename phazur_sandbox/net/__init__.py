"""Network capabilities injected into node executors."""

from phazur_sandbox.net.http_client import HttpFetcher, HttpResponse, HttpxFetcher

__all__ = ["HttpFetcher", "HttpResponse", "HttpxFetcher"]
