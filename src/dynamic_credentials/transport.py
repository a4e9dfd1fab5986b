"""
HTTP transport for request descriptors.

``RequestsHttpClient`` executes a ``RequestDescriptor`` with a
``requests.Session``. It is a thin adapter: descriptor fields map one-to-one
onto ``Session.request`` arguments.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import requests

from dynamic_credentials.exceptions import HttpRequestError
from dynamic_credentials.models import RequestDescriptor

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """Response returned by an ``HttpClient``."""
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        if not self.body:
            return {}
        return json.loads(self.body)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpClient(ABC):
    """Executes request descriptors."""

    @abstractmethod
    def request(self, descriptor: RequestDescriptor) -> HttpResponse:
        raise NotImplementedError


class RequestsHttpClient(HttpClient):
    """
    ``HttpClient`` backed by ``requests``.

    Non-2xx responses raise ``HttpRequestError`` with the response reason as
    message and the body text as description.
    """

    def __init__(self, session: requests.Session | None = None, timeout: float = 60.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    def request(self, descriptor: RequestDescriptor) -> HttpResponse:
        kwargs: dict[str, Any] = {
            "headers": dict(descriptor.headers),
            "params": dict(descriptor.query) or None,
            "verify": descriptor.verify_tls,
            "timeout": self.timeout,
        }
        if descriptor.auth is not None:
            kwargs["auth"] = (descriptor.auth.username, descriptor.auth.password)
        if isinstance(descriptor.body, (dict, list)):
            kwargs["json"] = descriptor.body
        elif descriptor.body is not None:
            kwargs["data"] = descriptor.body

        logger.debug("%s %s", descriptor.method, descriptor.uri)
        try:
            resp = self.session.request(descriptor.method.upper(), descriptor.uri, **kwargs)
        except requests.RequestException as e:
            raise HttpRequestError(f"Request to {descriptor.uri} failed: {e}") from e

        response = HttpResponse(
            status_code=resp.status_code,
            headers={k.lower(): v for k, v in resp.headers.items()},
            body=resp.content or b"",
        )
        if not response.ok:
            reason = resp.reason or "Unknown Error"
            raise HttpRequestError(
                f"{response.status_code} - {reason}",
                status_code=response.status_code,
                description=response.text,
            )
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> RequestsHttpClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
