"""Request and response value types shared by the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

import httpx

ParamValue = Union[str, int, float, bool, None]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def sends_body(self) -> bool:
        return self is not HttpMethod.GET


@dataclass(frozen=True)
class RequestSpec:
    """One verb call: where it goes, how, and with which parameters."""

    relative_url: str
    method: HttpMethod
    parameters: Mapping[str, ParamValue] = field(default_factory=dict)


@dataclass(frozen=True)
class TransportFailure:
    """A failed request, returned to the caller instead of being raised.

    ``status_code`` and ``body`` are only populated when the server answered;
    network-level errors (DNS, refused connections, timeouts) leave them unset.
    """

    method: HttpMethod
    url: str
    error: httpx.HTTPError
    status_code: Optional[int] = None
    body: Any = None

    ok = False

    @property
    def message(self) -> str:
        if self.status_code is not None:
            return f"{self.method.value} {self.url} failed with status {self.status_code}"
        return f"{self.method.value} {self.url} failed: {self.error}"


__all__ = [
    "HttpMethod",
    "ParamValue",
    "RequestSpec",
    "TransportFailure",
]
