"""Async client for the Sonarr REST API."""

from __future__ import annotations

import base64
import logging
from typing import Any, Awaitable, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from .config import ClientConfig
from .exceptions import ArgumentError
from .models import HttpMethod, ParamValue, RequestSpec, TransportFailure

logger = logging.getLogger(__name__)


API_KEY_HEADER = "X-API-KEY"
UNAUTHORIZED_ERROR = "Unauthorized"

# Characters left unescaped by JavaScript's encodeURIComponent.
_QUERY_SAFE = "-_.!~*'()"


class SonarrAPI:
    """Thin wrapper that signs and dispatches calls to a Sonarr server.

    Either pass a prebuilt :class:`ClientConfig` or the raw options
    (``hostname``, ``port``, ``apiKey``/``api_key``, ``urlBase``/``url_base``,
    ``ssl``, ``username``, ``password``), which are validated immediately.

    The verb methods raise :class:`ArgumentError` synchronously for bad
    arguments. Every HTTP-level failure is *returned*: an ``Unauthorized``
    error body comes back as-is, anything else as a :class:`TransportFailure`.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **options: Any,
    ) -> None:
        if config is None:
            config = ClientConfig.from_mapping(options)
        elif options:
            raise ArgumentError("pass either a ClientConfig or keyword options, not both")
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def get(self, relative_url: Optional[str] = None, parameters: Any = None) -> Awaitable[Any]:
        """Retrieve a resource; parameters become the query string."""
        return self._dispatch(HttpMethod.GET, relative_url, parameters)

    def post(self, relative_url: Optional[str] = None, parameters: Any = None) -> Awaitable[Any]:
        """Create a resource or trigger a command; parameters become the JSON body."""
        return self._dispatch(HttpMethod.POST, relative_url, parameters)

    def put(self, relative_url: Optional[str] = None, parameters: Any = None) -> Awaitable[Any]:
        """Update a resource; parameters become the JSON body."""
        return self._dispatch(HttpMethod.PUT, relative_url, parameters)

    def delete(self, relative_url: Optional[str] = None, parameters: Any = None) -> Awaitable[Any]:
        """Delete a resource; parameters become the JSON body."""
        return self._dispatch(HttpMethod.DELETE, relative_url, parameters)

    def _dispatch(self, method: HttpMethod, relative_url: Optional[str], parameters: Any) -> Awaitable[Any]:
        # Raises at call time, before the coroutine exists.
        spec = build_request_spec(method, relative_url, parameters)
        return self._request(spec)

    async def _request(self, spec: RequestSpec) -> Any:
        url = self._build_url(spec)
        headers = self._build_headers(spec.method)
        body = dict(spec.parameters) if spec.method.sends_body else None

        try:
            async with self._http_client(spec.method) as client:
                response = await client.request(spec.method.value, url, headers=headers, json=body)
                if response.is_error or (spec.method.sends_body and not response.is_success):
                    response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            return self._handle_status_error(spec, url, exc)
        except httpx.HTTPError as exc:
            logger.warning(
                "sonarr.request.failed method=%s url=%s error=%s",
                spec.method.value,
                url,
                exc,
            )
            return TransportFailure(method=spec.method, url=url, error=exc)

        data = _decode_body(response)
        logger.debug(
            "sonarr.request.ok method=%s url=%s status=%s",
            spec.method.value,
            url,
            response.status_code,
        )
        return data

    def _handle_status_error(self, spec: RequestSpec, url: str, exc: httpx.HTTPStatusError) -> Any:
        status = exc.response.status_code
        body = _decode_body(exc.response)
        if isinstance(body, dict) and body.get("error") == UNAUTHORIZED_ERROR:
            logger.warning("sonarr.request.unauthorized method=%s url=%s", spec.method.value, url)
            return body

        logger.warning(
            "sonarr.request.failed method=%s url=%s status=%s",
            spec.method.value,
            url,
            status,
        )
        return TransportFailure(
            method=spec.method,
            url=url,
            error=exc,
            status_code=status,
            body=body,
        )

    def _http_client(self, method: HttpMethod) -> httpx.AsyncClient:
        if self._config.ssl:
            # ssl mode never verifies the server certificate.
            logger.debug("sonarr.tls.verify_disabled host=%s", self._config.hostname)
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            verify=not self._config.ssl,
            # Mutating verbs never follow redirects.
            follow_redirects=method is HttpMethod.GET,
            transport=self._transport,
        )

    def _build_url(self, spec: RequestSpec) -> str:
        url = f"{self._config.base_url}{spec.relative_url}"
        if spec.method is HttpMethod.GET and spec.parameters:
            url += to_query_string(spec.parameters)
        return url

    def _build_headers(self, method: HttpMethod) -> Dict[str, str]:
        headers = {API_KEY_HEADER: self._config.api_key}
        if method is HttpMethod.GET:
            headers["Accept"] = "application/json"
        else:
            headers["Content-Type"] = "application/json"

        if self._config.auth:
            credentials = f"{self._config.username}:{self._config.password}".encode("utf-8")
            headers["Authorization"] = "Basic " + base64.b64encode(credentials).decode("ascii")
        return headers


APIClient = SonarrAPI


def build_request_spec(method: HttpMethod, relative_url: Optional[str], parameters: Any) -> RequestSpec:
    if relative_url is None:
        raise ArgumentError("relative URL is not set")
    if parameters is None:
        parameters = {}
    if not isinstance(parameters, Mapping):
        raise ArgumentError("parameters must be an object")
    return RequestSpec(relative_url=str(relative_url), method=method, parameters=dict(parameters))


def to_query_string(parameters: Mapping[str, ParamValue]) -> str:
    """Encode parameters the way encodeURIComponent would; None values are dropped."""
    pairs = [
        f"{quote(str(key), safe=_QUERY_SAFE)}={quote(_format_param(value), safe=_QUERY_SAFE)}"
        for key, value in parameters.items()
        if value is not None
    ]
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


def _format_param(value: ParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


__all__ = [
    "API_KEY_HEADER",
    "APIClient",
    "SonarrAPI",
    "build_request_spec",
    "to_query_string",
]
