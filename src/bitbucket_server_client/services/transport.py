"""Single authenticated HTTP exchanges with the Bitbucket Server.

Every request opens and closes its own ``httpx.Client`` so that the proxy
configuration is read fresh and the connection is released on every path,
failures included.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from bitbucket_server_client.config import Credentials, ProxyConfig, ProxySource, no_proxy
from bitbucket_server_client.errors import EncodingError, TransportError, UnexpectedStatusError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 10.0  # seconds, also used for pool acquisition
READ_TIMEOUT = 60.0  # seconds

NO_RESPONSE_STATUS = 0

POST_ACCEPTED_STATUSES = frozenset({httpx.codes.OK, httpx.codes.CREATED, httpx.codes.NO_CONTENT})

Payload = str | Mapping[str, Any] | Sequence[tuple[str, Any]]


def encode_payload(payload: Payload) -> bytes:
    """Encode a POST body as UTF-8.

    Name-value pairs become a single flat JSON object; strings are sent as is.
    """
    try:
        if isinstance(payload, str):
            text = payload
        else:
            text = json.dumps(dict(payload), ensure_ascii=False)
        return text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Encoding error: {exc}", exc) from exc


@dataclass(frozen=True)
class Transport:
    base_url: str
    credentials: Credentials | None = None
    proxy_source: ProxySource = no_proxy
    # Custom httpx transport, e.g. httpx.MockTransport. Replaces the network layer.
    http_transport: httpx.BaseTransport | None = field(default=None, repr=False)

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path

    def client_options(self, proxy: ProxyConfig | None) -> dict[str, Any]:
        options: dict[str, Any] = {
            "timeout": httpx.Timeout(READ_TIMEOUT, connect=CONNECT_TIMEOUT, pool=CONNECT_TIMEOUT),
            # proxies come from the proxy source only
            "trust_env": False,
        }
        if self.credentials is not None:
            # httpx.BasicAuth sends the header on the first request, no challenge needed
            options["auth"] = httpx.BasicAuth(
                self.credentials.username, self.credentials.password.get_secret_value()
            )
        if proxy is not None:
            logger.info("Using proxy: %s:%s", proxy.host, proxy.port)
            proxy_auth = None
            if proxy.has_credentials:
                logger.info("Using proxy authentication (user=%s)", proxy.username)
                secret = proxy.password.get_secret_value() if proxy.password else ""
                proxy_auth = (proxy.username, secret)
            options["proxy"] = httpx.Proxy(proxy.url, auth=proxy_auth)
        if self.http_transport is not None:
            options["transport"] = self.http_transport
        return options

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            with httpx.Client(**self.client_options(self.proxy_source())) as client:
                return client.request(method, self.url(path), **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"Communication error: {exc}", exc) from exc
        except (ValidationError, httpx.InvalidURL) as exc:
            raise TransportError(f"Invalid connection settings: {exc}", exc) from exc

    def get(self, path: str) -> str:
        """GET ``path`` and return the body; anything but 200 raises."""
        response = self._send("GET", path)
        if response.status_code != httpx.codes.OK:
            raise UnexpectedStatusError(response.status_code, response.reason_phrase, response.text)
        return response.text

    def get_status(self, path: str) -> int:
        """GET ``path`` and return only the status, 0 if no response came back. Never raises."""
        try:
            return self._send("GET", path).status_code
        except TransportError as exc:
            logger.error("Communication error probing %s: %s", path, exc.cause)
            return NO_RESPONSE_STATUS

    def post(self, path: str, payload: Payload) -> str:
        """POST ``payload`` as JSON. 200 and 201 return the body, 204 returns ``""``."""
        content = encode_payload(payload)
        response = self._send(
            "POST",
            path,
            content=content,
            headers={"Content-Type": "application/json; charset=UTF-8"},
        )
        if response.status_code not in POST_ACCEPTED_STATUSES:
            raise UnexpectedStatusError(response.status_code, response.reason_phrase, response.text)
        if response.status_code == httpx.codes.NO_CONTENT:
            return ""
        return response.text
