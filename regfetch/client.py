"""
Remote session client.

Thin wrapper around one requests.Session. The session cookie is forwarded
verbatim as the Cookie header; it is never parsed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests

from regfetch.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from regfetch.errors import ProtocolError, TransportError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass
class Response:
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)


class RegistrarClient:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def __enter__(self) -> "RegistrarClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _headers(cookie: Optional[str], extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers: Dict[str, str] = dict(extra or {})
        if cookie:
            headers["Cookie"] = cookie
        return headers

    def post(self, url: str, body: str, cookie: Optional[str] = None) -> Response:
        """
        POST an already-encoded form body. Raises requests exceptions as-is.
        """
        logger.debug("POST %s %s", url, body)
        resp = self.session.post(
            url,
            data=body.encode("utf-8"),
            headers=self._headers(cookie, {"Content-Type": FORM_CONTENT_TYPE}),
            timeout=self.timeout,
        )
        return Response(resp.status_code, resp.text, dict(resp.headers))

    def get(
        self,
        url: str,
        params: Optional[Mapping[str, str]] = None,
        cookie: Optional[str] = None,
    ) -> Response:
        logger.debug("GET %s %s", url, dict(params or {}))
        resp = self.session.get(url, params=params, headers=self._headers(cookie), timeout=self.timeout)
        return Response(resp.status_code, resp.text, dict(resp.headers))


def request_text(
    client: Any,
    what: str,
    url: str,
    body: Optional[str] = None,
    cookie: Optional[str] = None,
    params: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Checked request: POST when `body` is given, GET otherwise.

    Returns the response body; transport failures become TransportError and
    any status other than 200 becomes ProtocolError. `what` names the page in
    the error message.
    """
    try:
        if body is not None:
            resp = client.post(url, body, cookie=cookie)
        else:
            resp = client.get(url, params=params, cookie=cookie)
    except requests.RequestException as e:
        raise TransportError(what, e) from e

    if resp.status_code != requests.codes.ok:
        raise ProtocolError(what, resp.status_code)
    return resp.text
