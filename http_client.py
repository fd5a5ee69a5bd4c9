from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

import requests

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """The request never produced a response (connection refused, timeout)."""

    def __init__(self, url: str, detail: str = ""):
        super().__init__(url, detail)
        self.url = url
        self.detail = detail

    def __str__(self) -> str:
        return f"network error: {self.detail}" if self.detail else "network error"


@dataclass(eq=False)
class HttpError(RuntimeError):
    url: str
    status_code: int | None
    message: str
    response_text: str | None = None

    def __str__(self) -> str:
        code = self.status_code if self.status_code is not None else "unknown"
        return f"HTTP {code} for {self.url}: {self.message}"


def _error_message(resp: requests.Response) -> str:
    msg = resp.text
    try:
        payload = resp.json()
    except ValueError:
        return msg
    if isinstance(payload, dict):
        msg = payload.get("error") or payload.get("message") or msg
    return str(msg)


def _send(method: str, url: str, *, timeout_s: float, **kwargs) -> requests.Response:
    logger.debug("%s %s", method, url)
    try:
        resp = requests.request(method, str(url), timeout=float(timeout_s), **kwargs)
    except requests.RequestException as e:
        logger.warning("%s %s failed: %s", method, url, e)
        raise TransportError(str(url), str(e)) from e
    if resp.status_code // 100 != 2:
        msg = _error_message(resp)
        logger.warning("%s %s returned %s: %s", method, url, resp.status_code, msg[:200])
        raise HttpError(
            url=str(url),
            status_code=int(resp.status_code),
            message=msg[:500],
            response_text=resp.text,
        )
    return resp


def _json_body(url: str, resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError as e:
        raise HttpError(
            url=str(url),
            status_code=int(resp.status_code),
            message=f"Invalid JSON response: {e}",
            response_text=resp.text,
        ) from e


def get_text(
    url: str,
    *,
    params: Mapping[str, str] | None = None,
    timeout_s: float = 30.0,
) -> str:
    resp = _send("GET", url, timeout_s=timeout_s, params=dict(params or {}))
    if resp.encoding is None:
        resp.encoding = "utf-8"
    return resp.text


def post_json(
    url: str,
    body: Any,
    *,
    timeout_s: float = 30.0,
    headers: Mapping[str, str] | None = None,
    attempts: int = 1,
    backoff_s: float = 0.5,
) -> Any:
    """POST a JSON body and decode the JSON reply.

    Only transport failures are retried; an HTTP error status is returned to
    the caller on the first occurrence.
    """
    hdrs = {"Content-Type": "application/json", "Accept": "application/json"}
    hdrs.update(dict(headers or {}))
    attempt = 0
    while True:
        attempt += 1
        try:
            resp = _send(
                "POST", url, timeout_s=timeout_s, data=json.dumps(body), headers=hdrs
            )
            break
        except TransportError:
            if attempt >= max(1, attempts):
                raise
            time.sleep(backoff_s * attempt)
    return _json_body(url, resp)


def post_form(
    url: str,
    data: Mapping[str, str],
    files: Mapping[str, Any],
    *,
    timeout_s: float = 30.0,
) -> dict:
    resp = _send("POST", url, timeout_s=timeout_s, data=dict(data), files=dict(files))
    payload = _json_body(url, resp)
    return payload if isinstance(payload, dict) else {}
