from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from springops.api.results import ApiResult, ErrorKind, kind_for_status
from springops.api.session import SessionStore
from springops.api.throttle import ThrottledGetCache

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def clean_params(params: dict | None) -> dict[str, str]:
    """Drop empty filter values; stringify the rest the way URLSearchParams does."""
    out: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
            continue
        if isinstance(value, (list, tuple, set)):
            joined = ",".join(str(v) for v in value if v is not None and str(v) != "")
            if joined:
                out[key] = joined
            continue
        s = str(value)
        if s.strip() == "":
            continue
        out[key] = s
    return out


def _error_message(body: Any, status: int) -> str:
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
        # DRF field errors: {"field": ["msg", ...]}
        for key, value in body.items():
            if isinstance(value, list) and value:
                return f"{key}: {value[0]}"
    if isinstance(body, str) and body.strip() and len(body) < 300:
        return body.strip()
    return f"HTTP error! status: {status}"


class ApiClient:
    """Thin async REST client shared by the per-domain API modules.

    Every call returns an ``ApiResult``; transport errors never escape.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionStore,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        cache: ThrottledGetCache | None = None,
    ):
        self.base_url = str(base_url).rstrip("/")
        self.session = session
        self.timeout = timeout
        self._transport = transport
        self.cache = cache if cache is not None else ThrottledGetCache()

    def headers(self, extra: dict | None = None) -> dict[str, str]:
        headers = {**DEFAULT_HEADERS, **(extra or {})}
        token = self.session.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def url(self, path: str) -> str:
        return self.base_url + "/" + str(path).lstrip("/")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: Any = None,
        files: dict | None = None,
        data: dict | None = None,
    ) -> ApiResult:
        url = self.url(path)
        headers = self.headers()
        if files is not None:
            # Let httpx write the multipart boundary.
            headers.pop("Content-Type", None)

        async with self._client() as client:
            try:
                resp = await client.request(
                    method,
                    url,
                    params=clean_params(params),
                    json=json,
                    files=files,
                    data=data,
                    headers=headers,
                )
            except httpx.HTTPError as ex:
                logger.error("%s %s failed: %s", method, url, ex)
                return ApiResult.failure(ErrorKind.NETWORK, f"Network error: {ex}")

        if method.upper() != "GET":
            self.cache.invalidate()
        return self._to_result(resp)

    def _to_result(self, resp: httpx.Response) -> ApiResult:
        status = resp.status_code

        body: Any = None
        if resp.content:
            content_type = resp.headers.get("content-type", "")
            if "application/json" in content_type:
                try:
                    body = resp.json()
                except ValueError:
                    body = resp.text
            else:
                body = resp.text

        if resp.is_success:
            if isinstance(body, dict) and body.get("success") is False:
                return ApiResult.failure(ErrorKind.VALIDATION, _error_message(body, status), status=status, data=body)
            return ApiResult.success(body, status=status)

        kind = kind_for_status(status)
        message = _error_message(body, status)
        if status == 401:
            logger.warning("Session rejected by backend (401); clearing stored credentials")
            self.session.clear_session()
        elif status == 429:
            logger.warning("Rate limited on %s", resp.request.url)
        else:
            logger.error("API request failed (%s) %s: %s", status, resp.request.url, message)
        return ApiResult.failure(kind, message, status=status, data=body)

    async def get(self, path: str, params: dict | None = None, *, cached: bool = False, force: bool = False) -> ApiResult:
        if not cached:
            return await self.request("GET", path, params=params)
        query = urlencode(sorted(clean_params(params).items()))
        key = f"{self.session.get_token() or ''}:{path}?{query}"
        return await self.cache.get(key, lambda: self.request("GET", path, params=params), force=force)

    async def post(self, path: str, json: Any = None, **kwargs) -> ApiResult:
        return await self.request("POST", path, json=json if json is not None else {}, **kwargs)

    async def patch(self, path: str, json: Any = None) -> ApiResult:
        return await self.request("PATCH", path, json=json if json is not None else {})

    async def upload(self, path: str, *, filename: str, content: bytes, field: str = "file", data: dict | None = None) -> ApiResult:
        files = {field: (filename, content)}
        return await self.request("POST", path, files=files, data={k: str(v) for k, v in (data or {}).items()})
