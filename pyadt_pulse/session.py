import asyncio
import json
import logging
import os
from dataclasses import dataclass

import aiohttp

from .connectivity import ReachabilityCheck, check_host_reachable, ensure_reachable
from .constants import (
    ACCEPT,
    DEFAULT_TIMEOUT,
    PORTAL_HOST,
    PORTAL_PORT,
    PROBE_RETRIES,
    PROBE_TIMEOUT,
    SUMMARY_URL,
    USER_AGENT,
    VERSIONED_SUMMARY_URL,
)
from .exceptions import PulseNetworkError

_LOGGER = logging.getLogger("pyadt_pulse")

_MASKED_FIELDS = ("password",)


class _LoggedClientSession:
    """Wraps an aiohttp session and writes every round trip to a log file."""

    def __init__(self, session: aiohttp.ClientSession, log_file: str):
        self._session = session
        self._logger = logging.getLogger("pyadt_pulse.http")
        if not self._logger.handlers:
            handler = logging.FileHandler(log_file)
            formatter = logging.Formatter(
                "%(asctime)s %(levelname)s %(message)s"
            )
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.INFO)

        self._log_headers = os.getenv("PULSE_HTTP_LOG_HEADERS", "false").lower() == "true"
        self._log_body = os.getenv("PULSE_HTTP_LOG_BODY", "true").lower() == "true"

    def _format_body(self, kwargs: dict) -> str | None:
        if not self._log_body or "data" not in kwargs:
            return None
        data = kwargs["data"]
        if isinstance(data, dict):
            data = {
                k: "***" if k in _MASKED_FIELDS else v for k, v in data.items()
            }
            return json.dumps(data, ensure_ascii=False)
        return str(data)

    def _log_request(self, method: str, url, **kwargs) -> None:
        body = self._format_body(kwargs)
        if self._log_headers and "headers" in kwargs:
            self._logger.info("REQUEST: %s %s headers=%s body=%s", method, url, kwargs.get("headers"), body)
        else:
            self._logger.info("REQUEST: %s %s body=%s", method, url, body)

    async def _log_response(self, method: str, url, resp: aiohttp.ClientResponse) -> None:
        """Log final URL, status and (truncated) body"""
        body = None
        if self._log_body:
            try:
                text = await resp.text()
                body = text[:500] + ("..." if len(text) > 500 else "")
            except (aiohttp.ClientError, UnicodeDecodeError) as e:
                body = f"<error reading body: {e}>"

        if self._log_headers:
            self._logger.info(
                "RESPONSE: %s %s -> %s status=%d headers=%s body=%s",
                method, url, resp.url, resp.status, dict(resp.headers), body,
            )
        else:
            self._logger.info(
                "RESPONSE: %s %s -> %s status=%d body=%s",
                method, url, resp.url, resp.status, body,
            )

    class _LoggedResponse:
        """Context manager that logs the response on __aexit__"""
        def __init__(self, cm, logger_func, method: str, url):
            self._cm = cm
            self._logger_func = logger_func
            self._method = method
            self._url = url
            self._resp = None

        async def __aenter__(self):
            self._resp = await self._cm.__aenter__()
            return self._resp

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            if self._resp is not None and exc_type is None:
                await self._logger_func(self._method, self._url, self._resp)
            return await self._cm.__aexit__(exc_type, exc_val, exc_tb)

    def request(self, method: str, url, **kwargs):
        self._log_request(method, url, **kwargs)
        cm = self._session.request(method, url, **kwargs)
        return self._LoggedResponse(cm, self._log_response, method, url)

    def __getattr__(self, name):
        return getattr(self._session, name)


@dataclass
class PortalResponse:
    """One completed round trip: where it ended up and what came back."""
    status: int
    path: str  # path + query string of the final URL
    body: str


class PulseSession:
    """
    State of one logical connection to the portal.

    Owns the authenticated / logging-in flags, the captured portal version
    and the transport whose cookie jar carries the server-side session.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        debug: bool = False,
        reachability_check: ReachabilityCheck | None = None,
    ):
        self._owns_session = session is None
        self._session = self._wrap(session) if session is not None else None
        self.debug = debug
        self._reachability_check = reachability_check or check_host_reachable

        self.authenticated: bool = False
        self.logging_in: bool = False
        self.portal_version: str = ""

    # ---------- transport ----------

    @staticmethod
    def _wrap(session: aiohttp.ClientSession):
        log_file = os.getenv("PULSE_HTTP_LOG_FILE")
        if log_file:
            return _LoggedClientSession(session, log_file)
        return session

    @property
    def http(self):
        """Transport, created on first use when none was supplied."""
        if self._session is None:
            self._session = self._wrap(
                aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar())
            )
        return self._session

    @property
    def cookie_jar(self):
        return self.http.cookie_jar

    def reset_cookies(self) -> None:
        """Drop every cookie so the next request opens a fresh portal session."""
        self.cookie_jar.clear()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ---------- connectivity ----------

    async def ensure_reachable(self) -> None:
        await ensure_reachable(
            self._reachability_check,
            PORTAL_HOST,
            PORTAL_PORT,
            PROBE_TIMEOUT,
            PROBE_RETRIES,
        )

    # ---------- logging ----------

    def log(self, level: int, message: str, *args) -> None:
        """Debug sink: emits only when the client was created with debug=True."""
        if self.debug:
            _LOGGER.log(level, message, *args)

    # ---------- headers ----------

    def summary_url(self) -> str:
        if self.portal_version:
            return VERSIONED_SUMMARY_URL.format(version=self.portal_version)
        return SUMMARY_URL

    def headers(self, referer: str | None = None, **extra: str) -> dict:
        """Browser-like headers the portal expects"""
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": ACCEPT,
        }
        if referer:
            headers["Referer"] = referer
        headers.update(extra)
        return headers

    # ---------- requests ----------

    async def fetch(
        self,
        method: str,
        url,
        *,
        headers: dict | None = None,
        data: dict | None = None,
    ) -> PortalResponse:
        """
        Issue one request following redirects and read the body.

        Raises:
            PulseNetworkError: The round trip itself failed
        """
        try:
            async with self.http.request(
                method,
                url,
                headers=headers or self.headers(),
                data=data,
                allow_redirects=True,
                timeout=aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT),
            ) as resp:
                body = await resp.text()
                path = resp.url.path_qs
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise PulseNetworkError(f"{method} {url} failed: {e}") from e

        self.log(logging.INFO, "ADT Pulse: Response path -> %s", path)
        return PortalResponse(status=resp.status, path=path, body=body)
