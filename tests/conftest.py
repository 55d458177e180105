"""Pytest fixtures for pyadt_pulse tests.

The portal is replaced by an in-memory fake of the aiohttp session: each
route answers with a canned body and the URL the redirects "ended up" on,
which is all the client looks at.
"""

from __future__ import annotations

import json
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any

import pytest
import pytest_asyncio
from yarl import URL

from pyadt_pulse import PulseClient

PORTAL = "https://portal.adtpulse.com"
VERSION = "21.0.0-132"
SIGNIN_PAGE = "/myhome/access/signin.jsp"
SIGNIN_EXPIRED = "/myhome/access/signin.jsp?e=ns&partner=adt"

DEVICE_HTML = """
<html><body>
<table>
  <tr>
    <td class="InputFieldDescriptionL">Name:</td>
    <td class="InputFieldL"> Security Panel </td>
  </tr>
  <tr>
    <td class="InputFieldDescriptionL">Manufacturer/Provider:</td>
    <td class="InputFieldL">ADT</td>
  </tr>
  <tr>
    <td class="InputFieldDescriptionL">Type/Model:</td>
    <td class="InputFieldL">Security Panel - Safewatch Pro 3000/3000CN</td>
  </tr>
</table>
</body></html>
"""

ORB_HTML = """
<div id="divOrbContent">
  <div id="divOrbTextSummary"><span class="p_boldNormalTextLarge">{text}</span></div>
</div>
"""

FORCE_ARM_TOKEN = "8d6b1e7e-21f3"

ARM_HTML_FORCE = f"""
<div class="p_armDisarmWrapper">
  <span>Some sensors are open or reporting motion.</span>
  <input type="button" id="arm_button_1" value="Arm Anyway"
    onclick="confirmForceArm('/myhome/quickcontrol/serv/RunRRACommand?sat={FORCE_ARM_TOKEN}&amp;href=rest/adt/ui/client/security/setForceArm&amp;armstate=forcearm&amp;arm=away')">
</div>
"""

ARM_HTML_PLAIN = """
<div class="p_armDisarmWrapper"><span>Your system is arming.</span></div>
"""

LOGIN_PAGE_HTML = "<html><head><title>ADT Pulse Login</title></head><body></body></html>"

ZONE_ITEMS = [
    {
        "id": "sensor-1",
        "name": "Front Door",
        "tags": "sensor,doorWindow",
        "state": {"icon": "devStatOpen", "statusTxt": "Front Door - Open"},
    },
    {
        "id": "panel-1",
        "name": "Security Panel",
        "tags": "panel",
        "state": {"icon": "devStatOK"},
    },
    {
        "id": "sensor-2",
        "name": "Living Room Motion",
        "tags": "sensor,motion",
        "state": {"icon": "devStatOK"},
    },
]


def versioned(path: str, version: str = VERSION) -> str:
    """/myhome/x → /myhome/<version>/x, the way the portal redirects."""
    return path.replace("/myhome/", f"/myhome/{version}/", 1)


def zone_body(items: list[dict] | None = None) -> str:
    return json.dumps({"items": ZONE_ITEMS if items is None else items})


@dataclass
class FakeResponse:
    final_url: str
    body: str
    status: int = 200
    error: BaseException | None = None
    headers: dict = field(default_factory=dict)

    @property
    def url(self) -> URL:
        return URL(self.final_url)

    async def text(self) -> str:
        return self.body

    async def __aenter__(self):
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeCookieJar:
    def __init__(self):
        self.cookies: dict[str, str] = {}
        self.clear_count = 0

    def clear(self, predicate=None):
        self.clear_count += 1
        self.cookies.clear()

    def __iter__(self):
        return iter(self.cookies.items())


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict[str, Any]

    @property
    def path(self) -> str:
        return URL(self.url).path

    @property
    def query_string(self) -> str:
        return self.url.partition("?")[2]


class FakeHTTPSession:
    """
    Stand-in for aiohttp.ClientSession.

    Routes are keyed by (method, request path). Queued responses are used
    in order; the last one keeps answering once the queue is down to it.
    """

    def __init__(self):
        self.cookie_jar = FakeCookieJar()
        self.calls: list[Call] = []
        self.closed = False
        self._routes: dict[tuple[str, str], deque[FakeResponse]] = defaultdict(deque)

    def route(
        self,
        method: str,
        path: str,
        body: str = "",
        final_path: str | None = None,
        status: int = 200,
    ) -> "FakeHTTPSession":
        if final_path is None:
            final_path = versioned(path)
        self._routes[(method, path)].append(
            FakeResponse(final_url=PORTAL + final_path, body=body, status=status)
        )
        return self

    def fail(self, method: str, path: str, error: BaseException) -> "FakeHTTPSession":
        self._routes[(method, path)].append(
            FakeResponse(final_url=PORTAL + path, body="", error=error)
        )
        return self

    def request(self, method: str, url, **kwargs):
        url = str(url)
        self.calls.append(Call(method, url, kwargs))
        queue = self._routes.get((method, URL(url).path))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return queue.popleft() if len(queue) > 1 else queue[0]

    def calls_to(self, path: str) -> list[Call]:
        return [c for c in self.calls if c.path == path]

    async def close(self):
        self.closed = True


class FakeProbe:
    """Reachability check that answers a fixed value and counts calls."""

    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.calls: list[tuple] = []

    async def __call__(self, host, port, timeout, retries):
        self.calls.append((host, port, timeout, retries))
        return self.reachable


@pytest.fixture(autouse=True)
def _no_wire_log(monkeypatch):
    monkeypatch.delenv("PULSE_HTTP_LOG_FILE", raising=False)


@pytest.fixture
def http() -> FakeHTTPSession:
    return FakeHTTPSession()


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe(True)


@pytest.fixture
def client(http, probe) -> PulseClient:
    return PulseClient(
        "user@example.com", "hunter2", session=http, reachability_check=probe
    )


@pytest.fixture
def portal_login(http):
    """Route a successful sign-in (root GET + credential POST)."""
    http.route("GET", "/", final_path="/")
    http.route(
        "POST",
        SIGNIN_PAGE,
        body="<html>summary</html>",
        final_path=f"/myhome/{VERSION}/summary/summary.jsp",
    )
    return http


@pytest_asyncio.fixture
async def logged_in(client, portal_login):
    """Client that has completed a successful login."""
    result = await client.login()
    assert result.success
    portal_login.calls.clear()
    return client
