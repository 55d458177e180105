import asyncio
import logging

from .constants import BASE_URL, PORTAL_HOST, SIGNIN_URL, SIGNOUT_URL
from .exceptions import PulseAuthError, PulseNetworkError
from .models import Action
from .responses import login_version


class PulseAuth:
    def __init__(self, session, username: str, password: str):
        self._session = session
        self._username = username
        self._password = password
        self._login_task: asyncio.Task | None = None

    # ---------- login ----------

    async def login(self) -> str:
        """
        Sign in, or join a sign-in already in flight.

        Concurrent callers share one negotiation so the cookie jar is only
        reset once; all of them observe the same outcome.

        Returns:
            Portal version captured from the summary redirect
        """
        if self._session.authenticated:
            return self._session.portal_version

        if self._login_task is None:
            self._login_task = asyncio.ensure_future(self._login())
            self._login_task.add_done_callback(self._login_done)
        else:
            self._session.log(logging.INFO, "ADT Pulse: Login already in progress, waiting...")

        return await asyncio.shield(self._login_task)

    def _login_done(self, task: asyncio.Task) -> None:
        if self._login_task is task:
            self._login_task = None

    async def _login(self) -> str:
        """
        Flow:
        1. GET portal root with a fresh cookie jar → session cookie
        2. POST credentials to signin.jsp, following redirects
        3. Landing on /myhome/<version>/summary/summary.jsp means success
        """
        self._session.log(logging.INFO, "ADT Pulse: Logging in...")
        self._session.logging_in = True
        try:
            self._session.reset_cookies()
            await self._session.fetch("GET", BASE_URL)

            response = await self._session.fetch(
                "POST",
                SIGNIN_URL,
                headers=self._session.headers(Host=PORTAL_HOST),
                data={"username": self._username, "password": self._password},
            )
            version = login_version(response.path)
            self._session.log(
                logging.INFO, "ADT Pulse: Response path matches -> %s", version is not None
            )

            if version is None:
                self._session.authenticated = False
                self._session.log(logging.ERROR, "ADT Pulse: Login failed.")
                raise PulseAuthError(
                    f"Sign-in landed on {response.path}, not the summary page",
                    action=Action.LOGIN,
                )
        except PulseNetworkError as e:
            self._session.authenticated = False
            self._session.log(logging.ERROR, "ADT Pulse: Login failed.")
            e.action = Action.LOGIN
            raise
        finally:
            self._session.logging_in = False

        self._session.portal_version = version
        self._session.authenticated = True
        self._session.log(logging.INFO, "ADT Pulse: Login success.")
        self._session.log(logging.INFO, "ADT Pulse: Web portal version -> %s", version)
        return version

    # ---------- logout ----------

    async def logout(self) -> None:
        """
        Sign out. Best effort: the session is considered closed whatever
        the portal answers, including a transport error.
        """
        if not self._session.authenticated:
            return

        self._session.log(logging.INFO, "ADT Pulse: Logging out...")
        try:
            await self._session.fetch("GET", SIGNOUT_URL)
        except PulseNetworkError as e:
            self._session.log(
                logging.WARNING, "ADT Pulse: Sign-out request failed, dropping session anyway: %s", e
            )

        self._session.authenticated = False
        self._session.log(logging.INFO, "ADT Pulse: Logout success.")
