"""
Response classification.

The portal answers every request with 200 and an HTML page; whether the call
worked can only be told from where the redirects ended up and, for AJAX
endpoints, whether the body is a full HTML document (the sign-in page).
"""
import re
from enum import Enum

from .constants import LOGIN_SUCCESS_PATH

_HTML_MARKERS = ("<html", "<!doctype html")


class Outcome(Enum):
    OK = "ok"
    FAILED = "failed"  # transport error, says nothing about the session
    REAUTH_REQUIRED = "reauth_required"  # portal dropped the session


def looks_like_html(body: str | None) -> bool:
    if not body:
        return False
    return body.lstrip()[:20].lower().startswith(_HTML_MARKERS)


def classify(
    pattern: re.Pattern,
    error: BaseException | None,
    final_path: str | None,
    body: str | None = None,
    *,
    reject_html: bool = False,
) -> Outcome:
    """
    Decide the outcome of one portal round trip.

    Args:
        pattern: Path contract of the endpoint (see constants)
        error: Transport exception, if the request itself failed
        final_path: Path and query of the URL after redirects
        body: Response text
        reject_html: Treat an HTML document body as session loss
            (for endpoints that answer JSON or plain text)
    """
    if error is not None:
        return Outcome.FAILED
    if final_path is None or not pattern.match(final_path):
        return Outcome.REAUTH_REQUIRED
    if reject_html and looks_like_html(body):
        return Outcome.REAUTH_REQUIRED
    return Outcome.OK


def login_version(final_path: str | None) -> str | None:
    """Portal version segment of a successful sign-in redirect."""
    if final_path is None:
        return None
    match = LOGIN_SUCCESS_PATH.match(final_path)
    return match.group("version") if match else None
