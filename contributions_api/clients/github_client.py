from datetime import date
from urllib.parse import quote

import httpx


HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def build_contributions_url(base_url: str, username: str) -> str:
    """Return the public contributions page URL for a GitHub username."""

    return f"{base_url.rstrip('/')}/users/{quote(username, safe='')}/contributions"


def fetch_contributions_page(
    username: str,
    from_date: date,
    to_date: date,
    base_url: str,
    user_agent: str,
    timeout: float,
) -> str:
    """Fetch the contribution calendar HTML page for a user and date range.

    Raises:
        httpx.HTTPStatusError: If GitHub answers with a non-2xx status.
        httpx.HTTPError: On transport failures.
    """

    response = httpx.get(
        build_contributions_url(base_url, username),
        params={"from": from_date.isoformat(), "to": to_date.isoformat()},
        headers={
            "Accept": HTML_ACCEPT,
            "User-Agent": user_agent,
        },
        timeout=timeout,
        follow_redirects=True,
    )
    response.raise_for_status()

    return response.text
