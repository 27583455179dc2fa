import logging
import re
from dataclasses import dataclass
from datetime import date

import httpx
from bs4 import BeautifulSoup
from bs4 import Tag

from contributions_api.clients.github_client import fetch_contributions_page


logger = logging.getLogger(__name__)

CALENDAR_GRID_CLASS = "ContributionCalendar-grid"
CALENDAR_DAY_CLASS = "ContributionCalendar-day"
TOOLTIP_TAG = "tool-tip"
COUNT_PATTERN = re.compile(r"(\d[\d,]*)\s+contributions?\b", re.IGNORECASE)


class ContributionsError(Exception):
    """Base error for failures while building a contributions result."""


class UpstreamHTTPError(ContributionsError):
    """Raised when GitHub answers the calendar request with a non-2xx status."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"Failed to fetch contributions: {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason


class UpstreamRequestError(ContributionsError):
    """Raised when the calendar request fails before a response arrives."""


class CalendarNotFoundError(ContributionsError):
    """Raised when the fetched page has no contribution calendar table."""


class InvalidDateError(ContributionsError):
    """Raised when a `from`/`to` query value is not an ISO calendar date."""


@dataclass(frozen=True)
class DayRecord:
    """Contribution count of a single calendar day."""

    date: date
    count: int
    level: int


@dataclass(frozen=True)
class ParsedContributions:
    """Days sorted ascending by date together with their summed count."""

    total_contributions: int
    contributions: tuple[DayRecord, ...]


def contribution_level(count: int) -> int:
    """Map daily contribution count to a heatmap level in range 0..4."""

    if count <= 0:
        return 0
    if count <= 3:
        return 1
    if count <= 6:
        return 2
    if count <= 9:
        return 3
    return 4


def parse_contribution_count(tooltip_text: str) -> int:
    """Read the contribution count out of a calendar tooltip.

    "3 contributions on January 3rd." gives 3, "No contributions on ..." and
    any unrecognized text give 0.
    """

    match = COUNT_PATTERN.search(tooltip_text)
    if match is None:
        return 0
    return int(match.group(1).replace(",", ""))


def resolve_date_range(
    raw_from: str | None,
    raw_to: str | None,
    today: date | None = None,
) -> tuple[date, date]:
    """Resolve query values into a date range, defaulting to the current year."""

    year = (today or date.today()).year
    from_date = _parse_query_date(raw_from, "from") if raw_from else date(year, 1, 1)
    to_date = _parse_query_date(raw_to, "to") if raw_to else date(year, 12, 31)
    return from_date, to_date


def _parse_query_date(raw_value: str, name: str) -> date:
    try:
        return date.fromisoformat(raw_value)
    except ValueError as exc:
        raise InvalidDateError(
            f"Invalid '{name}' date: {raw_value!r}, expected YYYY-MM-DD"
        ) from exc


def extract_calendar_block(page_html: str) -> str | None:
    """Return the markup region holding the calendar table and its tooltips.

    GitHub renders the day tooltips as siblings of the calendar table, so the
    block is the closest ancestor of the table that also contains tooltips.
    Falls back to the table alone when no ancestor has any.
    """

    soup = BeautifulSoup(page_html, "html.parser")
    table = soup.find("table", class_=CALENDAR_GRID_CLASS)
    if not isinstance(table, Tag):
        return None

    for ancestor in table.parents:
        if ancestor.name == "[document]":
            break
        if ancestor.find(TOOLTIP_TAG) is not None:
            return str(ancestor)

    return str(table)


def parse_contributions(html: str) -> ParsedContributions:
    """Extract per-day contribution counts from calendar markup.

    Day cells are matched to tooltips through the tooltip's `for` attribute;
    cells without a linked tooltip are skipped. Markup whose tooltips carry
    no `for` attribute is paired by document order instead. When
    no classed day cell yields a record, any element carrying `data-date` is
    tried instead. Markup without day markers gives an empty result.
    """

    soup = BeautifulSoup(html, "html.parser")
    tooltips = soup.find_all(TOOLTIP_TAG)

    strict_cells = soup.find_all(class_=CALENDAR_DAY_CLASS, attrs={"data-date": True})
    records = _build_records(strict_cells, tooltips)

    if not records:
        loose_cells = soup.find_all(attrs={"data-date": True})
        records = _build_records(loose_cells, tooltips)
        if records:
            logger.debug("Calendar parsed with loose data-date matching")

    records.sort(key=lambda record: record.date)
    return ParsedContributions(
        total_contributions=sum(record.count for record in records),
        contributions=tuple(records),
    )


def _build_records(cells: list[Tag], tooltips: list[Tag]) -> list[DayRecord]:
    tooltips_by_target = {
        tooltip["for"]: tooltip for tooltip in tooltips if tooltip.get("for")
    }

    records: list[DayRecord] = []
    seen_dates: set[date] = set()
    for index, cell in enumerate(cells):
        if tooltips_by_target:
            # Only linked tooltips count once any tooltip names its cell.
            tooltip = tooltips_by_target.get(cell.get("id"))
        elif index < len(tooltips):
            tooltip = tooltips[index]
        else:
            tooltip = None
        if tooltip is None:
            continue

        try:
            day = date.fromisoformat(cell["data-date"])
        except ValueError:
            continue
        if day in seen_dates:
            continue
        seen_dates.add(day)

        count = parse_contribution_count(tooltip.get_text(" ", strip=True))
        records.append(DayRecord(date=day, count=count, level=contribution_level(count)))

    return records


def get_contributions(
    username: str,
    from_date: date,
    to_date: date,
    base_url: str,
    user_agent: str,
    timeout: float,
) -> ParsedContributions:
    """Fetch and parse the contribution calendar of a GitHub user."""

    try:
        page_html = fetch_contributions_page(
            username=username,
            from_date=from_date,
            to_date=to_date,
            base_url=base_url,
            user_agent=user_agent,
            timeout=timeout,
        )
    except httpx.HTTPStatusError as exc:
        raise UpstreamHTTPError(
            exc.response.status_code, exc.response.reason_phrase
        ) from exc
    except httpx.HTTPError as exc:
        raise UpstreamRequestError(f"GitHub request failed: {exc}") from exc

    calendar_block = extract_calendar_block(page_html)
    if calendar_block is None:
        raise CalendarNotFoundError("Could not find contribution calendar in response")

    parsed = parse_contributions(calendar_block)
    logger.info(
        "Parsed %d days (%d contributions) for %s between %s and %s",
        len(parsed.contributions),
        parsed.total_contributions,
        username,
        from_date.isoformat(),
        to_date.isoformat(),
    )
    return parsed
