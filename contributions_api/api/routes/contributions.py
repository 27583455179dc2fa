import logging
from datetime import UTC
from datetime import date
from datetime import datetime

from fastapi import APIRouter
from fastapi import Query
from fastapi import Response
from fastapi.responses import HTMLResponse
from fastapi.responses import JSONResponse

from contributions_api.api.pages import INDEX_PAGE
from contributions_api.api.schemas.contributions import ContributionDay
from contributions_api.api.schemas.contributions import ContributionsResponse
from contributions_api.api.schemas.contributions import ErrorResponse
from contributions_api.api.schemas.contributions import HealthResponse
from contributions_api.services.contributions_service import ContributionsError
from contributions_api.services.contributions_service import ParsedContributions
from contributions_api.services.contributions_service import get_contributions
from contributions_api.services.contributions_service import resolve_date_range
from contributions_api.services.svg_renderer import render_contributions_svg
from contributions_api.services.svg_renderer import render_error_svg
from contributions_api.settings import Settings


logger = logging.getLogger(__name__)

router = APIRouter()
settings = Settings()

SVG_MEDIA_TYPE = "image/svg+xml"


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with milliseconds and `Z`."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def cache_control_header() -> str:
    return f"public, max-age={settings.cache_max_age_seconds}"


def json_error_response(message: str) -> JSONResponse:
    error = ErrorResponse(error=message, timestamp=utc_timestamp())
    return JSONResponse(status_code=500, content=error.model_dump())


def svg_error_response(message: str) -> Response:
    return Response(
        content=render_error_svg(message),
        status_code=500,
        media_type=SVG_MEDIA_TYPE,
    )


def load_contributions(
    username: str, raw_from: str | None, raw_to: str | None
) -> tuple[ParsedContributions, date, date]:
    """Resolve the requested range and fetch the user's contributions for it."""

    from_date, to_date = resolve_date_range(raw_from, raw_to)
    parsed = get_contributions(
        username=username,
        from_date=from_date,
        to_date=to_date,
        base_url=settings.github_base_url,
        user_agent=settings.github_user_agent,
        timeout=settings.github_timeout_seconds,
    )
    return parsed, from_date, to_date


@router.get("/", response_class=HTMLResponse)
async def root() -> str:
    """Return the HTML page documenting the available endpoints."""

    return INDEX_PAGE


@router.get("/health")
def health() -> HealthResponse:
    """Return liveness probe response for health checks."""

    return HealthResponse(status="healthy", timestamp=utc_timestamp())


@router.get(
    "/api/contributions/{username}",
    response_model=ContributionsResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_user_contributions(
    username: str,
    response: Response,
    raw_from: str | None = Query(default=None, alias="from"),
    raw_to: str | None = Query(default=None, alias="to"),
) -> ContributionsResponse | JSONResponse:
    """Return the contribution calendar of a GitHub user as JSON."""

    try:
        parsed, from_date, to_date = load_contributions(username, raw_from, raw_to)
    except ContributionsError as exc:
        logger.warning("Contributions request for %s failed: %s", username, exc)
        return json_error_response(str(exc))
    except Exception as exc:
        logger.exception("Unexpected error loading contributions for %s", username)
        return json_error_response(str(exc) or type(exc).__name__)

    response.headers["Cache-Control"] = cache_control_header()
    return ContributionsResponse(
        total_contributions=parsed.total_contributions,
        contributions=[
            ContributionDay(date=day.date, count=day.count, level=day.level)
            for day in parsed.contributions
        ],
        username=username,
        from_date=from_date,
        to_date=to_date,
        timestamp=utc_timestamp(),
    )


@router.get("/api/contributions/{username}/svg")
def get_user_contributions_svg(
    username: str,
    raw_from: str | None = Query(default=None, alias="from"),
    raw_to: str | None = Query(default=None, alias="to"),
) -> Response:
    """Return the contribution heatmap of a GitHub user as an SVG card.

    Failures are rendered as an SVG error card with status 500, so the
    endpoint always answers with an image.
    """

    try:
        parsed, from_date, to_date = load_contributions(username, raw_from, raw_to)
        svg = render_contributions_svg(parsed, username, from_date, to_date)
    except ContributionsError as exc:
        logger.warning("Contributions SVG request for %s failed: %s", username, exc)
        return svg_error_response(str(exc))
    except Exception as exc:
        logger.exception("Unexpected error rendering contributions for %s", username)
        return svg_error_response(str(exc) or type(exc).__name__)

    return Response(
        content=svg,
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": cache_control_header()},
    )
