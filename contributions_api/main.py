from fastapi import FastAPI
from fastapi import Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from contributions_api.api.routes.contributions import router
from contributions_api.core.middleware import RequestLoggingMiddleware
from contributions_api.core.observability import configure_logging
from contributions_api.core.observability import init_sentry
from contributions_api.settings import Settings


async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer unknown paths and unsupported methods with a plain-text 404."""

    if exc.status_code in {404, 405}:
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


def create_app() -> FastAPI:
    """Build the FastAPI application with logging, Sentry and routes."""

    app_settings = Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    application = FastAPI(
        title="GitHub Contributions API",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    application.add_middleware(RequestLoggingMiddleware)
    application.add_exception_handler(StarletteHTTPException, not_found_handler)
    application.include_router(router)
    return application


app = create_app()
