import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

load_dotenv()

from campusapi import containers  # noqa: E402
from campusapi.config import settings  # noqa: E402
from campusapi.core.exception_handlers import (  # noqa: E402
    handle_base_api_exception,
    handle_http_exception,
    handle_service_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from campusapi.core.exceptions import BaseAPIException, ServiceException  # noqa: E402
from campusapi.core.logging_middleware import LoggingMiddleware  # noqa: E402
from campusapi.logging_config import setup_logging  # noqa: E402
from campusapi.routers import (  # noqa: E402
    balance_router,
    cron_router,
    health_router,
    notification_router,
)

logger = logging.getLogger("campusapi")


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL, json_logs=settings.is_production)

    app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore[attr-defined]

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(ServiceException, handle_service_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(balance_router.router, prefix=settings.API_PREFIX)
    app.include_router(cron_router.router, prefix=settings.API_PREFIX)
    app.include_router(notification_router.router, prefix=settings.API_PREFIX)

    @app.get("/")
    def hello() -> dict:
        return {"message": f"{settings.APP_NAME} API"}

    logger.info(f"{settings.PROJECT_NAME} started (environment={settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
