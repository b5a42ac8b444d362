import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from school_records.analytics import router as analytics_router
from school_records.auth import router as auth_router
from school_records.config.settings import settings
from school_records.database import create_db_engine, create_session_factory, init_db
from school_records.errors import ServiceError, StorageError
from school_records.health import router as health_router
from school_records.marks import router as marks_router
from school_records.students import router as students_router
from school_records.teachers import router as teachers_router

LOCAL_DEV_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


def configure_logging() -> None:
    """One stream handler at INFO for local runs and Lambda alike."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )
    logging.getLogger().setLevel(logging.INFO)

    # Lambda already captures stdout; uvicorn's own loggers would double every line
    if settings.APP_ENV != 'development':
        for name in ("uvicorn.access", "uvicorn.error"):
            logging.getLogger(name).propagate = False


configure_logging()
logger = logging.getLogger(__name__)


def cors_origins() -> List[str]:
    if settings.ALLOW_ALL_ORIGINS:
        return ["*"]

    origins = list(LOCAL_DEV_ORIGINS)
    frontend_url = settings.FRONTEND_URL
    if frontend_url:
        origins.append(frontend_url)
        if frontend_url.endswith("/"):
            origins.append(frontend_url.rstrip("/"))
    return origins


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path} database error: {str(exc)}")
        error = StorageError("A database error occurred")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the school records API.

    The engine is created from settings unless one is passed in. Its session
    factory is stored on `app.state`, where the `get_db` dependency finds it.
    """
    logger.info(f"Building school records API - environment: {settings.APP_ENV}")

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url=settings.API_DOCS_URL,
        redoc_url=settings.API_REDOC_URL,
        openapi_url=settings.API_OPENAPI_URL
    )

    if engine is None:
        engine = create_db_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    @app.on_event("startup")
    async def create_tables():
        try:
            init_db(app.state.engine)
        except Exception as e:
            logger.error(f"Could not initialize the database on startup: {str(e)}")
            raise
        logger.info("School records API ready")

    register_error_handlers(app)

    origins = cors_origins()
    logger.info(f"CORS origins: {origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (auth_router, students_router, marks_router, teachers_router, analytics_router, health_router):
        app.include_router(module.router)

    return app


_fastapi_app = create_app()

# Lambda entry point outside development
if settings.APP_ENV != 'development':
    app = Mangum(_fastapi_app)
else:
    app = _fastapi_app

if __name__ == '__main__':
    import uvicorn

    logger.info(f"Serving on port {settings.PORT}, docs at http://localhost:{settings.PORT}{settings.API_DOCS_URL}")
    uvicorn.run(_fastapi_app, host="0.0.0.0", port=settings.PORT, log_level="info", access_log=False)
