"""FastAPI application for the lending API."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lending import __version__
from lending.api import api_router
from lending.config import settings
from lending.core.exceptions import AppException, ConflictError
from lending.core.logging import get_logger, setup_logging
from lending.database import close_db, init_db

setup_logging(settings.log_level)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("%s %s ready", settings.app_name, __version__)
    yield
    await close_db()


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    """Map a domain error to its status with a ``detail``/``error_code`` body."""
    if isinstance(exc, ConflictError):
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
            "details": exc.details,
        },
    )


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Library lending API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppException, handle_app_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name, "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("lending.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
