"""
FastAPI application entry point

Internship placement tracking API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import init_db, close_db
from app.core.logging import setup_logging
from app.core.response import success_response, DictResponse
from app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    database_exception_handler,
    general_exception_handler,
)
from app.api import api_router

VERSION = "1.0.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """
    OpenAPI operationId from the route function name
    """
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan

    Creates tables on startup and releases connections on shutdown
    """
    setup_logging()
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug: {settings.debug}")

    await init_db()
    logger.info("Database initialized")

    yield

    await close_db()
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """
    Build the FastAPI application
    """
    app = FastAPI(
        title=settings.app_name,
        description="Internship placement application tracking API",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )

    # Exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["System"], response_model=DictResponse)
    async def health_check():
        """Health check"""
        return success_response(data={"status": "healthy"})

    @app.get("/", tags=["System"], response_model=DictResponse)
    async def root():
        """API root"""
        return success_response(data={
            "name": settings.app_name,
            "version": VERSION,
            "docs": "/docs" if settings.debug else None,
        })

    # CORS goes last so it runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
    )
