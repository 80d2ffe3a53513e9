"""
FastAPI application entry point for the blog backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_backend.config import Settings, get_settings
from blog_backend.dependencies import build_blog_service
from blog_backend.errors import BlogServiceError
from blog_backend.routes import router
from blog_backend.service import BlogService

logger = logging.getLogger(__name__)


async def blog_error_handler(request: Request, exc: BlogServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": "Server error", "error": str(exc)},
        )
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc)})


async def catch_unhandled_errors(request: Request, call_next):
    # Runs inside CORSMiddleware so 500 responses still carry CORS headers.
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500, content={"message": "Server error", "error": str(exc)}
        )


def create_app(
    service: BlogService | None = None, settings: Settings | None = None
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Blog Backend", version="0.1.0")
    app.state.blog_service = service or build_blog_service(settings)
    # Middleware added last wraps outermost.
    app.middleware("http")(catch_unhandled_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BlogServiceError, blog_error_handler)
    app.include_router(router)
    return app
