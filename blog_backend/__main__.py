"""
Run the blog backend with uvicorn: ``python -m blog_backend``.
"""

from __future__ import annotations

import logging
import sys

import uvicorn

from blog_backend.app import create_app
from blog_backend.config import get_settings
from blog_backend.dependencies import build_blog_service

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    settings = get_settings()
    try:
        service = build_blog_service(settings)
    except Exception as exc:
        logger.error("Failed to start: %s: %s", type(exc).__name__, exc)
        return 1

    logger.info("Server running on port %d", settings.port)
    uvicorn.run(create_app(service), host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
