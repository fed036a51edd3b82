"""Serve the API: ``python -m postboard``."""

import uvicorn

from postboard.config import get_settings


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "postboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload and settings.is_development,
        log_config=None,
    )
