#!/usr/bin/env python3
"""Run the Snippetbox application"""
import uvicorn

from snippetbox.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "snippetbox.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
