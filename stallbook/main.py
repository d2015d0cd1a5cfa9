"""
Stallbook API

Application entry point used by uvicorn: ``uvicorn stallbook.main:app``.
"""

from stallbook.config.logging import configure_logging
from stallbook.serving.api import create_api_app

configure_logging()

app = create_api_app()


if __name__ == "__main__":
    import uvicorn
    from stallbook.config import get_settings

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
