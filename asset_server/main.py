import logging

import uvicorn

from asset_server.core.app_factory import create_app
from asset_server.core.config import settings

logger = logging.getLogger(__name__)


def run() -> None:
    """Console entry point: build the app, then listen on BIND_HOST:PORT.

    Configuration errors surface before the listening socket opens.
    """
    app = create_app()
    logger.info(
        "server.starting",
        extra={"host": settings.server.bind_host, "port": settings.server.port},
    )
    uvicorn.run(
        app,
        host=settings.server.bind_host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
