"""Run the lookbook API with uvicorn.

Usage:
    python api_main.py                         # 0.0.0.0:8000
    API_PORT=9000 API_RELOAD=true python api_main.py
"""

import os

import uvicorn

from lookbook.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    configure_logging()

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"
    workers = int(os.getenv("API_WORKERS", "1"))
    if reload and workers > 1:
        logger.warning("api_workers_ignored", workers=workers, reason="reload")
        workers = 1

    logger.info("api_server_starting", host=host, port=port, reload=reload, workers=workers)
    # log_config=None keeps uvicorn on the structlog handlers configured above
    uvicorn.run(
        "lookbook.api.app:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_config=None,
    )


if __name__ == "__main__":
    main()
