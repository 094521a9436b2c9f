from __future__ import annotations

import logging

import uvicorn

from app.config import settings
from app.logging import configure_logging


def main() -> None:
    configure_logging()
    logging.getLogger("startup").info(
        "service_starting",
        extra={"port": settings.PORT, "environment": settings.ENVIRONMENT},
    )
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
