from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Request lines are already covered by uvicorn's access log.
    logging.getLogger("httpx").setLevel(logging.WARNING)
