"""Configuração de logging a partir das settings da aplicação."""

from __future__ import annotations

import logging

from cartilha_app.config import AppSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: AppSettings) -> None:
    if settings.DISABLE_LOGS:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("cartilha_app").setLevel(level)
