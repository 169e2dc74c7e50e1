"""Configuração de logging do pacote."""

from __future__ import annotations

import logging
import logging.config

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Envia os logs de ``visual_regression`` para stdout, em JSON por padrão."""

    level = level.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Nível de log inválido: {level}")

    formatter = {"()": jsonlogger.JsonFormatter, "fmt": LOG_FORMAT} if json_output else {"format": LOG_FORMAT}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "default",
                }
            },
            "loggers": {
                "visual_regression": {
                    "handlers": ["stdout"],
                    "level": level,
                    "propagate": False,
                },
            },
        }
    )
