"""Configure structured JSON logging for the gate service."""

import logging

from pythonjsonlogger.json import JsonFormatter

from synthgate.config import settings


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure the root logger once at startup."""
    logger = logging.getLogger()
    logger.setLevel((level or settings.log_level).upper())
    handler = logging.StreamHandler()
    use_json = settings.log_json if json_output is None else json_output
    if use_json:
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.handlers = [handler]
