# core/logging_config.py
import logging
from flask import Flask

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(app: Flask) -> None:
    """Logging simples; o nível vem de LOG_LEVEL."""
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # o urllib3 (via requests) é muito verboso em DEBUG
    logging.getLogger("urllib3").setLevel(max(log_level, logging.WARNING))

    app.logger.setLevel(log_level)
    app.logger.info("Logging configured, level=%s, SGS=%s", log_level_name, app.config.get("BCB_SGS_BASE"))
