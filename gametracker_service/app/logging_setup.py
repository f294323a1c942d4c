import logging
import os
from logging.handlers import RotatingFileHandler

from .config import SERVICE_NAME


def setup_logging(service_name: str = SERVICE_NAME) -> logging.Logger:
    """Настраивает логгер сервиса: консоль всегда, файл с ротацией, если задан LOG_DIR."""
    log_dir = os.getenv("LOG_DIR", "")
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(service_name)
    logger.setLevel(level)

    # чтобы не плодить хендлеры при повторном create_app()
    if logger.handlers:
        return logger

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, f"{service_name}.log")

        # в файл (ротация)
        file_handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)

    # в консоль (docker logs)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(fmt)
    logger.addHandler(console_handler)

    return logger
