"""
Logging configuration

Модули пакета логируют через logging.getLogger(__name__) и не настраивают
handlers при импорте. setup_logging вызывается хостом один раз.
"""

import logging
from pathlib import Path
from typing import Final, Optional, Union

ROOT_LOGGER_NAME: Final[str] = "src"

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    console_output: bool = True,
) -> logging.Logger:
    """
    Настройка логгера пакета.

    Args:
        level: Уровень логирования
        log_file: Путь к файлу лога (None — без файла)
        console_output: Писать ли в stderr

    Returns:
        Настроенный корневой логгер пакета
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Повторный вызов не дублирует handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("logging initialized level=%s file=%s", logging.getLevelName(level), log_file)
    return logger
