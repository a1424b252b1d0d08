"""Logging setup shared by the bot and the maintenance scripts."""

import logging
import logging.handlers
import sys
from pathlib import Path
from datetime import datetime

# Log levels for different components
LOGGING_CONFIG = {
    "tarjama": logging.INFO,
    "tarjama.core": logging.INFO,
    "tarjama.core.i18n": logging.INFO,
    "tarjama.core.dates": logging.WARNING,
    "tarjama.features": logging.INFO,
    "tarjama.infra": logging.WARNING,

    # Reduce noise from libraries
    "telegram": logging.WARNING,
    "telegram.ext": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy": logging.WARNING,
    "aiosqlite": logging.WARNING,

    "asyncio": logging.ERROR,
}


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        result = super().format(record)

        # Other handlers must see the plain level name
        record.levelname = levelname

        return result


def setup_logging(
    log_file: bool = True,
    debug: bool = False,
    log_dir: Path = Path("logs"),
    missing_translations: bool = False,
) -> None:
    """Configure root logging: colored console plus an optional rotating file.

    Missing translations are logged at DEBUG by ``tarjama.core.i18n``;
    ``missing_translations`` shows them without turning on DEBUG everywhere.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug or missing_translations else logging.INFO)
    console_handler.setFormatter(ColoredFormatter(
        "%(asctime)s %(levelname)-8s %(name)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir.mkdir(exist_ok=True)
        log_filename = log_dir / f"tarjama_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d) - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root_logger.addHandler(file_handler)

    for logger_name, level in LOGGING_CONFIG.items():
        logging.getLogger(logger_name).setLevel(level)

    if debug:
        for logger_name in LOGGING_CONFIG:
            if logger_name.startswith("tarjama"):
                logging.getLogger(logger_name).setLevel(logging.DEBUG)
    if debug or missing_translations:
        logging.getLogger("tarjama.core.i18n").setLevel(logging.DEBUG)

    logging.getLogger(__name__).info(
        f"Logging configured (console={'DEBUG' if debug else 'INFO'}, "
        f"file={'ENABLED' if log_file else 'DISABLED'}, "
        f"missing translations={'SHOWN' if debug or missing_translations else 'HIDDEN'})"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with proper configuration."""
    return logging.getLogger(name)
