import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from core.config import settings

class HarbourTimeFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        # Stamp records in harbour local time whatever the host timezone
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        local = dt.astimezone(ZoneInfo(settings.harbour_timezone))
        return local.strftime(datefmt or "%Y-%m-%d %H:%M:%S %Z")

    def format(self, record: logging.LogRecord) -> str:
        # Extract just the module name from the dotted path
        record.name = record.name.split('.')[-1]
        return super().format(record)

def setup_logging(level: int = logging.INFO) -> None:
    formatter = HarbourTimeFormatter(
        fmt="[%(levelname)s] %(asctime)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S %Z"
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Configure console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    # Remove existing handlers and add our custom handler
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # Set specific log levels for noisy libraries
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
