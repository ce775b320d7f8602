import os
import sys

from loguru import logger


def setup_logger(*, json_logs: bool = False, level: str = "INFO", enabled: bool = True) -> None:
    """Configure loguru for the checker.

    Console level controlled by LOG_LEVEL env (default: INFO).
    With ``enabled=False`` every ``solcheck.*`` log event is dropped; log
    storage itself is left to whoever hosts the checker.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if enabled:
        logger.enable("solcheck")
    else:
        logger.disable("solcheck")
