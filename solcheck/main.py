"""Entry point: check one Solana address and print the result as JSON."""

import argparse
import asyncio
import sys

from loguru import logger

from config.settings import Settings
from solcheck.checker import AddressChecker
from solcheck.db.redis import close_redis
from solcheck.exceptions import FatalConfigurationError
from solcheck.utils.logger import setup_logger


async def run(address: str, settings: Settings) -> int:
    async with AddressChecker.from_settings(settings) as checker:
        try:
            result = await checker.check(address)
        except FatalConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return 2
        finally:
            await close_redis()

    print(result.model_dump_json(indent=2))
    return 0 if result.is_valid else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check a Solana wallet or token address")
    parser.add_argument("address", help="Solana wallet or token mint address")
    parser.add_argument("--json-logs", action="store_true", help="Serialize logs as JSON")
    args = parser.parse_args(argv)

    settings = Settings()
    setup_logger(
        json_logs=args.json_logs or settings.json_logs,
        level=settings.log_level,
        enabled=settings.logging_enabled,
    )
    return asyncio.run(run(args.address, settings))


if __name__ == "__main__":
    sys.exit(main())
