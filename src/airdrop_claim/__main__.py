"""Run the claim server: ``python -m airdrop_claim``."""

import uvicorn

from .engine.exceptions import ConfigurationError
from .servers.apps import ClaimServer
from .settings import ClaimSettings
from .utils import logger, setup_logger


def main() -> None:
    setup_logger()
    try:
        settings = ClaimSettings.from_env()
        setup_logger(settings.log_level)
        app = ClaimServer(settings=settings)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(1)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
