"""Main entry point for the zikir rewards API"""
import logging
import uvicorn
from zikir_rewards.config import API_HOST, API_PORT, LOG_LEVEL, validate_config

logger = logging.getLogger(__name__)


def main() -> None:
    """Main application entry point"""
    # Fail before binding the port if configuration is invalid
    logger.info("Validating configuration...")
    validate_config()

    logger.info(f"Starting API on {API_HOST}:{API_PORT}")
    uvicorn.run(
        "zikir_rewards.api.server:app",
        host=API_HOST,
        port=API_PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
