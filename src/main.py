"""Main application entry point: serve the billing API with uvicorn."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

from src.services.config import load_config
from src.services.logging import setup_server_logging

# Load environment variables
load_dotenv()

# Configure logging (with file logging)
config = load_config()
setup_server_logging(config.log_file)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the API server."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    from src.api.app import app

    logger.info("Starting billing API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
