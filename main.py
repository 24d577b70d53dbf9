"""
Main entry point for the application

Starts the HTTP API that drafts emails with Gemini and sends them over SMTP.
Configure GEMINI_API_KEY and the SMTP_* settings in .env first; either half
can run without the other and /api/health reports which one is available.
"""
import sys

import uvicorn

from config.settings import settings
from utils.logger import get_logger, uvicorn_log_config

logger = get_logger(__name__)


def main():
    """Run the API server with uvicorn"""
    reload = "--reload" in sys.argv

    logger.info("=" * 60)
    logger.info("AI Email Composer - Starting")
    logger.info("=" * 60)
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; /api/generate-email will return 503")
    if not (settings.SMTP_USERNAME and settings.SMTP_PASSWORD):
        logger.warning("SMTP credentials are not set; /api/send-email will return 503")

    uvicorn.run(
        "api.server:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=reload,
        log_config=uvicorn_log_config(),
    )


if __name__ == "__main__":
    main()
