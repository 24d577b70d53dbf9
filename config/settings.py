"""
Application settings and configuration

This file contains all the settings for the email composer.
Most settings can be changed by creating a .env file in the project root.
If a setting isn't in .env, it uses the default value shown here.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file (if it exists)
load_dotenv()


class Settings:
    """
    Application configuration settings

    You can change these values by setting environment variables in a .env file.
    """

    # ============================================================
    # Server Settings
    # ============================================================
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))

    # ============================================================
    # Gemini API Settings
    # ============================================================
    # Gemini writes the email drafts.
    # Without an API key the generate endpoint reports the service as unavailable.
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

    # Generation parameters are fixed per deployment, not per request
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_MAX_OUTPUT_TOKENS = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "1000"))

    # ============================================================
    # Email Settings
    # ============================================================
    # For Gmail: You need to create an "App Password" (not your regular password)
    SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))  # 587 for TLS
    SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    # Every email goes out from this address, whoever asked for it
    FROM_EMAIL = os.getenv("FROM_EMAIL", "") or SMTP_USERNAME

    # ============================================================
    # Logging Settings
    # ============================================================
    # Options: DEBUG, INFO, WARNING, ERROR
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")  # Empty string disables file logging


# Global settings instance
settings = Settings()
