import os

from dotenv import load_dotenv

# Load variables from a local .env file when present
load_dotenv()

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL")
SQL_ECHO = os.getenv("SQL_ECHO", "false").strip().lower() in ("1", "true", "yes")

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()


def get_database_url():
    return DATABASE_URL


def get_log_level():
    return LOG_LEVEL
