"""Configuration module for the point-of-sale sync client."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _optional_float(name):
    """Read a float env var, returning None when unset or empty."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    return float(raw)


class Config:
    """Base configuration class."""

    # Remote authoritative store (PostgREST-style API)
    REMOTE_BASE_URL = os.getenv('REMOTE_BASE_URL', 'http://localhost:54321')
    REMOTE_API_KEY = os.getenv('REMOTE_API_KEY', '')
    # No timeout is imposed unless explicitly configured
    REMOTE_TIMEOUT = _optional_float('REMOTE_TIMEOUT')

    # Local mirror
    MIRROR_DATABASE_URL = os.getenv('MIRROR_DATABASE_URL', 'sqlite:///pos_mirror.sqlite3')
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', '0') == '1'

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Stock Configuration
    LOW_STOCK_THRESHOLD = int(os.getenv('LOW_STOCK_THRESHOLD', '5'))

    # Formatting
    CURRENCY_SYMBOL = os.getenv('CURRENCY_SYMBOL', 'DH')


class TestConfig(Config):
    """Configuration used by the test suite."""

    MIRROR_DATABASE_URL = 'sqlite:///:memory:'
    SQLALCHEMY_ECHO = False
    LOG_LEVEL = 'DEBUG'
    LOW_STOCK_THRESHOLD = 5
