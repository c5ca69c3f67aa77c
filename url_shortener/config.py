"""
Configuration settings for the URL shortener service.
"""

import os

# Base URL for the shortened URLs
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000/")

# SQLite database file path
DB_PATH = os.getenv("DB_PATH", os.path.join(os.path.dirname(__file__), "url_shortener.db"))

# Use 301 (permanent) or 302 (temporary) redirects
# 301: Better for SEO, lower server load due to browser caching
# 302: Every request reaches the service, so click counts stay accurate
REDIRECT_TYPE = int(os.getenv("REDIRECT_TYPE", 302))

# Links expire after this many days unless the request says otherwise
DEFAULT_EXPIRY_IN_DAYS = int(os.getenv("DEFAULT_EXPIRY_IN_DAYS", 30))

# Number of links per page in listings
PAGE_SIZE = int(os.getenv("PAGE_SIZE", 10))

MAX_URL_LENGTH = 2048

# Largest identifier SQLite can store in an INTEGER PRIMARY KEY
MAX_ID = 2 ** 63 - 1

# Server settings
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

# Logging configuration
LOGGING = {
    "level": os.getenv("LOG_LEVEL", "INFO").upper(),
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
