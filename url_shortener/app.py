"""
Main application entry point for the URL shortener service.
"""

import logging

import uvicorn
from fastapi import FastAPI

from url_shortener.api import app
from url_shortener.config import HOST, PORT, DEBUG, LOGGING
from url_shortener.db import URLRepository

# Configure logging
logging.basicConfig(level=getattr(logging, LOGGING["level"]), format=LOGGING["format"])
logger = logging.getLogger(__name__)


def initialize_app() -> FastAPI:
    """
    Initialize the FastAPI application

    Returns:
        FastAPI app: The initialized FastAPI application
    """
    logger.info("Initializing URL shortener application")

    # Fail startup if the schema cannot be created
    URLRepository.initialize_db()

    logger.info("URL shortener application initialized successfully")
    return app


def start():
    """Start the FastAPI application with Uvicorn"""
    initialize_app()

    uvicorn.run(
        "url_shortener.api:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info"
    )


if __name__ == "__main__":
    start()
