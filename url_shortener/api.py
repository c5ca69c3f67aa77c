"""
API endpoints for the URL shortener service.
"""

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request, Header, HTTPException, Query, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field, field_validator

from url_shortener.config import BASE_URL, MAX_URL_LENGTH, REDIRECT_TYPE, LOGGING
from url_shortener.models import PagedResult, ShortUrlDto, UserDto
from url_shortener.shortener import URLShortener, PrivateUrlError, UserNotFoundError

# Configure logging
logging.basicConfig(level=getattr(logging, LOGGING["level"]), format=LOGGING["format"])
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="URL Shortener API",
    description="Shortens long URLs into Base62 keys and redirects them back",
    version="1.0.0"
)

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), 'templates'))


# Define request and response models
class URLRequest(BaseModel):
    url: str = Field(..., description="The URL to shorten")
    is_private: bool = Field(False, description="Only the creating user can resolve it")
    expiration_in_days: Optional[int] = Field(None, ge=1, le=3650, description="Lifetime of the link in days")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("URL cannot be empty")
        if len(v) > MAX_URL_LENGTH:
            raise ValueError(f"URL is too long (max {MAX_URL_LENGTH} characters)")
        return v


class URLResponse(BaseModel):
    short_key: str
    short_url: str
    long_url: str
    is_private: bool
    expires_at: Optional[datetime] = None


class UserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ErrorResponse(BaseModel):
    detail: str


@app.post("/api/v1/shorten",
          response_model=URLResponse,
          responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
          summary="Shorten a URL",
          status_code=status.HTTP_201_CREATED)
async def shorten(url_request: URLRequest, x_user_id: Optional[int] = Header(None)):
    """
    Shortens a URL and returns the shortened version

    - **url**: The URL to shorten
    - **is_private**: Restrict the link to the user in the X-User-Id header
    - **expiration_in_days**: Lifetime of the link, server default if omitted
    """
    try:
        short_url = URLShortener.shorten_url(
            url_request.url,
            is_private=url_request.is_private,
            expiration_in_days=url_request.expiration_in_days,
            user_id=x_user_id,
        )
    except (PrivateUrlError, UserNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if short_url is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not shorten the URL"
        )

    return URLResponse(
        short_key=short_url.short_key,
        short_url=f"{BASE_URL}{short_url.short_key}",
        long_url=short_url.original_url,
        is_private=short_url.is_private,
        expires_at=short_url.expires_at,
    )


@app.get("/api/v1/short-urls",
         response_model=PagedResult,
         summary="List public short URLs")
async def list_short_urls(page: int = Query(1, ge=1)):
    """Public links, newest first"""
    return URLShortener.list_public_urls(page)


@app.post("/api/v1/users",
          response_model=UserDto,
          responses={500: {"model": ErrorResponse}},
          summary="Create a user",
          status_code=status.HTTP_201_CREATED)
async def create_user(user_request: UserRequest):
    user = URLShortener.create_user(user_request.name)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create the user"
        )
    return user


@app.get("/api/v1/users/{user_id}/short-urls",
         response_model=PagedResult,
         responses={404: {"model": ErrorResponse}},
         summary="List a user's short URLs")
async def list_user_short_urls(user_id: int, page: int = Query(1, ge=1)):
    """All links created by the user, private ones included"""
    try:
        return URLShortener.list_user_urls(user_id, page)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@app.get("/api/v1/stats/{short_key}",
         response_model=ShortUrlDto,
         responses={404: {"model": ErrorResponse}},
         summary="Get statistics for a shortened URL")
async def get_stats(short_key: str, x_user_id: Optional[int] = Header(None)):
    """
    Get statistics for a shortened URL

    - **short_key**: The shortened URL key

    Private links are reported only to the user in the X-User-Id header
    """
    stats = URLShortener.get_url_stats(short_key, user_id=x_user_id)

    if stats is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short URL not found: {short_key}"
        )

    return stats


@app.get("/", summary="Home page")
async def index(request: Request):
    """Return the home page"""
    return templates.TemplateResponse(request, "index.html")


@app.get("/{short_key}",
         summary="Redirect to the original URL",
         response_class=RedirectResponse)
async def redirect_url(short_key: str, request: Request, x_user_id: Optional[int] = Header(None)):
    """
    Redirects to the original URL corresponding to the short key

    - **short_key**: The shortened URL key
    """
    short_url = URLShortener.get_long_url(short_key, user_id=x_user_id)

    if short_url is None:
        return templates.TemplateResponse(
            request,
            "404.html",
            {"short_key": short_key},
            status_code=status.HTTP_404_NOT_FOUND
        )

    return RedirectResponse(url=short_url.original_url, status_code=REDIRECT_TYPE)
