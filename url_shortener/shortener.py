"""
URL shortening service with Base62 encoding.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from url_shortener import base62
from url_shortener.config import DEFAULT_EXPIRY_IN_DAYS, MAX_ID, PAGE_SIZE, LOGGING
from url_shortener.db import URLRepository
from url_shortener.models import (
    PagedResult, ShortUrlDto, UserDto, to_short_url_dto, to_user_dto
)

# Configure logging
logging.basicConfig(level=getattr(logging, LOGGING["level"]), format=LOGGING["format"])
logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when a request names a user that does not exist"""


class PrivateUrlError(Exception):
    """Raised when a private link is requested without a user"""


class URLShortener:
    """
    Main URL shortening service
    """

    @staticmethod
    def shorten_url(original_url: str, is_private: bool = False,
                    expiration_in_days: Optional[int] = None,
                    user_id: Optional[int] = None) -> Optional[ShortUrlDto]:
        """
        Shorten a URL

        Args:
            original_url (str): The original long URL
            is_private (bool): Restrict resolution to the creating user
            expiration_in_days (int, optional): Lifetime of the link, defaults
                to DEFAULT_EXPIRY_IN_DAYS
            user_id (int, optional): ID of the creating user

        Returns:
            ShortUrlDto: The new link, or None if it could not be stored

        Raises:
            PrivateUrlError: If a private link is requested without a user
            UserNotFoundError: If user_id does not exist
        """
        if is_private and user_id is None:
            raise PrivateUrlError("Private URLs require a user")

        if user_id is not None and URLRepository.get_user(user_id) is None:
            raise UserNotFoundError(f"User not found: {user_id}")

        if expiration_in_days is None:
            expiration_in_days = DEFAULT_EXPIRY_IN_DAYS
        expires_at = datetime.now(timezone.utc) + timedelta(days=expiration_in_days)

        # Storage assigns the ID; the key is derived from it
        url_id = URLRepository.save_url(
            original_url, is_private, expires_at.isoformat(timespec="microseconds"), user_id
        )
        if url_id is None:
            logger.error(f"Failed to save URL: {original_url[:50]}...")
            return None

        short_key = base62.encode(url_id)
        if not URLRepository.set_short_key(url_id, short_key):
            logger.error(f"Failed to store short key {short_key} for URL {url_id}")
            URLRepository.delete_url(url_id)
            return None

        row = URLRepository.get_url_by_id(url_id)
        if row is None:
            return None

        logger.info(f"Created new short URL: {short_key} for {original_url[:50]}...")
        return to_short_url_dto(row)

    @staticmethod
    def resolve(short_key: str) -> Optional[ShortUrlDto]:
        """
        Look up the link a short key was issued for

        Args:
            short_key (str): The shortened URL key

        Returns:
            ShortUrlDto: The stored link, or None if the key is malformed or unknown
        """
        try:
            url_id = base62.decode(short_key)
        except base62.Base62Error as e:
            logger.warning(f"Malformed short key {short_key!r}: {e}")
            return None

        if url_id > MAX_ID:
            logger.warning(f"Short key out of range: {short_key}")
            return None

        row = URLRepository.get_url_by_id(url_id)
        # Padded spellings ("ab" for "b") decode to the same ID but were never issued
        if row is None or row['short_key'] != short_key:
            logger.warning(f"Short URL not found: {short_key}")
            return None

        return to_short_url_dto(row)

    @staticmethod
    def get_long_url(short_key: str, user_id: Optional[int] = None) -> Optional[ShortUrlDto]:
        """
        Resolve a short key for a redirect, counting the click

        Args:
            short_key (str): The shortened URL key
            user_id (int, optional): ID of the requesting user

        Returns:
            ShortUrlDto: The link, or None if it is unknown, expired, or private
                to another user
        """
        short_url = URLShortener.resolve(short_key)
        if short_url is None:
            return None

        if short_url.is_expired(datetime.now(timezone.utc)):
            logger.info(f"Short URL expired: {short_key}")
            return None

        if not URLShortener._is_visible_to(short_url, user_id):
            return None

        if URLRepository.increment_click_count(short_url.id):
            short_url.click_count += 1

        return short_url

    @staticmethod
    def get_url_stats(short_key: str, user_id: Optional[int] = None) -> Optional[ShortUrlDto]:
        """
        Get a link and its click count without recording a click.
        Expired links are still reported; private ones only to their creator.
        """
        short_url = URLShortener.resolve(short_key)
        if short_url is None or not URLShortener._is_visible_to(short_url, user_id):
            return None
        return short_url

    @staticmethod
    def _is_visible_to(short_url: ShortUrlDto, user_id: Optional[int]) -> bool:
        if not short_url.is_private:
            return True
        if short_url.created_by is not None and short_url.created_by.id == user_id:
            return True
        logger.info(f"Denied access to private short URL: {short_url.short_key}")
        return False

    @staticmethod
    def list_public_urls(page: int = 1) -> PagedResult:
        """Get a page of public links, newest first"""
        rows, total = URLRepository.find_public_urls(page, PAGE_SIZE)
        return PagedResult.of([to_short_url_dto(row) for row in rows], page, PAGE_SIZE, total)

    @staticmethod
    def list_user_urls(user_id: int, page: int = 1) -> PagedResult:
        """
        Get a page of the links created by a user, private ones included

        Raises:
            UserNotFoundError: If user_id does not exist
        """
        if URLRepository.get_user(user_id) is None:
            raise UserNotFoundError(f"User not found: {user_id}")

        rows, total = URLRepository.find_user_urls(user_id, page, PAGE_SIZE)
        return PagedResult.of([to_short_url_dto(row) for row in rows], page, PAGE_SIZE, total)

    @staticmethod
    def create_user(name: str) -> Optional[UserDto]:
        """Create a user, or return None if it could not be stored"""
        user_id = URLRepository.create_user(name)
        if user_id is None:
            return None
        return to_user_dto(URLRepository.get_user(user_id))
