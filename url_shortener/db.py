"""
Database layer for the URL shortener service.
Handles connections and operations with SQLite.
"""

import sqlite3
import logging
from datetime import datetime, timezone
from typing import Tuple, Optional, Dict, List, Any

from url_shortener.config import DB_PATH, LOGGING

# Configure logging
logging.basicConfig(level=getattr(logging, LOGGING["level"]), format=LOGGING["format"])
logger = logging.getLogger(__name__)

# Columns returned for a short URL, with the creator's name joined in
SHORT_URL_COLUMNS = """
    s.id, s.short_key, s.original_url, s.is_private, s.expires_at,
    s.created_by, u.name AS created_by_name, s.click_count, s.created_at
"""


def get_connection():
    """Get a SQLite connection with row factory enabled"""
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string"""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class URLRepository:
    """Repository class for URL database operations"""

    @staticmethod
    def initialize_db():
        """Initialize the database schema if it doesn't exist"""
        conn = get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL
            )
            """)

            # The identifier assigned here is what the short key encodes
            cursor.execute("""
            CREATE TABLE IF NOT EXISTS short_urls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                short_key TEXT,
                original_url TEXT NOT NULL,
                is_private INTEGER NOT NULL DEFAULT 0,
                expires_at TIMESTAMP,
                created_by INTEGER,
                click_count INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL,
                UNIQUE(short_key),
                FOREIGN KEY (created_by) REFERENCES users(id)
            )
            """)

            cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_short_urls_created_by ON short_urls(created_by)
            """)

            conn.commit()
            logger.info("Database schema initialized successfully")

        except sqlite3.Error as e:
            logger.error(f"Error initializing database: {e}")
            raise
        finally:
            conn.close()

    @staticmethod
    def create_user(name: str) -> Optional[int]:
        """
        Create a user

        Args:
            name (str): Display name of the user

        Returns:
            int: The new user's ID, or None if an error occurred
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
            INSERT INTO users (name, created_at)
            VALUES (?, ?)
            """, (name, utc_now()))

            conn.commit()
            logger.info(f"Created user {cursor.lastrowid}: {name}")
            return cursor.lastrowid

        except sqlite3.Error as e:
            logger.error(f"Error creating user: {e}")
            conn.rollback()
            return None
        finally:
            conn.close()

    @staticmethod
    def get_user(user_id: int) -> Optional[Dict[str, Any]]:
        """Get a user by ID, or None if it does not exist"""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
            SELECT id, name FROM users
            WHERE id = ?
            """, (user_id,))

            result = cursor.fetchone()
            return dict(result) if result else None

        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Error retrieving user: {e}")
            return None
        finally:
            conn.close()

    @staticmethod
    def save_url(original_url: str, is_private: bool = False,
                 expires_at: Optional[str] = None,
                 created_by: Optional[int] = None) -> Optional[int]:
        """
        Save a new URL record. The database assigns its ID.

        Args:
            original_url (str): The original long URL
            is_private (bool): Whether only the creator may resolve it
            expires_at (str, optional): ISO timestamp after which the link is dead
            created_by (int, optional): ID of the creating user

        Returns:
            int: The assigned ID, or None if an error occurred
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
            INSERT INTO short_urls (original_url, is_private, expires_at, created_by, created_at)
            VALUES (?, ?, ?, ?, ?)
            """, (original_url, int(is_private), expires_at, created_by, utc_now()))

            conn.commit()
            return cursor.lastrowid

        except sqlite3.Error as e:
            logger.error(f"Error saving URL: {e}")
            conn.rollback()
            return None
        finally:
            conn.close()

    @staticmethod
    def set_short_key(url_id: int, short_key: str) -> bool:
        """
        Store the short key derived from a URL's ID

        Returns:
            bool: True if successful, False otherwise
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
            UPDATE short_urls SET short_key = ?
            WHERE id = ?
            """, (short_key, url_id))

            conn.commit()
            logger.info(f"Saved URL mapping: {short_key} -> {url_id}")
            return cursor.rowcount == 1

        except sqlite3.Error as e:
            logger.error(f"Error saving short key: {e}")
            conn.rollback()
            return False
        finally:
            conn.close()

    @staticmethod
    def delete_url(url_id: int) -> bool:
        """Delete a URL record, used to discard a half-created link"""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM short_urls WHERE id = ?", (url_id,))
            conn.commit()
            return cursor.rowcount == 1

        except sqlite3.Error as e:
            logger.error(f"Error deleting URL: {e}")
            conn.rollback()
            return False
        finally:
            conn.close()

    @staticmethod
    def get_url_by_id(url_id: int) -> Optional[Dict[str, Any]]:
        """
        Retrieve a URL record by its ID

        Args:
            url_id (int): The ID decoded from a short key

        Returns:
            dict: The record joined with its creator's name, or None if not found
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"""
            SELECT {SHORT_URL_COLUMNS} FROM short_urls s
            LEFT JOIN users u ON u.id = s.created_by
            WHERE s.id = ?
            """, (url_id,))

            result = cursor.fetchone()
            return dict(result) if result else None

        except sqlite3.Error as e:
            logger.error(f"Error retrieving URL: {e}")
            return None
        finally:
            conn.close()

    @staticmethod
    def increment_click_count(url_id: int) -> bool:
        """
        Record a click on a shortened URL

        Returns:
            bool: True if successful, False otherwise
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
            UPDATE short_urls SET click_count = click_count + 1
            WHERE id = ?
            """, (url_id,))

            conn.commit()
            return cursor.rowcount == 1

        except sqlite3.Error as e:
            logger.error(f"Error recording click: {e}")
            conn.rollback()
            return False
        finally:
            conn.close()

    @staticmethod
    def find_public_urls(page: int, size: int) -> Tuple[List[Dict[str, Any]], int]:
        """
        Get a page of public URLs, newest first

        Args:
            page (int): 1-based page number
            size (int): Number of records per page

        Returns:
            tuple: (records, total number of public records)
        """
        return URLRepository._find_urls("s.is_private = 0", (), page, size)

    @staticmethod
    def find_user_urls(user_id: int, page: int, size: int) -> Tuple[List[Dict[str, Any]], int]:
        """Get a page of the URLs created by a user, newest first"""
        return URLRepository._find_urls("s.created_by = ?", (user_id,), page, size)

    @staticmethod
    def _find_urls(where: str, params: tuple, page: int, size: int) -> Tuple[List[Dict[str, Any]], int]:
        conn = get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute(f"""
            SELECT COUNT(*) AS count FROM short_urls s
            WHERE {where}
            """, params)
            total = cursor.fetchone()['count']

            cursor.execute(f"""
            SELECT {SHORT_URL_COLUMNS} FROM short_urls s
            LEFT JOIN users u ON u.id = s.created_by
            WHERE {where}
            ORDER BY s.created_at DESC, s.id DESC
            LIMIT ? OFFSET ?
            """, params + (size, (page - 1) * size))

            return [dict(row) for row in cursor.fetchall()], total

        except (sqlite3.Error, OverflowError) as e:
            logger.error(f"Error listing URLs: {e}")
            return [], 0
        finally:
            conn.close()
