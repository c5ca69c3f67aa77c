"""
Data transfer models for the URL shortener service, and the mapping from
database rows to them.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class UserDto(BaseModel):
    """Public view of a user"""
    id: int
    name: str


class ShortUrlDto(BaseModel):
    """Public view of a shortened URL"""
    id: int
    short_key: str
    original_url: str
    is_private: bool = False
    expires_at: Optional[datetime] = None
    created_by: Optional[UserDto] = None
    click_count: int = 0
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Whether the link's expiry time has passed"""
        return self.expires_at is not None and self.expires_at < now


class PagedResult(BaseModel):
    """One page of a listing"""
    data: List[ShortUrlDto] = Field(default_factory=list)
    page_number: int
    total_pages: int
    total_elements: int
    is_first: bool
    is_last: bool
    has_next: bool
    has_previous: bool

    @classmethod
    def of(cls, data: List[ShortUrlDto], page_number: int, page_size: int,
           total_elements: int) -> "PagedResult":
        total_pages = math.ceil(total_elements / page_size) if page_size > 0 else 0
        return cls(
            data=data,
            page_number=page_number,
            total_pages=total_pages,
            total_elements=total_elements,
            is_first=page_number == 1,
            is_last=page_number >= total_pages,
            has_next=page_number < total_pages,
            has_previous=page_number > 1,
        )


def to_user_dto(row: Dict[str, Any]) -> UserDto:
    return UserDto(id=row['id'], name=row['name'])


def to_short_url_dto(row: Dict[str, Any]) -> ShortUrlDto:
    """Map a short_urls row (with created_by_name joined in) to a DTO"""
    user = None
    if row.get('created_by') is not None:
        user = UserDto(id=row['created_by'], name=row['created_by_name'])

    return ShortUrlDto(
        id=row['id'],
        short_key=row['short_key'],
        original_url=row['original_url'],
        is_private=bool(row['is_private']),
        expires_at=row['expires_at'],
        created_by=user,
        click_count=row['click_count'],
        created_at=row['created_at'],
    )
