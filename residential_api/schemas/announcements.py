"""
Announcement schema.
"""

from pydantic import Field

from residential_api.schemas.common import Priority, Schema


class AnnouncementCreateRequest(Schema):
    title: str = Field(..., min_length=5)
    type: str = Field(..., min_length=1)
    priority: Priority
    description: str = Field(..., min_length=10)


__all__ = ["AnnouncementCreateRequest"]
