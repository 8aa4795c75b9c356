"""Shared pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TimestampSchema(BaseModel):
    """Creation and update timestamps of a persisted row."""

    created_at: datetime = Field(description="Creation time (UTC)")
    updated_at: Optional[datetime] = Field(default=None, description="Last update time (UTC)")
