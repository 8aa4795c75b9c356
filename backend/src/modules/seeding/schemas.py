"""Pydantic schemas for first-login seeding."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class SeedResult(BaseModel):
    success: bool
    notebook_id: Optional[UUID] = None
    documents_created: int = 0
    error: Optional[str] = None


class SeedStatus(BaseModel):
    needs_seeding: bool
