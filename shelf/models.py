"""Pydantic models for Shelf."""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


class ComicRecord(BaseModel):
    """One indexed archive. Serialized with the camelCase names of the HTTP API."""

    model_config = {"populate_by_name": True, "frozen": True}

    id: str
    file_name: str = Field(alias="fileName")
    file_path: str = Field(alias="filePath")
    title: str
    cover: str = Field(min_length=1)
    page_count: int = Field(alias="pageCount", ge=1)
    added_at: datetime = Field(alias="addedAt")
    tags: List[str] = Field(default_factory=list)

    @property
    def path(self) -> Path:
        return Path(self.file_path)


def new_comic_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
