# src/renderer/model.py (Render Layer)
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class RenderedPage(BaseModel):
    url: str
    final_url: Optional[str] = None
    status_code: Optional[int] = None
    content: str
    # False when the HTML came straight from an HTTP GET (no JavaScript executed)
    rendered: bool = True
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("content", mode="before")
    @classmethod
    def _require_content(cls, v):
        if v is None:
            raise ValueError("content is required")
        s = str(v)
        if not s.strip():
            raise ValueError("content cannot be empty")
        return s
