from typing import Optional

from pydantic import BaseModel, Field, field_validator

from vidtube.auth.models import build


class VideoPublish(BaseModel):
    """Form fields accompanying a video upload."""
    title: str = Field(..., max_length=255)
    description: str = Field(..., max_length=5000)
    duration: float = Field(default=0, ge=0)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError('Video title cannot be empty')
        return v.strip()

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v or not v.strip():
            raise ValueError('Video description cannot be empty')
        return v.strip()

    @classmethod
    def parse(cls, **fields) -> "VideoPublish":
        return build(cls, **fields)


class VideoDetailsUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)

    @field_validator('title', 'description')
    @classmethod
    def strip_blank(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

    @classmethod
    def parse(cls, **fields) -> "VideoDetailsUpdate":
        return build(cls, **fields)

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump().items() if v is not None}
