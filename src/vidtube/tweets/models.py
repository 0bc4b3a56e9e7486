from pydantic import BaseModel, Field, field_validator


class TweetContent(BaseModel):
    content: str = Field(..., max_length=280)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Content is required')
        return v.strip()
