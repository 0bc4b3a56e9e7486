from pydantic import BaseModel, Field, field_validator


class CommentContent(BaseModel):
    content: str = Field(..., max_length=1000)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Comment content cannot be empty')
        return v.strip()
