from pydantic import BaseModel, Field, field_validator


class PlaylistDetails(BaseModel):
    name: str = Field(..., max_length=100)
    description: str = Field(..., max_length=500)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError('Playlist name cannot be empty')
        return v.strip()

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v or not v.strip():
            raise ValueError('Playlist description cannot be empty')
        return v.strip()
