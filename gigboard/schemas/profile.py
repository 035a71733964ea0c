import re

from pydantic import BaseModel, Field, field_validator


class ProfileOut(BaseModel):
    id: str
    full_name: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    phone: str | None = None
    bio: str | None = None

    class Config:
        from_attributes = True


class PublicProfileOut(BaseModel):
    id: str
    full_name: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    bio: str | None = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    full_name: str | None = Field(default=None, max_length=200)
    username: str | None = Field(default=None, max_length=50)
    avatar_url: str | None = Field(default=None, max_length=2000)
    phone: str | None = Field(default=None, max_length=30)
    bio: str | None = Field(default=None, max_length=2000)

    @field_validator("username")
    @classmethod
    def username_charset(cls, v: str | None) -> str | None:
        if v and not re.fullmatch(r"[A-Za-z0-9_.]{3,50}", v):
            raise ValueError("Username must be 3-50 letters, digits, '.' or '_'")
        return v

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, v: str | None) -> str | None:
        if v and not re.fullmatch(r"\+?[0-9 ()\-]{5,30}", v):
            raise ValueError("Phone may contain digits, spaces, '+', '-' and parentheses")
        return v
