# server/api/schemas.py

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


# -------------------------------
# Request bodies
# -------------------------------

class RegisterRequest(BaseModel):
    """
    Registration body. Email and password are checked by the route so that
    their absence is reported with a domain message rather than a 422.
    """
    name: str | None = None
    email: str | None = None
    password: str | None = None


class ArticleCreateRequest(BaseModel):
    title: str = ""
    content: str = ""


class CommentCreateRequest(BaseModel):
    content: str = ""


# -------------------------------
# Response shapes
# -------------------------------

class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str | None = None
    image: str | None = None


class UserOut(AuthorOut):
    created_at: datetime = Field(serialization_alias="createdAt")


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    created_at: datetime = Field(serialization_alias="createdAt")
    author: AuthorOut


class ArticleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    created_at: datetime = Field(serialization_alias="createdAt")
    author: AuthorOut
    comment_count: int = Field(default=0, serialization_alias="commentCount")


def dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True)
