# =============================================================================
# REELSOCIAL BACKEND - CONTENT SCHEMAS
# =============================================================================
# File: content/schemas.py
# Description: Request/response models for posts, likes and comments
# =============================================================================

from typing import Optional, List
from datetime import datetime

from pydantic import Field

from reelsocial.auth.schemas import BaseSchema


# =============================================================================
# POST SCHEMAS
# =============================================================================

class PostCreate(BaseSchema):
    """
    Body of ``POST /post``.

    Any ``sender`` in the body is ignored; the author comes from the
    access token.
    """
    title: Optional[str] = Field(None, max_length=255)
    content: str = Field(..., min_length=1, max_length=10000)
    image_url: Optional[str] = Field(None, alias="imageUrl", max_length=512)


class PostUpdate(BaseSchema):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, min_length=1, max_length=10000)
    image_url: Optional[str] = Field(None, alias="imageUrl", max_length=512)


class PostResponse(BaseSchema):
    """A post as returned to clients."""
    id: str = Field(..., serialization_alias="_id")
    title: Optional[str] = None
    content: str
    sender: str
    sender_id: Optional[str] = Field(None, serialization_alias="senderId")
    image_url: Optional[str] = Field(None, serialization_alias="imageUrl")
    profile_pic: Optional[str] = Field(None, serialization_alias="profilePic")
    likes: List[str] = Field(default_factory=list, validation_alias="like_user_ids")
    created_at: datetime = Field(..., serialization_alias="createdAt")


class LikeStatusResponse(BaseSchema):
    liked: bool
    likes: int


# =============================================================================
# COMMENT SCHEMAS
# =============================================================================

class CommentCreate(BaseSchema):
    post_id: str = Field(..., alias="postId", min_length=1)
    content: str = Field(..., min_length=1, max_length=5000)


class CommentUpdate(BaseSchema):
    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseSchema):
    id: str = Field(..., serialization_alias="_id")
    post_id: str = Field(..., serialization_alias="postId")
    content: str
    sender: str
    sender_id: Optional[str] = Field(None, serialization_alias="senderId")
    created_at: datetime = Field(..., serialization_alias="createdAt")
