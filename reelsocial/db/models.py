# =============================================================================
# REELSOCIAL BACKEND - DATABASE MODELS
# =============================================================================
# File: db/models.py
# Description: SQLAlchemy ORM models for Users, Refresh Tokens, Posts,
#              Likes and Comments
# =============================================================================

from typing import Optional, List
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Text,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from reelsocial.db.base import Base
from reelsocial.utils.helpers import utc_now


DEFAULT_DESCRIPTION = "Here you can write about yourself, your favorite movies..."
DEFAULT_PROFILE_PIC = "../../images/noProfilePic.png"


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


# =============================================================================
# USER MODEL
# =============================================================================

class User(Base):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    USER MODEL                                            │
    │  Identity, credentials and profile of an account                        │
    └─────────────────────────────────────────────────────────────────────────┘

    Fields:
        - id:             UUID primary key (auto-generated)
        - email:          Unique email address (indexed)
        - username:       Unique username (indexed)
        - password_hash:  Argon2id/Bcrypt hashed password
        - description:    Free-form "about me" text
        - profile_pic:    Stored file name of the profile picture
        - created_at:     Account creation timestamp
        - updated_at:     Last update timestamp

    Relationships:
        - refresh_tokens: Currently valid refresh tokens, oldest first
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    description: Mapped[str] = mapped_column(
        Text,
        default=DEFAULT_DESCRIPTION,
        nullable=False
    )
    profile_pic: Mapped[str] = mapped_column(
        String(512),
        default=DEFAULT_PROFILE_PIC,
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False
    )

    refresh_tokens: Mapped[List["RefreshToken"]] = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RefreshToken.id",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, username={self.username})>"


# =============================================================================
# REFRESH TOKEN MODEL
# =============================================================================

class RefreshToken(Base):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    REFRESH TOKEN MODEL                                   │
    │  One row per currently valid refresh token of a user                    │
    └─────────────────────────────────────────────────────────────────────────┘

    The raw token never reaches the database, only its SHA-256 digest.
    Rows are deleted on rotation, logout and replay detection, so the
    table only ever holds live tokens.

    Fields:
        - id:           Autoincrement key (insertion order)
        - user_id:      Foreign key to users
        - token_hash:   SHA-256 hash of token (unique)
        - created_at:   Issue time
        - expires_at:   Token expiration
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="refresh_tokens"
    )

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id={self.user_id})>"


# =============================================================================
# POST MODEL
# =============================================================================

class Post(Base):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    POST MODEL                                            │
    │  A movie review with optional image                                     │
    └─────────────────────────────────────────────────────────────────────────┘

    ``sender`` is a copy of the author's username, not a foreign key. It is
    kept in sync by ``content.propagation.IdentityPropagator``.
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sender: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True
    )
    sender_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    profile_pic: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True
    )

    likes: Mapped[List["PostLike"]] = relationship(
        "PostLike",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="PostLike.id",
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, sender={self.sender})>"

    @property
    def like_user_ids(self) -> List[str]:
        return [like.user_id for like in self.likes]


class PostLike(Base):
    """A single user's like on a post; at most one per (post, user)."""

    __tablename__ = "post_likes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),
    )


# =============================================================================
# COMMENT MODEL
# =============================================================================

class Comment(Base):
    """
    A comment on a post.

    ``post_id`` is checked when the comment is created but is not a foreign
    key, and ``sender`` is a username copy like ``Post.sender``.
    """

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )
    post_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True
    )
    sender_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )

    __table_args__ = (
        Index("ix_comments_post_created", "post_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, sender={self.sender})>"
