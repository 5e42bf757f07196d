from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DateTime, Table, UniqueConstraint
from sqlalchemy.orm import relationship
from socialpod.database import Base
from socialpod.models.mixins import generate_guid, utcnow


post_aspects = Table(
    "post_aspects",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("aspect_id", Integer, ForeignKey("aspects.id", ondelete="CASCADE"), primary_key=True),
)


# Status messages are the only post type for now.
class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    guid = Column(String(64), unique=True, index=True, nullable=False, default=generate_guid)
    author_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    text = Column(Text)
    public = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    author = relationship("Person", back_populates="posts")
    aspects = relationship("Aspect", secondary=post_aspects)
    photos = relationship("Photo", back_populates="status_message", order_by="Photo.id")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("post_id", "author_id", name="uq_likes_post_author"),)

    id = Column(Integer, primary_key=True)
    guid = Column(String(64), unique=True, nullable=False, default=generate_guid)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    post = relationship("Post", back_populates="likes")
    author = relationship("Person")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    guid = Column(String(64), unique=True, nullable=False, default=generate_guid)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    post = relationship("Post", back_populates="comments")
    author = relationship("Person")
