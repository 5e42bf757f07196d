from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Table
from sqlalchemy.orm import relationship
from socialpod.config import settings
from socialpod.database import Base
from socialpod.models.mixins import generate_guid, utcnow


photo_aspects = Table(
    "photo_aspects",
    Base.metadata,
    Column("photo_id", Integer, ForeignKey("photos.id", ondelete="CASCADE"), primary_key=True),
    Column("aspect_id", Integer, ForeignKey("aspects.id", ondelete="CASCADE"), primary_key=True),
)


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    guid = Column(String(64), unique=True, index=True, nullable=False, default=generate_guid)
    author_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    pending = Column(Boolean, default=False, nullable=False)
    public = Column(Boolean, default=False, nullable=False)
    # Stored name of the original upload; renditions are "<size>_<file_name>"
    file_name = Column(String(255), nullable=False)
    width = Column(Integer)
    height = Column(Integer)
    status_message_guid = Column(
        String(64),
        ForeignKey("posts.guid", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    author = relationship("Person", back_populates="photos")
    status_message = relationship("Post", back_populates="photos")
    aspects = relationship("Aspect", secondary=photo_aspects)

    def stored_name(self, size: Optional[str] = None) -> str:
        return f"{size}_{self.file_name}" if size else self.file_name

    def url(self, size: Optional[str] = None) -> str:
        return f"{settings.media_base_url}/{self.stored_name(size)}"
