import enum

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Enum, Table, UniqueConstraint
from sqlalchemy.orm import relationship
from socialpod.database import Base
from socialpod.models.mixins import generate_guid, utcnow


class NotificationType(str, enum.Enum):
    ALSO_COMMENTED = "Notifications::AlsoCommented"
    COMMENT_ON_POST = "Notifications::CommentOnPost"
    LIKED = "Notifications::Liked"
    LIKED_COMMENT = "Notifications::LikedComment"
    MENTIONED_IN_POST = "Notifications::MentionedInPost"
    MENTIONED_IN_COMMENT = "Notifications::MentionedInComment"
    RESHARED = "Notifications::Reshared"
    STARTED_SHARING = "Notifications::StartedSharing"
    CONTACTS_BIRTHDAY = "Notifications::ContactsBirthday"


# The surrogate id keeps actors in the order they were added.
notification_actors = Table(
    "notification_actors",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("notification_id", Integer, ForeignKey("notifications.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("person_id", Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False),
    UniqueConstraint("notification_id", "person_id", name="uq_notification_actors"),
)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    guid = Column(String(64), unique=True, index=True, nullable=False, default=generate_guid)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(NotificationType), nullable=False, index=True)
    target_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True, index=True)
    unread = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    recipient = relationship("User", back_populates="notifications")
    target = relationship("Post")
    actors = relationship(
        "Person",
        secondary=notification_actors,
        order_by=notification_actors.c.id,
    )
