from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from socialpod.database import Base
from socialpod.models.mixins import generate_guid, utcnow


# ---------------- PERSON (FEDERATED IDENTITY) ----------------
class Person(Base):
    __tablename__ = "people"

    id = Column(Integer, primary_key=True, index=True)
    guid = Column(String(64), unique=True, index=True, nullable=False, default=generate_guid)
    # username@pod-host
    diaspora_id = Column(String(255), unique=True, index=True, nullable=False)
    # Null for people living on other pods
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    owner = relationship("User", back_populates="person")
    profile = relationship("Profile", back_populates="person", uselist=False, cascade="all, delete-orphan")
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    photos = relationship("Photo", back_populates="author", cascade="all, delete-orphan")

    @property
    def name(self) -> str:
        full_name = self.profile.full_name if self.profile else ""
        return full_name or self.diaspora_id

    @property
    def local(self) -> bool:
        return self.owner_id is not None


# ---------------- PROFILE TABLE ----------------
class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String(127))
    last_name = Column(String(127))
    image_url = Column(String(255))
    image_url_medium = Column(String(255))
    image_url_small = Column(String(255))
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    person = relationship("Person", back_populates="profile")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()
