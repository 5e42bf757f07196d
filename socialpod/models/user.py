from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from socialpod.database import Base
from socialpod.models.mixins import utcnow


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(32), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    person = relationship("Person", back_populates="owner", uselist=False, cascade="all, delete-orphan")
    aspects = relationship(
        "Aspect",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Aspect.id",
    )
    contacts = relationship("Contact", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="recipient", cascade="all, delete-orphan")

    @property
    def profile(self):
        return self.person.profile if self.person else None
