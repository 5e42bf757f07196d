from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from socialpod.database import Base
from socialpod.models.mixins import utcnow


class Aspect(Base):
    __tablename__ = "aspects"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_aspects_user_name"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="aspects")
    memberships = relationship("AspectMembership", back_populates="aspect", cascade="all, delete-orphan")


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (UniqueConstraint("user_id", "person_id", name="uq_contacts_user_person"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    # sharing: the person shares with the user; receiving: the user shares with the person
    sharing = Column(Boolean, default=False, nullable=False)
    receiving = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="contacts")
    person = relationship("Person")
    memberships = relationship("AspectMembership", back_populates="contact", cascade="all, delete-orphan")


class AspectMembership(Base):
    __tablename__ = "aspect_memberships"
    __table_args__ = (UniqueConstraint("aspect_id", "contact_id", name="uq_aspect_memberships"),)

    id = Column(Integer, primary_key=True)
    aspect_id = Column(Integer, ForeignKey("aspects.id", ondelete="CASCADE"), index=True, nullable=False)
    contact_id = Column(Integer, ForeignKey("contacts.id", ondelete="CASCADE"), index=True, nullable=False)

    aspect = relationship("Aspect", back_populates="memberships")
    contact = relationship("Contact", back_populates="memberships")
