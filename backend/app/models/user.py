"""User model — teachers and admins. Students stay anonymous."""

import uuid

from sqlalchemy import Boolean, Column, String

from app.database import Base, UTCDateTime, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="teacher")  # admin | teacher
    display_name = Column(String(255), nullable=False)
    school = Column(String(255), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
