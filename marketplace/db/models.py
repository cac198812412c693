"""SQLAlchemy models for hosted accounts and the key-value slot table."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", uselist=False, back_populates="account", cascade="all,delete-orphan")


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False)
    full_name = Column(String(255), nullable=False, default="")
    country = Column(String(128), nullable=True)
    phone = Column(String(64), nullable=True)
    bio = Column(Text, nullable=True)
    website = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    account = relationship("Account", back_populates="user")
    skills = relationship("UserSkill", cascade="all,delete-orphan")
    languages = relationship("UserLanguage", cascade="all,delete-orphan")
    certifications = relationship("UserCertification", cascade="all,delete-orphan")
    education = relationship("UserEducation", cascade="all,delete-orphan")


class UserSkill(Base):
    __tablename__ = "user_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    skill = Column(String(255), nullable=False)


class UserLanguage(Base):
    __tablename__ = "user_languages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    language = Column(String(128), nullable=False)


class UserCertification(Base):
    __tablename__ = "user_certifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    issued_by = Column(String(255), nullable=True)
    year = Column(String(16), nullable=True)


class UserEducation(Base):
    __tablename__ = "user_education"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    college = Column(String(255), nullable=False)
    degree = Column(String(255), nullable=True)
    year = Column(String(16), nullable=True)


class UserSession(Base):
    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class StoreSlot(Base):
    __tablename__ = "store_slots"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
