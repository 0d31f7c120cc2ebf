# User, Session Tokens

import enum
from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, ForeignKey, func
from sqlalchemy.orm import relationship
from fleetos.database import Base

class UserRole(str, enum.Enum):
    ADMIN = 'admin'
    WORKSHOP_MANAGER = 'workshop_manager'
    TECHNICIAN = 'technician'
    USER = 'user'

class User(Base):
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String(250), nullable=False)
    password = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, name='user_role_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=UserRole.USER, index=True
    )
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    # Relationships
    tokens = relationship("UserToken", back_populates="user", cascade="all, delete-orphan")
    alerts = relationship("Alert", back_populates="user", cascade="all, delete-orphan")
    work_orders = relationship("WorkOrder", back_populates="technician")

class UserToken(Base):
    """One row per logged-in session; the session cookie carries a JWT naming this row."""
    __tablename__ = "user_tokens"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    access_key = Column(String(250), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="tokens")
