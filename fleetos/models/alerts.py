import enum
from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, Text, ForeignKey, func
from sqlalchemy.orm import relationship
from fleetos.database import Base
from .maintenance import Priority

class AlertType(str, enum.Enum):
    MAINTENANCE = 'maintenance'
    INVENTORY = 'inventory'
    WORK_ORDER = 'work_order'
    FUEL = 'fuel'

class Alert(Base):
    __tablename__ = "alerts"
    id = Column(Integer, primary_key=True, index=True)
    # NULL user_id means the alert is broadcast to everyone
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(
        Enum(AlertType, name='alert_type_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    priority = Column(
        Enum(Priority, name='priority_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=Priority.MEDIUM
    )
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    link = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    user = relationship("User", back_populates="alerts")
