# Parts Inventory, Parts Used on Work Orders

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, ForeignKey, func
from sqlalchemy.orm import relationship
from fleetos.database import Base

class Part(Base):
    __tablename__ = "parts"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    reference = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=5)
    location = Column(String, nullable=True)
    unit_price = Column(Float, nullable=False, default=0.0)
    supplier = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    usages = relationship("PartUsed", back_populates="part")

class PartUsed(Base):
    __tablename__ = "parts_used"
    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=1)
    # Price at attach time; later Part.unit_price edits do not touch history
    unit_price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    work_order = relationship("WorkOrder", back_populates="parts_used")
    part = relationship("Part", back_populates="usages")
