# Parts, Parts Used
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

class PartBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    reference: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    quantity: int = Field(0, ge=0)
    min_quantity: int = Field(5, ge=0)
    location: Optional[str] = None
    unit_price: float = Field(0.0, ge=0)
    supplier: Optional[str] = None

class PartCreate(PartBase): pass

class PartUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    reference: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    quantity: Optional[int] = None
    min_quantity: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    unit_price: Optional[float] = Field(None, ge=0)
    supplier: Optional[str] = None

class PartOut(PartBase):
    id: int
    # Ledger balance; may be negative when ALLOW_NEGATIVE_STOCK is on
    quantity: int
    created_at: datetime
    class Config: from_attributes = True

class PaginatedPartOut(BaseModel):
    total: int
    items: List[PartOut]

class StockAdjustment(BaseModel):
    quantity_change: int = Field(..., description="Positive to add stock, negative to remove")
    reason: Optional[str] = Field(None, description="Reason for stock change")

# --- PARTS USED ---
class PartUsedCreate(BaseModel):
    part_id: int
    quantity: int = Field(1, gt=0)
    # Defaults to the part's current unit price when omitted
    unit_price: Optional[float] = Field(None, ge=0)

class PartUsedUpdate(BaseModel):
    quantity: int = Field(..., gt=0)

class PartUsedOut(BaseModel):
    id: int
    work_order_id: int
    part_id: int
    quantity: int
    unit_price: float
    created_at: datetime
    class Config: from_attributes = True
