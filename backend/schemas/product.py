# backend/schemas/product.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Full product representation as listed on the menu
class ProductOut(ORMBase):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    image_url: Optional[str] = None
    flash_sale: bool = False
    stock: int
    created_at: Optional[datetime] = None
