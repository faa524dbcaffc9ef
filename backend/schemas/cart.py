from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

# Request schema for adding an item to the cart.
# Name and price are optional, missing values are taken from the product table.
class CartAddItem(BaseModel):
    user_id: Optional[int] = None
    product_id: int
    product_name: Optional[str] = Field(None, min_length=1, max_length=100)
    product_price: Optional[float] = Field(None, ge=0)
    product_image: Optional[str] = Field(None, max_length=255)
    quantity: int = Field(1, ge=1)

# Request schema for updating cart item quantity
class CartUpdateItem(BaseModel):
    quantity: int = Field(ge=1)

# Response schema for a single cart row
class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    product_id: int
    product_name: str
    product_price: float
    product_image: Optional[str] = None
    quantity: int
    added_at: Optional[datetime] = None

# Aggregates over a user's cart
class CartSummary(BaseModel):
    total_items: int = 0
    total_quantity: int = 0
    total_price: float = 0.0
