from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    product_id: int
    product_name: str
    product_price: float
    quantity: int
    subtotal: float


# Input schema for creating an order from the current cart
class OrderCreatePayload(BaseModel):
    shipping_address: Optional[str] = None
    payment_method: Optional[str] = Field(None, max_length=50)


# Output schema for the order header
class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    total_amount: float
    status: str
    shipping_address: Optional[str] = None
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
