# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# A single product a user intends to buy, with the product data captured at add time.
# Uniqueness of (user_id, product_id) is kept by the cart upsert, not by a constraint.
class CartItem(Base):
    __tablename__ = "cart"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, nullable=False, index=True)

    # Product snapshot
    product_name = Column(String(100), nullable=False)
    product_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    product_image = Column(String(255), nullable=True)

    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="cart_items")
