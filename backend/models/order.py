# backend/models/order.py
from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, DateTime, Computed, func
from sqlalchemy.orm import relationship
from database import Base

ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_COMPLETED = "completed"

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    status = Column(String(20), nullable=False, default=ORDER_STATUS_PENDING, server_default=ORDER_STATUS_PENDING)
    shipping_address = Column(Text, nullable=True)
    payment_method = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(100), nullable=False)
    product_price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Stored by the database, never written by the application
    subtotal = Column(Numeric(10, 2, asdecimal=False), Computed("product_price * quantity", persisted=True))

    order = relationship("Order", back_populates="items")
