# backend/models/product.py
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, CheckConstraint, func
from database import Base

# Model Product
# A single item on the coffee shop menu. Cart rows and order items
# reference it by id only and keep their own name/price snapshot.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    price = Column(Numeric(10, 2, asdecimal=False), CheckConstraint("price >= 0"), nullable=False)
    category = Column(String(50), index=True)
    image_url = Column(String(255), nullable=True)
    flash_sale = Column(Boolean, nullable=False, default=False, server_default="0")
    stock = Column(Integer, nullable=False, default=100, server_default="100")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
