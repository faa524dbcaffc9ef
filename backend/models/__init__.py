# Importing the package registers every table on Base.metadata
from models.users import User
from models.product import Product
from models.cart import CartItem
from models.order import Order, OrderItem

__all__ = ["User", "Product", "CartItem", "Order", "OrderItem"]
