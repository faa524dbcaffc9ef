import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from dotenv import load_dotenv

load_dotenv()

# Database models and setup
from models.product import Product
from database import SessionLocal, init_db

# Default menu: (name, category, price, flash_sale, description)
MENU = [
    ("Espresso", "coffee", 18000, False, "Single shot of house blend espresso."),
    ("Americano", "coffee", 20000, False, "Espresso topped with hot water."),
    ("Cappuccino", "coffee", 25000, True, "Espresso with steamed milk and thick foam."),
    ("Caffe Latte", "coffee", 26000, False, "Espresso with plenty of steamed milk."),
    ("Caramel Macchiato", "coffee", 30000, True, "Vanilla milk, espresso and caramel drizzle."),
    ("Kopi Susu Gula Aren", "coffee", 22000, True, "Iced coffee with milk and palm sugar."),
    ("Cold Brew", "coffee", 28000, False, "Slow steeped for 18 hours."),
    ("Matcha Latte", "non-coffee", 27000, False, "Japanese matcha with steamed milk."),
    ("Chocolate", "non-coffee", 24000, False, "Rich dark chocolate, hot or iced."),
    ("Butter Croissant", "pastry", 19000, False, "Flaky all-butter croissant."),
    ("Banana Bread", "pastry", 17000, True, "Moist banana bread with walnuts."),
]


def seed_products(session, menu=MENU) -> int:
    """Insert the default menu when the products table is empty. Returns the number of rows added."""
    if session.query(Product).count() > 0:
        return 0

    for name, category, price, flash_sale, description in menu:
        session.add(Product(
            name=name,
            category=category,
            price=price,
            flash_sale=flash_sale,
            description=description,
            image_url=f"https://picsum.photos/seed/{name.lower().replace(' ', '-')}/300/300",
            stock=100,
        ))
    session.commit()
    return len(menu)


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        added = seed_products(session)
        if added:
            print(f"Added {added} products to the menu.")
        else:
            print("Products table is not empty, skipping.")
    finally:
        session.close()
