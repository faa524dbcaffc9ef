# backend/routes/products.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from schemas.product import ProductOut
from utils.errors import NotFound, server_error

router = APIRouter(prefix="/api/products", tags=["Products"])
logger = logging.getLogger(__name__)


def _products_page(products: List[Product]) -> dict:
    return {
        "success": True,
        "count": len(products),
        "products": [ProductOut.model_validate(p).model_dump(mode="json") for p in products],
    }


# Full menu, newest first
@router.get("")
def list_products(db: Session = Depends(get_db)):
    try:
        products = db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch products")
        raise server_error("Failed to fetch products", exc)
    return _products_page(products)


# Products currently on flash sale
@router.get("/flash-sale")
def list_flash_sale_products(db: Session = Depends(get_db)):
    try:
        products = (
            db.query(Product)
            .filter(Product.flash_sale.is_(True))
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch flash sale products")
        raise server_error("Failed to fetch flash sale products", exc)
    return _products_page(products)


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        product = db.get(Product, product_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch product %s", product_id)
        raise server_error("Failed to fetch product", exc)

    if product is None:
        raise NotFound("Product not found")
    return {"success": True, "product": ProductOut.model_validate(product).model_dump(mode="json")}
